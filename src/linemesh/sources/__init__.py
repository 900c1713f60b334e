"""Description sources: plain data, Lua scripts and YAML files."""

from .parse import parse_collection, parse_mesh
from .lua import MeshScript, execute_script, lua_to_python
from .loader import DescriptionLoader

__all__ = [
    "parse_collection",
    "parse_mesh",
    "MeshScript",
    "execute_script",
    "lua_to_python",
    "DescriptionLoader",
]
