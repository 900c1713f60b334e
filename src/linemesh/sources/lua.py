"""Run Lua mesh descriptions and collect the mesh list they define.

A description is a Lua chunk that assigns its meshes to a global:

    local square = {{0, 0}, {1, 0}, {1, 1}, {0, 1}}
    meshes = {
      { vertexes = square, segments = {{0, 1, 2, 3, 0}} },
      { vertexes = 1, segments = {{0, 2}} },   -- reuse mesh 1's vertexes
    }

Mesh references are written Lua style, starting at 1; vertex indices
and color selectors start at 0.
"""

from __future__ import annotations

import logging
from typing import Any

from lupa import LuaError, LuaRuntime, lua_type

from ..config import LUA_MAX_SPARSE_INDEX, ScriptConfig
from ..core.errors import ScriptError
from ..core.mesh import MeshCollection
from .parse import parse_collection

logger = logging.getLogger(__name__)

# Preloaded helpers hand the mesh list back untouched
_PASSTHROUGH_MODULE = "function() return function(meshlist) return meshlist end end"


def lua_to_python(value: Any, max_depth: int, _depth: int = 0) -> Any:
    """Convert a Lua value into plain lists, dicts and scalars.

    Tables keyed 1..n become lists. Tables keyed by positive integers
    with gaps and no nested tables become lists with None in the gaps.
    Any other table becomes a dict.

    Raises:
        ScriptError: For functions, userdata, threads or tables nested
            deeper than max_depth
    """
    kind = lua_type(value)
    if kind is None:
        return value
    if kind != "table":
        raise ScriptError(f"unsupported Lua value of type '{kind}' in the mesh list")
    if _depth >= max_depth:
        raise ScriptError(f"Lua tables nested deeper than {max_depth} levels")

    items = [(key, lua_to_python(item, max_depth, _depth + 1)) for key, item in value.items()]
    keys = [key for key, _ in items]
    if all(isinstance(key, int) and not isinstance(key, bool) and key > 0 for key in keys):
        if sorted(keys) == list(range(1, len(keys) + 1)):
            return [item for _, item in sorted(items, key=lambda pair: pair[0])]
        nested = any(isinstance(item, (list, dict)) for _, item in items)
        if not nested and max(keys) <= LUA_MAX_SPARSE_INDEX:
            dense: list[Any] = [None] * max(keys)
            for key, item in items:
                dense[key - 1] = item
            return dense
    return dict(items)


class MeshScript:
    """A Lua runtime scoped to executing one description.

    The runtime is created on entry and released on exit, whether or not
    the script succeeded:

        with MeshScript() as script:
            collection = script.execute(source)

    Unsafe globals (os, io, debug, ...) are removed before the script
    runs, and the helper modules listed in the config are preloaded so
    descriptions may require() them.
    """

    def __init__(self, config: ScriptConfig | None = None) -> None:
        self.config = config or ScriptConfig()
        self._runtime: LuaRuntime | None = None
        self._used = False

    def __enter__(self) -> MeshScript:
        self._runtime = self._create_runtime()
        self._used = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Drop the runtime so its memory can be reclaimed."""
        if self._runtime is not None:
            self._runtime = None
            logger.debug("Lua runtime released")

    def _create_runtime(self) -> LuaRuntime:
        runtime = LuaRuntime(unpack_returned_tuples=True, register_eval=False)
        lua_globals = runtime.globals()
        for name in self.config.disabled_globals:
            lua_globals[name] = None

        passthrough = runtime.eval(_PASSTHROUGH_MODULE)
        preload = lua_globals.package.preload
        for module in self.config.helper_modules:
            preload[module] = passthrough

        logger.debug("Lua runtime created")
        return runtime

    def execute(self, source: str) -> MeshCollection:
        """Run a description and return the meshes it defines.

        Args:
            source: Lua source code

        Returns:
            MeshCollection with references still unresolved

        Raises:
            ScriptError: If the script fails or defines no mesh list
            DescriptionError: If the mesh list has the wrong shape
        """
        if self._runtime is None:
            raise RuntimeError("MeshScript.execute() must be called inside a 'with' block")
        if self._used:
            raise RuntimeError("a MeshScript runs a single description; open a new one")
        self._used = True

        try:
            self._runtime.execute(source)
        except LuaError as e:
            raise ScriptError(f"description script failed: {e}") from e

        name = self.config.result_global
        result = self._runtime.globals()[name]
        if result is None:
            raise ScriptError(f"description script did not define the '{name}' global")
        if lua_type(result) != "table":
            raise ScriptError(f"'{name}' must be a table, got {lua_type(result) or type(result).__name__}")

        data = lua_to_python(result, self.config.max_depth)
        return parse_collection(data, reference_base=self.config.reference_base)


def execute_script(source: str, config: ScriptConfig | None = None) -> MeshCollection:
    """Run one Lua description in a fresh runtime."""
    with MeshScript(config) as script:
        return script.execute(source)
