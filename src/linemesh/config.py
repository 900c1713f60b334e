"""Package-wide constants and the Lua execution settings."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

# Layout of the render buffers
BUFFER_DTYPE = np.float32
POSITION_SIZE = 3
COLOR_SIZE = 4

# Packed RGBA used when a mesh or a vertex has no color (opaque white)
FALLBACK_COLOR = 0xFFFFFFFF

# Fields of a mesh record that may hold a reference to another mesh
REFERENCE_FIELDS = ("vertexes", "segments", "colors")

# Lua globals removed before a description script runs
DISABLED_LUA_GLOBALS = ("os", "io", "debug", "crypto", "coroutine", "utf8", "python")

# Helper modules descriptions may require(); resolution and decompression
# happen in Python after the script returns, so they are pass-through here.
LUA_HELPER_MODULES = ("/ppms/decompress_meshes.lua", "/ppms/decompress_colors.lua")

LUA_RESULT_GLOBAL = "meshes"

# Nesting limit when converting Lua tables (a mesh list is 4 levels deep)
LUA_MAX_DEPTH = 16

# Largest index accepted for a Lua sequence with holes
LUA_MAX_SPARSE_INDEX = 1 << 24


@dataclass(frozen=True)
class ScriptConfig:
    """Settings for executing a Lua mesh description.

    Attributes:
        result_global: Name of the global the script assigns the mesh list to
        disabled_globals: Globals set to nil before the script runs
        helper_modules: Module names preloaded for require()
        reference_base: Index of the first mesh as written in the script
        max_depth: Deepest table nesting accepted from the script
    """

    result_global: str = LUA_RESULT_GLOBAL
    disabled_globals: tuple[str, ...] = DISABLED_LUA_GLOBALS
    helper_modules: tuple[str, ...] = LUA_HELPER_MODULES
    reference_base: int = 1
    max_depth: int = LUA_MAX_DEPTH
