"""Load mesh descriptions from Lua or YAML files."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..config import ScriptConfig
from ..core.errors import DescriptionError
from ..core.mesh import MeshCollection
from .lua import execute_script
from .parse import parse_collection

logger = logging.getLogger(__name__)

# Registry of description formats by file suffix
FORMATS = {
    ".lua": "lua",
    ".yaml": "yaml",
    ".yml": "yaml",
}


class DescriptionLoader:
    """Loads mesh collections from description files.

    Lua descriptions assign a `meshes` global (see linemesh.sources.lua).
    YAML descriptions use the same layout with 0-based references:

    ```yaml
    meshes:
      - vertexes: [[0, 0], [1, 0], [1, 1], [0, 1]]
        segments: [[0, 1, 2, 3, 0]]
        colors:
          0xFF0000FF: [0, [1, 2]]
      - vertexes: 0        # same vertexes as mesh 0
        segments: [[0, 2]]
    ```
    """

    def __init__(self, script_config: ScriptConfig | None = None) -> None:
        """Initialize the loader.

        Args:
            script_config: Settings for Lua descriptions. Defaults to ScriptConfig().
        """
        self.script_config = script_config or ScriptConfig()

    def load(self, path: str | Path) -> MeshCollection:
        """Load a description file, choosing the format from its suffix.

        Args:
            path: Path to a .lua, .yaml or .yml file

        Returns:
            MeshCollection with references still unresolved

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the suffix is not a known format
        """
        path = Path(path)
        fmt = FORMATS.get(path.suffix.lower())
        if fmt is None:
            raise ValueError(
                f"Unknown description format '{path.suffix}', expected one of {sorted(FORMATS)}"
            )

        logger.info(f"Loading {fmt} description from {path}")
        with open(path, encoding="utf-8") as f:
            text = f.read()
        return self.load_string(text, fmt)

    def load_string(self, text: str, fmt: str = "yaml") -> MeshCollection:
        """Load a description from a string.

        Args:
            text: Description source
            fmt: "lua" or "yaml"

        Returns:
            MeshCollection with references still unresolved
        """
        if fmt == "lua":
            return execute_script(text, self.script_config)
        elif fmt == "yaml":
            return self._parse_yaml(text)
        else:
            raise ValueError(f"Unknown description format: {fmt}")

    def _parse_yaml(self, text: str) -> MeshCollection:
        """Parse a YAML description."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DescriptionError(f"invalid YAML: {e}") from e
        if data is None:
            raise DescriptionError("empty description")
        return parse_collection(data)
