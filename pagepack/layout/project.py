"""Explicit project root and source directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pagepack.errors import ConfigurationError

SOURCE_DIR = "src"
PAGES_DIR = "pages"
NODE_MODULES_DIR = "node_modules"


@dataclass(frozen=True)
class ProjectLayout:
    """Project root plus the source directory below it."""

    root: Path
    source_dir: Path

    def __post_init__(self) -> None:
        root = Path(self.root)
        source = Path(self.source_dir)
        if not root.is_absolute():
            raise ConfigurationError(f"project root must be absolute: {root}")
        if not source.is_absolute():
            source = root / source
        if root not in source.parents:
            raise ConfigurationError(f"source dir {source} is not inside project root {root}")
        object.__setattr__(self, "root", root)
        object.__setattr__(self, "source_dir", source)

    @classmethod
    def from_root(cls, root: Path | str, source_dir: str = SOURCE_DIR) -> "ProjectLayout":
        root = Path(root)
        if not root.is_absolute():
            root = root.resolve()
        return cls(root=root, source_dir=root / source_dir)

    @property
    def pages_dir(self) -> Path:
        return self.source_dir / PAGES_DIR

    @property
    def node_modules_dir(self) -> Path:
        return self.root / NODE_MODULES_DIR

    def out_path(self, out_dir: str) -> Path:
        """Build output directory root/out_dir."""
        return self.root / out_dir
