"""Import-alias table from the first-level directories of the source root.

Supports both `import x from "modules/x"` and the absolute-style
`import x from "/modules/x"`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pagepack.errors import ConfigurationError, FilesystemError
from pagepack.layout.fs import FileSystem, LocalFileSystem
from pagepack.logging import get_logger

_LOG = get_logger("layout")


@dataclass(frozen=True)
class AliasEntry:
    name: str
    absolute_path: Path


class PathAliasResolver:
    """Scan the source directory and build a name -> absolute path alias map."""

    def __init__(self, fs: Optional[FileSystem] = None) -> None:
        self.fs = fs or LocalFileSystem()

    def scan(self, source_dir: Path, depth: int = 1) -> List[AliasEntry]:
        """Directories under source_dir down to `depth` levels, as alias entries."""
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
            raise ConfigurationError(f"alias scan depth must be a positive integer, got {depth!r}")
        source_dir = Path(source_dir)
        if not source_dir.is_absolute():
            source_dir = source_dir.resolve()
        if not self.fs.is_dir(source_dir):
            raise FilesystemError(f"source directory does not exist: {source_dir}")
        entries: List[AliasEntry] = []
        level = [source_dir]
        for _ in range(depth):
            next_level: List[Path] = []
            for parent in level:
                for child in self.fs.list_dirs(parent):
                    name = child.relative_to(source_dir).as_posix()
                    entries.append(AliasEntry(name=name, absolute_path=child))
                    next_level.append(child)
            level = next_level
        return entries

    def resolve(
        self,
        source_dir: Path,
        depth: int = 1,
        overrides: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, str]:
        aliases: Dict[str, str] = {}
        for entry in self.scan(source_dir, depth):
            path = str(entry.absolute_path)
            aliases["/" + entry.name] = path
            aliases[entry.name] = path
        if not overrides:
            return aliases
        merged = dict(aliases)
        merged.update({str(k): str(v) for k, v in overrides.items()})
        _LOG.debug("alias overrides applied: %s", ", ".join(sorted(overrides)))
        return merged
