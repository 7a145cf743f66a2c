"""Filesystem access used by layout discovery and the offline pass.

Every scan goes through a `FileSystem` so tests can hand in a virtual tree
(`MemoryFileSystem`) instead of touching real disk.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Dict, List, Mapping, Protocol, Union, runtime_checkable

from pagepack.errors import FilesystemError


@runtime_checkable
class FileSystem(Protocol):
    """Read-only view of a directory tree."""

    def exists(self, path: Path) -> bool:
        ...

    def is_dir(self, path: Path) -> bool:
        ...

    def list_dirs(self, path: Path) -> List[Path]:
        """Immediate subdirectories of path, sorted by name."""
        ...

    def walk_files(self, path: Path) -> List[Path]:
        """All regular files below path, recursively, sorted."""
        ...

    def read_bytes(self, path: Path) -> bytes:
        ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def list_dirs(self, path: Path) -> List[Path]:
        path = Path(path)
        if not path.is_dir():
            raise FilesystemError(f"not a directory: {path}")
        try:
            return sorted(p for p in path.iterdir() if p.is_dir())
        except OSError as exc:
            raise FilesystemError(f"cannot list {path}: {exc}") from exc

    def walk_files(self, path: Path) -> List[Path]:
        path = Path(path)
        if not path.is_dir():
            raise FilesystemError(f"not a directory: {path}")
        try:
            return sorted(p for p in path.rglob("*") if p.is_file())
        except OSError as exc:
            raise FilesystemError(f"cannot walk {path}: {exc}") from exc

    def read_bytes(self, path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise FilesystemError(f"cannot read {path}: {exc}") from exc


class MemoryFileSystem:
    """In-memory directory tree keyed by absolute posix paths.

    Directories are implied by file parents; empty ones can be added with
    `add_dir`.
    """

    def __init__(self, files: Mapping[str, Union[str, bytes]] | None = None) -> None:
        self._files: Dict[str, bytes] = {}
        self._dirs: set[str] = {"/"}
        for name, content in (files or {}).items():
            self.add_file(name, content)

    @staticmethod
    def _key(path: Union[str, Path]) -> str:
        return str(PurePosixPath(str(path).replace("\\", "/")))

    def add_dir(self, path: Union[str, Path]) -> None:
        p = PurePosixPath(self._key(path))
        self._dirs.add(str(p))
        self._dirs.update(str(parent) for parent in p.parents)

    def add_file(self, path: Union[str, Path], content: Union[str, bytes]) -> None:
        key = self._key(path)
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        self._files[key] = data
        self.add_dir(PurePosixPath(key).parent)

    def exists(self, path: Path) -> bool:
        key = self._key(path)
        return key in self._files or key in self._dirs

    def is_dir(self, path: Path) -> bool:
        return self._key(path) in self._dirs

    def list_dirs(self, path: Path) -> List[Path]:
        key = self._key(path)
        if key not in self._dirs:
            raise FilesystemError(f"not a directory: {path}")
        return sorted(
            Path(d) for d in self._dirs if d != key and str(PurePosixPath(d).parent) == key
        )

    def walk_files(self, path: Path) -> List[Path]:
        key = self._key(path)
        if key not in self._dirs:
            raise FilesystemError(f"not a directory: {path}")
        base = PurePosixPath(key)
        return sorted(Path(f) for f in self._files if base in PurePosixPath(f).parents)

    def read_bytes(self, path: Path) -> bytes:
        key = self._key(path)
        if key not in self._files:
            raise FilesystemError(f"cannot read {path}: no such file")
        return self._files[key]
