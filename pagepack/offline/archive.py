"""Deterministic zip writer for offline packages."""

from __future__ import annotations

import os
import tempfile
import zipfile
from pathlib import Path
from typing import Dict, Iterable, Protocol, Tuple

from pagepack.errors import PackagingError

# fixed timestamp so identical inputs give byte-identical archives
ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)


class Archiver(Protocol):
    def write(self, target: Path, entries: Iterable[Tuple[str, bytes]]) -> Path:
        ...


class ZipArchiver:
    """Write entries sorted by name into a temp file, then atomically replace target."""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED) -> None:
        self.compression = compression

    def write(self, target: Path, entries: Iterable[Tuple[str, bytes]]) -> Path:
        target = Path(target)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".pagepack-", suffix=".zip.tmp", dir=target.parent)
        except OSError as exc:
            raise PackagingError(f"cannot create archive directory {target.parent}: {exc}") from exc
        os.close(fd)
        tmp = Path(tmp_name)
        try:
            with zipfile.ZipFile(tmp, "w", self.compression) as zf:
                for name, data in sorted(entries):
                    info = zipfile.ZipInfo(name, date_time=ZIP_DATE_TIME)
                    info.compress_type = self.compression
                    info.external_attr = 0o644 << 16
                    zf.writestr(info, data)
            os.replace(tmp, target)
        except (OSError, ValueError) as exc:
            raise PackagingError(f"cannot write archive {target}: {exc}") from exc
        finally:
            if tmp.exists():
                tmp.unlink()
        return target


def read_archive(path: Path) -> Dict[str, bytes]:
    """Archive member name -> bytes."""
    try:
        with zipfile.ZipFile(path) as zf:
            return {name: zf.read(name) for name in zf.namelist()}
    except (OSError, zipfile.BadZipFile) as exc:
        raise PackagingError(f"cannot read archive {path}: {exc}") from exc
