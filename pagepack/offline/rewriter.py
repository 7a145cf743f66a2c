"""Offline package rewriter.

Reads every built file, rewrites its content, maps it to its archive
location and hands the whole set to the archiver in one go. Any failure
aborts the pass before the archive is touched.
"""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pagepack.errors import FilesystemError, PackagingError
from pagepack.layout.fs import FileSystem, LocalFileSystem
from pagepack.logging import get_logger
from pagepack.offline.archive import Archiver, ZipArchiver
from pagepack.offline.plan import OfflinePackagePlan

_LOG = get_logger("offline")

# non-markup assets decoded and rewritten as text; everything else is copied as bytes
TEXT_SUFFIXES = frozenset(
    {".js", ".mjs", ".cjs", ".css", ".json", ".map", ".svg", ".txt", ".xml", ".webmanifest"}
)


class AssetKind(str, Enum):
    MARKUP = "markup"
    OTHER = "other"


class RewriterState(str, Enum):
    IDLE = "idle"
    STAGED = "staged"
    TERMINAL = "terminal"
    FAILED = "failed"


@dataclass(slots=True)
class StagedAsset:
    source_path: Path
    relative_path: str
    archive_path: str
    kind: AssetKind
    content: bytes


@dataclass(slots=True)
class PackageResult:
    archive_path: Path
    entries: List[str] = field(default_factory=list)
    markup_count: int = 0
    other_count: int = 0


def _check_archive_path(name: str, source: str) -> str:
    if name in ("", ".", "..") or name.startswith("/") or name.startswith("../"):
        raise PackagingError(f"{source} maps outside the archive: {name!r}")
    return name


class OfflinePackageRewriter:
    """One-shot rewriter: IDLE -> STAGED -> TERMINAL (or FAILED)."""

    def __init__(
        self,
        plan: OfflinePackagePlan,
        fs: Optional[FileSystem] = None,
        archiver: Optional[Archiver] = None,
    ) -> None:
        self.plan = plan
        self.fs = fs or LocalFileSystem()
        self.archiver = archiver or ZipArchiver()
        self.state = RewriterState.IDLE
        self.state_history: List[RewriterState] = [RewriterState.IDLE]
        self.staged: List[StagedAsset] = []

    def _set_state(self, state: RewriterState) -> None:
        if self.state == state:
            return
        self.state = state
        self.state_history.append(state)

    def _fail(self, message: str) -> PackagingError:
        self._set_state(RewriterState.FAILED)
        self.staged = []
        _LOG.warning("offline package aborted: %s", message)
        return PackagingError(message)

    def _stage_one(self, path: Path, relative: str) -> StagedAsset:
        data = self.fs.read_bytes(path)
        kind = AssetKind.MARKUP if self.plan.is_markup(relative) else AssetKind.OTHER
        if kind is AssetKind.MARKUP or path.suffix.lower() in TEXT_SUFFIXES:
            text = data.decode("utf-8")
            content = self.plan.content_rewriter(text, relative).encode("utf-8")
        else:
            content = data
        archive_path = _check_archive_path(
            posixpath.normpath(self.plan.path_mapper(relative)), relative
        )
        _LOG.debug("%s %s -> %s", kind.value, relative, archive_path)
        return StagedAsset(
            source_path=path,
            relative_path=relative,
            archive_path=archive_path,
            kind=kind,
            content=content,
        )

    def stage(self, output_dir: Path) -> List[StagedAsset]:
        """Read, classify, rewrite and path-map every file under output_dir."""
        if self.state != RewriterState.IDLE:
            raise PackagingError(f"rewriter already used (state: {self.state.value})")
        output_dir = Path(os.path.abspath(output_dir))
        try:
            files = self.fs.walk_files(output_dir)
        except FilesystemError as exc:
            raise self._fail(f"cannot list build output {output_dir}") from exc
        skip_dir = Path(os.path.abspath(self.plan.output_dir))
        staged: List[StagedAsset] = []
        seen: Dict[str, str] = {}
        for path in files:
            if skip_dir in path.parents:
                continue
            relative = path.relative_to(output_dir).as_posix()
            try:
                asset = self._stage_one(path, relative)
            except FilesystemError as exc:
                raise self._fail(f"cannot read {relative}") from exc
            except UnicodeDecodeError as exc:
                raise self._fail(f"{relative} is not valid UTF-8 text") from exc
            except PackagingError as exc:
                raise self._fail(str(exc)) from exc
            if asset.archive_path in seen:
                raise self._fail(
                    f"{relative} and {seen[asset.archive_path]} both map to {asset.archive_path}"
                )
            seen[asset.archive_path] = relative
            staged.append(asset)
        self.staged = staged
        self._set_state(RewriterState.STAGED)
        return staged

    def finish(self) -> PackageResult:
        """Hand all staged entries to the archiver."""
        if self.state != RewriterState.STAGED:
            raise PackagingError(f"nothing staged (state: {self.state.value})")
        entries = sorted((a.archive_path, a.content) for a in self.staged)
        try:
            target = self.archiver.write(self.plan.output_zip_path, entries)
        except PackagingError as exc:
            raise self._fail(str(exc)) from exc
        result = PackageResult(
            archive_path=Path(target),
            entries=[name for name, _ in entries],
            markup_count=sum(1 for a in self.staged if a.kind is AssetKind.MARKUP),
            other_count=sum(1 for a in self.staged if a.kind is AssetKind.OTHER),
        )
        self._set_state(RewriterState.TERMINAL)
        _LOG.info(
            "offline package written: %s (%d markup, %d other)",
            result.archive_path,
            result.markup_count,
            result.other_count,
        )
        return result

    def run(self, output_dir: Path) -> PackageResult:
        self.stage(output_dir)
        return self.finish()


def build_offline_package(
    plan: OfflinePackagePlan,
    output_dir: Path,
    fs: Optional[FileSystem] = None,
    archiver: Optional[Archiver] = None,
) -> PackageResult:
    return OfflinePackageRewriter(plan, fs=fs, archiver=archiver).run(output_dir)
