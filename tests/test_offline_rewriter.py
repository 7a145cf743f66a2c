"""Tests for OfflinePackageRewriter: staging, archiving, all-or-nothing failure."""

from pathlib import Path

import pytest

from pagepack.config import load_build_options
from pagepack.errors import PackagingError
from pagepack.layout.fs import MemoryFileSystem
from pagepack.layout.project import ProjectLayout
from pagepack.offline.archive import read_archive
from pagepack.offline.plan import plan_offline_package
from pagepack.offline.rewriter import (
    AssetKind,
    OfflinePackageRewriter,
    RewriterState,
    build_offline_package,
)

PNG = b"\x89PNG\r\n\x1a\n\xff\xfe\x00binary"

OPTIONS = {
    "htmlPrefix": "webserver",
    "assetsPrefix": "cdn",
    "domain": "now.example.com",
    "serverUrl": "//now.example.com/h5",
    "cdn": "cdn.example.com",
    "product": "now",
}


def _write(path: Path, content) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")


def _built_project(root: Path) -> Path:
    out = root / "public"
    _write(
        out / "webserver" / "index.html",
        '<html><head><script src="//cdn.example.com/now/js/index_1a2b.js?_bid=152" '
        'integrity="sha256-abc" crossorigin="anonymous"></script></head></html>',
    )
    _write(out / "cdn" / "js" / "index_1a2b.js", 'fetch("//cdn.example.com/now/api.json")')
    _write(out / "cdn" / "img" / "logo.png", PNG)
    _write(out / "offline" / "offline.zip", b"stale archive")
    return out


def _plan(root: Path, **extra):
    raw = dict(OPTIONS)
    raw.update(extra)
    return plan_offline_package(ProjectLayout.from_root(root), load_build_options(raw), clock=lambda: 42)


def test_full_pass_writes_archive(tmp_path: Path) -> None:
    out = _built_project(tmp_path)
    result = build_offline_package(_plan(tmp_path), out)

    assert result.archive_path == tmp_path / "public" / "offline" / "offline.zip"
    assert result.entries == [
        "now.example.com/h5/img/logo.png",
        "now.example.com/h5/index.html",
        "now.example.com/h5/js/index_1a2b.js",
    ]
    assert (result.markup_count, result.other_count) == (1, 2)

    archive = read_archive(result.archive_path)
    html = archive["now.example.com/h5/index.html"].decode("utf-8")
    assert html.startswith('<html><head><script>var pack = {"version":42}</script><script src="//now.example.com/js/index_1a2b.js"')
    assert "integrity" not in html
    assert "crossorigin" not in html
    assert "_bid" not in html
    assert archive["now.example.com/h5/js/index_1a2b.js"] == b'fetch("//now.example.com/api.json")'


def test_relative_output_dir_still_skips_archive_dir(tmp_path: Path, monkeypatch) -> None:
    root = tmp_path.resolve()
    _built_project(root)
    monkeypatch.chdir(root)
    result = build_offline_package(_plan(root), Path("public"))

    assert result.archive_path == root / "public" / "offline" / "offline.zip"
    assert not any("offline.zip" in e for e in result.entries)
    assert len(result.entries) == 3


def test_binary_assets_round_trip_unchanged(tmp_path: Path) -> None:
    out = _built_project(tmp_path)
    rewriter = OfflinePackageRewriter(_plan(tmp_path))
    staged = {a.archive_path: a for a in rewriter.stage(out)}
    result = rewriter.finish()

    archive = read_archive(result.archive_path)
    assert archive["now.example.com/h5/img/logo.png"] == PNG
    for name, asset in staged.items():
        if asset.kind is AssetKind.OTHER:
            assert archive[name] == asset.content


def test_archive_directory_is_not_packaged(tmp_path: Path) -> None:
    out = _built_project(tmp_path)
    result = build_offline_package(_plan(tmp_path), out)
    assert not any("offline.zip" in name for name in result.entries)


def test_state_history(tmp_path: Path) -> None:
    out = _built_project(tmp_path)
    rewriter = OfflinePackageRewriter(_plan(tmp_path))
    rewriter.run(out)
    assert rewriter.state_history == [RewriterState.IDLE, RewriterState.STAGED, RewriterState.TERMINAL]
    with pytest.raises(PackagingError):
        rewriter.run(out)


def test_invalid_markup_aborts_without_archive(tmp_path: Path) -> None:
    out = _built_project(tmp_path)
    (out / "offline" / "offline.zip").unlink()
    _write(out / "webserver" / "broken.html", b"<html>\xff\xfe</html>")

    rewriter = OfflinePackageRewriter(_plan(tmp_path))
    with pytest.raises(PackagingError):
        rewriter.run(out)
    assert rewriter.state is RewriterState.FAILED
    assert rewriter.staged == []
    assert not (out / "offline" / "offline.zip").exists()


def test_failure_leaves_previous_archive_untouched(tmp_path: Path) -> None:
    out = _built_project(tmp_path)
    _write(out / "cdn" / "js" / "bad.js", b"\xff\xfe\xfd")
    with pytest.raises(PackagingError):
        build_offline_package(_plan(tmp_path), out)
    assert (out / "offline" / "offline.zip").read_bytes() == b"stale archive"


def test_colliding_archive_paths_abort(tmp_path: Path) -> None:
    out = _built_project(tmp_path)
    _write(out / "webserver" / "js" / "index_1a2b.js", "dup")
    with pytest.raises(PackagingError):
        build_offline_package(_plan(tmp_path), out)


def test_missing_output_dir_is_packaging_error(tmp_path: Path) -> None:
    with pytest.raises(PackagingError):
        build_offline_package(_plan(tmp_path), tmp_path / "public")


def test_archives_are_deterministic(tmp_path: Path) -> None:
    out = _built_project(tmp_path)
    first = build_offline_package(_plan(tmp_path), out).archive_path.read_bytes()
    second = build_offline_package(_plan(tmp_path), out).archive_path.read_bytes()
    assert first == second


class RecordingArchiver:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls = []

    def write(self, target, entries):
        if self.fail:
            raise PackagingError("disk full")
        self.calls.append((target, list(entries)))
        return target


def test_virtual_tree_with_recording_archiver() -> None:
    fs = MemoryFileSystem(
        {
            "/project/public/webserver/a.html": '<script src="//11.url.cn/now/lib.js"></script>',
            "/project/public/cdn/a.css": "body{background:url(//cdn.example.com/now/bg.png)}",
        }
    )
    archiver = RecordingArchiver()
    result = OfflinePackageRewriter(_plan(Path("/project")), fs=fs, archiver=archiver).run(Path("/project/public"))

    assert result.entries == ["now.example.com/h5/a.css", "now.example.com/h5/a.html"]
    target, entries = archiver.calls[0]
    assert target == Path("/project/public/offline/offline.zip")
    contents = dict(entries)
    assert contents["now.example.com/h5/a.css"] == b"body{background:url(//now.example.com/bg.png)}"
    assert contents["now.example.com/h5/a.html"] == (
        b'<script>var pack = {"version":42}</script><script src="//now.example.com/lib.js"></script>'
    )


def test_archiver_failure_marks_rewriter_failed() -> None:
    fs = MemoryFileSystem({"/project/public/cdn/a.js": "x"})
    rewriter = OfflinePackageRewriter(_plan(Path("/project")), fs=fs, archiver=RecordingArchiver(fail=True))
    with pytest.raises(PackagingError):
        rewriter.run(Path("/project/public"))
    assert rewriter.state is RewriterState.FAILED
