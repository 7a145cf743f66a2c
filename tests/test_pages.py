"""Tests for MultiPageEntryPlanner and page discovery."""

from pathlib import Path

from pagepack.config import BuildOptions
from pagepack.layout.fs import MemoryFileSystem
from pagepack.layout.pages import (
    MINIFY_OPTIONS,
    MultiPageEntryPlanner,
    discover_page_dirs,
    page_name_for,
)
from pagepack.layout.project import ProjectLayout


def test_page_name_follows_pages_marker() -> None:
    assert page_name_for("/project/src/pages/home") == "home"
    assert page_name_for("pages/a") == "a"
    assert page_name_for("/project/src/pages/user/profile") == "user/profile"
    assert page_name_for("/project/src/components/home") is None
    assert page_name_for("/project/src/mypages/home") is None


def test_markup_only_page_gets_template_but_no_entry(memory_fs, layout) -> None:
    page_dirs = [layout.pages_dir / "a", layout.pages_dir / "b"]
    plan = MultiPageEntryPlanner(memory_fs).plan(page_dirs, BuildOptions(inject=True))

    assert plan.entry_map == {"b": "/project/src/pages/b/init.js"}
    assert [t.page_name for t in plan.template_instantiations] == ["a", "b"]
    a, b = plan.template_instantiations
    assert a.inject is False
    assert b.inject is True
    assert b.chunks == ["b"]
    assert b.template_path == Path("/project/src/pages/b/index.html")


def test_inject_follows_option_when_entry_exists(memory_fs, layout) -> None:
    plan = MultiPageEntryPlanner(memory_fs).plan([layout.pages_dir / "b"], BuildOptions(inject=False))
    assert plan.template_instantiations[0].inject is False
    assert "b" in plan.entry_map


def test_input_order_is_preserved(memory_fs, layout) -> None:
    page_dirs = [layout.pages_dir / "b", layout.pages_dir / "a"]
    plan = MultiPageEntryPlanner(memory_fs).plan(page_dirs, BuildOptions())
    assert [t.page_name for t in plan.template_instantiations] == ["b", "a"]


def test_dirs_outside_pages_are_skipped(memory_fs, layout) -> None:
    plan = MultiPageEntryPlanner(memory_fs).plan(
        [layout.source_dir / "modules", layout.pages_dir / "a"], BuildOptions()
    )
    assert [t.page_name for t in plan.template_instantiations] == ["a"]
    assert plan.entry_map == {}


def test_filename_prefix_and_assets_prefix(memory_fs, layout) -> None:
    options = BuildOptions(html_prefix="webserver", assets_prefix="cdn")
    plan = MultiPageEntryPlanner(memory_fs).plan([layout.pages_dir / "b"], options)
    t = plan.template_instantiations[0]
    assert t.output_filename == "webserver/b.html"
    assert t.assets_prefix == "cdn/"


def test_no_html_prefix_gives_bare_filename(memory_fs, layout) -> None:
    plan = MultiPageEntryPlanner(memory_fs).plan([layout.pages_dir / "a"], BuildOptions())
    assert plan.template_instantiations[0].output_filename == "a.html"


def test_minify_and_inline_css_options(memory_fs, layout) -> None:
    plan = MultiPageEntryPlanner(memory_fs).plan(
        [layout.pages_dir / "b"], BuildOptions(minify_html=True, inline_css=True)
    )
    t = plan.template_instantiations[0]
    assert t.minify == MINIFY_OPTIONS
    assert t.inline_source_pattern is not None
    assert t.inline_source_pattern.search("b_1234.css")
    assert t.to_dict()["inlineSource"] == r"\.css$"

    plain = MultiPageEntryPlanner(memory_fs).plan([layout.pages_dir / "b"], BuildOptions())
    assert plain.template_instantiations[0].minify is False
    assert plain.template_instantiations[0].inline_source_pattern is None


def test_discover_page_dirs_sorted_by_name(layout) -> None:
    fs = MemoryFileSystem(
        {
            "/project/src/pages/zeta/index.html": "",
            "/project/src/pages/alpha/index.html": "",
            "/project/src/pages/mid/index.html": "",
        }
    )
    assert [p.name for p in discover_page_dirs(layout, fs)] == ["alpha", "mid", "zeta"]


def test_discover_without_pages_dir_is_empty(layout) -> None:
    assert discover_page_dirs(layout, MemoryFileSystem({"/project/src/x.js": ""})) == []


def test_one_template_per_page_on_disk(tmp_path: Path) -> None:
    pages = tmp_path / "src" / "pages"
    for name, has_script in (("home", True), ("about", False), ("list", True)):
        (pages / name).mkdir(parents=True)
        (pages / name / "index.html").write_text("<html></html>", encoding="utf-8")
        if has_script:
            (pages / name / "init.js").write_text("", encoding="utf-8")
    layout = ProjectLayout.from_root(tmp_path)
    plan = MultiPageEntryPlanner().plan(discover_page_dirs(layout), BuildOptions())
    assert [t.page_name for t in plan.template_instantiations] == ["about", "home", "list"]
    assert set(plan.entry_map) == {"home", "list"}
