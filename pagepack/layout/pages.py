"""Multi-page entry planning.

Each `pages/<name>/` directory becomes one markup template instantiation and,
when it holds an `init.js`, one script entry. Pages without `init.js` are
markup-only: they get a template but nothing is injected into it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pagepack.config import BuildOptions
from pagepack.layout.fs import FileSystem, LocalFileSystem
from pagepack.layout.project import ProjectLayout
from pagepack.logging import get_logger

_LOG = get_logger("layout")

ENTRY_SCRIPT = "init.js"
TEMPLATE_FILE = "index.html"
INLINE_CSS_PATTERN = r"\.css$"

_PAGE_NAME_RE = re.compile(r"(?:^|/)pages/(.*)")

MINIFY_OPTIONS: Dict[str, bool] = {
    "html5": True,
    "collapseWhitespace": True,
    "preserveLineBreaks": False,
    "minifyCSS": True,
    "minifyJS": True,
    "removeComments": False,
}


def page_name_for(directory: Union[str, Path]) -> Optional[str]:
    """Path segment(s) after the `pages/` marker, or None when there is none."""
    match = _PAGE_NAME_RE.search(Path(directory).as_posix())
    if not match or not match.group(1):
        return None
    return match.group(1).rstrip("/")


@dataclass(frozen=True)
class PageDescriptor:
    page_name: str
    directory: Path
    entry_script_exists: bool
    template_path: Path

    @property
    def entry_script(self) -> Path:
        return self.directory / ENTRY_SCRIPT


@dataclass(frozen=True)
class TemplateInstantiation:
    """What the bundler's markup plugin is told to stamp for one page."""

    page_name: str
    template_path: Path
    output_filename: str
    chunks: List[str]
    assets_prefix: str
    inject: bool
    minify: Union[Dict[str, bool], bool]
    inline_source_pattern: Optional[re.Pattern[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageName": self.page_name,
            "template": str(self.template_path),
            "filename": self.output_filename,
            "chunks": list(self.chunks),
            "assetsPrefix": self.assets_prefix,
            "inject": self.inject,
            "minify": dict(self.minify) if isinstance(self.minify, dict) else self.minify,
            "inlineSource": self.inline_source_pattern.pattern if self.inline_source_pattern else None,
        }


@dataclass
class PagePlan:
    entry_map: Dict[str, str] = field(default_factory=dict)
    template_instantiations: List[TemplateInstantiation] = field(default_factory=list)


def discover_page_dirs(layout: ProjectLayout, fs: Optional[FileSystem] = None) -> List[Path]:
    """Page directories under src/pages, sorted by page name."""
    fs = fs or LocalFileSystem()
    if not fs.is_dir(layout.pages_dir):
        _LOG.debug("no pages directory at %s", layout.pages_dir)
        return []
    return sorted(fs.list_dirs(layout.pages_dir), key=lambda p: p.name)


class MultiPageEntryPlanner:
    """Turn page directories into an entry map plus template instantiations."""

    def __init__(self, fs: Optional[FileSystem] = None) -> None:
        self.fs = fs or LocalFileSystem()

    def describe(self, directory: Union[str, Path]) -> Optional[PageDescriptor]:
        directory = Path(directory)
        name = page_name_for(directory)
        if name is None:
            return None
        return PageDescriptor(
            page_name=name,
            directory=directory,
            entry_script_exists=self.fs.exists(directory / ENTRY_SCRIPT),
            template_path=directory / TEMPLATE_FILE,
        )

    def plan(self, page_dirs: Iterable[Union[str, Path]], options: BuildOptions) -> PagePlan:
        """Plan every page in input order; dirs outside `pages/` are skipped."""
        result = PagePlan()
        html_prefix = f"{options.html_prefix}/" if options.html_prefix else ""
        inline_source = re.compile(INLINE_CSS_PATTERN) if options.inline_css else None
        for directory in page_dirs:
            page = self.describe(directory)
            if page is None:
                _LOG.debug("skipping %s: not under a pages/ directory", directory)
                continue
            if page.entry_script_exists:
                result.entry_map[page.page_name] = str(page.entry_script)
            result.template_instantiations.append(
                TemplateInstantiation(
                    page_name=page.page_name,
                    template_path=page.template_path,
                    output_filename=f"{html_prefix}{page.page_name}.html",
                    chunks=[page.page_name],
                    assets_prefix=f"{options.assets_prefix}/",
                    inject=options.inject and page.entry_script_exists,
                    minify=dict(MINIFY_OPTIONS) if options.minify_html else False,
                    inline_source_pattern=inline_source,
                )
            )
        _LOG.info(
            "planned %d page(s), %d script entr%s",
            len(result.template_instantiations),
            len(result.entry_map),
            "y" if len(result.entry_map) == 1 else "ies",
        )
        return result
