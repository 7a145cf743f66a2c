"""Assemble the full build descriptor the external bundler consumes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pagepack.config import BuildOptions
from pagepack.descriptor import plugins
from pagepack.descriptor.rules import (
    Rule,
    css_rule,
    font_rule,
    image_rule,
    markup_rule,
    media_rule,
    script_rule,
    style_preprocessor_rule,
    transpile_options,
    typescript_rule,
)
from pagepack.layout.aliases import PathAliasResolver
from pagepack.layout.fs import FileSystem, LocalFileSystem
from pagepack.layout.pages import MultiPageEntryPlanner, TemplateInstantiation, discover_page_dirs
from pagepack.layout.project import ProjectLayout
from pagepack.logging import get_logger
from pagepack.offline.plan import OfflinePackagePlan, plan_offline_package
from pagepack.offline.rules import Clock
from pagepack.output.naming import output_spec
from pagepack.rewrite.pipeline import RewritePipeline, RewriteRule

_LOG = get_logger("descriptor")


@dataclass
class BuildDescriptor:
    entry: Dict[str, str]
    output: Dict[str, Any]
    alias: Dict[str, str]
    module_rules: List[Rule]
    templates: List[TemplateInstantiation]
    extract_css_filename: str
    transpile: Dict[str, Any]
    externals: List[Dict[str, str]]
    define: Dict[str, str]
    integrity: Dict[str, Any]
    common_chunk: Dict[str, str]
    dev_server: Dict[str, Any]
    css_purge_paths: List[str] = field(default_factory=list)
    offline: Optional[OfflinePackagePlan] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible view: rules become name/pattern pairs, paths strings."""
        return {
            "entry": dict(self.entry),
            "output": _plain(self.output),
            "resolve": {"alias": dict(self.alias)},
            "module": {"rules": _plain(self.module_rules)},
            "templates": [t.to_dict() for t in self.templates],
            "extractCss": self.extract_css_filename,
            "transpile": _plain(self.transpile),
            "externals": _plain(self.externals),
            "define": dict(self.define),
            "integrity": _plain(self.integrity),
            "commonChunk": dict(self.common_chunk),
            "devServer": _plain(self.dev_server),
            "cssPurgePaths": list(self.css_purge_paths),
            "offline": {"path": str(self.offline.output_zip_path)} if self.offline else None,
        }


def _plain(value: Any) -> Any:
    if isinstance(value, RewritePipeline):
        return [_plain(r) for r in value.rules]
    if isinstance(value, RewriteRule):
        return {"name": value.name, "pattern": value.pattern.pattern}
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def assemble_descriptor(
    layout: ProjectLayout,
    options: BuildOptions,
    fs: Optional[FileSystem] = None,
    *,
    env: str = "production",
    page_dirs: Optional[Iterable[Union[str, Path]]] = None,
    clock: Optional[Clock] = None,
) -> BuildDescriptor:
    """Run alias resolution and page planning, then lay out every bundler setting.

    FilesystemError from a missing source directory propagates unchanged.
    """
    fs = fs or LocalFileSystem()
    alias = PathAliasResolver(fs).resolve(layout.source_dir, overrides=options.alias)
    if page_dirs is None:
        page_dirs = discover_page_dirs(layout, fs)
    pages = MultiPageEntryPlanner(fs).plan(page_dirs, options)

    style_kwargs = dict(
        minimize=options.minimize_css,
        use_px2rem=options.use_px2rem,
        rem_unit=options.rem_unit,
        rem_precision=options.rem_precision,
        alias=alias,
    )
    module_rules: List[Rule] = [
        markup_rule(),
        script_rule(layout),
        typescript_rule(layout),
        css_rule(),
        style_preprocessor_rule("scss", layout, **style_kwargs),
        style_preprocessor_rule("less", layout, **style_kwargs),
        image_rule(options.image.use_hash, options.image.path_prefix),
        media_rule(options.media.use_hash, options.media.path_prefix),
        font_rule(),
    ]

    descriptor = BuildDescriptor(
        entry=pages.entry_map,
        output=output_spec(
            options.script.use_hash,
            options.script.path_prefix,
            options.public_path,
            layout.root,
            options.out_dir,
        ),
        alias=alias,
        module_rules=module_rules,
        templates=pages.template_instantiations,
        extract_css_filename=plugins.extract_css_filename(options.style.use_hash, options.style.path_prefix),
        transpile=transpile_options(use_tree_shaking=options.use_tree_shaking),
        externals=plugins.externals(options.externals),
        define=plugins.define_constants(env),
        integrity=plugins.integrity_plugin(),
        common_chunk=plugins.common_chunk(),
        dev_server=plugins.dev_server(layout, options.port),
        css_purge_paths=plugins.css_purge_paths(layout, fs) if options.use_tree_shaking else [],
        offline=plan_offline_package(layout, options, clock) if options.offline else None,
    )
    _LOG.info(
        "descriptor assembled: %d entr%s, %d template(s), %d alias key(s)%s",
        len(descriptor.entry),
        "y" if len(descriptor.entry) == 1 else "ies",
        len(descriptor.templates),
        len(descriptor.alias),
        ", offline package planned" if descriptor.offline else "",
    )
    return descriptor
