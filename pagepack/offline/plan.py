"""Offline package plan: archive location, path mapper, content rewriter."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from pagepack.config import BuildOptions, OfflineOptions
from pagepack.errors import ConfigurationError
from pagepack.layout.project import ProjectLayout
from pagepack.offline.rules import Clock, asset_pipeline, markup_pipeline

OFFLINE_DIR = "offline"
ARCHIVE_NAME = "offline.zip"

PathMapper = Callable[[str], str]
ContentRewriter = Callable[[str, str], str]


def server_base(server_url: str) -> str:
    """`//now.qq.com/h5/` -> `now.qq.com/h5`; a scheme is dropped too."""
    return re.sub(r"^[A-Za-z][A-Za-z0-9+.-]*:", "", server_url).strip("/")


def make_path_mapper(html_prefix: str, assets_prefix: str, server_url: str) -> PathMapper:
    """Strip the markup or static-asset prefix and re-root under the server path.

    The markup prefix is checked first. Empty prefixes never match, and a path
    matching neither is returned unchanged.
    """
    base = server_base(server_url)

    def path_mapper(asset_path: str) -> str:
        if html_prefix and html_prefix in asset_path:
            rest = asset_path.replace(html_prefix, "", 1)
        elif assets_prefix and assets_prefix in asset_path:
            rest = asset_path.replace(assets_prefix, "", 1)
        else:
            return asset_path
        return posixpath.normpath(posixpath.join(base, rest.lstrip("/")))

    return path_mapper


def make_content_rewriter(options: OfflineOptions, clock: Optional[Clock] = None) -> ContentRewriter:
    markup_re = re.compile(options.markup_pattern)
    markup = markup_pipeline(options, clock)
    other = asset_pipeline(options)

    def content_rewriter(content: str, asset_path: str) -> str:
        if markup_re.search(asset_path):
            return markup(content)
        return other(content)

    return content_rewriter


@dataclass(frozen=True)
class OfflinePackagePlan:
    output_zip_path: Path
    path_mapper: PathMapper
    content_rewriter: ContentRewriter
    markup_pattern: re.Pattern[str]

    @property
    def output_dir(self) -> Path:
        return self.output_zip_path.parent

    def is_markup(self, asset_path: str) -> bool:
        return bool(self.markup_pattern.search(asset_path))


def plan_offline_package(
    layout: ProjectLayout,
    options: BuildOptions,
    clock: Optional[Clock] = None,
) -> OfflinePackagePlan:
    """Plan for `<root>/<outDir>/offline/offline.zip`."""
    offline = options.offline
    if offline is None:
        raise ConfigurationError("offline packaging is not configured (domain/serverUrl missing)")
    try:
        markup_re = re.compile(offline.markup_pattern)
    except re.error as exc:
        raise ConfigurationError(f"invalid markup pattern {offline.markup_pattern!r}: {exc}") from exc
    return OfflinePackagePlan(
        output_zip_path=layout.out_path(options.out_dir) / OFFLINE_DIR / ARCHIVE_NAME,
        path_mapper=make_path_mapper(options.html_prefix, options.assets_prefix, offline.server_url),
        content_rewriter=make_content_rewriter(offline, clock),
        markup_pattern=markup_re,
    )
