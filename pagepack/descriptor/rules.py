"""Module (loader) rules handed to the bundler, one per file class."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from pagepack.errors import ConfigurationError
from pagepack.layout.project import ProjectLayout
from pagepack.output.naming import image_filename, media_filename
from pagepack.rewrite.source_rules import markup_source_pipeline, stylesheet_source_pipeline

Rule = Dict[str, Any]

IMAGE_TEST = r"\.(png|svg|jpg|gif|blob)$"
MEDIA_TEST = r"\.(mp3|mp4|mov)$"
FONT_TEST = r"\.(woff|woff2|eot|ttf|otf)$"
AUTOPREFIXER_BROWSERS = ["last 2 version", "> 1%", "iOS 7"]


def image_rule(use_hash: bool, prefix: Optional[str] = None) -> Rule:
    return {
        "test": IMAGE_TEST,
        "use": [{"loader": "inline-file-loader", "options": {"name": image_filename(use_hash, prefix)}}],
    }


def media_rule(use_hash: bool, prefix: Optional[str] = None) -> Rule:
    return {
        "test": MEDIA_TEST,
        "use": [{"loader": "file-loader", "options": {"name": media_filename(use_hash, prefix)}}],
    }


def font_rule() -> Rule:
    return {"test": FONT_TEST, "use": {"loader": "file-loader"}}


def css_rule() -> Rule:
    return {"test": r"\.css$", "use": ["style-loader", "css-loader"]}


def markup_rule() -> Rule:
    """Page templates: html-loader, then the inline-syntax rewrites."""
    return {
        "test": r"index\.html$",
        "use": [
            {"loader": "html-loader", "options": {"interpolate": 1, "attrs": [":src"]}},
            {"loader": "replace-text-loader", "options": {"rules": markup_source_pipeline()}},
        ],
    }


def style_preprocessor_rule(
    kind: str,
    layout: ProjectLayout,
    *,
    minimize: bool = False,
    use_px2rem: bool = False,
    rem_unit: int = 75,
    rem_precision: int = 8,
    alias: Optional[Mapping[str, str]] = None,
) -> Rule:
    """scss/less chain: css -> px2rem? -> autoprefixer -> sprites -> preprocessor.

    Extracted to a stylesheet file with a style-loader fallback.
    """
    if kind not in ("scss", "less"):
        raise ConfigurationError(f"unsupported style preprocessor: {kind!r}")
    css_loader: Dict[str, Any] = {"loader": "css-loader", "options": {"alias": dict(alias or {})}}
    if minimize:
        css_loader["options"] = {"minimize": True}
    chain: List[Any] = [css_loader]
    if use_px2rem:
        chain.append(
            {"loader": "px2rem-loader", "options": {"remUnit": rem_unit or 75, "remPrecision": rem_precision or 8}}
        )
    chain.append({"loader": "autoprefixer-loader?" + json.dumps({"browsers": AUTOPREFIXER_BROWSERS})})
    chain.append({"loader": "sprites-loader"})
    chain.append(
        {
            "loader": "sass-loader" if kind == "scss" else "less-loader",
            "options": {"includePaths": [str(layout.source_dir)]},
        }
    )
    if kind == "scss":
        chain.append({"loader": "string-replace-loader", "options": {"rules": stylesheet_source_pipeline()}})
    return {
        "test": rf"\.{kind}$",
        "use": ["css-hot-loader", {"extract": True, "fallback": "style-loader", "use": chain}],
    }


def script_rule(layout: ProjectLayout) -> Rule:
    return {"test": r"\.js$", "loader": "happypack/loader", "exclude": str(layout.node_modules_dir)}


def typescript_rule(layout: ProjectLayout) -> Rule:
    return {"test": r"\.ts(x?)$", "loader": "happypack/loader", "exclude": str(layout.node_modules_dir)}


def transpile_options(js_loader: Optional[Mapping[str, Any]] = None, use_tree_shaking: bool = False) -> Dict[str, Any]:
    """Babel options for the script loader; tree shaking keeps ES modules."""
    presets: List[Any] = ["env", "stage-0", "react"]
    if use_tree_shaking:
        presets = [["env", {"modules": False}], "stage-0", "react"]
    options: Dict[str, Any] = {
        "cacheDirectory": True,
        "plugins": [
            "transform-decorators-legacy",
            ["import", {"libraryName": "antd", "libraryDirectory": "es", "style": "css"}],
        ],
        "presets": presets,
    }
    options.update(js_loader or {})
    return options
