"""Build options: validation of the recognized option surface and env overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv

from pagepack.errors import ConfigurationError
from pagepack.logging import get_logger

_LOG = get_logger("config")

DEFAULT_OUT_DIR = "public"
DEFAULT_PORT = 8001
DEFAULT_PLATFORM_BASE = "11.url.cn/now"
DEFAULT_MARKUP_PATTERN = r"\.html?$"

ASSET_CLASSES: tuple[str, ...] = ("script", "image", "media", "style")

_OFFLINE_KEYS = ("cdnUrl", "serverUrl", "domain", "cdn", "product", "platformBase", "markupPattern")
_KNOWN_KEYS = frozenset(
    {
        "useHash",
        "pathPrefix",
        "publicPath",
        "inject",
        "inlineCSS",
        "minifyHtml",
        "assetsPrefix",
        "htmlPrefix",
        "outDir",
        "port",
        "externals",
        "alias",
        "minimizeCss",
        "usePx2rem",
        "remUnit",
        "remPrecision",
        "useTreeShaking",
        "offline",
        *ASSET_CLASSES,
        *_OFFLINE_KEYS,
    }
)


@dataclass(slots=True)
class AssetNaming:
    """Hash/prefix choice for one asset class."""

    use_hash: bool = False
    path_prefix: str = ""


@dataclass(slots=True)
class OfflineOptions:
    """Targets of the offline rewrite pass."""

    domain: str
    server_url: str
    cdn_url: str = ""
    cdn: str = ""
    product: str = ""
    platform_base: str = DEFAULT_PLATFORM_BASE
    markup_pattern: str = DEFAULT_MARKUP_PATTERN

    @property
    def rewrites_business_assets(self) -> bool:
        return bool(self.cdn and self.product)


@dataclass(slots=True)
class BuildOptions:
    script: AssetNaming = field(default_factory=AssetNaming)
    image: AssetNaming = field(default_factory=AssetNaming)
    media: AssetNaming = field(default_factory=AssetNaming)
    style: AssetNaming = field(default_factory=AssetNaming)
    public_path: str = ""
    inject: bool = True
    inline_css: bool = False
    minify_html: bool = False
    assets_prefix: str = ""
    html_prefix: str = ""
    out_dir: str = DEFAULT_OUT_DIR
    port: int = DEFAULT_PORT
    externals: Optional[List[Dict[str, str]]] = None
    alias: Dict[str, str] = field(default_factory=dict)
    minimize_css: bool = False
    use_px2rem: bool = False
    rem_unit: int = 75
    rem_precision: int = 8
    use_tree_shaking: bool = False
    offline: Optional[OfflineOptions] = None

    def naming(self, asset_class: str) -> AssetNaming:
        if asset_class not in ASSET_CLASSES:
            raise ConfigurationError(f"unknown asset class: {asset_class!r}")
        return getattr(self, asset_class)


def _bool(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    if key not in raw or raw[key] is None:
        return default
    value = raw[key]
    if not isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a boolean, got {value!r}")
    return value


def _str(raw: Mapping[str, Any], key: str, default: str = "") -> str:
    if key not in raw or raw[key] is None:
        return default
    value = raw[key]
    if not isinstance(value, str):
        raise ConfigurationError(f"{key} must be a string, got {value!r}")
    return value


def _int(raw: Mapping[str, Any], key: str, default: int, *, minimum: int = 0) -> int:
    if key not in raw or raw[key] is None:
        return default
    value = raw[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{key} must be >= {minimum}, got {value}")
    return value


def _asset_naming(raw: Mapping[str, Any], asset_class: str) -> AssetNaming:
    """Per-class block wins over the global useHash/pathPrefix keys."""
    base = AssetNaming(use_hash=_bool(raw, "useHash", False), path_prefix=_str(raw, "pathPrefix"))
    block = raw.get(asset_class)
    if block is None:
        return base
    if not isinstance(block, Mapping):
        raise ConfigurationError(f"{asset_class} must be a mapping, got {block!r}")
    return AssetNaming(
        use_hash=_bool(block, "useHash", base.use_hash),
        path_prefix=_str(block, "pathPrefix", base.path_prefix),
    )


def _offline_options(raw: Mapping[str, Any]) -> Optional[OfflineOptions]:
    enabled = raw.get("offline")
    if enabled is not None and not isinstance(enabled, bool):
        raise ConfigurationError(f"offline must be a boolean, got {enabled!r}")
    if enabled is False:
        return None
    if not enabled and not any(k in raw for k in _OFFLINE_KEYS):
        return None
    domain = _str(raw, "domain")
    server_url = _str(raw, "serverUrl")
    if not domain:
        raise ConfigurationError("offline packaging requires a non-empty domain")
    if not server_url:
        raise ConfigurationError("offline packaging requires a non-empty serverUrl")
    cdn = _str(raw, "cdn")
    product = _str(raw, "product")
    if bool(cdn) != bool(product):
        raise ConfigurationError("cdn and product must be set together")
    return OfflineOptions(
        domain=domain,
        server_url=server_url,
        cdn_url=_str(raw, "cdnUrl"),
        cdn=cdn,
        product=product,
        platform_base=_str(raw, "platformBase", DEFAULT_PLATFORM_BASE) or DEFAULT_PLATFORM_BASE,
        markup_pattern=_str(raw, "markupPattern", DEFAULT_MARKUP_PATTERN) or DEFAULT_MARKUP_PATTERN,
    )


def _externals(raw: Mapping[str, Any]) -> Optional[List[Dict[str, str]]]:
    value = raw.get("externals")
    if value is None:
        return None
    if not isinstance(value, list):
        raise ConfigurationError(f"externals must be a list, got {value!r}")
    out: List[Dict[str, str]] = []
    for item in value:
        if not isinstance(item, Mapping) or not {"module", "entry", "global"} <= set(item):
            raise ConfigurationError(f"external needs module, entry and global: {item!r}")
        out.append({k: str(item[k]) for k in ("module", "entry", "global")})
    return out


def _alias(raw: Mapping[str, Any]) -> Dict[str, str]:
    value = raw.get("alias")
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"alias must be a mapping, got {value!r}")
    return {str(k): str(v) for k, v in value.items()}


def _out_dir(raw: Mapping[str, Any]) -> str:
    if raw.get("outDir") is not None:
        out_dir = _str(raw, "outDir")
    else:
        out_dir = os.environ.get("PAGEPACK_OUT_DIR", "").strip() or DEFAULT_OUT_DIR
    out_dir = out_dir.strip("/")
    if not out_dir or ".." in Path(out_dir).parts:
        raise ConfigurationError(f"outDir must be a relative directory name, got {out_dir!r}")
    return out_dir


def load_build_options(raw: Optional[Mapping[str, Any]] = None) -> BuildOptions:
    """Validate a camelCase option mapping into BuildOptions.

    Invalid values raise ConfigurationError; only documented defaults are
    applied (outDir falls back to PAGEPACK_OUT_DIR, then "public").
    """
    raw = raw or {}
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"build options must be a mapping, got {type(raw).__name__}")
    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        _LOG.warning("ignoring unknown build options: %s", ", ".join(unknown))
    return BuildOptions(
        script=_asset_naming(raw, "script"),
        image=_asset_naming(raw, "image"),
        media=_asset_naming(raw, "media"),
        style=_asset_naming(raw, "style"),
        public_path=_str(raw, "publicPath"),
        inject=_bool(raw, "inject", True),
        inline_css=_bool(raw, "inlineCSS", False),
        minify_html=_bool(raw, "minifyHtml", False),
        assets_prefix=_str(raw, "assetsPrefix"),
        html_prefix=_str(raw, "htmlPrefix"),
        out_dir=_out_dir(raw),
        port=_int(raw, "port", DEFAULT_PORT, minimum=1),
        externals=_externals(raw),
        alias=_alias(raw),
        minimize_css=_bool(raw, "minimizeCss", False),
        use_px2rem=_bool(raw, "usePx2rem", False),
        rem_unit=_int(raw, "remUnit", 75, minimum=1),
        rem_precision=_int(raw, "remPrecision", 8),
        use_tree_shaking=_bool(raw, "useTreeShaking", False),
        offline=_offline_options(raw),
    )


def load_environment(env_file: Optional[Path] = None) -> bool:
    """Load a project .env; its values override exported ones (PAGEPACK_* keys)."""
    if env_file is not None and not Path(env_file).exists():
        return False
    return load_dotenv(env_file, override=True)
