"""Output filename templates per asset class.

Placeholders (`[name]`, `[chunkhash:8]`, ...) are left for the bundler to
fill in. Script filenames carry the `?_bid=152` cache-busting token that the
offline pass strips again.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from pagepack.config import DEFAULT_OUT_DIR
from pagepack.errors import ConfigurationError

CACHE_BUST_QUERY = "?_bid=152"
CROSS_ORIGIN_LOADING = "anonymous"

CHUNK_HASH = "_[chunkhash:8]"
ASSET_HASH = "_[hash:8]"
CONTENT_HASH = "_[contenthash:8]"


def _prefix(prefix: Optional[str]) -> str:
    if prefix is None:
        return ""
    if not isinstance(prefix, str):
        raise ConfigurationError(f"path prefix must be a string, got {prefix!r}")
    return prefix + "/" if prefix else ""


def _hash(use_hash: bool, token: str) -> str:
    if not isinstance(use_hash, bool):
        raise ConfigurationError(f"use_hash must be a boolean, got {use_hash!r}")
    return token if use_hash else ""


def script_filename(use_hash: bool, prefix: Optional[str] = None) -> str:
    return f"{_prefix(prefix)}[name]{_hash(use_hash, CHUNK_HASH)}.js{CACHE_BUST_QUERY}"


def image_filename(use_hash: bool, prefix: Optional[str] = None) -> str:
    return f"{_prefix(prefix)}img/[name]{_hash(use_hash, ASSET_HASH)}.[ext]"


def media_filename(use_hash: bool, prefix: Optional[str] = None) -> str:
    # media shares the img/ directory with images
    return f"{_prefix(prefix)}img/[name]{_hash(use_hash, ASSET_HASH)}.[ext]"


def style_filename(use_hash: bool, prefix: Optional[str] = None) -> str:
    return f"{_prefix(prefix)}[name]{_hash(use_hash, CONTENT_HASH)}.css"


def output_spec(
    use_hash: bool,
    prefix: Optional[str],
    public_path: str,
    root: Path,
    out_dir: Optional[str] = None,
) -> Dict[str, Any]:
    """Bundler `output` block: script filename, target dir, public path."""
    return {
        "filename": script_filename(use_hash, prefix),
        "path": str(Path(root) / (out_dir or DEFAULT_OUT_DIR)) + "/",
        "publicPath": public_path,
        "crossOriginLoading": CROSS_ORIGIN_LOADING,
    }
