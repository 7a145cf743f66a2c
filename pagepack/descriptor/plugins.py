"""Plugin and server descriptors for the bundler, as plain data."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pagepack.layout.fs import FileSystem
from pagepack.layout.project import ProjectLayout
from pagepack.output.naming import style_filename
from pagepack.rewrite.source_rules import replace_rule

DEFAULT_RUNTIME = "runtime-now-6"
BUILDER_HOME = ".feflow"
PLATFORM_LOADER_ROOT = "/data/frontend/install/AlloyDist"
INTEGRITY_HASHES = ("sha256", "sha384")

DEFAULT_EXTERNALS: List[Dict[str, str]] = [
    {
        "module": "react",
        "entry": "//11.url.cn/now/lib/15.1.0/react-with-addons.min.js?_bid=3123",
        "global": "React",
    },
    {
        "module": "react-dom",
        "entry": "//11.url.cn/now/lib/15.1.0/react-dom.min.js?_bid=3123",
        "global": "ReactDOM",
    },
]


def externals(custom: Optional[List[Dict[str, str]]] = None) -> List[Dict[str, str]]:
    """Libraries loaded from the platform CDN instead of bundled."""
    return [dict(e) for e in (custom if custom is not None else DEFAULT_EXTERNALS)]


def extract_css_filename(use_hash: bool, prefix: Optional[str] = None) -> str:
    return style_filename(use_hash, prefix)


def define_constants(env: str) -> Dict[str, str]:
    return {"process.env.NODE_ENV": json.dumps(env)}


def integrity_plugin() -> Dict[str, Any]:
    return {"hashFuncNames": list(INTEGRITY_HASHES)}


def common_chunk(name: str = "common") -> Dict[str, str]:
    return {"name": name}


def dev_server(layout: ProjectLayout, port: int) -> Dict[str, Any]:
    return {
        "contentBase": str(layout.source_dir),
        "inline": True,
        "historyApiFallback": False,
        "disableHostCheck": True,
        "port": port,
    }


def resolve_loader_paths(
    package_name: str,
    runtime: Optional[str] = None,
    home: Optional[Path] = None,
) -> Dict[str, List[str]]:
    """Loader lookup dirs: shared builder install, the builder's own deps, platform runtime."""
    home = Path(home) if home is not None else Path.home()
    base = home / BUILDER_HOME / "node_modules"
    return {
        "modules": [
            str(base),
            str(base / package_name / "node_modules"),
            f"{PLATFORM_LOADER_ROOT}/{runtime or DEFAULT_RUNTIME}/node_modules",
        ]
    }


def css_purge_paths(layout: ProjectLayout, fs: FileSystem) -> List[str]:
    """Every source file, scanned for used selectors when tree-shaking styles."""
    if not fs.is_dir(layout.source_dir):
        return []
    return [str(p) for p in fs.walk_files(layout.source_dir)]


def replace_plugin(pattern: str, replace_with: str) -> Dict[str, Any]:
    """Post-build replacement applied to markup or bundles."""
    return {"enable": True, "rules": (replace_rule(pattern, replace_with),)}
