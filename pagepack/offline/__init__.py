"""Offline package: relocate built assets under a new domain and server path."""

from .archive import Archiver, ZipArchiver, read_archive
from .plan import OfflinePackagePlan, make_content_rewriter, make_path_mapper, plan_offline_package
from .rewriter import (
    AssetKind,
    OfflinePackageRewriter,
    PackageResult,
    RewriterState,
    StagedAsset,
    build_offline_package,
)
from .rules import asset_pipeline, markup_pipeline

__all__ = [
    "Archiver",
    "AssetKind",
    "OfflinePackagePlan",
    "OfflinePackageRewriter",
    "PackageResult",
    "RewriterState",
    "StagedAsset",
    "ZipArchiver",
    "asset_pipeline",
    "build_offline_package",
    "make_content_rewriter",
    "make_path_mapper",
    "markup_pipeline",
    "plan_offline_package",
    "read_archive",
]
