"""pagepack: build descriptors and offline packages for multi-page front-end projects.

Layout:

- pagepack/layout      project root, filesystem access, aliases, page planning
- pagepack/output      output filename templates per asset class
- pagepack/rewrite     ordered regex rewrite rules
- pagepack/descriptor  loader rules, plugin settings, descriptor assembly
- pagepack/offline     offline package plan, rewriter and archiver

Every component takes the project root explicitly through `ProjectLayout`.
"""

from .config import BuildOptions, load_build_options, load_environment
from .descriptor import BuildDescriptor, assemble_descriptor
from .errors import ConfigurationError, FilesystemError, PackagingError, PagepackError
from .layout import ProjectLayout
from .offline import OfflinePackageRewriter, build_offline_package, plan_offline_package

__version__ = "1.0.0"

__all__ = [
    "BuildDescriptor",
    "BuildOptions",
    "ConfigurationError",
    "FilesystemError",
    "OfflinePackageRewriter",
    "PackagingError",
    "PagepackError",
    "ProjectLayout",
    "assemble_descriptor",
    "build_offline_package",
    "load_build_options",
    "load_environment",
    "plan_offline_package",
]
