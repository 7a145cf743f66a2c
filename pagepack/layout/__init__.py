"""Project-layout discovery: filesystem access, aliases, page planning."""

from .aliases import AliasEntry, PathAliasResolver
from .fs import FileSystem, LocalFileSystem, MemoryFileSystem
from .pages import (
    MultiPageEntryPlanner,
    PageDescriptor,
    PagePlan,
    TemplateInstantiation,
    discover_page_dirs,
    page_name_for,
)
from .project import ProjectLayout

__all__ = [
    "AliasEntry",
    "FileSystem",
    "LocalFileSystem",
    "MemoryFileSystem",
    "MultiPageEntryPlanner",
    "PageDescriptor",
    "PagePlan",
    "PathAliasResolver",
    "ProjectLayout",
    "TemplateInstantiation",
    "discover_page_dirs",
    "page_name_for",
]
