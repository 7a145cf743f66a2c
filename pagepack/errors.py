"""Exception taxonomy for descriptor assembly and offline packaging."""

from __future__ import annotations


class PagepackError(Exception):
    """Base class for every error raised by pagepack."""


class FilesystemError(PagepackError):
    """Missing or unreadable directory/file in the project layout."""


class ConfigurationError(PagepackError):
    """Invalid option value."""


class PackagingError(PagepackError):
    """Failure during the offline rewrite pass. No archive is written."""
