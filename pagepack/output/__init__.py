"""Output naming for built assets."""

from .naming import (
    CACHE_BUST_QUERY,
    image_filename,
    media_filename,
    output_spec,
    script_filename,
    style_filename,
)

__all__ = [
    "CACHE_BUST_QUERY",
    "image_filename",
    "media_filename",
    "output_spec",
    "script_filename",
    "style_filename",
]
