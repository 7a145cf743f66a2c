"""Build descriptor for the external bundler."""

from .assemble import BuildDescriptor, assemble_descriptor

__all__ = ["BuildDescriptor", "assemble_descriptor"]
