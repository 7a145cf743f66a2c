"""Sequential regex rewrite rules."""

from .pipeline import RewritePipeline, RewriteRule, literal, rule

__all__ = ["RewritePipeline", "RewriteRule", "literal", "rule"]
