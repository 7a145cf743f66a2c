"""Rewrite rules the bundler's loaders apply to sources before compiling.

Page markup supports two inline shorthands:

- `<script src="pkg?__inline"></script>` becomes an inline script whose body
  is the transpiled package source;
- `<!--inline[/assets/inline/meta.html]-->` is replaced by the raw contents
  of that file, with absolute paths resolved from the source root.

Stylesheets may `@import "/assets/css/mixin";` relative to the source root.
"""

from __future__ import annotations

import re

from pagepack.rewrite.pipeline import RewritePipeline, RewriteRule, literal, rule

_FLAGS = re.IGNORECASE | re.MULTILINE

INLINE_SCRIPT_RE = re.compile(r'<script.*?src="(.*?)\?__inline".*?>.*?</script>', _FLAGS)
INLINE_MARKUP_RE = re.compile(r"<!--inline\[(.*?)\]-->", _FLAGS)
ABSOLUTE_IMPORT_RE = re.compile(r'@import\s*"(/.*?)";', _FLAGS)


def _inline_script(match: re.Match[str]) -> str:
    pkg = match.group(1)
    return "<script>${require('raw-loader!babel-loader!" + pkg + "')}</script>"


def _inline_markup(match: re.Match[str]) -> str:
    path = match.group(1)
    if path.startswith("/"):
        # templates live two levels below src: src/pages/<name>/index.html
        path = "../.." + path
    return "${require('raw-loader!" + path + "')}"


def _absolute_import(match: re.Match[str]) -> str:
    return f'@import "{match.group(1)[1:]}";'


def inline_script_rule() -> RewriteRule:
    return rule("inline-script", INLINE_SCRIPT_RE, _inline_script)


def inline_markup_rule() -> RewriteRule:
    return rule("inline-markup", INLINE_MARKUP_RE, _inline_markup)


def absolute_import_rule() -> RewriteRule:
    return rule("absolute-import", ABSOLUTE_IMPORT_RE, _absolute_import)


def markup_source_pipeline() -> RewritePipeline:
    return RewritePipeline((inline_script_rule(), inline_markup_rule()))


def stylesheet_source_pipeline() -> RewritePipeline:
    return RewritePipeline((absolute_import_rule(),))


def replace_rule(pattern: str, replace_with: str, *, flags: int = 0) -> RewriteRule:
    """Post-build string replacement: every match of pattern becomes replace_with."""
    return literal(f"replace:{pattern}", pattern, replace_with, flags=flags)
