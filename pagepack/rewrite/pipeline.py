"""Ordered text-rewrite rules.

A `RewriteRule` is a pure `(text) -> text` callable wrapping one regex
substitution. A `RewritePipeline` applies its rules in declared order, each
rule seeing the output of the previous one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Tuple, Union

Replacement = Union[str, Callable[[re.Match[str]], str]]


@dataclass(frozen=True)
class RewriteRule:
    name: str
    pattern: re.Pattern[str]
    replacement: Replacement
    count: int = 0  # 0 = every match

    def __call__(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text, count=self.count)


def rule(
    name: str,
    pattern: Union[str, re.Pattern[str]],
    replacement: Replacement,
    *,
    count: int = 0,
    flags: int = 0,
) -> RewriteRule:
    """Build a RewriteRule, compiling pattern when given as a string."""
    compiled = re.compile(pattern, flags) if isinstance(pattern, str) else pattern
    return RewriteRule(name=name, pattern=compiled, replacement=replacement, count=count)


def literal(name: str, pattern: Union[str, re.Pattern[str]], text: str, *, count: int = 0, flags: int = 0) -> RewriteRule:
    """Rule whose replacement is inserted verbatim (no group/escape expansion)."""
    return rule(name, pattern, lambda _m: text, count=count, flags=flags)


@dataclass(frozen=True)
class RewritePipeline:
    rules: Tuple[RewriteRule, ...] = ()

    def __call__(self, text: str) -> str:
        for r in self.rules:
            text = r(text)
        return text

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(r.name for r in self.rules)

    def then(self, *rules: RewriteRule) -> "RewritePipeline":
        return RewritePipeline(self.rules + tuple(rules))
