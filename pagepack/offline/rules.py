"""Content rewrite chains for the offline package.

Markup runs the full chain below; every other text asset only gets the
business-asset domain substitution.

1. platform base `//11.url.cn/now/...` -> `//{domain}/...`
2. business assets `//{cdn}/{product}/...` -> `//{domain}/...`
3. drop `crossorigin="anonymous"`
4. drop the `?_bid=152` cache-busting token
5. drop `integrity="..."` from the first script tag
6. inject `<script>var pack = {"version": <ms>}</script>` before the first script

Step 6 is not idempotent: each pass prepends another version script.
"""

from __future__ import annotations

import json
import re
import time
from typing import Callable, Optional

from pagepack.config import OfflineOptions
from pagepack.output.naming import CACHE_BUST_QUERY
from pagepack.rewrite.pipeline import RewritePipeline, RewriteRule, literal, rule

Clock = Callable[[], int]

# rest of the URL up to a quote, backtick, closing paren or whitespace (kept), or end of text
_URL_TAIL = r"""([^"'`)\s]+)(["'`)\s]|$)"""


def now_ms() -> int:
    return int(time.time() * 1000)


def _host_rule(name: str, base: str, domain: str) -> RewriteRule:
    pattern = re.compile("//" + re.escape(base.strip("/")) + "/" + _URL_TAIL)
    return rule(name, pattern, lambda m: f"//{domain}/{m.group(1)}{m.group(2)}")


def platform_domain_rule(platform_base: str, domain: str) -> RewriteRule:
    return _host_rule("platform-domain", platform_base, domain)


def business_domain_rule(cdn: str, product: str, domain: str) -> RewriteRule:
    return _host_rule("business-domain", f"{cdn.strip('/')}/{product.strip('/')}", domain)


def strip_crossorigin_rule() -> RewriteRule:
    return literal("strip-crossorigin", re.escape('crossorigin="anonymous"'), "")


def strip_cache_bust_rule(token: str = CACHE_BUST_QUERY) -> RewriteRule:
    return literal("strip-cache-bust", re.escape(token), "")


def strip_integrity_rule() -> RewriteRule:
    return rule("strip-integrity", r'(<script.*)integrity=".*?"', lambda m: m.group(1), count=1)


def version_marker(clock: Clock = now_ms) -> str:
    return "<script>var pack = " + json.dumps({"version": clock()}, separators=(",", ":")) + "</script>"


def inject_version_rule(clock: Clock = now_ms) -> RewriteRule:
    """Prepend the version script to the first `<script`; clock is read per call."""
    return rule("inject-version", r"(<script)", lambda m: version_marker(clock) + m.group(1), count=1)


def markup_pipeline(options: OfflineOptions, clock: Optional[Clock] = None) -> RewritePipeline:
    rules = [platform_domain_rule(options.platform_base, options.domain)]
    if options.rewrites_business_assets:
        rules.append(business_domain_rule(options.cdn, options.product, options.domain))
    rules += [
        strip_crossorigin_rule(),
        strip_cache_bust_rule(),
        strip_integrity_rule(),
        inject_version_rule(clock or now_ms),
    ]
    return RewritePipeline(tuple(rules))


def asset_pipeline(options: OfflineOptions) -> RewritePipeline:
    if not options.rewrites_business_assets:
        return RewritePipeline()
    return RewritePipeline((business_domain_rule(options.cdn, options.product, options.domain),))
