"""Carrier URL rewriting.

The start endpoint may hand back auth URLs built from old carrier
templates that still point at plain HTTP. UrlRewriter walks an ordered
table of rules; the first rule whose matcher accepts the URL decides the
outcome, and a URL no rule matches is returned unchanged.

Built-in rules, in order:
1. Sprint (http://oap7...): swap the scheme to https.
2. AT&T SNAP (pfflow=): leave untouched, the URL carries its own flow.
3. T-Mobile production/staging deviceAuthenticate: move to the secure
   step-down endpoint, keeping everything after the template.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ...const import (
    PFFLOW_PARAM,
    SPRINT_INSECURE_PREFIX,
    TMO_PROD_URL,
    TMO_SECURE_PROD_URL,
    TMO_SECURE_STAGING_URL,
    TMO_STAGING_URL,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteRule:
    """One entry of the rewrite table.

    Attributes:
        name: Short rule label
        description: Narration sent to the debug callback on a match
        matches: Predicate deciding whether this rule owns the URL
        apply: Rewrite for an owned URL (None leaves it unchanged)
    """

    name: str
    matches: Callable[[str], bool]
    apply: Callable[[str], str] | None = None
    description: str = ""


def prefix_rule(name: str, prefix: str, replacement: str, description: str = "") -> RewriteRule:
    """Build a rule replacing a template prefix and keeping the remainder."""
    return RewriteRule(
        name=name,
        matches=lambda url: url.startswith(prefix),
        apply=lambda url: replacement + url[len(prefix) :],
        description=description or f"Detected insecure {name} URL. Converting to secure URL.",
    )


DEFAULT_RULES: tuple[RewriteRule, ...] = (
    prefix_rule(
        "sprint",
        SPRINT_INSECURE_PREFIX,
        "https" + SPRINT_INSECURE_PREFIX[len("http") :],
        "Detected insecure Sprint call -> converting to secure.",
    ),
    RewriteRule(
        name="att_snap",
        matches=lambda url: f"{PFFLOW_PARAM}=" in url,
        description="Detected an AT&T SNAP url.",
    ),
    prefix_rule(
        "tmobile_production",
        TMO_PROD_URL,
        TMO_SECURE_PROD_URL,
        "Detected insecure T-Mobile URL. Converting to Secure URL.",
    ),
    prefix_rule(
        "tmobile_staging",
        TMO_STAGING_URL,
        TMO_SECURE_STAGING_URL,
        "Detected insecure T-Mobile staging URL. Converting to Secure URL.",
    ),
)


class UrlRewriter:
    """Applies the first matching rewrite rule to a target URL."""

    def __init__(self, rules: Iterable[RewriteRule] | None = None):
        """Initialize rewriter.

        Args:
            rules: Ordered rule table (defaults to DEFAULT_RULES)
        """
        self.rules: tuple[RewriteRule, ...] = tuple(DEFAULT_RULES if rules is None else rules)

    def with_rules(self, extra: Iterable[RewriteRule]) -> UrlRewriter:
        """Return a rewriter with extra rules appended after the current ones."""
        return UrlRewriter((*self.rules, *extra))

    def match(self, url: str) -> RewriteRule | None:
        """Return the rule that owns the URL, if any."""
        for rule in self.rules:
            if rule.matches(url):
                return rule
        return None

    def rewrite(self, url: str) -> str:
        """Rewrite a target URL to its secure equivalent.

        Never raises; URLs no rule owns come back unchanged.
        """
        rule = self.match(url)
        if rule is None:
            return url
        if rule.apply is None:
            _LOGGER.debug("URL matched %s rule, leaving unchanged", rule.name)
            return url

        rewritten = rule.apply(url)
        _LOGGER.debug("URL matched %s rule, rewrote to secure URL", rule.name)
        return rewritten
