"""
Rewriting of legacy internal links in post bodies.

Old posts link to each other through short links of the form
``<host prefix><token>``. The authority source maps each token to the
publish date of the target post, which is also the target's output name, so
the link can become a relative path such as ``../2021-03-15``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import logging
import re

from ..logging_utils import warn_event
from .types import AuthorityIndex, CanonicalPost, RunReport

logger = logging.getLogger(__name__)

DEFAULT_HOST_PREFIX = "https://confluence.example.com/x/"
DEFAULT_TOKEN_PATTERN = r"[\w-]+"
DEFAULT_LINK_TEMPLATE = "../{date}"


@dataclass
class LinkRewriter:
    """Replaces legacy short links with relative links keyed by publish date.

    Attributes:
        host_prefix: Literal text preceding the token (e.g. "https://host/x/")
        token_pattern: Regex matching the token itself
        link_template: Replacement template; ``{date}`` receives YYYY-MM-DD
        legacy_parity: Stop rewriting a body at its first unresolved token
            instead of skipping past it. Each link matched before the miss is
            then replaced as plain text everywhere in the body, so a longer
            link sharing its text (``/x/abcd`` after ``/x/abc`` resolved) is
            rewritten too, keeping its trailing characters. Off by default;
            turn it on to reproduce first-miss output.
    """
    host_prefix: str = DEFAULT_HOST_PREFIX
    token_pattern: str = DEFAULT_TOKEN_PATTERN
    link_template: str = DEFAULT_LINK_TEMPLATE
    legacy_parity: bool = False
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._regex = re.compile(f"{re.escape(self.host_prefix)}({self.token_pattern})")

    def format_link(self, target: date) -> str:
        return self.link_template.format(date=target.isoformat())

    def rewrite(
        self,
        body: str,
        token_to_date: dict[str, date],
        report: RunReport | None = None,
        title: str | None = None,
    ) -> str:
        """Rewrite every resolvable legacy link in ``body``.

        Args:
            body: Post body markup
            token_to_date: Legacy link token -> publish date of the target
            report: Optional run report receiving counters and warnings
            title: Title of the post being rewritten, used in warnings

        Returns:
            The body with legacy links replaced
        """
        if self.legacy_parity:
            return self._rewrite_until_miss(body, token_to_date, report, title)

        def replace(match: re.Match[str]) -> str:
            target = token_to_date.get(match.group(1))
            if target is None:
                self._warn_unresolved(match, report, title)
                return match.group(0)
            if report is not None:
                report.links_rewritten += 1
            return self.format_link(target)

        return self._regex.sub(replace, body)

    def _rewrite_until_miss(
        self,
        body: str,
        token_to_date: dict[str, date],
        report: RunReport | None,
        title: str | None,
    ) -> str:
        resolved: list[tuple[str, str]] = []
        for match in self._regex.finditer(body):
            target = token_to_date.get(match.group(1))
            if target is None:
                self._warn_unresolved(match, report, title)
                break
            resolved.append((match.group(0), self.format_link(target)))

        for old, new in resolved:
            if report is not None:
                report.links_rewritten += body.count(old)
            body = body.replace(old, new)
        return body

    def _warn_unresolved(
        self, match: re.Match[str], report: RunReport | None, title: str | None
    ) -> None:
        where = f" in `{title}`" if title else ""
        message = f"Unable to resolve link `{match.group(0)}` (token '{match.group(1)}'){where}"
        warn_event(
            logger, report, message, event="unresolved_link", title=title, token=match.group(1)
        )


def rewrite_posts(
    posts: list[CanonicalPost],
    authority: AuthorityIndex,
    rewriter: LinkRewriter,
    report: RunReport | None = None,
) -> list[CanonicalPost]:
    """Return new posts whose bodies have legacy links rewritten."""
    return [
        CanonicalPost(
            title=post.title,
            body=rewriter.rewrite(post.body, authority.token_to_date, report, post.title),
            publish_date=post.publish_date,
        )
        for post in posts
    ]
