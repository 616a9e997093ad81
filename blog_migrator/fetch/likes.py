"""
Content API walker that reports blog posts and their like counts.

The listing endpoint is paged: every response carries ``limit``, ``size`` and
``_links.next``. Pages are requested one after another until a short page
(``size < limit``) or a missing ``next`` link ends the walk, then the likes
endpoint is queried once per post. Requests are sequential and not retried;
any HTTP failure aborts the walk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import logging
from types import TracebackType
from typing import Any, Callable

import httpx

from ..config import FetchConfig

logger = logging.getLogger(__name__)

CONTENT_PATH = "rest/api/content/"
LIKES_PATH = "rest/likes/1.0/content/{id}/likes"


@dataclass
class BlogEntry:
    """A blog post as listed by the content API.

    Attributes:
        id: Content id
        title: Post title
        likes: Number of likes, filled in by ``count_likes``
        published: Publish date derived from the ``webui`` link, if it has one
        links: The ``_links`` map of the listing (``webui``, ``tinyui``, ...)
    """
    id: str
    title: str
    likes: int = 0
    published: date | None = None
    links: dict[str, str] = field(default_factory=dict)

    @property
    def permalink(self) -> str | None:
        return self.links.get("tinyui")


class ContentApiClient:
    """Thin synchronous client for the content and likes endpoints.

    Usage:
        with ContentApiClient(cfg, token) as client:
            entries = client.list_blog_posts()
    """

    def __init__(
        self,
        cfg: FetchConfig,
        token: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.cfg = cfg
        self._client = httpx.Client(
            base_url=cfg.base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=cfg.timeout_seconds,
            trust_env=cfg.trust_env,
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self) -> "ContentApiClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        resp = self._client.get(url, params=params)
        resp.raise_for_status()
        return resp.json()

    def list_blog_posts(self) -> list[BlogEntry]:
        """Walk every page of the space's blog post listing."""
        params: dict[str, Any] | None = {"type": "blogpost", "limit": self.cfg.page_limit}
        if self.cfg.space_key:
            params["spaceKey"] = self.cfg.space_key
        url = CONTENT_PATH

        entries: list[BlogEntry] = []
        while True:
            page = self._get_json(url, params)
            results = page.get("results", [])
            entries.extend(_parse_entry(item) for item in results)
            logger.debug("Listed %d posts (total %d)", len(results), len(entries))

            links = page.get("_links", {})
            next_link = links.get("next")
            if not next_link or page.get("size", 0) != page.get("limit", 0):
                break
            url = f"{links.get('base', '').rstrip('/')}/{next_link.lstrip('/')}"
            params = None
        return entries

    def count_likes(self, entry: BlogEntry) -> int:
        payload = self._get_json(LIKES_PATH.format(id=entry.id))
        return len(payload.get("likes", []))


def collect_likes(
    client: ContentApiClient,
    advance: Callable[[], None] | None = None,
    on_listed: Callable[[int], None] | None = None,
) -> list[BlogEntry]:
    """List every blog post, fill in its like count and sort by likes ascending.

    Args:
        client: Open content API client
        advance: Optional callback invoked after each post's likes are fetched
        on_listed: Optional callback receiving the number of listed posts

    Returns:
        Blog entries sorted by like count, fewest first
    """
    entries = client.list_blog_posts()
    if on_listed is not None:
        on_listed(len(entries))
    for entry in entries:
        entry.likes = client.count_likes(entry)
        if advance is not None:
            advance()
    return sorted(entries, key=lambda entry: entry.likes)


def published_from_webui(link: str | None) -> date | None:
    """Extract the date from a ``/display/<space>/YYYY/MM/DD/<title>`` link."""
    if not link or "display" not in link:
        return None
    parts = link.split("/")
    try:
        return date(int(parts[3]), int(parts[4]), int(parts[5]))
    except (IndexError, ValueError):
        return None


def _parse_entry(item: dict[str, Any]) -> BlogEntry:
    links = {key: str(value) for key, value in (item.get("_links") or {}).items()}
    return BlogEntry(
        id=str(item.get("id", "")),
        title=item.get("title", ""),
        published=published_from_webui(links.get("webui")),
        links=links,
    )
