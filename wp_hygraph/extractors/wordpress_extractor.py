"""
WordPress REST API reader.

:class:`WordPressClient` fetches the bounded snapshot the migration works
from: users, posts (with embedded featured media), categories and comments.
Every list endpoint is paginated; pages are followed until
``X-WP-TotalPages`` says there are no more.  The same authenticated session
is used to download media binaries.

Raw payloads are converted into the models in
:mod:`wp_hygraph.models.wordpress` by :func:`parse_records`; a record that
fails validation is reported and dropped without affecting its siblings.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from wp_hygraph.models.wordpress import WPAuthor, WPCategory, WPComment, WPPost
from wp_hygraph.utils.errors import log_message, report_error

T = TypeVar("T", bound=BaseModel)


def parse_records(kind: str, payloads: List[Dict[str, Any]], model: Type[T]) -> List[T]:
    """Convert raw payloads with ``model.from_api``, skipping invalid ones."""
    records: List[T] = []
    for payload in payloads:
        try:
            records.append(model.from_api(payload))  # type: ignore[attr-defined]
        except ValidationError as e:
            label = payload.get("id", "unknown") if isinstance(payload, dict) else "unknown"
            log_message(f"   ⚠️ Skipping {kind} {label} — could not parse WordPress record: {e}", level="WARNING")
            report_error("INVALID_RECORD", kind, label, e)
    return records


class WordPressClient:
    """Authenticated, read-only access to ``/wp-json/wp/v2``."""

    def __init__(
        self,
        api_url: str,
        username: str = "",
        password: str = "",
        *,
        per_page: int = 100,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.per_page = per_page
        self.timeout = timeout
        self.session = session or requests.Session()
        if username:
            self.session.auth = (username, password)

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "WordPressClient":
        return cls(
            cfg["api_url"],
            cfg.get("username", ""),
            cfg.get("password", ""),
            per_page=int(cfg.get("per_page") or 100),
            timeout=cfg.get("timeout"),
        )

    def _fetch_collection(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            query = {**(params or {}), "per_page": self.per_page, "page": page}
            resp = self.session.get(f"{self.api_url}/{endpoint}", params=query, timeout=self.timeout)
            resp.raise_for_status()
            batch = resp.json()
            if not batch:
                break
            items.extend(batch)
            total_pages = int(resp.headers.get("X-WP-TotalPages") or 1)
            if page >= total_pages:
                break
            page += 1
        return items

    def fetch_authors(self) -> List[WPAuthor]:
        return parse_records("author", self._fetch_collection("users"), WPAuthor)

    def fetch_categories(self) -> List[WPCategory]:
        return parse_records("category", self._fetch_collection("categories"), WPCategory)

    def fetch_posts(self) -> List[WPPost]:
        return parse_records("post", self._fetch_collection("posts", {"_embed": 1}), WPPost)

    def fetch_comments(self) -> List[WPComment]:
        return parse_records("comment", self._fetch_collection("comments"), WPComment)

    def download(self, url: str) -> bytes:
        """
        Download a media file with the WordPress credentials.

        :raises requests.HTTPError: on a non-success status.
        """
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.content
