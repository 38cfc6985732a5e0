"""
Typed views of the WordPress REST API payloads.

Every record fetched from WordPress is converted once, at the extractor
boundary, into one of the models below.  The migrators only ever read these
attributes, never the raw JSON.  Rendered fields such as ``title`` arrive as
``{"rendered": "..."}`` objects and are flattened to plain strings here.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from wp_hygraph.parsers.rich_text import strip_html


def _rendered(value: Any) -> str:
    if isinstance(value, dict):
        value = value.get("rendered")
    return value or ""


class WPAuthor(BaseModel):
    id: int
    name: str = ""
    slug: str = ""
    description: str = ""

    @field_validator("name", "slug", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> str:
        return v or ""

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "WPAuthor":
        return cls.model_validate(payload)


class WPCategory(BaseModel):
    id: int
    name: str = ""
    slug: str
    description: str = ""

    @field_validator("name", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> str:
        return v or ""

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "WPCategory":
        return cls.model_validate(payload)


class WPMedia(BaseModel):
    """Featured media embedded in a post via ``?_embed``."""

    source_url: Optional[str] = None
    alt_text: str = ""
    caption: str = ""

    @field_validator("alt_text", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> str:
        return v or ""

    @field_validator("caption", mode="before")
    @classmethod
    def _plain_caption(cls, v: Any) -> str:
        return strip_html(_rendered(v))


class WPPost(BaseModel):
    id: int
    slug: str = ""
    status: str = ""
    title: str = ""
    content: str = ""
    excerpt: str = ""
    author: Optional[int] = None
    categories: List[int] = Field(default_factory=list)
    featured_media: Optional[WPMedia] = None

    @field_validator("title", "content", "excerpt", mode="before")
    @classmethod
    def _flatten_rendered(cls, v: Any) -> str:
        return _rendered(v)

    @field_validator("categories", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> List[int]:
        return v or []

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "WPPost":
        data = dict(payload)
        # ``featured_media`` is only an attachment id in the raw payload; the
        # usable object lives under ``_embedded`` when the list was fetched
        # with ``_embed``.
        embedded = (payload.get("_embedded") or {}).get("wp:featuredmedia") or []
        data["featured_media"] = embedded[0] if embedded and isinstance(embedded[0], dict) else None
        return cls.model_validate(data)

    @property
    def featured_image(self) -> Optional[WPMedia]:
        if self.featured_media and self.featured_media.source_url:
            return self.featured_media
        return None


class WPComment(BaseModel):
    id: int
    post: int
    status: str = ""
    content: str = ""
    author: int = 0
    author_name: str = ""
    author_email: str = ""
    author_url: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def _flatten_rendered(cls, v: Any) -> str:
        return _rendered(v)

    @field_validator("author_name", "author_email", "author_url", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> str:
        return v or ""

    @field_validator("author", mode="before")
    @classmethod
    def _none_to_zero(cls, v: Any) -> int:
        return v or 0

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "WPComment":
        return cls.model_validate(payload)

    @property
    def text(self) -> str:
        return strip_html(self.content)

    @property
    def email_or_placeholder(self) -> str:
        if self.author_email:
            return self.author_email
        return f"user.id-{self.author or self.id}@placeholder.invalid"
