"""
Run-scoped migration state.

A :class:`MigrationState` is created fresh for every run, owned by the
orchestrator and handed by reference to each phase.  Nothing here is
persisted; idempotence across runs comes from the natural-key maps filled
from Hygraph at start-up.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class PendingLink:
    """A post waiting for its category set once categories exist."""

    title: str
    slug: str
    category_ids: List[int]
    is_new: bool


@dataclass
class KindSummary:
    created: int = 0
    reused: int = 0
    skipped: int = 0
    published: int = 0
    failed: List[str] = field(default_factory=list)


@dataclass
class MigrationSummary:
    kinds: Dict[str, KindSummary] = field(default_factory=dict)

    def of(self, kind: str) -> KindSummary:
        return self.kinds.setdefault(kind, KindSummary())

    def created(self, kind: str) -> None:
        self.of(kind).created += 1

    def reused(self, kind: str) -> None:
        self.of(kind).reused += 1

    def skipped(self, kind: str) -> None:
        self.of(kind).skipped += 1

    def published(self, kind: str) -> None:
        self.of(kind).published += 1

    def failed(self, kind: str, label: str) -> None:
        self.of(kind).failed.append(str(label))

    @property
    def has_failures(self) -> bool:
        return any(k.failed for k in self.kinds.values())

    def lines(self) -> List[str]:
        out = []
        for kind, s in self.kinds.items():
            out.append(
                f"{kind}: {s.created} created, {s.reused} reused, {s.skipped} skipped, "
                f"{s.published} published, {len(s.failed)} failed"
            )
        return out


@dataclass
class MigrationState:
    # Natural key -> Hygraph id for content found before the run.
    existing_authors: Dict[str, str] = field(default_factory=dict)
    existing_categories: Dict[str, str] = field(default_factory=dict)
    existing_posts: Dict[str, str] = field(default_factory=dict)
    existing_assets: Dict[str, str] = field(default_factory=dict)

    # WordPress id -> Hygraph id (or slug, for categories).
    author_ids: Dict[int, str] = field(default_factory=dict)
    category_slugs: Dict[int, str] = field(default_factory=dict)
    post_ids: Dict[int, str] = field(default_factory=dict)

    # Publish queues: Hygraph id -> natural key used to name the entry in reports.
    # Dicts keep insertion order and drop repeats.
    authors_to_publish: Dict[str, str] = field(default_factory=dict)
    categories_to_publish: Dict[str, str] = field(default_factory=dict)
    assets_to_publish: Dict[str, str] = field(default_factory=dict)
    posts_to_publish: Dict[str, str] = field(default_factory=dict)
    comments_to_publish: Dict[str, str] = field(default_factory=dict)

    # Hygraph post id -> categories still to connect.
    posts_to_link: Dict[str, PendingLink] = field(default_factory=dict)

    summary: MigrationSummary = field(default_factory=MigrationSummary)

    def author_for(self, wp_author_id: Optional[int]) -> Optional[str]:
        if wp_author_id is None:
            return None
        return self.author_ids.get(wp_author_id)
