"""
Post ↔ category relationship linking (pass 2).

Categories are connected by slug with a ``set`` update, so the post ends up
with exactly the resolved categories no matter what it was linked to before.
Running the linker twice with the same input leaves the same result.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from wp_hygraph.models.state import MigrationState
from wp_hygraph.utils.errors import log_message, report_error, report_ok


def resolve_category_slugs(category_ids: Iterable[int], category_slugs: Dict[int, str]) -> List[str]:
    """Map WordPress category ids to Hygraph slugs, dropping unknown ids and repeats."""
    slugs: List[str] = []
    for category_id in category_ids:
        slug = category_slugs.get(category_id)
        if slug and slug not in slugs:
            slugs.append(slug)
    return slugs


def link_post_categories(client, state: MigrationState) -> None:
    """
    Write the category set of every queued post.

    A pre-existing post that receives a link is published afterwards so the
    change goes live; new posts were already published by the scheduler.
    """
    for post_id, pending in state.posts_to_link.items():
        if not pending.category_ids:
            log_message(f"   ⏩ Post \"{pending.title}\" has no categories in WordPress.")
            continue

        slugs = resolve_category_slugs(pending.category_ids, state.category_slugs)
        if not slugs:
            log_message(f"   ⏩ Post \"{pending.title}\" has no categories to update.")
            continue

        try:
            client.set_post_categories(post_id, slugs)
        except Exception as e:
            log_message(f"❌ Failed to update post \"{pending.title}\" with categories: {e}", level="ERROR")
            report_error("LINK_CATEGORIES", "post", pending.slug, e)
            state.summary.failed("post", pending.slug)
            continue
        report_ok("LINKED", "post", pending.slug, {"id": post_id, "categories": slugs})
        log_message(f"✅ Updated post \"{pending.title}\" with categories.")

        if pending.is_new:
            continue
        try:
            client.publish("post", post_id)
        except Exception as e:
            log_message(f"❌ Failed to publish updated post \"{pending.slug}\" (ID: {post_id}): {e}", level="ERROR")
            report_error("PUBLISH", "post", pending.slug, e)
            state.summary.failed("post", pending.slug)
            continue
        state.summary.published("post")
        report_ok("PUBLISHED", "post", pending.slug, {"id": post_id})
        log_message(f"✅ Published updated post ID: {post_id}")
