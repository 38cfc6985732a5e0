"""
Per-entity migration steps (pass 1).

Each function walks one kind of WordPress record and either reuses the
Hygraph entry that already carries the same natural key or creates a new
draft.  Both branches record the WordPress → Hygraph mapping in the
:class:`~wp_hygraph.models.state.MigrationState` and queue the entry for
publishing, so a rerun also publishes leftovers from an interrupted run.

No exception leaves these functions: a failed create is logged, reported and
counted, and the loop moves on to the next record.
"""

from __future__ import annotations

import json
from typing import Iterable

from wp_hygraph.migrators.assets import file_name_from_url, materialize_asset
from wp_hygraph.models.state import MigrationState, PendingLink
from wp_hygraph.models.wordpress import WPAuthor, WPCategory, WPComment, WPPost
from wp_hygraph.parsers.rich_text import convert_html_to_rich_text, strip_html
from wp_hygraph.utils.errors import log_message, report_error, report_ok


def _log_failure(message: str, exc: Exception) -> None:
    log_message(f"{message}: {exc}", level="ERROR")
    details = getattr(exc, "errors", None)
    if details:
        log_message("GraphQL errors: " + json.dumps(details, indent=2), level="ERROR")


def migrate_authors(client, authors: Iterable[WPAuthor], state: MigrationState, *, skip_slugs: Iterable[str] = ()) -> None:
    """Create or reuse one Hygraph author per WordPress user, keyed by name."""
    skipped = set(skip_slugs)
    for author in authors:
        if author.slug in skipped:
            log_message(f"   ⏩ Skipping author \"{author.name}\" — excluded user \"{author.slug}\".")
            state.summary.skipped("author")
            continue

        existing_id = state.existing_authors.get(author.name)
        if existing_id:
            state.author_ids[author.id] = existing_id
            state.authors_to_publish[existing_id] = author.name
            state.summary.reused("author")
            report_ok("REUSED", "author", author.name, {"id": existing_id})
            log_message(f"   ⏩ Skipping author \"{author.name}\" — already exists with ID: {existing_id}")
            continue

        try:
            author_id = client.create_author(author.name, author.description)
        except Exception as e:
            _log_failure(f"❌ Failed to create author \"{author.name}\"", e)
            report_error("CREATE", "author", author.name, e)
            state.summary.failed("author", author.name)
            continue

        state.author_ids[author.id] = author_id
        state.existing_authors[author.name] = author_id
        state.authors_to_publish[author_id] = author.name
        state.summary.created("author")
        report_ok("CREATED", "author", author.name, {"id": author_id})
        log_message(f"✅ Created author: {author.name}")


def migrate_categories(client, categories: Iterable[WPCategory], state: MigrationState) -> None:
    """Create or reuse one Hygraph category per WordPress category, keyed by slug."""
    for category in categories:
        existing_id = state.existing_categories.get(category.slug)
        if existing_id:
            state.category_slugs[category.id] = category.slug
            state.categories_to_publish[existing_id] = category.slug
            state.summary.reused("category")
            report_ok("REUSED", "category", category.slug, {"id": existing_id})
            log_message(f"   ⏩ Skipping category \"{category.name}\" — already exists with ID: {existing_id}")
            continue

        try:
            category_id = client.create_category(category.name, category.slug, category.description)
        except Exception as e:
            _log_failure(f"❌ Failed to create category \"{category.name}\"", e)
            report_error("CREATE", "category", category.slug, e)
            state.summary.failed("category", category.slug)
            continue

        state.category_slugs[category.id] = category.slug
        state.existing_categories[category.slug] = category_id
        state.categories_to_publish[category_id] = category.slug
        state.summary.created("category")
        report_ok("CREATED", "category", category.slug, {"id": category_id})
        log_message(f"✅ Created category: {category.name}")


def migrate_posts(
    client,
    source,
    posts: Iterable[WPPost],
    state: MigrationState,
    *,
    reserved_slugs: Iterable[str] = (),
) -> None:
    """
    Create or reuse one Hygraph blog post per published WordPress post.

    Posts that are not published, use a reserved slug, or whose author has
    no Hygraph id are skipped.  The featured image is materialized before
    the post is created so the post can reference it.  Category links are
    only queued here; they are written by the relationship linker once every
    category has an id.
    """
    reserved = set(reserved_slugs)
    for post in posts:
        if post.status != "publish" or post.slug in reserved:
            state.summary.skipped("post")
            continue

        existing_id = state.existing_posts.get(post.slug)
        if existing_id:
            state.post_ids[post.id] = existing_id
            state.posts_to_link.setdefault(existing_id, PendingLink(post.title, post.slug, list(post.categories), is_new=False))
            state.summary.reused("post")
            report_ok("REUSED", "post", post.slug, {"id": existing_id})
            log_message(f"   ⏩ Skipping post \"{post.title}\" — already exists with ID: {existing_id}")
            continue

        log_message(f"Migrating post: {post.title}")
        author_id = state.author_for(post.author)
        if not author_id:
            log_message(
                f"   ⚠️ Skipping post \"{post.title}\" — missing author. Make sure the author exists in Hygraph.",
                level="WARNING",
            )
            state.summary.skipped("post")
            continue

        featured_image_id = None
        media = post.featured_image
        if media is not None:
            featured_image_id = materialize_asset(
                client,
                source,
                media.source_url,
                media.alt_text,
                media.caption,
                state.existing_assets,
                state.summary,
            )
            if featured_image_id:
                state.assets_to_publish[featured_image_id] = file_name_from_url(media.source_url)

        try:
            post_id = client.create_post(
                title=post.title,
                slug=post.slug,
                excerpt=strip_html(post.excerpt),
                description=convert_html_to_rich_text(post.content),
                author_id=author_id,
                featured_image_id=featured_image_id,
            )
        except Exception as e:
            _log_failure(f"❌ Failed to create post \"{post.title}\"", e)
            report_error("CREATE", "post", post.slug, e)
            state.summary.failed("post", post.slug)
            continue

        state.post_ids[post.id] = post_id
        state.existing_posts[post.slug] = post_id
        state.posts_to_publish[post_id] = post.slug
        state.posts_to_link[post_id] = PendingLink(post.title, post.slug, list(post.categories), is_new=True)
        state.summary.created("post")
        report_ok("CREATED", "post", post.slug, {"id": post_id})
        log_message(f"✅ Created post: {post.title}")


def migrate_comments(client, comments: Iterable[WPComment], state: MigrationState) -> None:
    """
    Create Hygraph comments for approved WordPress comments.

    Comments are never deduplicated: every admitted comment is created anew
    on each run.
    """
    for comment in comments:
        if comment.status != "approved":
            log_message(f"   ⏩ Skipping unapproved comment ID: {comment.id}")
            state.summary.skipped("comment")
            continue

        post_id = state.post_ids.get(comment.post)
        if not post_id:
            log_message(
                f"   ⚠️ Skipping comment ID {comment.id} — its corresponding post was not migrated.",
                level="WARNING",
            )
            state.summary.skipped("comment")
            continue

        text = comment.text
        if not text or not comment.author_name:
            log_message(
                f"   ⚠️ Skipping comment ID {comment.id} by \"{comment.author_name or 'unknown'}\" "
                "due to missing author name or content.",
                level="WARNING",
            )
            state.summary.skipped("comment")
            continue

        try:
            comment_id = client.create_comment(
                post_id=post_id,
                text=text,
                user_name=comment.author_name,
                user_email=comment.email_or_placeholder,
                user_website=comment.author_url,
            )
        except Exception as e:
            _log_failure(f"❌ Failed to create comment for post ID {comment.post}", e)
            report_error("CREATE", "comment", comment.id, e)
            state.summary.failed("comment", comment.id)
            continue

        state.comments_to_publish[comment_id] = str(comment.id)
        state.summary.created("comment")
        report_ok("CREATED", "comment", comment.id, {"id": comment_id, "post_id": post_id})
        log_message(f"✅ Created comment by \"{comment.author_name}\" for Hygraph post ID {post_id}")
