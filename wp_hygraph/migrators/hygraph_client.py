"""
Hygraph API helper for WordPress → Hygraph migration.

This module implements low-level interactions with the Hygraph Content API.
:class:`HygraphClient` sends GraphQL queries and mutations with a bearer
token, reads the content that already exists (for natural-key dedup),
creates and updates entries, publishes them, and performs the two-step asset
upload: ``createAsset`` returns a pre-signed S3 form which is then posted
together with the file bytes.

A simple rate limiter paces requests to stay under the project's request
budget.  Nothing here retries: a failed call raises, and the caller decides
what to skip.

Usage example::

    from wp_hygraph.migrators.hygraph_client import HygraphClient

    client = HygraphClient("https://.../master", token)
    author_id = client.create_author("Ada", "Writes things.")
    client.publish("author", author_id)

"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from wp_hygraph.models.hygraph import CreatedAsset, UploadTicket

###############################################################################
# Errors, rate limiting and headers
###############################################################################


class GraphQLError(Exception):
    """Raised when a GraphQL response carries an ``errors`` array."""

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        self.errors = errors
        messages = "; ".join(str(e.get("message", e)) for e in errors) or "unknown GraphQL error"
        super().__init__(messages)


class UploadError(Exception):
    """Raised when the pre-signed upload endpoint rejects a file."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Upload to S3 failed. Status: {status_code}, Body: {body}")


class RateLimiter:
    """
    Simple time-based rate limiter.  Ensures that no more than ``rpm``
    requests are dispatched per minute.  The start-up reads run on several
    threads, so the bookkeeping is guarded by a lock.
    """

    def __init__(self, rpm: int = 300) -> None:
        self.rpm = max(1, rpm)
        self.interval = 60.0 / float(self.rpm)
        self._last = 0.0
        self._lock = threading.Lock()

    def wait(self, time_fn: Callable[[], float] = time.time, sleep_fn: Callable[[float], None] = time.sleep) -> None:
        with self._lock:
            now = time_fn()
            dt = now - self._last
            if dt < self.interval:
                sleep_fn(self.interval - dt)
            self._last = time_fn()


def hygraph_headers(token: str) -> Dict[str, str]:
    """
    Construct the default headers required for Hygraph API requests.

    :param token: A permanent auth token with content read/write access.
    :return: A dictionary of headers including Authorization.
    """
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }


###############################################################################
# Queries and mutations
###############################################################################

GET_EXISTING_AUTHORS_QUERY = """
query GetExistingAuthors {
  authors(first: 1000) {
    name
    id
  }
}
"""

GET_EXISTING_POSTS_QUERY = """
query GetExistingPosts($reservedSlugs: [String!]) {
  blogPosts(first: 1000, where: { slug_not_in: $reservedSlugs }) {
    id
    slug
  }
}
"""

GET_EXISTING_ASSETS_QUERY = """
query GetExistingAssets {
  assets(first: 1000) {
    fileName
    id
  }
}
"""

GET_EXISTING_CATEGORIES_QUERY = """
query GetExistingCategories {
  categories(first: 1000) {
    categorySlug
    id
  }
}
"""

CREATE_AUTHOR_MUTATION = """
mutation CreateAuthor($name: String!, $about: String) {
  createAuthor(data: { name: $name, about: $about }) {
    id
  }
}
"""

CREATE_CATEGORY_MUTATION = """
mutation CreateCategory($name: String!, $slug: String!, $description: String) {
  createCategory(data: { categoryName: $name, categorySlug: $slug, categoryDescription: $description }) {
    id
  }
}
"""

CREATE_POST_MUTATION = """
mutation CreateBlogPost(
  $title: String!
  $slug: String!
  $excerpt: String!
  $description: RichTextAST!
  $authorId: ID!
  $featuredImage: AssetCreateOneInlineInput
) {
  createBlogPost(
    data: {
      title: $title
      slug: $slug
      excerpt: $excerpt
      description: $description
      author: { connect: { id: $authorId } }
      featuredImage: $featuredImage
    }
  ) {
    id
    title
  }
}
"""

UPDATE_POST_CATEGORIES_MUTATION = """
mutation UpdateBlogPost($id: ID!, $categoryConnects: [CategoryWhereUniqueInput!]!) {
  updateBlogPost(
    where: { id: $id }
    data: { category: { set: $categoryConnects } }
  ) {
    id
  }
}
"""

CREATE_ASSET_MUTATION = """
mutation CreateAsset($name: String) {
  createAsset(data: { fileName: $name }) {
    id
    upload {
      requestPostData {
        url
        date
        key
        signature
        algorithm
        policy
        credential
        securityToken
      }
    }
  }
}
"""

UPDATE_ASSET_METADATA_MUTATION = """
mutation UpdateAsset($id: ID!, $altText: String, $caption: String) {
  updateAsset(where: { id: $id }, data: { altText: $altText, caption: $caption }) {
    id
  }
}
"""

CREATE_COMMENT_MUTATION = """
mutation CreateComment(
  $blogPostComment: String!
  $userName: String!
  $userEmail: String!
  $userWebsite: String
  $blogPostId: ID!
) {
  createComment(
    data: {
      blogPostComment: $blogPostComment
      userName: $userName
      userEmail: $userEmail
      userWebsite: $userWebsite
      blogPost: { connect: { id: $blogPostId } }
    }
  ) {
    id
  }
}
"""

# Entity kind -> Hygraph model name used in the ``publish<Model>`` mutation.
PUBLISHABLE_MODELS: Dict[str, str] = {
    "author": "Author",
    "category": "Category",
    "asset": "Asset",
    "post": "BlogPost",
    "comment": "Comment",
}


def publish_mutation(kind: str) -> str:
    model = PUBLISHABLE_MODELS[kind]
    return (
        f"mutation Publish{model}($id: ID!) {{\n"
        f"  publish{model}(where: {{ id: $id }}, to: PUBLISHED) {{\n"
        f"    id\n"
        f"  }}\n"
        f"}}\n"
    )


###############################################################################
# Client
###############################################################################


class HygraphClient:
    """
    Typed wrapper over the Hygraph Content API.

    All methods raise on failure: :class:`requests.RequestException` for
    transport errors, :class:`GraphQLError` when Hygraph reports errors and
    :class:`UploadError` when S3 refuses an upload.
    """

    def __init__(
        self,
        api_url: str,
        token: str,
        *,
        requests_per_minute: int = 300,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(hygraph_headers(token))
        self._limiter = RateLimiter(requests_per_minute)

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "HygraphClient":
        return cls(
            cfg["api_url"],
            cfg["token"],
            requests_per_minute=int(cfg.get("requests_per_minute") or 300),
            timeout=cfg.get("timeout"),
        )

    def request(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute one GraphQL operation and return its ``data`` object.

        :raises requests.HTTPError: on a non-success HTTP status.
        :raises GraphQLError: if the response contains ``errors``.
        """
        self._limiter.wait()
        resp = self.session.post(
            self.api_url,
            json={"query": query, "variables": variables or {}},
            timeout=self.timeout,
        )
        body: Dict[str, Any] = {}
        try:
            body = resp.json()
        except ValueError:
            resp.raise_for_status()
            raise
        if body.get("errors"):
            raise GraphQLError(body["errors"])
        resp.raise_for_status()
        return body.get("data") or {}

    # --- existing content -------------------------------------------------

    def list_authors(self) -> List[Dict[str, Any]]:
        return self.request(GET_EXISTING_AUTHORS_QUERY).get("authors", [])

    def list_posts(self, reserved_slugs: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        data = self.request(GET_EXISTING_POSTS_QUERY, {"reservedSlugs": list(reserved_slugs or [])})
        return data.get("blogPosts", [])

    def list_assets(self) -> List[Dict[str, Any]]:
        return self.request(GET_EXISTING_ASSETS_QUERY).get("assets", [])

    def list_categories(self) -> List[Dict[str, Any]]:
        return self.request(GET_EXISTING_CATEGORIES_QUERY).get("categories", [])

    # --- create / update --------------------------------------------------

    def create_author(self, name: str, about: str) -> str:
        data = self.request(CREATE_AUTHOR_MUTATION, {"name": name, "about": about})
        return data["createAuthor"]["id"]

    def create_category(self, name: str, slug: str, description: str) -> str:
        data = self.request(CREATE_CATEGORY_MUTATION, {"name": name, "slug": slug, "description": description})
        return data["createCategory"]["id"]

    def create_post(
        self,
        *,
        title: str,
        slug: str,
        excerpt: str,
        description: Dict[str, Any],
        author_id: str,
        featured_image_id: Optional[str] = None,
    ) -> str:
        variables = {
            "title": title,
            "slug": slug,
            "excerpt": excerpt,
            "description": description,
            "authorId": author_id,
            "featuredImage": {"connect": {"id": featured_image_id}} if featured_image_id else None,
        }
        data = self.request(CREATE_POST_MUTATION, variables)
        return data["createBlogPost"]["id"]

    def set_post_categories(self, post_id: str, category_slugs: List[str]) -> str:
        """Replace the post's category relation with exactly ``category_slugs``."""
        connects = [{"categorySlug": slug} for slug in category_slugs]
        data = self.request(UPDATE_POST_CATEGORIES_MUTATION, {"id": post_id, "categoryConnects": connects})
        return data["updateBlogPost"]["id"]

    def create_comment(
        self,
        *,
        post_id: str,
        text: str,
        user_name: str,
        user_email: str,
        user_website: str = "",
    ) -> str:
        variables = {
            "blogPostComment": text,
            "userName": user_name,
            "userEmail": user_email,
            "userWebsite": user_website,
            "blogPostId": post_id,
        }
        data = self.request(CREATE_COMMENT_MUTATION, variables)
        return data["createComment"]["id"]

    def publish(self, kind: str, entry_id: str) -> str:
        data = self.request(publish_mutation(kind), {"id": entry_id})
        return data[f"publish{PUBLISHABLE_MODELS[kind]}"]["id"]

    # --- assets -----------------------------------------------------------

    def create_asset(self, file_name: str) -> CreatedAsset:
        """
        Create an asset entry and obtain its pre-signed upload form.

        :raises GraphQLError: if Hygraph rejects the mutation.
        :raises ValueError: if no upload form was returned.
        """
        data = self.request(CREATE_ASSET_MUTATION, {"name": file_name})
        created = data["createAsset"]
        post_data = ((created.get("upload") or {}).get("requestPostData")) or None
        if not post_data:
            raise ValueError("Failed to get pre-signed upload URL from Hygraph.")
        return CreatedAsset(id=created["id"], ticket=UploadTicket.model_validate(post_data))

    def upload_asset(self, ticket: UploadTicket, content: bytes, file_name: str) -> None:
        """
        Post ``content`` to the pre-signed S3 form in ``ticket``.

        :raises UploadError: on a non-success response.
        """
        resp = requests.post(
            ticket.url,
            data=ticket.form_fields(),
            files={"file": (file_name, content)},
            timeout=self.timeout,
        )
        if not resp.ok:
            raise UploadError(resp.status_code, resp.text)

    def update_asset_metadata(self, asset_id: str, alt_text: str, caption: str) -> str:
        data = self.request(UPDATE_ASSET_METADATA_MUTATION, {"id": asset_id, "altText": alt_text, "caption": caption})
        return data["updateAsset"]["id"]
