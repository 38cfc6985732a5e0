import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import itertools

import pytest
import requests

from wp_hygraph.migration_tool import HygraphMigrationTool
from wp_hygraph.migrators.hygraph_client import GraphQLError, UploadError
from wp_hygraph.models.hygraph import CreatedAsset, UploadTicket
from wp_hygraph.models.wordpress import WPAuthor, WPCategory, WPComment, WPPost
from wp_hygraph.utils import errors


class FakeHygraph:
    """In-memory Hygraph that records every call in order."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.entries = {kind: {} for kind in ("author", "category", "asset", "post", "comment")}
        self.calls = []
        self.uploads = []
        # (operation, key) pairs that should raise
        self.fail_on = set()

    def _maybe_fail(self, op, key):
        if (op, key) in self.fail_on:
            raise GraphQLError([{"message": f"simulated failure in {op} for {key}"}])

    def _new(self, kind, **fields):
        entry_id = f"{kind}-{next(self._ids)}"
        self.entries[kind][entry_id] = {"id": entry_id, "published": False, **fields}
        return entry_id

    def seed(self, kind, published=True, **fields):
        entry_id = self._new(kind, **fields)
        self.entries[kind][entry_id]["published"] = published
        return entry_id

    def find(self, kind, **fields):
        return [
            e for e in self.entries[kind].values()
            if all(e.get(k) == v for k, v in fields.items())
        ]

    # --- existing content ---

    def list_authors(self):
        self.calls.append(("list", "author", None))
        return [{"id": e["id"], "name": e["name"]} for e in self.entries["author"].values()]

    def list_posts(self, reserved_slugs=None):
        self.calls.append(("list", "post", None))
        reserved = set(reserved_slugs or [])
        return [
            {"id": e["id"], "slug": e["slug"]}
            for e in self.entries["post"].values()
            if e["slug"] not in reserved
        ]

    def list_assets(self):
        self.calls.append(("list", "asset", None))
        return [{"id": e["id"], "fileName": e["fileName"]} for e in self.entries["asset"].values()]

    def list_categories(self):
        self.calls.append(("list", "category", None))
        return [{"id": e["id"], "categorySlug": e["categorySlug"]} for e in self.entries["category"].values()]

    # --- mutations ---

    def create_author(self, name, about):
        self._maybe_fail("create_author", name)
        entry_id = self._new("author", name=name, about=about)
        self.calls.append(("create", "author", entry_id))
        return entry_id

    def create_category(self, name, slug, description):
        self._maybe_fail("create_category", slug)
        entry_id = self._new("category", categoryName=name, categorySlug=slug, categoryDescription=description)
        self.calls.append(("create", "category", entry_id))
        return entry_id

    def create_post(self, *, title, slug, excerpt, description, author_id, featured_image_id=None):
        self._maybe_fail("create_post", slug)
        assert author_id in self.entries["author"]
        if featured_image_id:
            assert featured_image_id in self.entries["asset"]
        entry_id = self._new(
            "post",
            title=title,
            slug=slug,
            excerpt=excerpt,
            description=description,
            author=author_id,
            featuredImage=featured_image_id,
            categories=[],
        )
        self.calls.append(("create", "post", entry_id))
        return entry_id

    def set_post_categories(self, post_id, category_slugs):
        post = self.entries["post"][post_id]
        self._maybe_fail("set_post_categories", post["slug"])
        for slug in category_slugs:
            matches = self.find("category", categorySlug=slug)
            assert matches, f"category {slug} does not exist"
            assert matches[0]["published"], f"category {slug} is not published"
        post["categories"] = list(category_slugs)
        self.calls.append(("link", "post", post_id))
        return post_id

    def create_comment(self, *, post_id, text, user_name, user_email, user_website=""):
        self._maybe_fail("create_comment", user_name)
        assert post_id in self.entries["post"]
        entry_id = self._new(
            "comment",
            blogPostComment=text,
            userName=user_name,
            userEmail=user_email,
            userWebsite=user_website,
            blogPost=post_id,
        )
        self.calls.append(("create", "comment", entry_id))
        return entry_id

    def publish(self, kind, entry_id):
        self._maybe_fail("publish", entry_id)
        self.entries[kind][entry_id]["published"] = True
        self.calls.append(("publish", kind, entry_id))
        return entry_id

    def create_asset(self, file_name):
        self._maybe_fail("create_asset", file_name)
        entry_id = self._new("asset", fileName=file_name, uploaded=False)
        self.calls.append(("create", "asset", entry_id))
        ticket = UploadTicket(url="https://s3.example.test/upload", key=f"uploads/{file_name}", policy="p", signature="s")
        return CreatedAsset(id=entry_id, ticket=ticket)

    def upload_asset(self, ticket, content, file_name):
        if ("upload_asset", file_name) in self.fail_on:
            raise UploadError(403, "AccessDenied")
        self.uploads.append((ticket.url, file_name, content))
        for entry in self.find("asset", fileName=file_name):
            entry["uploaded"] = True
        self.calls.append(("upload", "asset", file_name))

    def update_asset_metadata(self, asset_id, alt_text, caption):
        self._maybe_fail("update_asset_metadata", self.entries["asset"][asset_id]["fileName"])
        self.entries["asset"][asset_id].update(altText=alt_text, caption=caption)
        self.calls.append(("metadata", "asset", asset_id))
        return asset_id


class FakeWordPress:
    """WordPress snapshot built from raw REST payloads."""

    def __init__(self, authors=(), posts=(), categories=(), comments=(), files=None):
        self.authors = [WPAuthor.from_api(a) for a in authors]
        self.posts = [WPPost.from_api(p) for p in posts]
        self.categories = [WPCategory.from_api(c) for c in categories]
        self.comments = [WPComment.from_api(c) for c in comments]
        self.files = dict(files or {})
        self.downloads = []

    def fetch_authors(self):
        return list(self.authors)

    def fetch_posts(self):
        return list(self.posts)

    def fetch_categories(self):
        return list(self.categories)

    def fetch_comments(self):
        return list(self.comments)

    def download(self, url):
        self.downloads.append(url)
        if url not in self.files:
            raise requests.HTTPError(f"404 Client Error: Not Found for url: {url}")
        return self.files[url]


def wp_post(post_id, slug, *, author=1, categories=(), status="publish", image=None, content="<p>Body</p>"):
    payload = {
        "id": post_id,
        "slug": slug,
        "status": status,
        "title": {"rendered": slug.replace("-", " ").title()},
        "content": {"rendered": content},
        "excerpt": {"rendered": f"<p>About {slug}</p>\n"},
        "author": author,
        "categories": list(categories),
        "featured_media": 0,
    }
    if image:
        payload["featured_media"] = 900 + post_id
        payload["_embedded"] = {
            "wp:featuredmedia": [
                {
                    "id": 900 + post_id,
                    "source_url": image,
                    "alt_text": f"alt {slug}",
                    "caption": {"rendered": f"<p>Caption {slug}</p>\n"},
                }
            ]
        }
    return payload


@pytest.fixture(autouse=True)
def report_dir(tmp_path):
    path = str(tmp_path / "reports")
    errors.set_report_dir(path)
    return path


@pytest.fixture
def hygraph():
    return FakeHygraph()


@pytest.fixture
def make_tool(report_dir):
    def _make(client, source, **migration):
        config = {
            "hygraph": {"api_url": "https://api.hygraph.test/v2/x/master", "token": "t"},
            "wordpress": {"api_url": "https://wp.test/wp-json/wp/v2"},
            "migration": {"report_dir": report_dir, **migration},
        }
        return HygraphMigrationTool(config, client=client, source=source)

    return _make
