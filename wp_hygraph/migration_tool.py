"""
High-level orchestration of the WordPress → Hygraph migration.

This module defines a :class:`HygraphMigrationTool` class that ties together
the WordPress reader, the Hygraph client and the per-entity migrators into
the complete two-pass pipeline:

* **Pass 1** creates drafts: authors, categories (published immediately,
  because posts can only be connected to live categories), posts with their
  featured images, then comments.
* **Pass 2** finalizes: publishes assets, new posts and comments, writes
  post/category links (publishing pre-existing posts that were re-linked)
  and publishes authors last.

Configuration is supplied via a JSON file path or directly as a dictionary;
missing values are filled from the environment (``.env`` is honoured by the
entry point).  The ``hygraph`` section must include ``api_url`` and
``token``; the ``wordpress`` section must include ``api_url``.
"""

from __future__ import annotations

import json
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

from wp_hygraph.extractors.wordpress_extractor import WordPressClient
from wp_hygraph.migrators.entities import migrate_authors, migrate_categories, migrate_comments, migrate_posts
from wp_hygraph.migrators.hygraph_client import HygraphClient
from wp_hygraph.migrators.linker import link_post_categories
from wp_hygraph.migrators.publisher import publish_all
from wp_hygraph.models.state import MigrationState, MigrationSummary
from wp_hygraph.utils import errors
from wp_hygraph.utils.errors import log_message, report_error
from wp_hygraph.utils.natural_keys import build_key_map
from wp_hygraph.utils.pre_flight_checks import run_pre_flight_checks

DEFAULT_RESERVED_SLUGS = ["hello-world", "sample-page"]
DEFAULT_SKIP_AUTHOR_SLUGS = ["hygraphexport"]


def _env_list(name: str, default: list) -> list:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_config(config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the run configuration.

    Values from ``config_file`` (when it exists) or ``config`` win; anything
    missing is taken from the environment or a default.
    """
    if config_file and os.path.exists(config_file):
        with open(config_file, "r", encoding="utf-8") as f:
            config = json.load(f)
    elif config is None:
        config = {}

    config.setdefault("wordpress", {})
    config["wordpress"].setdefault("api_url", os.getenv("WP_API", ""))
    config["wordpress"].setdefault("username", os.getenv("WP_USERNAME", ""))
    config["wordpress"].setdefault("password", os.getenv("WP_PASSWORD", ""))
    config["wordpress"].setdefault("per_page", int(os.getenv("WP_PER_PAGE", "100")))
    config["wordpress"].setdefault("timeout", None)

    config.setdefault("hygraph", {})
    config["hygraph"].setdefault("api_url", os.getenv("HYGRAPH_API", ""))
    config["hygraph"].setdefault("token", os.getenv("HYGRAPH_TOKEN", ""))
    config["hygraph"].setdefault("requests_per_minute", int(os.getenv("HYGRAPH_RPM", "300")))
    config["hygraph"].setdefault("timeout", None)

    config.setdefault("migration", {})
    config["migration"].setdefault("reserved_slugs", _env_list("RESERVED_SLUGS", DEFAULT_RESERVED_SLUGS))
    config["migration"].setdefault("skip_author_slugs", _env_list("SKIP_AUTHOR_SLUGS", DEFAULT_SKIP_AUTHOR_SLUGS))
    config["migration"].setdefault("report_dir", os.path.join("reports", "migration"))
    return config


def fetch_concurrently(jobs: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
    """
    Run independent zero-argument reads on a thread pool.

    :return: Job name -> result.  The first exception raised by any job is
        re-raised once all jobs have finished.
    """
    with ThreadPoolExecutor(max_workers=max(1, len(jobs))) as pool:
        futures = {name: pool.submit(fn) for name, fn in jobs.items()}
        return {name: future.result() for name, future in futures.items()}


class HygraphMigrationTool:
    """
    Encapsulates all state and behavior required to migrate one WordPress
    snapshot into Hygraph.  The Hygraph and WordPress clients can be passed
    in (tests use in-memory fakes); otherwise they are built from the
    configuration.  Every run starts from a fresh
    :class:`~wp_hygraph.models.state.MigrationState`.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        config_file: Optional[str] = None,
        client: Optional[HygraphClient] = None,
        source: Optional[WordPressClient] = None,
    ) -> None:
        self.config = load_config(config, config_file=config_file)
        errors.set_report_dir(self.config["migration"]["report_dir"])
        self._client = client
        self._source = source

    @property
    def client(self) -> HygraphClient:
        if self._client is None:
            self._client = HygraphClient.from_config(self.config["hygraph"])
        return self._client

    @property
    def source(self) -> WordPressClient:
        if self._source is None:
            self._source = WordPressClient.from_config(self.config["wordpress"])
        return self._source

    def log_message(self, message: str, level: str = "INFO") -> None:
        log_message(message, level)

    def check(self) -> None:
        """
        Validate the configuration before any work starts.

        :raises PreFlightCheckError: if credentials or endpoints are missing.
        """
        run_pre_flight_checks(self.config)

    def load_existing(self, state: MigrationState) -> None:
        """Fill the natural-key maps from content already in Hygraph."""
        reserved = self.config["migration"]["reserved_slugs"]
        existing = fetch_concurrently(
            {
                "authors": self.client.list_authors,
                "posts": lambda: self.client.list_posts(reserved),
                "assets": self.client.list_assets,
                "categories": self.client.list_categories,
            }
        )
        state.existing_authors = build_key_map(existing["authors"], "name")
        state.existing_posts = build_key_map(existing["posts"], "slug")
        state.existing_assets = build_key_map(existing["assets"], "fileName")
        state.existing_categories = build_key_map(existing["categories"], "categorySlug")
        self.log_message(f"Found {len(state.existing_authors)} existing authors.")
        self.log_message(f"Found {len(state.existing_posts)} existing posts.")
        self.log_message(f"Found {len(state.existing_assets)} existing assets.")
        self.log_message(f"Found {len(state.existing_categories)} existing categories.")

    def fetch_source(self) -> Dict[str, Any]:
        return fetch_concurrently(
            {
                "authors": self.source.fetch_authors,
                "posts": self.source.fetch_posts,
                "categories": self.source.fetch_categories,
                "comments": self.source.fetch_comments,
            }
        )

    def migrate(self) -> MigrationSummary:
        """
        Run both passes and return the run summary.

        Only a failure of the start-up reads stops the run early; it is
        logged and an empty summary is returned.  Every later failure is
        confined to the item it happened on.
        """
        state = MigrationState()
        migration = self.config["migration"]

        try:
            self.log_message("--- Checking for existing content in Hygraph ---")
            self.load_existing(state)
            self.log_message("--- Fetching WordPress Data ---")
            snapshot = self.fetch_source()
        except Exception as e:
            self.log_message(f"❌ Migration error: {e}", level="ERROR")
            report_error("SOURCE_FETCH", "run", None, e)
            return state.summary

        # --- Pass 1: create content as drafts ---
        self.log_message("\n--- Migrating Authors ---")
        migrate_authors(self.client, snapshot["authors"], state, skip_slugs=migration["skip_author_slugs"])

        self.log_message("\n--- Migrating Categories ---")
        migrate_categories(self.client, snapshot["categories"], state)

        self.log_message("\n--- Publishing Categories ---")
        publish_all(self.client, "category", state.categories_to_publish, state.summary)

        self.log_message("\n--- Migrating New Posts & Assets ---")
        migrate_posts(self.client, self.source, snapshot["posts"], state, reserved_slugs=migration["reserved_slugs"])

        self.log_message("\n--- Migrating Comments ---")
        migrate_comments(self.client, snapshot["comments"], state)

        # --- Pass 2: publish and link ---
        self.log_message("\n--- Publishing New Assets ---")
        publish_all(self.client, "asset", state.assets_to_publish, state.summary, label="new")

        self.log_message("\n--- Publishing New Posts ---")
        publish_all(self.client, "post", state.posts_to_publish, state.summary, label="new")

        self.log_message("\n--- Publishing Comments ---")
        publish_all(self.client, "comment", state.comments_to_publish, state.summary)

        self.log_message("\n--- Updating Posts with Categories ---")
        link_post_categories(self.client, state)

        self.log_message("\n--- Publishing Authors ---")
        publish_all(self.client, "author", state.authors_to_publish, state.summary)

        self.log_message("\n--- Summary ---")
        for line in state.summary.lines():
            self.log_message(line)
        for kind, kind_summary in state.summary.kinds.items():
            if kind_summary.failed:
                self.log_message(f"⚠️ Failed {kind}: {', '.join(kind_summary.failed)}", level="WARNING")
        self.log_message("\n🎉 Migration complete!")
        return state.summary
