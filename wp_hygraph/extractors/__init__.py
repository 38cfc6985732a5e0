"""
Readers for the WordPress side of the migration.

This subpackage provides :class:`WordPressClient`, which pulls the source
snapshot from the WordPress REST API and normalizes it into the typed
records used by the Hygraph migrators.
"""

from .wordpress_extractor import WordPressClient, parse_records

__all__ = ["WordPressClient", "parse_records"]
