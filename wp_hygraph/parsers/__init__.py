"""
Parsers and converters used by the migration pipeline.

Currently this subpackage exposes ``convert_html_to_rich_text`` and
``strip_html`` from :mod:`wp_hygraph.parsers.rich_text`.
"""

from .rich_text import convert_html_to_rich_text, strip_html

__all__ = ["convert_html_to_rich_text", "strip_html"]
