"""
HTML → Hygraph rich text conversion.

:func:`convert_html_to_rich_text` maps rendered WordPress post content to the
``RichTextAST`` document Hygraph expects for rich text fields.  The
conversion is deliberately lossy and best effort: only top-level paragraphs
and unordered lists survive.  Headings, images, tables, quotes, ordered lists
and any other markup are dropped without a placeholder.

Content is parsed with the HTML5 tree builder so omitted end tags
(``<li>A<li>B``, ``<p>one<p>two``) close the way a browser closes them.

:func:`strip_html` is the plain-text counterpart used for excerpts, image
captions and comment bodies.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List

from bs4 import BeautifulSoup, Tag

from .rich_text_schema import bulleted_list, doc, list_item, paragraph

__all__ = ["convert_html_to_rich_text", "strip_html"]

_TAG_RE = re.compile(r"<[^>]+>")


def strip_html(html: str) -> str:
    """Remove every tag from ``html`` and trim the result."""
    return _TAG_RE.sub("", html or "").strip()


def convert_html_to_rich_text(html: str) -> Dict[str, Any]:
    """
    Convert an HTML fragment to a Hygraph rich text document.

    Only direct element children of the body are visited:

    - ``<p>`` becomes a ``paragraph`` with a single trimmed text run; empty
      paragraphs are dropped.
    - ``<ul>`` becomes a ``bulleted-list`` with one ``list-item`` per
      non-empty ``<li>`` found inside it; a list without any text is dropped.

    Everything else is discarded.

    :param html: Rendered HTML, may be empty.
    :return: ``{"children": [...]}``
    """
    if not html or not html.strip():
        return doc([])

    soup = BeautifulSoup(html, "html5lib")
    container = soup.body if soup.body else soup

    children: List[Dict[str, Any]] = []
    for node in container.children:
        if not isinstance(node, Tag):
            continue
        name = (node.name or "").lower()
        if name == "p":
            value = node.get_text().strip()
            if value:
                children.append(paragraph(value))
        elif name == "ul":
            items = []
            for li in node.find_all("li"):
                value = li.get_text().strip()
                if value:
                    items.append(list_item(value))
            if items:
                children.append(bulleted_list(items))

    return doc(children)
