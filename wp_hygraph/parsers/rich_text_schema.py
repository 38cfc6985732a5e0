from __future__ import annotations

from typing import Any, Dict, List


# --- Builders for Hygraph RichTextAST nodes ---

def doc(children: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"children": children or []}


def text(value: str) -> Dict[str, Any]:
    return {"text": value or ""}


def paragraph(value: str) -> Dict[str, Any]:
    return {"type": "paragraph", "children": [text(value)]}


def list_item(value: str) -> Dict[str, Any]:
    return {
        "type": "list-item",
        "children": [{"type": "list-item-child", "children": [text(value)]}],
    }


def bulleted_list(items: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "bulleted-list", "children": items}
