"""
Natural-key lookup tables for content that already exists in Hygraph.

Reruns are made safe by matching on stable, human-meaningful fields (author
name, post slug, asset file name, category slug) rather than on a persisted
identity map.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable


def build_key_map(records: Iterable[Dict[str, Any]], key_field: str) -> Dict[str, str]:
    """
    Map each record's ``key_field`` value to its Hygraph ``id``.

    Records without the key or without an id are ignored.  When two records
    share a key the first one wins, matching the order Hygraph returned them.

    :param records: Destination records as returned by a list query.
    :param key_field: The natural key field, e.g. ``"slug"`` or ``"fileName"``.
    :return: A dictionary of natural key to destination id.
    """
    key_map: Dict[str, str] = {}
    for record in records:
        key = record.get(key_field)
        record_id = record.get("id")
        if not key or not record_id:
            continue
        key_map.setdefault(key, record_id)
    return key_map
