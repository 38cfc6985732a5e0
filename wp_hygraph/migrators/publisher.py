"""
Draft → published promotion.

:func:`publish_all` publishes one queue of entries of a single kind.  Each
entry is attempted once; a failure is logged and counted under the entry's
natural key and the remaining entries are still published.
"""

from __future__ import annotations

from typing import Dict, List

from wp_hygraph.models.state import MigrationSummary
from wp_hygraph.utils.errors import log_message, report_error, report_ok


def publish_all(client, kind: str, entries: Dict[str, str], summary: MigrationSummary, *, label: str = "") -> List[str]:
    """
    Publish every entry in ``entries``.

    :param client: A :class:`~wp_hygraph.migrators.hygraph_client.HygraphClient`.
    :param kind: Entity kind, one of ``author``, ``category``, ``asset``,
        ``post`` or ``comment``.
    :param entries: Hygraph id -> natural key, in publish order.  The key
        names the entry in reports and in the run summary.
    :param summary: Run summary the outcomes are counted in.
    :param label: Optional word used in log lines (e.g. ``"new"``).
    :return: The ids that were published.
    """
    prefix = f"{label} {kind}" if label else kind
    published: List[str] = []
    for entry_id, key in entries.items():
        try:
            client.publish(kind, entry_id)
        except Exception as e:
            log_message(f"❌ Failed to publish {prefix} \"{key}\" (ID: {entry_id}): {e}", level="ERROR")
            report_error("PUBLISH", kind, key, e)
            summary.failed(kind, key)
            continue
        published.append(entry_id)
        summary.published(kind)
        report_ok("PUBLISHED", kind, key, {"id": entry_id})
        log_message(f"✅ Published {prefix} ID: {entry_id}")
    return published
