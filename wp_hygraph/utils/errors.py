"""
Structured logging helpers for migration errors and successes.

The :mod:`wp_hygraph.utils.errors` module centralizes console output and the
writing of log entries for both failed and successful operations during the
migration.  Each event is appended to a JSON Lines file under the report
directory (``reports/migration`` by default) so that the information can be
reviewed or parsed after a run.

Three public functions are provided:

``log_message``
    Print a ``[LEVEL] message`` line and append it to ``migration.log``.

``report_error``
    Record an error that occurred for one entity.  An optional exception can
    be supplied and will be serialized to the log.

``report_ok``
    Record a successful step for one entity.  Additional key/value
    information can be attached to the entry via the ``extra`` parameter.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

# Mapping of event codes used throughout the migration to descriptive messages.
# The keys include both error and success codes as the same lookup is used by
# :func:`report_error` and :func:`report_ok`.
ERRORS: Dict[str, str] = {
    "SOURCE_FETCH": "Failed to fetch content from WordPress",
    "INVALID_RECORD": "WordPress record could not be parsed",
    "CREATE": "Failed to create entry in Hygraph",
    "PUBLISH": "Failed to publish entry in Hygraph",
    "LINK_CATEGORIES": "Failed to update post categories",
    "MEDIA_DOWNLOAD": "Failed to download media from WordPress",
    "MEDIA_UPLOAD": "Failed to upload media to Hygraph",
    "MEDIA_METADATA": "Failed to update asset metadata",
    "CREATED": "Entry created successfully",
    "REUSED": "Entry already exists, reused",
    "PUBLISHED": "Entry published successfully",
    "LINKED": "Post categories updated",
    "UPLOADED": "Asset uploaded successfully",
}

_REPORT_DIR = os.path.join("reports", "migration")


def set_report_dir(path: str) -> None:
    """Redirect all log and JSONL output to ``path``."""
    global _REPORT_DIR
    _REPORT_DIR = path


def _write_jsonl(name: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``name``."""
    os.makedirs(_REPORT_DIR, exist_ok=True)
    with open(os.path.join(_REPORT_DIR, name), "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, default=str)
        f.write("\n")


def log_message(message: str, level: str = "INFO") -> None:
    print(f"[{level}] {message}")
    os.makedirs(_REPORT_DIR, exist_ok=True)
    with open(os.path.join(_REPORT_DIR, "migration.log"), "a", encoding="utf-8") as f:
        f.write(f"{level}: {message}\n")


def report_error(code: str, kind: str, key: Any, exc: Optional[Exception] = None) -> None:
    """Log an error event for one entity.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    kind:
        The entity type (``author``, ``post``, ...).
    key:
        The natural key or identifier that names the entity in the report.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the log entry,
        along with GraphQL error details when the exception carries them.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "kind": kind,
        "key": key,
    }
    if exc is not None:
        entry["error"] = str(exc)
        details = getattr(exc, "errors", None)
        if callable(details):
            # pydantic ValidationError
            details = details(include_url=False, include_context=False)
        if details:
            entry["details"] = details
    _write_jsonl("errors.jsonl", entry)


def report_ok(code: str, kind: str, key: Any, extra: Optional[Dict[str, Any]] = None) -> None:
    """Log a successful event for one entity.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    kind:
        The entity type.
    key:
        The natural key or identifier of the entity.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "kind": kind,
        "key": key,
    }
    if extra:
        entry.update(extra)
    _write_jsonl("success.jsonl", entry)
