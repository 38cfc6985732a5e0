"""
Create-or-reuse of Hygraph assets for WordPress featured images.

:func:`materialize_asset` is idempotent per file name: a name already known
to Hygraph (found at start-up, or uploaded earlier in this run) is reused
without any network call.  Otherwise the image is downloaded from WordPress,
an asset entry is created, the bytes are posted to the pre-signed form and
the alt text and caption are attached.

Failures never propagate.  An unparseable URL or a failed download leaves
nothing behind; a failed upload leaves the created asset entry in Hygraph as
an orphaned draft.
"""

from __future__ import annotations

import posixpath
from typing import Dict, Optional
from urllib.parse import unquote, urlparse

import requests

from wp_hygraph.models.state import MigrationSummary
from wp_hygraph.utils.errors import log_message, report_error, report_ok

KIND = "asset"


def file_name_from_url(url: str) -> str:
    """Return the last path segment of ``url``."""
    return posixpath.basename(unquote(urlparse(url).path))


def materialize_asset(
    client,
    source,
    image_url: str,
    alt_text: str,
    caption: str,
    existing_assets: Dict[str, str],
    summary: MigrationSummary,
) -> Optional[str]:
    """
    Return the Hygraph id of the asset for ``image_url``, creating it if needed.

    :param client: A :class:`~wp_hygraph.migrators.hygraph_client.HygraphClient`.
    :param source: A :class:`~wp_hygraph.extractors.WordPressClient` used to
        download the original file.
    :param image_url: The WordPress ``source_url`` of the media item.
    :param alt_text: Alternative text to store on the asset.
    :param caption: Plain-text caption to store on the asset.
    :param existing_assets: File name -> asset id.  Updated in place when a
        new asset is uploaded, so later posts sharing the image reuse it.
    :param summary: Run summary the outcome is counted in.
    :return: The asset id, or ``None`` when the file could not be put in
        place.  A failed metadata update still returns the id.
    """
    try:
        file_name = file_name_from_url(image_url)
    except ValueError as e:
        log_message(f"   ❌ Invalid image URL {image_url!r}: {e}", level="ERROR")
        report_error("INVALID_RECORD", KIND, image_url, e)
        summary.failed(KIND, image_url)
        return None
    if not file_name:
        log_message(f"   ⚠️ Skipping asset {image_url} — URL has no file name.", level="WARNING")
        summary.skipped(KIND)
        return None

    if file_name in existing_assets:
        asset_id = existing_assets[file_name]
        log_message(f"   ⏩ Skipping asset: {file_name} already exists with ID: {asset_id}")
        report_ok("REUSED", KIND, file_name, {"id": asset_id})
        summary.reused(KIND)
        return asset_id

    log_message(f"   📥 Downloading asset: {image_url}")
    try:
        content = source.download(image_url)
    except requests.RequestException as e:
        log_message(f"   ❌ Failed to download image {image_url}: {e}", level="ERROR")
        report_error("MEDIA_DOWNLOAD", KIND, file_name, e)
        summary.failed(KIND, file_name)
        return None

    log_message("   ✍️ Creating asset entry on Hygraph and getting pre-signed URL...")
    try:
        created = client.create_asset(file_name)
    except Exception as e:
        log_message(f"   ❌ Failed to create asset for {image_url}: {e}", level="ERROR")
        report_error("CREATE", KIND, file_name, e)
        summary.failed(KIND, file_name)
        return None

    log_message("   📤 Uploading asset to Hygraph's S3 endpoint...")
    try:
        client.upload_asset(created.ticket, content, file_name)
    except Exception as e:
        # The entry created above stays behind as a draft without a file.
        log_message(f"   ❌ Failed to upload asset {file_name} (orphaned draft ID: {created.id}): {e}", level="ERROR")
        report_error("MEDIA_UPLOAD", KIND, file_name, e)
        summary.failed(KIND, file_name)
        return None

    existing_assets[file_name] = created.id

    log_message(f"   🖼️ Updating asset metadata (altText, caption) for asset ID: {created.id}")
    try:
        client.update_asset_metadata(created.id, alt_text, caption)
    except Exception as e:
        # The file is in place, so the asset is still used without alt text or caption.
        log_message(f"   ❌ Failed to update metadata for asset {file_name}: {e}", level="ERROR")
        report_error("MEDIA_METADATA", KIND, file_name, e)
        summary.failed(KIND, file_name)
        return created.id

    log_message(f"   ✅ Created, uploaded, and updated asset: {file_name} -> ID: {created.id}")
    report_ok("UPLOADED", KIND, file_name, {"id": created.id})
    summary.created(KIND)
    return created.id
