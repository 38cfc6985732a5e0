"""
Value types shared across the pipeline.

* :mod:`wp_hygraph.models.wordpress` – parsed WordPress records
* :mod:`wp_hygraph.models.hygraph` – Hygraph responses that carry structure
* :mod:`wp_hygraph.models.state` – run-scoped identity maps and publish sets
"""

from .hygraph import CreatedAsset, UploadTicket
from .state import MigrationState, MigrationSummary, PendingLink
from .wordpress import WPAuthor, WPCategory, WPComment, WPMedia, WPPost

__all__ = [
    "CreatedAsset",
    "UploadTicket",
    "MigrationState",
    "MigrationSummary",
    "PendingLink",
    "WPAuthor",
    "WPCategory",
    "WPComment",
    "WPMedia",
    "WPPost",
]
