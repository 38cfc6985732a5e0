"""
Hygraph migrators and helpers.

This subpackage provides the Hygraph API client, the asset materializer
(download from WordPress, pre-signed upload, metadata), the per-entity
migrators for authors, categories, posts and comments, the post/category
linker and the publish helper.  The orchestration of these steps into the
two migration passes lives in :mod:`wp_hygraph.migration_tool`.
"""
