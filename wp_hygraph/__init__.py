"""
Top-level package for the WordPress → Hygraph migration utility.

This package bundles all components required to read a WordPress site
through its REST API, convert post HTML to Hygraph rich text, upload
featured images as Hygraph assets, create authors, categories, posts and
comments, link posts to categories and publish everything in dependency
order.  Modules are split into subpackages:

* :mod:`wp_hygraph.extractors` – WordPress REST reader
* :mod:`wp_hygraph.parsers` – HTML to rich text converters
* :mod:`wp_hygraph.migrators` – Hygraph API interactions and migration steps
* :mod:`wp_hygraph.models` – typed records and run state
* :mod:`wp_hygraph.utils` – logging, natural keys and pre-flight checks

Reruns are safe: content is matched against Hygraph by natural key (author
name, slug, file name) before anything is created.  Orchestration is
handled in :mod:`wp_hygraph.migration_tool`.
"""
