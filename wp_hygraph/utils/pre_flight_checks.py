from __future__ import annotations

from typing import Any, Dict


class PreFlightCheckError(Exception):
    """Custom exception for pre-flight check failures."""
    pass


def run_pre_flight_checks(config: Dict[str, Any]) -> None:
    """
    Verifies that the run is configured well enough to start migrating.

    Nothing is read from or written to either system when a check fails.

    Args:
        config: The application configuration dictionary.

    Raises:
        PreFlightCheckError: If any check fails.
    """
    hygraph = config.get("hygraph", {})
    wordpress = config.get("wordpress", {})

    if not hygraph.get("api_url") or not hygraph.get("token"):
        raise PreFlightCheckError("Set HYGRAPH_API and HYGRAPH_TOKEN in .env")

    if not wordpress.get("api_url"):
        raise PreFlightCheckError("Set WP_API in .env (e.g. https://example.com/wp-json/wp/v2)")
