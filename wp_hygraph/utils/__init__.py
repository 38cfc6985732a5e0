"""
Utility helpers used by the migration tool.

This subpackage exposes convenience functions for structured logging,
natural-key lookups and start-up configuration checks.
"""

from .errors import ERRORS, log_message, report_error, report_ok
from .natural_keys import build_key_map
from .pre_flight_checks import PreFlightCheckError, run_pre_flight_checks

__all__ = [
    "ERRORS",
    "log_message",
    "report_error",
    "report_ok",
    "build_key_map",
    "PreFlightCheckError",
    "run_pre_flight_checks",
]
