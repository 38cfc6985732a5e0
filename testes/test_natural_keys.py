import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from wp_hygraph.utils.natural_keys import build_key_map


def test_maps_natural_key_to_id():
    records = [{"id": "a1", "slug": "first"}, {"id": "a2", "slug": "second"}]
    assert build_key_map(records, "slug") == {"first": "a1", "second": "a2"}


def test_records_without_key_or_id_are_ignored():
    records = [{"id": "a1", "fileName": None}, {"fileName": "x.png"}, {"id": "a3", "fileName": "y.png"}]
    assert build_key_map(records, "fileName") == {"y.png": "a3"}


def test_first_record_wins_on_duplicate_key():
    records = [{"id": "a1", "name": "Ada"}, {"id": "a2", "name": "Ada"}]
    assert build_key_map(records, "name") == {"Ada": "a1"}


def test_empty_input():
    assert build_key_map([], "name") == {}
