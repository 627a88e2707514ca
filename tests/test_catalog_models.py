"""Catalog model record codec and display fallbacks."""

from datetime import datetime, timezone
from pathlib import Path

import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.catalog import Catalog, Combination, Item, new_id, parse_timestamp, utc_timestamp


def test_item_display_category_falls_back() -> None:
    assert Item(id="1", created_at="x").display_category == "Uncategorized"
    assert Item(id="1", created_at="x", category="").display_category == "Uncategorized"
    assert Item(id="1", created_at="x", category="Shoes").display_category == "Shoes"


def test_combination_display_name_falls_back() -> None:
    combo = Combination(id="1", created_at="x", name="   ")

    assert combo.display_name == "Unnamed Outfit"
    assert combo.name == "   "


def test_item_record_round_trip_uses_camel_case() -> None:
    record = {
        "id": "abc",
        "createdAt": "2024-02-03T04:05:06.789Z",
        "category": "Coats",
        "color": "#336699",
        "notes": None,
        "imagePreview": None,
    }

    item = Item.from_record(record)

    assert item.created_at == "2024-02-03T04:05:06.789Z"
    assert item.to_record() == record


def test_catalog_document_requires_both_collections() -> None:
    with pytest.raises(KeyError):
        Catalog.from_document({"items": []})
    with pytest.raises(TypeError):
        Catalog.from_document([])


def test_utc_timestamp_matches_browser_format() -> None:
    moment = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)

    assert utc_timestamp(moment) == "2024-05-06T07:08:09.123Z"
    assert parse_timestamp("2024-05-06T07:08:09.123Z") == datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=timezone.utc)
    assert parse_timestamp("garbage") is None
    assert parse_timestamp(None) is None


def test_new_ids_are_unique_ulids() -> None:
    ids = [new_id() for _ in range(20)]

    assert len(set(ids)) == 20
    assert all(len(value) == 26 for value in ids)
