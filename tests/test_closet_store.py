"""Closet store persistence, CRUD and error propagation tests."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Dict

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.catalog import parse_timestamp
from tools.catalog_storage import InMemoryStorage, JSONFileStorage, StorageQuotaExceededError
from tools.closet_store import CatalogLoadError, ClosetStore


@pytest.fixture()
def storage(tmp_path: Path) -> JSONFileStorage:
    return JSONFileStorage(tmp_path, key="smartClosetData")


@pytest.fixture()
def store(storage: JSONFileStorage) -> ClosetStore:
    closet = ClosetStore(storage)
    closet.load()
    return closet


@pytest.fixture()
def shirt() -> Dict[str, object]:
    return {
        "category": "Shirts",
        "color": "navy blue",
        "notes": "Linen, summer only",
        "imagePreview": "data:image/png;base64,AAAA",
    }


def test_first_load_creates_empty_catalog(storage: JSONFileStorage) -> None:
    """An absent slot loads as an empty catalog that is written straight away."""

    catalog = ClosetStore(storage).load()

    assert catalog.items == []
    assert catalog.combinations == []
    assert json.loads(storage.path.read_text()) == {"items": [], "combinations": []}


def test_add_item_stamps_id_and_created_at(store: ClosetStore, shirt: Dict[str, object]) -> None:
    item = store.add_item({**shirt, "id": "caller-id", "createdAt": "1999-01-01T00:00:00.000Z"})

    assert item.id != "caller-id"
    assert item.created_at != "1999-01-01T00:00:00.000Z"
    assert parse_timestamp(item.created_at) is not None
    assert item.category == "Shirts"
    assert item.image_preview == "data:image/png;base64,AAAA"


def test_added_ids_are_unique(store: ClosetStore) -> None:
    items = [store.add_item({"color": f"shade-{i}"}) for i in range(50)]

    assert len({item.id for item in items}) == 50
    stamps = [parse_timestamp(item.created_at) for item in items]
    assert stamps == sorted(stamps)


def test_get_item_by_id_returns_added_item(store: ClosetStore, shirt: Dict[str, object]) -> None:
    item = store.add_item(shirt)

    assert store.get_item_by_id(item.id) == item
    assert store.get_item_by_id("missing") is None


def test_getters_return_copies(store: ClosetStore, shirt: Dict[str, object]) -> None:
    """Mutating returned data never reaches the stored catalog."""

    item = store.add_item(shirt)
    listed = store.get_items()
    listed[0].color = "red"
    listed.clear()

    assert store.get_items()[0].color == "navy blue"
    combo = store.add_combination({"name": "Work", "items": [item.id]})
    store.get_combinations()[0].items.append("injected")
    assert store.get_combination_by_id(combo.id).items == [item.id]


def test_update_item_only_touches_patched_fields(store: ClosetStore, shirt: Dict[str, object]) -> None:
    item = store.add_item(shirt)

    assert store.update_item(item.id, {"color": "red"}) is True

    updated = store.get_item_by_id(item.id)
    assert updated.color == "red"
    assert updated.id == item.id
    assert updated.created_at == item.created_at
    assert updated.category == item.category
    assert updated.notes == item.notes
    assert updated.image_preview == item.image_preview


def test_update_item_accepts_record_keys_and_ignores_unknown(store: ClosetStore, shirt: Dict[str, object]) -> None:
    item = store.add_item(shirt)

    store.update_item(item.id, {"imagePreview": None, "size": "M"})

    updated = store.get_item_by_id(item.id)
    assert updated.image_preview is None
    assert not hasattr(updated, "size")


def test_update_unknown_item_returns_false_without_writing(store: ClosetStore, storage: JSONFileStorage) -> None:
    before = storage.path.read_text()

    assert store.update_item("missing", {"color": "red"}) is False
    assert storage.path.read_text() == before


def test_delete_item_leaves_combinations_dangling(store: ClosetStore, shirt: Dict[str, object]) -> None:
    keep = store.add_item(shirt)
    gone = store.add_item({**shirt, "color": "white"})
    combo = store.add_combination({"name": "Office", "items": [keep.id, gone.id]})

    assert store.delete_item(gone.id) is True
    assert store.delete_item(gone.id) is False

    assert [item.id for item in store.get_items()] == [keep.id]
    assert store.get_combination_by_id(combo.id).items == [keep.id, gone.id]


def test_add_combination_trims_tags_and_keeps_name(store: ClosetStore) -> None:
    combo = store.add_combination({"name": "", "tags": ["casual", " work ", "  "], "items": ["id1"]})

    assert combo.tags == ["casual", "work"]
    assert combo.name == ""
    assert combo.display_name == "Unnamed Outfit"
    assert combo.items == ["id1"]


def test_add_combination_reads_string_tags_and_single_item(store: ClosetStore) -> None:
    """A comma separated tag string is split and a lone item id is kept whole."""

    combo = store.add_combination({"name": "Office", "tags": "casual, work", "items": "abc"})

    assert combo.tags == ["casual", "work"]
    assert combo.items == ["abc"]
    assert store.get_combination_by_id(combo.id).tags == ["casual", "work"]


def test_combination_allows_duplicate_item_ids(store: ClosetStore) -> None:
    combo = store.add_combination({"items": ["a", "a"]})

    assert combo.items == ["a", "a"]


def test_delete_combination(store: ClosetStore) -> None:
    combo = store.add_combination({"name": "Weekend"})

    assert store.delete_combination(combo.id) is True
    assert store.delete_combination(combo.id) is False
    assert store.get_combinations() == []


def test_save_then_load_round_trips(store: ClosetStore, storage: JSONFileStorage, shirt: Dict[str, object]) -> None:
    """A fresh store over the same slot sees the same catalog, order preserved."""

    first = store.add_item(shirt)
    second = store.add_item({"category": "Shoes"})
    store.add_combination({"name": "Smart", "tags": ["office"], "items": [second.id, first.id, "ghost"]})

    reloaded = ClosetStore(JSONFileStorage(storage.base_dir, key=storage.key))
    catalog = reloaded.load()

    assert catalog == store.snapshot()
    assert [item.id for item in catalog.items] == [first.id, second.id]


def test_persisted_document_uses_record_keys(store: ClosetStore, storage: JSONFileStorage, shirt: Dict[str, object]) -> None:
    store.add_item(shirt)

    document = json.loads(storage.path.read_text())
    record = document["items"][0]
    assert set(record) == {"id", "createdAt", "category", "color", "notes", "imagePreview"}
    assert record["createdAt"].endswith("Z")


def test_load_ignores_unknown_record_keys() -> None:
    slots = {
        "closet": json.dumps(
            {
                "items": [{"id": "1", "createdAt": "2024-05-01T10:00:00.000Z", "brand": "Acme"}],
                "combinations": [],
            }
        )
    }
    catalog = ClosetStore(InMemoryStorage(key="closet", slots=slots)).load()

    assert catalog.items[0].id == "1"
    assert catalog.items[0].category is None


@pytest.mark.parametrize(
    "payload",
    ["{not json", "[]", json.dumps({"items": []}), json.dumps({"items": ["x"], "combinations": []})],
)
def test_corrupt_catalog_raises_load_error(payload: str) -> None:
    storage = InMemoryStorage(key="closet", slots={"closet": payload})

    with pytest.raises(CatalogLoadError):
        ClosetStore(storage).load()


def test_undecodable_catalog_file_raises_load_error(storage: JSONFileStorage) -> None:
    storage.path.write_bytes(b'{"items": [], "combinations": [\xff]}')

    with pytest.raises(CatalogLoadError):
        ClosetStore(storage).load()


def test_load_keeps_records_without_id_or_created_at() -> None:
    slots = {"closet": json.dumps({"items": [{"color": "red"}], "combinations": [{"items": ["1"]}]})}

    catalog = ClosetStore(InMemoryStorage(key="closet", slots=slots)).load()

    assert catalog.items[0].color == "red"
    assert catalog.items[0].id is None
    assert catalog.items[0].created_at is None
    assert catalog.combinations[0].items == ["1"]


def test_quota_failure_propagates_and_keeps_memory(shirt: Dict[str, object]) -> None:
    """A failed write surfaces to the caller while the in-memory catalog stays mutated."""

    storage = InMemoryStorage(key="closet", quota_bytes=200)
    store = ClosetStore(storage)
    store.load()
    persisted = storage.read()

    big = {**shirt, "imagePreview": "data:image/png;base64," + "A" * 500}
    with pytest.raises(StorageQuotaExceededError):
        store.add_item(big)

    assert len(store.get_items()) == 1
    assert storage.read() == persisted


def test_isolated_store_instances(shirt: Dict[str, object]) -> None:
    one = ClosetStore(InMemoryStorage())
    two = ClosetStore(InMemoryStorage())
    one.load()
    two.load()

    one.add_item(shirt)

    assert len(one.get_items()) == 1
    assert two.get_items() == []
