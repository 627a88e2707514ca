"""In-memory closet catalog kept in step with a storage slot."""
from __future__ import annotations

import copy
import json
from dataclasses import fields
from typing import Any, Dict, List, Optional

from closet_app.logging_config import get_logger
from models.catalog import Catalog, Combination, Item, attribute_name, new_id, utc_timestamp
from tools.catalog_storage import CatalogStorage
from tools.observability import instrument_operation

LOGGER = get_logger(__name__)

_STAMPED_FIELDS = {"id", "created_at"}
_ITEM_FIELDS = {f.name for f in fields(Item)}


class CatalogLoadError(ValueError):
    """The stored catalog document could not be parsed."""


def _stamp(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Map caller fields to attribute names and stamp a fresh id and creation time."""

    values = {attribute_name(key): value for key, value in (data or {}).items()}
    for key in _STAMPED_FIELDS:
        values.pop(key, None)
    return {**values, "id": new_id(), "created_at": utc_timestamp()}


class ClosetStore:
    """Owns the catalog and persists it wholesale after every mutation.

    Getters hand out deep copies; the only way to change stored state is through
    the mutating methods, each of which saves before returning. A failed save is
    raised to the caller and the in-memory change is kept.
    """

    def __init__(self, storage: CatalogStorage) -> None:
        self.storage = storage
        self._catalog = Catalog()

    @instrument_operation("load_catalog")
    def load(self) -> Catalog:
        try:
            raw = self.storage.read()
        except UnicodeDecodeError as exc:
            raise CatalogLoadError(f"Stored catalog '{self.storage.key}' is not valid UTF-8: {exc}") from exc
        if raw is None:
            LOGGER.info("No stored catalog under %s, starting empty", self.storage.key)
            self._catalog = Catalog()
            self.save()
            return copy.deepcopy(self._catalog)

        try:
            self._catalog = Catalog.from_document(json.loads(raw))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise CatalogLoadError(f"Stored catalog '{self.storage.key}' is malformed: {exc}") from exc
        LOGGER.info(
            "Loaded %d items and %d combinations",
            len(self._catalog.items),
            len(self._catalog.combinations),
        )
        return copy.deepcopy(self._catalog)

    def save(self) -> None:
        self.storage.write(json.dumps(self._catalog.to_document()))

    def snapshot(self) -> Catalog:
        """Return a detached copy of the whole catalog for read-only queries."""

        return copy.deepcopy(self._catalog)

    # Items

    @instrument_operation("add_item")
    def add_item(self, data: Dict[str, Any]) -> Item:
        item = Item.from_record(_stamp(data))
        self._catalog.items.append(item)
        self.save()
        return copy.deepcopy(item)

    def get_items(self) -> List[Item]:
        return copy.deepcopy(self._catalog.items)

    def get_item_by_id(self, item_id: str) -> Optional[Item]:
        for item in self._catalog.items:
            if item.id == item_id:
                return copy.deepcopy(item)
        return None

    @instrument_operation("update_item")
    def update_item(self, item_id: str, patch: Dict[str, Any]) -> bool:
        for item in self._catalog.items:
            if item.id != item_id:
                continue
            for key, value in (patch or {}).items():
                name = attribute_name(key)
                if name in _ITEM_FIELDS:
                    setattr(item, name, value)
                else:
                    LOGGER.debug("Ignoring unknown item field %s", key)
            self.save()
            return True
        return False

    @instrument_operation("delete_item")
    def delete_item(self, item_id: str) -> bool:
        for index, item in enumerate(self._catalog.items):
            if item.id == item_id:
                del self._catalog.items[index]
                self.save()
                return True
        return False

    # Combinations

    @instrument_operation("add_combination")
    def add_combination(self, data: Dict[str, Any]) -> Combination:
        combination = Combination.from_record(_stamp(data))
        self._catalog.combinations.append(combination)
        self.save()
        return copy.deepcopy(combination)

    def get_combinations(self) -> List[Combination]:
        return copy.deepcopy(self._catalog.combinations)

    def get_combination_by_id(self, combination_id: str) -> Optional[Combination]:
        for combination in self._catalog.combinations:
            if combination.id == combination_id:
                return copy.deepcopy(combination)
        return None

    @instrument_operation("delete_combination")
    def delete_combination(self, combination_id: str) -> bool:
        for index, combination in enumerate(self._catalog.combinations):
            if combination.id == combination_id:
                del self._catalog.combinations[index]
                self.save()
                return True
        return False


__all__ = ["CatalogLoadError", "ClosetStore"]
