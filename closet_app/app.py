"""Smart Closet app bootstrap and page services."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from closet_app.config import ClosetConfig
from closet_app.logging_config import configure_logging, get_logger, log_event, operation_context
from logic.catalog_queries import (
    available_categories,
    category_breakdown,
    filter_items,
    group_available_items_by_category,
    parse_tags,
    recent_items,
    resolve_combo_items,
)
from logic.validation import CombinationRequest, ImagePayload, ItemPayload
from models.catalog import UNNAMED_OUTFIT, Combination, Item
from tools.catalog_storage import CatalogStorage, InMemoryStorage, JSONFileStorage
from tools.closet_store import ClosetStore
from tools.observability import instrument_operation


LOGGER = get_logger(__name__)


class ItemNotFoundError(LookupError):
    """Raised when the item editor targets an id that is not in the catalog."""


class EmptyCombinationError(ValueError):
    """Raised when a combination is saved without any selected item."""


def item_view(item: Item) -> Dict[str, Any]:
    return {**item.to_record(), "display_category": item.display_category}


def combination_view(combination: Combination, items: Iterable[Item]) -> Dict[str, Any]:
    resolved = resolve_combo_items(combination, items)
    return {
        **combination.to_record(),
        "display_name": combination.display_name,
        "resolved_items": [item_view(item) for item in resolved],
    }


class SmartClosetApp:
    """Wires storage and the closet store together and serves the four pages."""

    def __init__(self, config: ClosetConfig | None = None, storage: CatalogStorage | None = None) -> None:
        self.config = config or ClosetConfig.from_env()
        configure_logging()

        self.storage = storage or self._build_storage()
        self.store = ClosetStore(self.storage)
        self.store.load()

    def _build_storage(self) -> CatalogStorage:
        if self.config.storage_backend == "memory":
            return InMemoryStorage(key=self.config.storage_key, quota_bytes=self.config.storage_quota_bytes)
        return JSONFileStorage(
            base_dir=self.config.data_dir,
            key=self.config.storage_key,
            quota_bytes=self.config.storage_quota_bytes,
        )

    # Dashboard

    def dashboard(self) -> Dict[str, Any]:
        """Totals, per-category counts and the newest items."""

        with operation_context("dashboard"):
            catalog = self.store.snapshot()
            recent = recent_items(catalog.items, self.config.recent_items_limit)
            return {
                "total_items": len(catalog.items),
                "category_stats": category_breakdown(catalog.items),
                "combination_count": len(catalog.combinations),
                "recent_items": [item_view(item) for item in recent],
            }

    # Item list

    def list_items(self, search_term: str = "", category: str = "") -> Dict[str, Any]:
        with operation_context("list_items"):
            items = self.store.get_items()
            matches = filter_items(items, search_term, category)
            return {
                "items": [item_view(item) for item in matches],
                "categories": available_categories(items),
                "total": len(items),
            }

    def remove_item(self, item_id: str) -> bool:
        removed = self.store.delete_item(item_id)
        if not removed:
            log_event(LOGGER, logging.WARNING, "item_not_found", item_id=item_id, action="delete")
        return removed

    # Item editor

    def load_item_for_edit(self, item_id: str) -> Optional[Dict[str, Any]]:
        item = self.store.get_item_by_id(item_id)
        if item is None:
            log_event(LOGGER, logging.WARNING, "item_not_found", item_id=item_id, action="edit")
            return None
        return item_view(item)

    def save_item(
        self,
        payload: Dict[str, Any],
        item_id: str | None = None,
        image_preview: str | None = None,
    ) -> Dict[str, Any]:
        """Create or update an item from the editor form.

        Editing merges only the fields present in ``payload``. When editing
        without a new image the stored image is kept; a new item without an
        image stores ``imagePreview`` as null.
        """

        with operation_context("save_item"):
            fields = ItemPayload.model_validate(payload).model_dump(exclude_unset=True)
            image = ImagePayload(image_preview=image_preview).image_preview

            if item_id is None:
                fields["image_preview"] = image
                return item_view(self.store.add_item(fields))

            existing = self.store.get_item_by_id(item_id)
            if existing is None:
                raise ItemNotFoundError(f"Unknown item {item_id}")
            fields["image_preview"] = image or existing.image_preview
            self.store.update_item(item_id, fields)
            return item_view(self.store.get_item_by_id(item_id))

    # Combinations

    def list_combinations(self) -> List[Dict[str, Any]]:
        with operation_context("list_combinations"):
            catalog = self.store.snapshot()
            return [combination_view(combo, catalog.items) for combo in catalog.combinations]

    def combination_builder(self) -> Dict[str, Any]:
        """Every item grouped by category for the outfit selection grid."""

        groups = group_available_items_by_category(self.store.get_items())
        return {
            "categories": [
                {"category": category, "count": len(items), "items": [item_view(item) for item in items]}
                for category, items in groups.items()
            ]
        }

    @instrument_operation("create_combination", input_model=CombinationRequest)
    def create_combination(
        self,
        *,
        name: str = "",
        tags: str | List[str] = "",
        item_ids: List[str] | None = None,
    ) -> Dict[str, Any]:
        selected = list(dict.fromkeys(item_ids or []))
        if not selected:
            raise EmptyCombinationError("Select at least one item for this combination")

        combination = self.store.add_combination(
            {
                "name": name.strip() or UNNAMED_OUTFIT,
                "tags": parse_tags(tags),
                "items": selected,
            }
        )
        return combination_view(combination, self.store.get_items())

    def remove_combination(self, combination_id: str) -> bool:
        removed = self.store.delete_combination(combination_id)
        if not removed:
            log_event(
                LOGGER, logging.WARNING, "combination_not_found", combination_id=combination_id, action="delete"
            )
        return removed


__all__ = ["EmptyCombinationError", "ItemNotFoundError", "SmartClosetApp", "combination_view", "item_view"]
