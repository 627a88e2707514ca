"""Read-only queries over a catalog snapshot: search, grouping and recency."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from models.catalog import Combination, Item, normalise_tags, parse_timestamp

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def category_breakdown(items: Iterable[Item]) -> Dict[str, int]:
    """Count items per display category, in first-seen order."""

    counts: Dict[str, int] = {}
    for item in items:
        category = item.display_category
        counts[category] = counts.get(category, 0) + 1
    return counts


def group_available_items_by_category(items: Iterable[Item]) -> Dict[str, List[Item]]:
    """Group full item records per display category, in first-seen order."""

    groups: Dict[str, List[Item]] = {}
    for item in items:
        groups.setdefault(item.display_category, []).append(item)
    return groups


def available_categories(items: Iterable[Item]) -> List[str]:
    """Distinct non-blank categories in first-seen order."""

    seen: Dict[str, None] = {}
    for item in items:
        if item.category:
            seen.setdefault(item.category, None)
    return list(seen)


def recent_items(items: Sequence[Item], n: int) -> List[Item]:
    """Return the ``n`` most recently created items, newest first.

    Equal timestamps keep their original relative order; items whose
    ``created_at`` cannot be parsed sort after everything else.
    """

    if n <= 0:
        return []
    ordered = sorted(items, key=lambda item: parse_timestamp(item.created_at) or _OLDEST, reverse=True)
    return ordered[:n]


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in str(value).lower()


def filter_items(items: Iterable[Item], search_term: Optional[str] = "", category: Optional[str] = "") -> List[Item]:
    """Filter by exact category and a case-insensitive search over color, notes and category.

    A blank ``search_term`` or ``category`` disables that half of the filter.
    """

    term = (search_term or "").lower()
    kept: List[Item] = []
    for item in items:
        if category and item.category != category:
            continue
        if term and not (
            _contains(item.color, term) or _contains(item.notes, term) or _contains(item.category, term)
        ):
            continue
        kept.append(item)
    return kept


def resolve_combo_items(combo: Combination, items: Iterable[Item]) -> List[Item]:
    """Map a combination's item ids to records, silently dropping dangling ids."""

    by_id: Dict[str, Item] = {}
    for item in items:
        by_id.setdefault(item.id, item)
    return [by_id[item_id] for item_id in combo.items if item_id in by_id]


def parse_tags(raw: str | Iterable[str] | None) -> List[str]:
    """Split a comma separated tag string into trimmed, non-empty tags."""

    return normalise_tags(raw)


__all__ = [
    "available_categories",
    "category_breakdown",
    "filter_items",
    "group_available_items_by_category",
    "parse_tags",
    "recent_items",
    "resolve_combo_items",
]
