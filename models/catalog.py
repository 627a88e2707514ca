"""Closet catalog data model and record helpers."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ulid import ULID

UNCATEGORIZED = "Uncategorized"
UNNAMED_OUTFIT = "Unnamed Outfit"

# Python attribute name -> persisted record key.
_RECORD_KEYS = {
    "image_preview": "imagePreview",
    "created_at": "createdAt",
}
_ATTRIBUTE_NAMES = {value: key for key, value in _RECORD_KEYS.items()}


def new_id() -> str:
    """Return a unique, creation-ordered identifier."""

    return str(ULID())


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a UTC timestamp the way the browser catalog stored it."""

    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning ``None`` when it is missing or invalid."""

    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def attribute_name(key: str) -> str:
    """Map a persisted camelCase key to its dataclass attribute name."""

    return _ATTRIBUTE_NAMES.get(key, key)


def normalise_tags(values: str | Iterable[Any] | None) -> List[str]:
    """Trim tags and drop the empty ones, keeping order and duplicates.

    A plain string is read as comma separated tags.
    """

    if isinstance(values, str):
        values = values.split(",")
    tags: List[str] = []
    for value in values or []:
        if value is None:
            continue
        tag = str(value).strip()
        if tag:
            tags.append(tag)
    return tags


def _known_fields(cls: type, record: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    # Records stored without id or createdAt load with null values.
    kwargs: Dict[str, Any] = {"id": None, "created_at": None}
    for key, value in record.items():
        name = attribute_name(key)
        if name in names:
            kwargs[name] = value
    return kwargs


def _to_record(instance: object) -> Dict[str, Any]:
    return {_RECORD_KEYS.get(f.name, f.name): getattr(instance, f.name) for f in fields(instance)}


@dataclass
class Item:
    """A single wardrobe piece ("cloth")."""

    id: str
    created_at: str
    category: Optional[str] = None
    color: Optional[str] = None
    notes: Optional[str] = None
    image_preview: Optional[str] = None

    @property
    def display_category(self) -> str:
        return self.category or UNCATEGORIZED

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Item":
        return cls(**_known_fields(cls, record))

    def to_record(self) -> Dict[str, Any]:
        return _to_record(self)


@dataclass
class Combination:
    """A named, tagged outfit referencing items by id."""

    id: str
    created_at: str
    name: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    items: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tags = normalise_tags(self.tags)
        items = [self.items] if isinstance(self.items, str) else (self.items or [])
        self.items = [str(item_id) for item_id in items]

    @property
    def display_name(self) -> str:
        name = (self.name or "").strip()
        return name or UNNAMED_OUTFIT

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Combination":
        return cls(**_known_fields(cls, record))

    def to_record(self) -> Dict[str, Any]:
        return _to_record(self)


@dataclass
class Catalog:
    """Root aggregate holding every item and combination."""

    items: List[Item] = field(default_factory=list)
    combinations: List[Combination] = field(default_factory=list)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Catalog":
        """Build a catalog from the persisted ``{items, combinations}`` document."""

        if not isinstance(document, dict):
            raise TypeError(f"Catalog document must be an object, got {type(document).__name__}")
        return cls(
            items=[Item.from_record(record) for record in document["items"]],
            combinations=[Combination.from_record(record) for record in document["combinations"]],
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "items": [item.to_record() for item in self.items],
            "combinations": [combo.to_record() for combo in self.combinations],
        }


__all__ = [
    "Catalog",
    "Combination",
    "Item",
    "UNCATEGORIZED",
    "UNNAMED_OUTFIT",
    "attribute_name",
    "new_id",
    "normalise_tags",
    "parse_timestamp",
    "utc_timestamp",
]
