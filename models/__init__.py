"""Model package exports."""

from models.catalog import Catalog, Combination, Item, UNCATEGORIZED, UNNAMED_OUTFIT

__all__ = ["Catalog", "Combination", "Item", "UNCATEGORIZED", "UNNAMED_OUTFIT"]
