"""Named storage slots holding one serialised catalog document."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional


class StorageQuotaExceededError(OSError):
    """Raised when a write would exceed the configured storage quota."""

    def __init__(self, key: str, size: int, quota: int) -> None:
        super().__init__(f"Writing {size} bytes to '{key}' exceeds the {quota} byte quota")
        self.key = key
        self.size = size
        self.quota = quota


class CatalogStorage:
    """A single named slot: read returns the last written text or ``None``."""

    def __init__(self, key: str, quota_bytes: Optional[int] = None) -> None:
        self.key = key
        self.quota_bytes = quota_bytes

    def read(self) -> Optional[str]:
        raise NotImplementedError

    def write(self, payload: str) -> None:
        raise NotImplementedError

    def _check_quota(self, payload: str) -> None:
        if not self.quota_bytes:
            return
        size = len(payload.encode("utf-8"))
        if size > self.quota_bytes:
            raise StorageQuotaExceededError(self.key, size, self.quota_bytes)


class JSONFileStorage(CatalogStorage):
    """Slot kept as ``<base_dir>/<key>.json`` on local disk."""

    def __init__(self, base_dir: str | Path = "data", key: str = "smartClosetData", quota_bytes: Optional[int] = None) -> None:
        super().__init__(key, quota_bytes)
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self.base_dir / f"{self.key}.json"

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write(self, payload: str) -> None:
        self._check_quota(payload)
        # atomic replace
        tmp_path = self.path.with_suffix(".json.tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(self.path)


class InMemoryStorage(CatalogStorage):
    """Process-local slots, shared between instances built on the same ``slots`` dict."""

    def __init__(self, key: str = "smartClosetData", quota_bytes: Optional[int] = None, slots: Optional[Dict[str, str]] = None) -> None:
        super().__init__(key, quota_bytes)
        self.slots: Dict[str, str] = slots if slots is not None else {}

    def read(self) -> Optional[str]:
        return self.slots.get(self.key)

    def write(self, payload: str) -> None:
        self._check_quota(payload)
        self.slots[self.key] = payload


__all__ = ["CatalogStorage", "InMemoryStorage", "JSONFileStorage", "StorageQuotaExceededError"]
