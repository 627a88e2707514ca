"""Pydantic schemas for payloads arriving from the closet pages."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATA_URL_PREFIX = "data:"


class ItemPayload(BaseModel):
    """Fields the item editor submits; everything is optional free text."""

    model_config = ConfigDict(extra="ignore")

    category: Optional[str] = None
    color: Optional[str] = None
    notes: Optional[str] = None


class ImagePayload(BaseModel):
    """An already-encoded image, as produced by the browser's file reader."""

    image_preview: Optional[str] = Field(None, alias="imagePreview")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("image_preview")
    @classmethod
    def _require_data_url(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.startswith(DATA_URL_PREFIX):
            raise ValueError("imagePreview must be a data URL")
        return value or None


class CombinationRequest(BaseModel):
    """What the combination builder submits when saving an outfit."""

    name: str = ""
    tags: str | List[str] = ""
    item_ids: Optional[List[str]] = None


__all__ = ["CombinationRequest", "ImagePayload", "ItemPayload"]
