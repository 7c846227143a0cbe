"""Pydantic schemas for the product catalog API."""

from typing import Any

from pydantic import BaseModel, Field


class CatalogUpload(BaseModel):
    """Replacement catalog snapshot. Items are schema-loose."""

    products: list[Any] = Field(..., description="Ordered list of catalog items")


class CatalogUploadResult(BaseModel):
    ok: bool = True
    count: int


class CatalogRead(BaseModel):
    products: list[Any] | None = None
