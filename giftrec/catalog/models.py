from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    price: float = Field(..., ge=0.0)
    category: str
    tags: list[str] = Field(default_factory=list)
    retailer: str | None = None
    brand: str | None = None
    url: str | None = None
    created_at: datetime | None = None


class ProductPage(BaseModel):
    products: list[Item]
    total: int
    limit: int
    offset: int
