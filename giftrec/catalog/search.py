from __future__ import annotations

from enum import Enum

import pandas as pd
from pydantic import BaseModel, Field

from .data_store import DataFrameCatalog, row_to_item
from .models import ProductPage


class SortOption(str, Enum):
    price_asc = "price_asc"
    price_desc = "price_desc"
    relevance = "relevance"


class SearchFilters(BaseModel):
    category: str | None = None
    retailer: str | None = None
    brand: str | None = None
    min_price: float | None = Field(default=None, ge=0.0)
    max_price: float | None = Field(default=None, ge=0.0)
    search_term: str | None = None


def search_products(
    catalog: DataFrameCatalog,
    filters: SearchFilters,
    limit: int = 20,
    offset: int = 0,
    sort: SortOption = SortOption.relevance,
) -> ProductPage:
    df = catalog.dataframe
    mask = pd.Series(True, index=df.index)

    if filters.category:
        mask = mask & (df["category_lower"] == filters.category.strip().lower())
    if filters.retailer:
        mask = mask & (df["retailer_lower"] == filters.retailer.strip().lower())
    if filters.brand:
        mask = mask & (df["brand_lower"] == filters.brand.strip().lower())
    if filters.min_price is not None:
        mask = mask & (df["price"] >= filters.min_price)
    if filters.max_price is not None:
        mask = mask & (df["price"] <= filters.max_price)

    if filters.search_term:
        term = filters.search_term.strip().lower()
        text_hit = df["title"].str.lower().str.contains(term, regex=False, na=False) | df[
            "description"
        ].str.lower().str.contains(term, regex=False, na=False)
        tag_hit = df["tags_lower"].apply(lambda tags: term in tags)
        mask = mask & (text_hit | tag_hit)

    matches = df.loc[mask]
    total = len(matches)

    # The catalog frame is already newest first, which stands in for relevance
    if sort == SortOption.price_asc:
        matches = matches.sort_values("price", ascending=True, kind="stable")
    elif sort == SortOption.price_desc:
        matches = matches.sort_values("price", ascending=False, kind="stable")

    page = matches.iloc[offset : offset + limit]
    return ProductPage(
        products=[row_to_item(row) for _, row in page.iterrows()],
        total=total,
        limit=limit,
        offset=offset,
    )
