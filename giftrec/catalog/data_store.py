from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..recommendations.ports import CatalogLookup
from .config import DEFAULT_CATALOG_CONFIG
from .models import Item

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = [
    "id",
    "title",
    "description",
    "price",
    "category",
    "tags",
    "retailer",
    "brand",
    "url",
    "created_at",
]


class CatalogUnavailableError(RuntimeError):
    """Raised when the product dataset cannot be loaded."""


def _split_tags(raw: object) -> list[str]:
    if not isinstance(raw, str):
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def _optional(value: object) -> str | None:
    return str(value) if pd.notna(value) and str(value) != "" else None


def prepare_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Normalise a raw product frame: parse tags, coerce types, newest first."""
    missing = {"id", "title", "price", "category"} - set(df.columns)
    if missing:
        raise CatalogUnavailableError(f"Catalog is missing columns: {sorted(missing)}")

    df = df.copy()
    for col in CATALOG_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df["id"] = df["id"].astype(str)
    df["description"] = df["description"].fillna("").astype(str)
    df["price"] = pd.to_numeric(df["price"], errors="coerce")
    df = df.loc[df["price"].notna() & (df["price"] >= 0)].copy()

    # Tags arrive as a comma-separated string; keep order and duplicates
    df["tags_list"] = df["tags"].apply(_split_tags)
    df["tags_lower"] = df["tags_list"].apply(lambda tags: [t.lower() for t in tags])

    # Lowercase copies for case-insensitive filtering
    df["category_lower"] = df["category"].fillna("").astype(str).str.lower()
    df["retailer_lower"] = df["retailer"].fillna("").astype(str).str.lower()
    df["brand_lower"] = df["brand"].fillna("").astype(str).str.lower()

    df["created_at"] = pd.to_datetime(df["created_at"], errors="coerce", utc=True)
    df = df.sort_values("created_at", ascending=False, na_position="last", kind="stable")
    return df.reset_index(drop=True)


def row_to_item(row: pd.Series) -> Item:
    created_at = row.get("created_at")
    return Item(
        id=str(row["id"]),
        title=str(row["title"]),
        description=str(row.get("description") or ""),
        price=float(row["price"]),
        category=str(row["category"]),
        tags=list(row.get("tags_list", [])),
        retailer=_optional(row.get("retailer")),
        brand=_optional(row.get("brand")),
        url=_optional(row.get("url")),
        created_at=created_at.to_pydatetime() if pd.notna(created_at) else None,
    )


class DataFrameCatalog(CatalogLookup):
    """Catalog lookup over an in-memory product DataFrame."""

    def __init__(self, df: pd.DataFrame):
        self._df = prepare_frame(df)

    @classmethod
    def from_csv(cls, path: Path) -> "DataFrameCatalog":
        try:
            df = pd.read_csv(path, dtype={"id": str})
        except (OSError, ValueError) as exc:
            raise CatalogUnavailableError(f"Could not load catalog from {path}") from exc
        catalog = cls(df)
        logger.info("Loaded %d products from %s", len(catalog.dataframe), path)
        return catalog

    @property
    def dataframe(self) -> pd.DataFrame:
        return self._df

    def fetch_candidates(self, max_price: float, limit: int) -> list[Item]:
        rows = self._df.loc[self._df["price"] <= max_price].head(limit)
        return [row_to_item(row) for _, row in rows.iterrows()]

    def fetch_items_by_ids(self, ids: list[str]) -> list[Item]:
        if not ids:
            return []
        rows = self._df.loc[self._df["id"].isin({str(i) for i in ids})]
        return [row_to_item(row) for _, row in rows.iterrows()]

    def get_item(self, item_id: str) -> Item | None:
        items = self.fetch_items_by_ids([item_id])
        return items[0] if items else None


_catalog: DataFrameCatalog | None = None


def get_catalog() -> DataFrameCatalog:
    """Return the process-wide catalog, loading it on first call."""
    global _catalog
    if _catalog is None:
        _catalog = DataFrameCatalog.from_csv(DEFAULT_CATALOG_CONFIG.products_path)
    return _catalog
