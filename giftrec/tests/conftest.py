from __future__ import annotations

import pandas as pd
import pytest

from giftrec.catalog.data_store import DataFrameCatalog
from giftrec.catalog.models import Item
from giftrec.history.store import InMemoryInteractionHistory

GAMING_KEYBOARD = Item(
    id="1",
    title="Gaming Keyboard",
    description="Mechanical keyboard for gamers",
    price=80,
    category="Electronics",
    tags=["gaming", "tech", "computer"],
    retailer="TechStore",
)
COFFEE_MAKER = Item(
    id="2",
    title="Coffee Maker",
    description="Premium espresso machine",
    price=150,
    category="Home",
    tags=["coffee", "kitchen", "home"],
    retailer="HomeGoods",
)
BIRTHDAY_BASKET = Item(
    id="3",
    title="Birthday Gift Basket",
    description="Perfect for birthday celebrations",
    price=90,
    category="Food",
    tags=["gift", "birthday", "food"],
    retailer="GiftShop",
)


def frame_from_items(items: list[Item]) -> pd.DataFrame:
    rows = []
    for i, item in enumerate(items):
        row = item.model_dump()
        row["tags"] = ",".join(item.tags)
        # Newest first in the given order
        row["created_at"] = pd.Timestamp("2024-06-01", tz="UTC") - pd.Timedelta(days=i)
        rows.append(row)
    return pd.DataFrame(rows)


@pytest.fixture
def make_catalog():
    def _make(items: list[Item]) -> DataFrameCatalog:
        return DataFrameCatalog(frame_from_items(items))

    return _make


@pytest.fixture
def catalog(make_catalog) -> DataFrameCatalog:
    return make_catalog([GAMING_KEYBOARD, COFFEE_MAKER, BIRTHDAY_BASKET])


@pytest.fixture
def history(catalog) -> InMemoryInteractionHistory:
    return InMemoryInteractionHistory(catalog)
