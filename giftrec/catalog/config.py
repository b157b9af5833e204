from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_BUNDLED_PRODUCTS = Path(__file__).resolve().parent.parent / "data" / "products.csv"


@dataclass(frozen=True)
class CatalogConfig:
    products_path: Path = field(
        default_factory=lambda: Path(os.getenv("CATALOG_PATH") or _BUNDLED_PRODUCTS)
    )


DEFAULT_CATALOG_CONFIG = CatalogConfig()
