# storefront/catalog.py
import json
from typing import List, Sequence, Tuple

from .logger import get_logger
from .models import ALL, FASHION, FASHION_CATEGORIES, Product

logger = get_logger(__name__)


class CatalogError(Exception):
    """The static catalog file is missing or malformed."""


def load_catalog(path: str) -> Tuple[Product, ...]:
    """
    Read the JSON array written by ingestion and return it as an ordered,
    read-only tuple of Products. Product ids must be unique.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found at {path}") from e
    except (OSError, ValueError) as e:
        raise CatalogError(f"Cannot read catalog at {path}: {e}") from e

    if not isinstance(raw, list):
        raise CatalogError(f"Catalog at {path} must be a JSON array")

    products: List[Product] = []
    seen: set[int] = set()
    for entry in raw:
        if not isinstance(entry, dict):
            raise CatalogError(f"Catalog entry is not an object: {entry!r}")
        try:
            product = Product.from_dict(entry)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CatalogError(f"Invalid catalog entry {entry!r}: {e}") from e
        if product.id in seen:
            raise CatalogError(f"Duplicate product id {product.id} in {path}")
        seen.add(product.id)
        products.append(product)

    logger.info("Loaded %d products from %s", len(products), path)
    return tuple(products)


def filter_by_category(catalog: Sequence[Product], category: str) -> List[Product]:
    if category == ALL:
        return list(catalog)
    if category == FASHION:
        return [p for p in catalog if p.category.lower() in FASHION_CATEGORIES]
    wanted = category.lower()
    return [p for p in catalog if p.category.lower() == wanted]


def search(catalog: Sequence[Product], query: str) -> List[Product]:
    """
    Case-insensitive substring match on title, description or category.
    A blank query matches everything.
    """
    if not query.strip():
        return list(catalog)
    needle = query.lower()
    return [
        p
        for p in catalog
        if needle in p.title.lower()
        or needle in p.description.lower()
        or needle in p.category.lower()
    ]
