import json

import pytest

from storefront.models import Product
from storefront.session import StoreSession
from storefront.storage import MemoryStore

RAW_PRODUCTS = [
    {
        "id": 1,
        "title": "Fjallraven Foldsack Backpack",
        "price": 109.95,
        "description": "Your perfect pack for everyday use and walks in the forest.",
        "category": "men's clothing",
        "image": "/images/product_1.jpg",
        "rating": {"rate": 3.9, "count": 120},
    },
    {
        "id": 2,
        "title": "John Hardy Women's Chain Bracelet",
        "price": 695.0,
        "description": "From our Legends Collection, inspired by the mythical water dragon.",
        "category": "jewelery",
        "image": "/images/product_2.jpg",
        "rating": {"rate": 4.6, "count": 400},
    },
    {
        "id": 3,
        "title": "WD 2TB Elements Portable Hard Drive",
        "price": 64.0,
        "description": "USB 3.0 and USB 2.0 compatibility, fast data transfers.",
        "category": "electronics",
        "image": "/images/product_3.jpg",
        "rating": {"rate": 3.3, "count": 203},
    },
    {
        "id": 4,
        "title": "Rain Jacket Women Windbreaker",
        "price": 39.99,
        "description": "Lightweight, hooded, striped climbing raincoat.",
        "category": "women's clothing",
        "image": "/images/product_4.jpg",
        "rating": {"rate": 3.8, "count": 679},
    },
    {
        "id": 5,
        "title": "Mens Casual Slim Fit",
        "price": 15.99,
        "description": "The color could be slightly different between on the screen and in practice.",
        "category": "Men's Clothing",
        "image": "/images/product_5.jpg",
        "rating": {"rate": 2.1, "count": 430},
    },
]


@pytest.fixture
def raw_products():
    return [dict(p) for p in RAW_PRODUCTS]


@pytest.fixture
def catalog():
    return tuple(Product.from_dict(p) for p in RAW_PRODUCTS)


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(json.dumps(RAW_PRODUCTS), encoding="utf-8")
    return str(path)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def session(catalog, store):
    return StoreSession(catalog, store)
