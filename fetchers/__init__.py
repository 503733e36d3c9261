# fetchers/__init__.py
from . import fakestore
from . import images

SOURCES = {
    "fakestore": fakestore.fetch_products,
}
