import json
import logging

import pytest

from storefront.models import Product
from storefront.session import CART_KEY, StoreSession
from storefront.storage import KeyValueStore, MemoryStore, StorageError


def ids(products):
    return [p.id for p in products]


def test_new_session_defaults(session, catalog):
    assert session.filtered_view == list(catalog)
    assert session.selected_category == "all"
    assert len(session.cart) == 0
    assert session.cart_open is False
    assert session.total_item_count == 0
    assert session.total_price == 0


def test_open_loads_catalog_file(catalog_file, store):
    session = StoreSession.open(catalog_file, store)
    assert ids(session.catalog) == [1, 2, 3, 4, 5]


def test_filter_sets_selected_category(session):
    session.filter_by_category("electronics")
    assert session.selected_category == "electronics"
    assert ids(session.filtered_view) == [3]


def test_search_keeps_selected_category(session, catalog):
    session.filter_by_category("jewelery")
    session.search("jacket")
    assert session.selected_category == "jewelery"
    assert ids(session.filtered_view) == [4]
    session.search("  ")
    assert session.filtered_view == list(catalog)


def test_filtered_view_is_replaced_not_patched(session):
    first = session.filter_by_category("fashion")
    session.filter_by_category("all")
    assert ids(first) == [1, 4, 5]
    assert session.filtered_view is not first


def test_reset_view_keeps_cart(session, catalog):
    session.add_to_cart(catalog[0])
    session.filter_by_category("electronics")
    session.toggle_cart()
    session.reset_view()
    assert session.selected_category == "all"
    assert session.filtered_view == list(catalog)
    assert session.cart_open is False
    assert session.cart.quantities() == {1: 1}


def test_toggle_and_close_cart(session):
    assert session.toggle_cart() is True
    assert session.toggle_cart() is False
    session.toggle_cart()
    session.close_cart()
    assert session.cart_open is False


def test_every_mutation_persists_full_snapshot(session, store, catalog):
    session.add_to_cart(catalog[0])
    session.add_to_cart(catalog[0])
    saved = json.loads(store.get(CART_KEY))
    assert [(d["id"], d["quantity"]) for d in saved] == [(1, 2)]

    session.add_to_cart(catalog[2])
    session.set_quantity(1, 5)
    saved = json.loads(store.get(CART_KEY))
    assert [(d["id"], d["quantity"]) for d in saved] == [(1, 5), (3, 1)]

    session.remove_from_cart(1)
    saved = json.loads(store.get(CART_KEY))
    assert [d["id"] for d in saved] == [3]

    session.clear_cart()
    assert json.loads(store.get(CART_KEY)) == []


def test_cart_survives_new_session(tmp_path, catalog):
    store = KeyValueStore(str(tmp_path / "state" / "store.sqlite3"))
    first = StoreSession(catalog, store)
    first.add_to_cart(catalog[1])
    first.add_to_cart(catalog[3])
    first.set_quantity(4, 3)

    second = StoreSession(catalog, KeyValueStore(store.path))
    assert second.cart.quantities() == first.cart.quantities() == {2: 1, 4: 3}
    assert second.total_price == pytest.approx(first.total_price)


@pytest.mark.parametrize("raw", ["{not json", '"cart"', '[{"id": 1}]', "42"])
def test_corrupt_saved_cart_falls_back_to_empty(catalog, raw, caplog):
    store = MemoryStore({CART_KEY: raw})
    with caplog.at_level(logging.WARNING):
        session = StoreSession(catalog, store)
    assert len(session.cart) == 0
    assert "Discarding saved cart" in caplog.text


class BrokenStore:
    def get(self, key):
        raise StorageError("disk gone")

    def set(self, key, value):
        raise StorageError("disk full")


def test_storage_failure_keeps_in_memory_cart(catalog, caplog):
    with caplog.at_level(logging.ERROR):
        session = StoreSession(catalog, BrokenStore())
        session.add_to_cart(catalog[0])
        session.add_to_cart(catalog[0])
    assert session.cart.quantities() == {1: 2}
    assert "Could not persist cart" in caplog.text


def test_checkout_is_placeholder(session, catalog):
    session.add_to_cart(catalog[0])
    session.checkout()
    assert session.cart.quantities() == {1: 1}


def test_example_scenario(store):
    shirt = Product(id=1, title="Shirt", price=20, category="men's clothing")
    ring = Product(id=2, title="Ring", price=50, category="jewelery")
    session = StoreSession([shirt, ring], store)

    session.add_to_cart(shirt)
    assert session.cart.quantities() == {1: 1}
    session.add_to_cart(shirt)
    assert session.cart.quantities() == {1: 2}
    assert session.total_price == 40

    assert session.filter_by_category("fashion") == [shirt]
    assert session.filter_by_category("jewelery") == [ring]


def test_session_exposes_cart_summary(session, catalog):
    session.add_to_cart(catalog[2])
    session.set_quantity(3, 2)
    assert session.total_savings == pytest.approx(12.8)
    assert session.final_total == pytest.approx(128.0 - 12.8)
