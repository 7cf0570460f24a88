# tests/test_cart.py
import json

from snapshop import cart
from snapshop.cart import CartStore


def test_add_twice_merges_into_one_line():
    lines = cart.add(cart.add((), 1), 1)
    assert len(lines) == 1
    assert lines[0].quantity == 2
    assert cart.total(lines) == 24998
    assert cart.item_count(lines) == 2


def test_add_keeps_first_added_order():
    lines = cart.add(cart.add(cart.add((), 3), 1), 3)
    assert [line.product.id for line in lines] == [3, 1]


def test_add_unknown_product_is_noop():
    lines = cart.add((), 1)
    assert cart.add(lines, 404) == lines


def test_delta_down_to_zero_removes_line():
    lines = cart.add(cart.add((), 2), 2)
    assert cart.set_quantity_delta(lines, 2, -2) == ()
    assert cart.set_quantity_delta(lines, 2, -5) == ()


def test_delta_updates_in_place_and_ignores_missing():
    lines = cart.add(cart.add((), 5), 6)
    lines = cart.set_quantity_delta(lines, 5, 3)
    assert [(line.product.id, line.quantity) for line in lines] == [(5, 4), (6, 1)]
    assert cart.set_quantity_delta(lines, 7, 1) == lines


def test_remove():
    lines = cart.add(cart.add((), 5), 6)
    assert [line.product.id for line in cart.remove(lines, 5)] == [6]
    assert cart.remove(lines, 1) == lines


def test_empty_cart_totals_zero():
    assert cart.total(()) == 0
    assert cart.item_count(()) == 0


def test_pure_functions_do_not_touch_input():
    lines = cart.add((), 1)
    cart.add(lines, 1)
    cart.set_quantity_delta(lines, 1, 4)
    assert lines[0].quantity == 1


def test_store_persists_after_every_mutation(durable):
    store = CartStore(durable)
    store.add(1)
    saved = json.loads(durable.get("cart"))
    assert saved == [{
        "id": 1, "title": "Wireless Headphones",
        "description": "Premium noise-cancelling headphones with 30-hour battery life",
        "price": 12499, "category": "electronics", "icon": "🎧", "quantity": 1,
    }]
    store.set_quantity_delta(1, -1)
    assert json.loads(durable.get("cart")) == []


def test_store_restores_saved_cart(durable):
    first = CartStore(durable)
    first.add(4)
    first.add(4)
    first.add(7)
    again = CartStore(durable)
    assert [(line.product.id, line.quantity) for line in again.lines] == [(4, 2), (7, 1)]
    assert again.total() == 7499 * 2 + 5899


def test_corrupt_cart_falls_back_to_empty(durable):
    durable.set("cart", "{not json")
    assert CartStore(durable).lines == ()
    durable.set("cart", json.dumps({"id": 1}))
    assert CartStore(durable).lines == ()


def test_unreadable_lines_are_dropped(durable):
    durable.set("cart", json.dumps([
        {"id": 1, "title": "x", "description": "y", "price": 10, "category": "home", "icon": "?", "quantity": 2},
        {"id": 2, "quantity": 1},
        "junk",
        {"id": 1, "title": "x", "description": "y", "price": 10, "category": "home", "icon": "?", "quantity": 5},
    ]))
    lines = CartStore(durable).lines
    assert [(line.product.id, line.quantity) for line in lines] == [(1, 2)]
