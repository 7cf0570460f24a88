# tests/test_checkout.py
from datetime import datetime, timezone

import pytest

from snapshop.cart import CartStore
from snapshop.checkout import checkout_summary, place_order
from snapshop.errors import ValidationFailed, EmptyCart
from snapshop.models import CheckoutForm
from snapshop.validators import validate_checkout, is_email, is_phone

GOOD = dict(
    name="Asha Rao",
    email="asha@example.com",
    phone="+91 (98) 7654-3210",
    address="12 MG Road, Indiranagar",
    city="Bengaluru",
    zip="560038",
    country="India",
)


def test_valid_form_has_no_errors():
    assert validate_checkout(CheckoutForm(**GOOD)) == {}


def test_short_address_is_the_only_error():
    errors = validate_checkout(CheckoutForm(**{**GOOD, "address": "12 Road"}))
    assert errors == {"address": "Please enter a complete address"}


def test_every_invalid_field_reported_together():
    form = CheckoutForm(**{**GOOD, "name": "A", "zip": "123", "email": "nope", "country": " "})
    assert set(validate_checkout(form)) == {"name", "zip", "email", "country"}


def test_empty_form_reports_all_seven_fields():
    assert set(validate_checkout(CheckoutForm())) == {"name", "email", "phone", "address", "city", "zip", "country"}


def test_fields_are_trimmed_before_length_checks():
    errors = validate_checkout(CheckoutForm(**{**GOOD, "city": "  B  "}))
    assert errors == {"city": "Please enter a valid city"}


@pytest.mark.parametrize("value,ok", [
    ("a@b.com", True),
    ("first.last@sub.domain.in", True),
    ("a@b", False),
    ("a b@c.com", False),
    ("@b.com", False),
    ("a@b.com\n", False),
])
def test_email_pattern(value, ok):
    assert is_email(value) is ok


@pytest.mark.parametrize("value,ok", [
    ("9876543210", True),
    ("+1 (555) 010-2030", True),
    ("12345", False),
    ("98765abcde12", False),
])
def test_phone_pattern(value, ok):
    assert is_phone(value) is ok


def test_summary_adds_shipping():
    store_lines = ()
    assert checkout_summary(store_lines, shipping=50) == {"subtotal": 0, "shipping": 50, "total": 50}


def test_place_order_snapshots_then_clears_cart(durable):
    cart = CartStore(durable)
    cart.add(1)
    cart.add(1)
    cart.add(6)
    when = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    order = place_order(cart, CheckoutForm(**{**GOOD, "name": "  Asha Rao "}), now=when, shipping=50)

    assert order.subtotal == 12499 * 2 + 3899
    assert order.total == order.subtotal + 50
    assert [(line.product.id, line.quantity) for line in order.lines] == [(1, 2), (6, 1)]
    assert order.customer["name"] == "Asha Rao"
    assert order.placed_at == when.isoformat()
    # cart cleared and persisted empty
    assert cart.lines == ()
    assert CartStore(durable).lines == ()


def test_invalid_form_keeps_cart(durable):
    cart = CartStore(durable)
    cart.add(2)
    with pytest.raises(ValidationFailed) as exc:
        place_order(cart, CheckoutForm(**{**GOOD, "phone": "123"}))
    assert exc.value.errors == {"phone": "Please enter a valid phone number"}
    assert cart.item_count() == 1


def test_empty_cart_cannot_be_ordered(durable):
    with pytest.raises(EmptyCart):
        place_order(CartStore(durable), CheckoutForm(**GOOD))
