# snapshop/checkout.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from .cart import CartStore, Lines, total
from .config import settings
from .errors import ValidationFailed, EmptyCart
from .models import CheckoutForm, Order
from .validators import validate_checkout, clean_checkout

logger = logging.getLogger(__name__)


def checkout_summary(lines: Lines, shipping: Optional[int] = None) -> Dict[str, int]:
    if shipping is None:
        shipping = settings.shipping
    subtotal = total(lines)
    return {"subtotal": subtotal, "shipping": shipping, "total": subtotal + shipping}


def place_order(cart: CartStore, form: CheckoutForm, now: Optional[datetime] = None,
                shipping: Optional[int] = None) -> Order:
    """Simulated submission: validate, snapshot cart + customer as an order,
    log it, then clear the cart. Nothing is sent anywhere."""
    errors = validate_checkout(form)
    if errors:
        logger.debug("checkout rejected: %s", sorted(errors))
        raise ValidationFailed(errors)
    if not cart.lines:
        raise EmptyCart()

    now = now or datetime.now(timezone.utc)
    summary = checkout_summary(cart.lines, shipping)
    order = Order(
        id=uuid.uuid4().hex,
        customer=clean_checkout(form).model_dump(),
        lines=cart.lines,
        placed_at=now.isoformat(),
        **summary,
    )
    logger.info("Order placed: %s items=%d total=%d", order.id, cart.item_count(), order.total)
    logger.debug("Order detail: %s", order.model_dump_json())

    cart.clear()
    return order
