# snapshop/cart.py
import logging
from typing import Iterable, Optional, Tuple

from pydantic import ValidationError

from .catalog import PRODUCTS, get_product
from .database import KeyValueStore, CART_KEY, read_json_list, write_json
from .models import CartLine, Product

logger = logging.getLogger(__name__)

Lines = Tuple[CartLine, ...]

# ---------------------------
# Pure cart operations. Each returns a new tuple of lines; the input is untouched.
# ---------------------------


def find_line(lines: Lines, product_id: int) -> Optional[CartLine]:
    for line in lines:
        if line.product.id == product_id:
            return line
    return None


def add(lines: Lines, product_id: int, catalog: Iterable[Product] = PRODUCTS) -> Lines:
    product = get_product(catalog, product_id)
    if product is None:
        return lines
    if find_line(lines, product_id) is None:
        return lines + (CartLine(product=product, quantity=1),)
    return tuple(
        CartLine(product=line.product, quantity=line.quantity + 1) if line.product.id == product_id else line
        for line in lines
    )


def remove(lines: Lines, product_id: int) -> Lines:
    return tuple(line for line in lines if line.product.id != product_id)


def set_quantity_delta(lines: Lines, product_id: int, delta: int) -> Lines:
    line = find_line(lines, product_id)
    if line is None:
        return lines
    quantity = line.quantity + delta
    if quantity <= 0:
        return remove(lines, product_id)
    return tuple(
        CartLine(product=other.product, quantity=quantity) if other.product.id == product_id else other
        for other in lines
    )


def total(lines: Lines) -> int:
    return sum(line.line_total for line in lines)


def item_count(lines: Lines) -> int:
    return sum(line.quantity for line in lines)


# ---------------------------
# Persistence
# ---------------------------
def load_lines(store: KeyValueStore) -> Lines:
    out = []
    for raw in read_json_list(store, CART_KEY):
        if not isinstance(raw, dict):
            continue
        try:
            line = CartLine.from_storage(raw)
        except (KeyError, ValidationError) as e:
            logger.warning("dropping unreadable cart line %r: %s", raw, e)
            continue
        # keep the one-line-per-product invariant even for hand-edited storage
        if find_line(tuple(out), line.product.id) is None:
            out.append(line)
    return tuple(out)


def save_lines(store: KeyValueStore, lines: Lines) -> None:
    write_json(store, CART_KEY, [line.to_storage() for line in lines])


class CartStore:
    """The cart as the user sees it: restored at startup, saved after every mutation."""

    def __init__(self, store: KeyValueStore, catalog: Iterable[Product] = PRODUCTS):
        self.store = store
        self.catalog = tuple(catalog)
        self.lines: Lines = load_lines(store)

    def _commit(self, lines: Lines) -> Lines:
        self.lines = lines
        save_lines(self.store, lines)
        return lines

    def add(self, product_id: int) -> Lines:
        return self._commit(add(self.lines, product_id, self.catalog))

    def remove(self, product_id: int) -> Lines:
        return self._commit(remove(self.lines, product_id))

    def set_quantity_delta(self, product_id: int, delta: int) -> Lines:
        return self._commit(set_quantity_delta(self.lines, product_id, delta))

    def clear(self) -> Lines:
        return self._commit(())

    def total(self) -> int:
        return total(self.lines)

    def item_count(self) -> int:
        return item_count(self.lines)
