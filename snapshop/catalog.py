# snapshop/catalog.py
from typing import Iterable, Optional, Tuple

from .models import Product, FilterState

# The fixed catalog. Prices are in minor currency units.
PRODUCTS: Tuple[Product, ...] = (
    Product(id=1, title="Wireless Headphones",
            description="Premium noise-cancelling headphones with 30-hour battery life",
            price=12499, category="electronics", icon="🎧"),
    Product(id=2, title="Smart Watch",
            description="Fitness tracker with heart rate monitor and GPS",
            price=24999, category="electronics", icon="⌚"),
    Product(id=3, title="Leather Jacket",
            description="Genuine leather jacket with modern slim fit design",
            price=16999, category="fashion", icon="🧥"),
    Product(id=4, title="Running Shoes",
            description="Lightweight running shoes with cushioned sole",
            price=7499, category="fashion", icon="👟"),
    Product(id=5, title="Coffee Maker",
            description="Programmable coffee maker with thermal carafe",
            price=6799, category="home", icon="☕"),
    Product(id=6, title="Table Lamp",
            description="Modern LED desk lamp with adjustable brightness",
            price=3899, category="home", icon="💡"),
    Product(id=7, title="Bluetooth Speaker",
            description="Portable waterproof speaker with 360° sound",
            price=5899, category="electronics", icon="🔊"),
    Product(id=8, title="Designer Sunglasses",
            description="UV protection polarized sunglasses",
            price=10999, category="fashion", icon="🕶️"),
)

ALL = "all"


def get_product(catalog: Iterable[Product], product_id: int) -> Optional[Product]:
    for p in catalog:
        if p.id == product_id:
            return p
    return None


def categories(catalog: Iterable[Product]) -> Tuple[str, ...]:
    seen = []
    for p in catalog:
        if p.category not in seen:
            seen.append(p.category)
    return tuple(seen)


def matches(product: Product, filter_state: FilterState) -> bool:
    if filter_state.category != ALL and product.category != filter_state.category:
        return False
    term = filter_state.query.lower()
    if not term:
        return True
    return term in product.title.lower() or term in product.description.lower()


def visible_products(catalog: Iterable[Product], filter_state: FilterState) -> Tuple[Product, ...]:
    """Products passing both the category filter and the text query, in catalog order.
    An empty result is a normal state, not an error."""
    return tuple(p for p in catalog if matches(p, filter_state))
