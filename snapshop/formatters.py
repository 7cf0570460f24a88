# snapshop/formatters.py
from typing import Optional

from .config import settings


def group_indian(amount: int) -> str:
    """Digit grouping as used in India: last three digits, then pairs (1,24,990)."""
    sign = "-" if amount < 0 else ""
    digits = str(abs(amount))
    if len(digits) <= 3:
        return sign + digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return sign + ",".join(pairs + [tail])


def format_currency(amount: int, symbol: Optional[str] = None) -> str:
    if symbol is None:
        symbol = settings.currency
    return f"{symbol}{group_indian(amount)}"
