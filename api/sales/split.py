"""
Revenue split owed to the partner whose products are sold at the till.
"""
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from api.common.utils import to_decimal


def line_split(owner: Optional[str], unit_price, quantity: int, partner: str) -> Decimal:
    """Partner contribution of one line: price x quantity when the partner owns the product."""
    if owner != partner:
        return Decimal("0")
    return to_decimal(unit_price) * quantity


def partner_split(lines: Iterable[Tuple[Optional[str], object, int]], partner: str) -> Decimal:
    """
    Sum the partner contribution over (owner, unit_price, quantity) lines.

    Free allowance units do not reduce the partner's share.
    """
    return sum((line_split(owner, price, quantity, partner) for owner, price, quantity in lines),
               Decimal("0"))
