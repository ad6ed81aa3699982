"""
Unit price and water-bottle eligibility for a cart line.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from api.common.utils import to_decimal
from api.products.schemas import BottleSize, ProductInDB
from api.sales.constants import LARGE_BOTTLE_PHRASE, SMALL_BOTTLE_PHRASE
from api.sales.schemas import SaleItemRequest


class ResolvedLine(BaseModel):
    unit_price: Decimal
    bottle_size: Optional[BottleSize] = None

    @property
    def is_water_bottle(self) -> bool:
        return self.bottle_size is not None


def classify_bottle(name: str, bottle_size: Optional[BottleSize] = None) -> Optional[BottleSize]:
    """
    Decide whether a product is an allowance bottle and of which size.

    An explicit bottleSize tag on the product wins; otherwise the product
    name is matched case-insensitively against the bottle phrases.
    """
    if bottle_size is not None:
        return BottleSize(bottle_size)

    lowered = (name or "").lower()
    if LARGE_BOTTLE_PHRASE in lowered:
        return BottleSize.LARGE
    if SMALL_BOTTLE_PHRASE in lowered:
        return BottleSize.SMALL
    return None


def resolve_line(line: SaleItemRequest, staff_discount: bool,
                 product: Optional[ProductInDB] = None,
                 use_catalog_prices: bool = False) -> ResolvedLine:
    """
    Resolve the unit price to charge and the bottle class of one cart line.

    Args:
        line: The cart line from the request
        staff_discount: Whether the sale is priced at the staff rate
        product: The live product record, used for classification and,
            with use_catalog_prices, for pricing
        use_catalog_prices: Price from the product record instead of the
            prices declared in the request

    Returns:
        ResolvedLine with the Decimal unit price and the bottle size (or None)
    """
    if use_catalog_prices and product is not None:
        regular, staff = product.sellPrice, product.staffPrice
        unit_price = to_decimal(staff if staff_discount else regular)
    elif line.priceUsed is not None:
        # The till already applied its own price (e.g. a promotion)
        unit_price = to_decimal(line.priceUsed)
    else:
        unit_price = to_decimal(line.staffPrice if staff_discount else line.regularPrice)

    if product is not None:
        bottle_size = classify_bottle(product.name, product.bottleSize)
    else:
        bottle_size = classify_bottle(line.name)

    return ResolvedLine(unit_price=unit_price, bottle_size=bottle_size)
