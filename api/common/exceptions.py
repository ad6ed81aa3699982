"""
Domain errors raised while processing a sale.

They subclass HTTPException so services can raise them and routers can
translate them into JSend error envelopes like any other HTTP error.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class SaleError(HTTPException):
    """Base class for sale rejections; carries optional structured data."""

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None,
                 status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=message)
        self.data = data


class SaleValidationError(SaleError):
    pass


class ProductNotFound(SaleError):
    def __init__(self, product_id: str, name: Optional[str] = None):
        super().__init__(
            f"Product not found: {name or product_id}",
            data={"productId": product_id, "name": name},
        )


class InsufficientStock(SaleError):
    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for product: {product_name} "
            f"(available {available}, requested {requested})",
            data={"productName": product_name, "available": available, "requested": requested},
        )
        self.available = available
        self.requested = requested


class StaffNotFound(SaleError):
    def __init__(self, staff_id: Optional[str] = None, staff_name: Optional[str] = None):
        super().__init__(
            "Staff member not found",
            data={"staffId": staff_id, "staffName": staff_name},
        )


class AllowanceExceeded(SaleError):
    def __init__(self, staff_name: str, bottle_size: str):
        super().__init__(
            f"No {bottle_size} water bottle allowance left for {staff_name}",
            data={"staffName": staff_name, "bottleSize": bottle_size},
        )


class SaleTimeout(SaleError):
    """The checkout did not finish in time; retry with the same idempotency key."""

    def __init__(self, seconds: float):
        super().__init__(
            f"Sale processing timed out after {seconds:g} seconds",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
