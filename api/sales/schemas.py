"""
This module defines the Pydantic models used for sales.
These models are used for request and response validation and serialization.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from api.common.schemas import PaginationResponse, ItemResponse, JSendResponse


class PaymentMethod(str, Enum):
    """Payment methods accepted at the till."""
    CASH = "Cash"
    INSTAPAY = "InstaPay"


class SaleItemRequest(BaseModel):
    """
    One cart line as sent by the cashier UI.
    """
    productId: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    regularPrice: float = Field(..., ge=0)
    staffPrice: float = Field(..., ge=0)
    priceUsed: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    subcategory: Optional[str] = None


class SaleRequest(BaseModel):
    """
    Checkout request. subtotal and total are what the client computed;
    the server recomputes both.
    """
    items: List[SaleItemRequest] = Field(..., min_length=1)
    subtotal: Optional[float] = Field(None, ge=0)
    staffDiscount: bool = False
    staffId: Optional[str] = None
    staffName: Optional[str] = None
    paymentMethod: PaymentMethod
    total: Optional[float] = Field(None, ge=0)

    @field_validator('staffId', 'staffName')
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class SaleItem(BaseModel):
    """
    A line of a persisted sale, with price snapshots.
    """
    productId: str
    name: str
    quantity: int
    regularPrice: float
    staffPrice: float
    priceUsed: float
    freeQuantity: int = 0
    paidQuantity: int
    category: Optional[str] = None
    subcategory: Optional[str] = None


class SaleResponse(BaseModel):
    """
    A persisted sale.
    """
    id: str
    items: List[SaleItem]
    subtotal: float
    allowanceDiscount: float = 0
    total: float
    staffDiscount: bool = False
    staffId: Optional[str] = None
    staffName: Optional[str] = None
    largeWaterBottle: bool = False
    smallWaterBottle: bool = False
    largeWaterBottlesFree: int = 0
    smallWaterBottlesFree: int = 0
    paymentMethod: PaymentMethod
    createdBy: str
    sharoofaAmount: float = 0
    idempotencyKey: Optional[str] = None
    createdAt: datetime


class SaleItemResponse(ItemResponse[SaleResponse]):
    """
    Wrapper for single sale response.
    """
    pass


class SalesData(PaginationResponse[SaleResponse]):
    """
    Represents a paginated list of sales.
    """
    pass


class SaleResultResponse(JSendResponse[SaleItemResponse]):
    """Response model for single sale operations."""
    pass


class SaleListResponse(JSendResponse[SalesData]):
    """Response model for sale list operations."""
    pass
