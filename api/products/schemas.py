"""
This module defines the Pydantic models used for product management.
These models are used for request and response validation and serialization.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from api.common.schemas import TimestampedModel, PaginationResponse, ItemResponse, JSendResponse


class BottleSize(str, Enum):
    """Water bottle sizes covered by the staff allowance."""
    LARGE = "large"
    SMALL = "small"


class ProductBase(BaseModel):
    """
    Base model for product data that is common to create, update and response models.
    """
    name: str = Field(..., min_length=1)
    description: str = ""
    sellPrice: float = Field(..., ge=0)
    staffPrice: float = Field(..., ge=0)
    costPrice: float = Field(0, ge=0)
    stock: int = Field(0, ge=0)
    owner: str = Field(..., min_length=1)
    category: Optional[str] = None
    subcategory: Optional[str] = None
    bottleSize: Optional[BottleSize] = None
    isAvailable: bool = True

    @field_validator('name', 'owner')
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ProductCreate(ProductBase):
    """
    Represents the request data for creating a new product.
    """
    pass


class ProductUpdate(BaseModel):
    """
    Represents the request data for updating an existing product.
    All fields are optional as only provided fields will be updated.
    """
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    sellPrice: Optional[float] = Field(None, ge=0)
    staffPrice: Optional[float] = Field(None, ge=0)
    costPrice: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    owner: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    subcategory: Optional[str] = None
    bottleSize: Optional[BottleSize] = None
    isAvailable: Optional[bool] = None


class ProductInDB(ProductBase, TimestampedModel):
    """
    Represents a product as stored in the database, including all metadata.
    """
    id: str


class ProductsData(PaginationResponse[ProductInDB]):
    """
    Represents a paginated list of products for response.
    """
    pass


class ProductDetailData(ItemResponse[ProductInDB]):
    """
    Container for a single product item.
    """
    pass


class ProductResponse(JSendResponse[ProductDetailData]):
    """Response model for single product operations."""
    pass


class ProductListResponse(JSendResponse[ProductsData]):
    """Response model for product list operations."""
    pass
