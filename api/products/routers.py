"""
This module contains the FastAPI routers for product catalog endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Query, Path, Depends
from starlette import status

from api.auth.dependencies import get_current_user_id
from api.common.responses import json_error, json_success
from api.products.schemas import (
    ProductCreate, ProductUpdate, ProductDetailData, ProductResponse, ProductListResponse,
)
from api.products.services import (
    get_products, get_product_by_id, create_product, update_product, delete_product,
)

router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(
        owner: Optional[str] = Query(None, description="Only products with this owner tag"),
        page: int = Query(1, ge=1, description="Page number"),
        size: int = Query(100, ge=1, le=1000, description="Items per page"),
        user_id: str = Depends(get_current_user_id)
):
    """
    Get the product catalog sorted by name, optionally filtered by owner.
    """
    try:
        products_data = await get_products(owner=owner, page=page, size=size)
        return json_success(products_data)
    except Exception as e:
        return json_error(e)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
        product_id: str = Path(..., description="The ID of the product to retrieve"),
        user_id: str = Depends(get_current_user_id)
):
    """
    Get a product by its ID.
    """
    try:
        product = await get_product_by_id(product_id)
        return json_success(ProductDetailData(item=product))
    except Exception as e:
        return json_error(e)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product_endpoint(
        product: ProductCreate,
        user_id: str = Depends(get_current_user_id)
):
    """
    Create a new product.
    """
    try:
        created = await create_product(product)
        return json_success(ProductDetailData(item=created), status_code=status.HTTP_201_CREATED)
    except Exception as e:
        return json_error(e)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product_endpoint(
        product_update: ProductUpdate,
        product_id: str = Path(..., description="The ID of the product to update"),
        user_id: str = Depends(get_current_user_id)
):
    """
    Update an existing product; only the provided fields change.
    """
    try:
        updated = await update_product(product_id, product_update)
        return json_success(ProductDetailData(item=updated))
    except Exception as e:
        return json_error(e)


@router.delete("/{product_id}")
async def delete_product_endpoint(
        product_id: str = Path(..., description="The ID of the product to delete"),
        user_id: str = Depends(get_current_user_id)
):
    """
    Delete a product from the catalog.
    """
    try:
        result = await delete_product(product_id)
        return json_success(result)
    except Exception as e:
        return json_error(e)
