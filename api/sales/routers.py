"""
This module contains the FastAPI routers for sales endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Path, Query
from starlette import status

from api.auth.dependencies import get_current_user_id
from api.common.config import get_settings
from api.common.responses import json_error, json_success
from api.common.utils import parse_flexible_date
from api.sales.schemas import SaleItemResponse, SaleListResponse, SaleRequest, SaleResultResponse
from api.sales.services import get_sale_by_id, get_sales, get_staff_recent_purchases, process_sale

router = APIRouter()


@router.post("", response_model=SaleResultResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(
    sale_request: SaleRequest,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Process a checkout.

    Args:
        sale_request: Cart lines, staff discount flag, staff and payment method
        idempotency_key: Optional key making retries of the same checkout safe
        user_id: The authenticated operator (injected)

    Returns:
        201 with the persisted sale wrapped in item, or a JSend error with the
        matching HTTP status
    """
    try:
        sale = await process_sale(sale_request, created_by=user_id, idempotency_key=idempotency_key)
        return json_success(SaleItemResponse(item=sale), status_code=status.HTTP_201_CREATED)
    except Exception as e:
        return json_error(e)


@router.get("", response_model=SaleListResponse)
async def list_sales(
    start_date: Optional[str] = Query(None, description="Start date filter (YYYY, YYYY-MM, or YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="End date filter (YYYY, YYYY-MM, or YYYY-MM-DD)"),
    staff_id: Optional[str] = Query(None, description="Staff ID filter"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Get sales newest first with optional date range and staff filters.
    """
    try:
        tz = get_settings().tz
        parsed_start = parse_flexible_date(start_date, tz=tz) if start_date else None
        parsed_end = parse_flexible_date(end_date, is_end_date=True, tz=tz) if end_date else None

        results = await get_sales(
            start_date=parsed_start,
            end_date=parsed_end,
            staff_id=staff_id,
            page=page,
            size=size
        )
        return json_success(results)
    except Exception as e:
        return json_error(e)


@router.get("/staff/{staff_id}/recent")
async def list_staff_recent_purchases(
    staff_id: str = Path(..., description="Staff member ID"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Get the most recent purchases made with a staff member's discount.
    """
    try:
        return json_success(await get_staff_recent_purchases(staff_id))
    except Exception as e:
        return json_error(e)


@router.get("/{sale_id}", response_model=SaleResultResponse)
async def get_sale(
    sale_id: str = Path(..., description="The ID of the sale to retrieve"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Get a sale by ID.
    """
    try:
        sale = await get_sale_by_id(sale_id)
        return json_success(SaleItemResponse(item=sale))
    except Exception as e:
        return json_error(e)
