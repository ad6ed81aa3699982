"""
This module contains the business logic for sales: checkout and sale history.
"""
import asyncio
import logging
import re
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException, status
from google.cloud.firestore import Query

from api.common import database
from api.common.config import Settings, get_settings
from api.common.exceptions import (
    AllowanceExceeded, ProductNotFound, SaleError, SaleTimeout, SaleValidationError,
)
from api.common.schemas import paginate
from api.common.utils import round_money, to_decimal
from api.products.ledger import StockLedger
from api.products.schemas import BottleSize
from api.sales.constants import IDEMPOTENCY_KEY_PATTERN, RECENT_PURCHASES_LIMIT
from api.sales.pricing import resolve_line
from api.sales.schemas import SaleItem, SaleRequest, SaleResponse, SalesData
from api.sales.split import partner_split
from api.staffs.ledger import AllowanceLedger

logger = logging.getLogger(__name__)


def sale_from_snapshot(doc) -> SaleResponse:
    """Build a SaleResponse from a Firestore document snapshot."""
    sale_data = doc.to_dict() or {}
    sale_data['id'] = doc.id
    return SaleResponse(**sale_data)


def _check_deadline(deadline: float, settings: Settings) -> None:
    if time.monotonic() > deadline:
        raise SaleTimeout(settings.sale_timeout_seconds)


def _execute_sale(transaction, db, request: SaleRequest, created_by: str,
                  idempotency_key: Optional[str], settings: Settings, deadline: float) -> SaleResponse:
    """
    Validate, price and record one sale inside a Firestore transaction.

    All reads (replayed sale, staff, products) happen before the first write.
    Stock and allowance changes are staged and written together with the
    sale document, so any exception leaves the database untouched. Past the
    monotonic deadline nothing is staged and SaleTimeout aborts the attempt.
    """
    sales_ref = db.collection(database.SALES_COLLECTION)
    if idempotency_key:
        sale_ref = sales_ref.document(idempotency_key)
        existing = sale_ref.get(transaction=transaction)
        if existing.exists:
            logger.info(f"Replaying sale {idempotency_key} for repeated idempotency key")
            return sale_from_snapshot(existing)
    else:
        sale_ref = sales_ref.document()

    stock = StockLedger(db, transaction)
    allowance = AllowanceLedger(db, transaction)

    # Resolve the staff member before any product is touched
    staff = None
    if request.staffDiscount:
        staff = allowance.resolve_staff(request.staffId, request.staffName)

    use_catalog_prices = not settings.trust_client_prices
    resolved_lines = []
    first_line_of_size = {}
    for index, line in enumerate(request.items):
        _check_deadline(deadline, settings)
        product = stock.load(line.productId)
        if product is None:
            raise ProductNotFound(line.productId, line.name)

        stock.check_and_reserve(product, line.quantity)

        resolved = resolve_line(line, request.staffDiscount, product, use_catalog_prices)
        if resolved.bottle_size is not None:
            first_line_of_size.setdefault(resolved.bottle_size, index)
        resolved_lines.append((line, product, resolved))

    # One free unit per bottle size per sale; an empty allowance rejects the sale
    free_line_indexes = {}
    if staff is not None:
        for bottle_size in (BottleSize.LARGE, BottleSize.SMALL):
            if bottle_size not in first_line_of_size:
                continue
            if not allowance.consume_if_available(staff, bottle_size):
                raise AllowanceExceeded(staff.name, bottle_size.value)
            free_line_indexes[first_line_of_size[bottle_size]] = bottle_size

    subtotal = Decimal("0")
    allowance_discount = Decimal("0")
    items = []
    for index, (line, product, resolved) in enumerate(resolved_lines):
        subtotal += resolved.unit_price * line.quantity
        free_quantity = 1 if index in free_line_indexes else 0
        allowance_discount += resolved.unit_price * free_quantity

        if use_catalog_prices:
            regular_price, staff_price = product.sellPrice, product.staffPrice
        else:
            regular_price, staff_price = line.regularPrice, line.staffPrice

        items.append(SaleItem(
            productId=product.id,
            name=product.name,
            quantity=line.quantity,
            regularPrice=round_money(to_decimal(regular_price)),
            staffPrice=round_money(to_decimal(staff_price)),
            priceUsed=round_money(resolved.unit_price),
            freeQuantity=free_quantity,
            paidQuantity=line.quantity - free_quantity,
            category=line.category or product.category,
            subcategory=line.subcategory or product.subcategory,
        ))

    total = max(Decimal("0"), subtotal - allowance_discount)
    sharoofa_amount = partner_split(
        ((product.owner, resolved.unit_price, line.quantity) for line, product, resolved in resolved_lines),
        settings.partner_owner_name,
    )

    if request.total is not None and to_decimal(request.total) != total.quantize(Decimal("0.01")):
        logger.warning(f"Client total {request.total} differs from computed total {round_money(total)}")

    granted = set(free_line_indexes.values())
    sale_data = {
        "items": [item.model_dump(mode="json") for item in items],
        "subtotal": round_money(subtotal),
        "allowanceDiscount": round_money(allowance_discount),
        "total": round_money(total),
        "staffDiscount": request.staffDiscount,
        "staffId": staff.id if staff else None,
        "staffName": staff.name if staff else None,
        "largeWaterBottle": BottleSize.LARGE in granted,
        "smallWaterBottle": BottleSize.SMALL in granted,
        "largeWaterBottlesFree": int(BottleSize.LARGE in granted),
        "smallWaterBottlesFree": int(BottleSize.SMALL in granted),
        "paymentMethod": request.paymentMethod.value,
        "createdBy": created_by,
        "sharoofaAmount": round_money(sharoofa_amount),
        "idempotencyKey": idempotency_key,
        "createdAt": datetime.now(settings.tz),
    }

    _check_deadline(deadline, settings)
    stock.commit()
    allowance.commit()
    transaction.set(sale_ref, sale_data)

    return SaleResponse(id=sale_ref.id, **sale_data)


async def process_sale(request: SaleRequest, created_by: str,
                       idempotency_key: Optional[str] = None) -> SaleResponse:
    """
    Process a checkout: validate stock, apply staff pricing and the bottle
    allowance, decrement stock and record the sale, all in one transaction.

    Args:
        request: The validated checkout request
        created_by: ID of the authenticated operator
        idempotency_key: Optional client key; a repeated key returns the
            sale recorded the first time instead of selling again

    Returns:
        SaleResponse for the persisted sale

    Raises:
        SaleError: For rejected sales (validation, missing product or staff,
            insufficient stock, exhausted allowance, timeout)
        HTTPException: 500 for unexpected persistence failures
    """
    settings = get_settings()

    if idempotency_key is not None and not re.match(IDEMPOTENCY_KEY_PATTERN, idempotency_key):
        raise SaleValidationError(
            "Invalid Idempotency-Key: use 8-128 letters, digits, '-' or '_'"
        )

    # The deadline is enforced inside the transaction: a worker thread cannot
    # be cancelled, so the transaction itself must refuse to commit late
    deadline = time.monotonic() + settings.sale_timeout_seconds

    try:
        db = database.get_firestore_client()
        sale = await asyncio.to_thread(
            database.run_in_transaction, db, _execute_sale,
            db, request, created_by, idempotency_key, settings, deadline,
        )
    except SaleTimeout:
        logger.warning(f"Sale timed out after {settings.sale_timeout_seconds}s (key={idempotency_key})")
        raise
    except SaleError as e:
        logger.warning(f"Sale rejected: {e.detail}")
        raise
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("Failed to process sale")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to process sale: {str(exc)}"
        )

    logger.info(
        f"Sale {sale.id} recorded: total={sale.total} items={len(sale.items)} "
        f"staffDiscount={sale.staffDiscount} sharoofaAmount={sale.sharoofaAmount}"
    )
    return sale


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def get_sales(start_date: Optional[datetime] = None, end_date: Optional[datetime] = None,
                    staff_id: Optional[str] = None, page: int = 1, size: int = 20) -> SalesData:
    """
    List sales newest first, optionally within a date range and for one staff member.

    Date filters are applied in memory to avoid composite index requirements.
    """
    try:
        db = database.get_firestore_client()
        query = db.collection(database.SALES_COLLECTION)
        if staff_id:
            query = query.where("staffId", "==", staff_id)
        query = query.order_by("createdAt", direction=Query.DESCENDING)

        sales = []
        for doc in query.stream():
            sale = sale_from_snapshot(doc)
            created_at = _as_aware(sale.createdAt)
            if start_date and created_at < _as_aware(start_date):
                continue
            if end_date and created_at > _as_aware(end_date):
                continue
            sales.append(sale)

        return SalesData(**paginate(sales, page, size))

    except Exception as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(exc)}"
        )


async def get_sale_by_id(sale_id: str) -> SaleResponse:
    """
    Get one sale by ID.

    Raises:
        HTTPException: 404 if the sale does not exist
    """
    try:
        db = database.get_firestore_client()
        doc = db.collection(database.SALES_COLLECTION).document(sale_id).get()
        if not doc.exists:
            raise HTTPException(
                status_code=404,
                detail=f"Sale with ID {sale_id} not found"
            )
        return sale_from_snapshot(doc)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(exc)}"
        )


async def get_staff_recent_purchases(staff_id: str) -> List[SaleResponse]:
    """Most recent sales made with a staff member's discount."""
    try:
        db = database.get_firestore_client()
        query = (
            db.collection(database.SALES_COLLECTION)
            .where("staffId", "==", staff_id)
            .order_by("createdAt", direction=Query.DESCENDING)
            .limit(RECENT_PURCHASES_LIMIT)
        )
        return [sale_from_snapshot(doc) for doc in query.stream()]
    except Exception as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(exc)}"
        )
