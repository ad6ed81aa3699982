"""
Common utility functions shared across the application.
"""

import calendar
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from fastapi import HTTPException, status

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """
    Convert a stored or declared amount to Decimal without float noise.

    Args:
        value: int, float, str or Decimal amount (None counts as zero)

    Returns:
        Decimal: The exact decimal value of the amount's string form
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> float:
    """Round to cents (half-up) for persistence and display."""
    return float(to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def parse_flexible_date(date_str: str, is_end_date: bool = False, tz=None) -> Optional[datetime]:
    """
    Parse flexible date formats:
    - "2025" -> January 1, 2025 00:00:00 (start) or December 31, 2025 23:59:59 (end)
    - "2025-07" -> July 1, 2025 00:00:00 (start) or July 31, 2025 23:59:59 (end)
    - "2025-07-16" -> July 16, 2025 00:00:00 (start) or July 16, 2025 23:59:59 (end)

    Args:
        date_str: The date string to parse
        is_end_date: If True, returns end of period; if False, returns start of period
        tz: Optional pytz timezone to localize the result in
    """
    if not date_str:
        return None

    date_str = date_str.strip()

    # Year only (e.g., "2025")
    if len(date_str) == 4 and date_str.isdigit():
        year = int(date_str)
        if is_end_date:
            parsed = datetime(year, 12, 31, 23, 59, 59)
        else:
            parsed = datetime(year, 1, 1, 0, 0, 0)

    # Year-month (e.g., "2025-07")
    elif len(date_str) == 7 and date_str.count('-') == 1:
        try:
            year, month = (int(part) for part in date_str.split('-'))
            if is_end_date:
                last_day = calendar.monthrange(year, month)[1]
                parsed = datetime(year, month, last_day, 23, 59, 59)
            else:
                parsed = datetime(year, month, 1, 0, 0, 0)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid date format: {date_str}. Expected format: YYYY-MM"
            )

    # Full date (e.g., "2025-07-16")
    elif len(date_str) == 10 and date_str.count('-') == 2:
        try:
            parsed = datetime.strptime(date_str, "%Y-%m-%d")
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid date format: {date_str}. Expected format: YYYY-MM-DD"
            )
        if is_end_date:
            parsed = parsed.replace(hour=23, minute=59, second=59)

    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date format: {date_str}. Supported formats: YYYY, YYYY-MM, YYYY-MM-DD"
        )

    if tz is not None:
        parsed = tz.localize(parsed)
    return parsed
