"""
This module defines common Pydantic models used across multiple API modules.
These models represent shared data structures to ensure consistency throughout the application.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, TypeVar, Generic, List, Any, Dict

from pydantic import BaseModel, field_validator


class TimestampedModel(BaseModel):
    """
    Base for documents that track creation and modification times.
    Firestore returns its own datetime subclass; ISO strings are accepted too.
    """
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @field_validator('createdAt', 'updatedAt', mode='before')
    @classmethod
    def parse_datetime(cls, value):
        """Accept datetimes, ISO strings and 'YYYY-MM-DD HH:MM:SS' strings."""
        if value is None or isinstance(value, datetime):
            return value

        # Sentinels such as SERVER_TIMESTAMP are not resolved yet
        if not isinstance(value, str):
            return None

        try:
            return datetime.fromisoformat(value)
        except ValueError:
            try:
                return datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
            except ValueError:
                # Let Pydantic report the invalid string
                return value


class JSendStatus(str, Enum):
    """
    JSend status options (success, fail, error).
    """
    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"


T = TypeVar('T')


class PaginationResponse(BaseModel, Generic[T]):
    """
    A generic model for paginated responses.
    """
    items: List[T]
    total: int
    page: int
    size: int
    pages: int


class ItemResponse(BaseModel, Generic[T]):
    """
    Wrapper for single item responses.
    """
    item: T


class JSendResponse(BaseModel, Generic[T]):
    """
    Base JSend response format as per https://github.com/omniti-labs/jsend
    """
    status: JSendStatus
    data: Optional[T] = None
    message: Optional[str] = None
    code: Optional[int] = None  # For error responses

    @classmethod
    def success(cls, data: Any = None) -> 'JSendResponse':
        """Create a success response with data"""
        return cls(status=JSendStatus.SUCCESS, data=data)

    @classmethod
    def fail(cls, data: Dict[str, Any]) -> 'JSendResponse':
        """Create a fail response with validation errors or other data-related failures"""
        return cls(status=JSendStatus.FAIL, data=data)

    @classmethod
    def error(cls, message: str, code: Optional[int] = None, data: Any = None) -> 'JSendResponse':
        """Create an error response for system or unexpected errors"""
        return cls(status=JSendStatus.ERROR, message=message, code=code, data=data)


def paginate(items: List[Any], page: int, size: int) -> Dict[str, Any]:
    """
    Slice an already-filtered list into one page.

    Returns:
        dict: keyword arguments for a PaginationResponse subclass
    """
    total = len(items)
    offset = (page - 1) * size
    pages = (total + size - 1) // size if size > 0 else 0
    return {
        "items": items[offset:offset + size],
        "total": total,
        "page": page,
        "size": size,
        "pages": pages,
    }
