"""
Helpers that turn service results and errors into JSend JSON responses.
"""
import logging
from typing import Any

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from api.common.schemas import JSendResponse

logger = logging.getLogger(__name__)


def json_success(data: Any = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    body = JSendResponse.success(data)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def json_error(exc: Exception) -> JSONResponse:
    """
    Map an exception to a JSend error response.

    HTTPExceptions keep their status code and detail (plus structured data
    when the exception carries any); anything else becomes a 500.
    """
    if isinstance(exc, HTTPException):
        body = JSendResponse.error(
            message=str(exc.detail),
            code=exc.status_code,
            data=getattr(exc, "data", None)
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))

    logger.exception("Unhandled error while serving request")
    body = JSendResponse.error(message=str(exc), code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump(mode="json"))
