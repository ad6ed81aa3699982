import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette import status

from api.common.config import configure_logging, get_settings
from api.common.database import initialize_firebase
from api.common.schemas import JSendResponse

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Firebase is initialized once per process, before the first request
    initialize_firebase(settings)
    yield


app = FastAPI(title="Gym POS API", lifespan=lifespan)

from api.products.routers import router as products_router
from api.staffs.routers import router as staff_router
from api.sales.routers import router as sales_router

app.include_router(products_router, prefix="/products", tags=["products"])
app.include_router(staff_router, prefix="/staffs", tags=["staffs"])
app.include_router(sales_router, prefix="/sales", tags=["sales"])


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as a 400 JSend fail response."""
    logger.info(f"Rejected malformed request to {request.url.path}")
    body = JSendResponse.fail({"errors": jsonable_encoder(exc.errors())})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(mode="json"))


@app.get("/")
def read_root():
    """Root endpoint for the API.
    Returns:
        A simple message indicating the API is running.
    """
    return {"message": "Gym POS API"}


if __name__ == "__main__":
    # Set port from environment variable or default to 8000
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
