# thriftstock/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from thriftstock.api.v1 import auth, categories, items, reports, staff, stock, suppliers
from thriftstock.core.config import settings
from thriftstock.core.database import get_db, init_db
from thriftstock.core.exceptions import InventoryError
from thriftstock.core.logging_setup import configure_logging

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s %s started (%s)", settings.PROJECT_NAME, settings.VERSION, settings.ENVIRONMENT)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Inventory management for a thrift store: catalog, suppliers, staff and stock movements",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==================== ERRORS ====================


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    message = "Invalid request"
    if details:
        message = f"Invalid request: {details[0]['field'] or 'body'} - {details[0]['message']}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "details": details},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )

# ==================== ROUTES ====================


@app.get(f"{settings.API_PREFIX}/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": "Failed to connect to database"},
        )

    return {
        "status": db_status,
        "message": "Database connection successful",
        "version": settings.VERSION,
    }


app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
app.include_router(categories.router, prefix=f"{settings.API_PREFIX}/categories", tags=["categories"])
app.include_router(items.router, prefix=f"{settings.API_PREFIX}/items", tags=["items"])
app.include_router(suppliers.router, prefix=f"{settings.API_PREFIX}/suppliers", tags=["suppliers"])
app.include_router(stock.router, prefix=settings.API_PREFIX, tags=["stock"])
app.include_router(staff.router, prefix=f"{settings.API_PREFIX}/staff", tags=["staff"])
app.include_router(reports.router, prefix=f"{settings.API_PREFIX}/reports", tags=["reports"])


if __name__ == "__main__":
    import uvicorn

    logger.info("Docs: http://localhost:%s/docs", settings.PORT)
    uvicorn.run("thriftstock.main:app", host="0.0.0.0", port=settings.PORT, reload=False)
