"""
SIMS API

Inventory, print queue and product pricing for a 3D printing shop. Every error
leaves the app as {"error": CODE, "message": ..., "details": {...}}.

Run locally:
    python -m sims.main
"""
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from sims.api.v1 import router as api_v1_router
from sims.core.settings import settings
from sims.db.session import init_db
from sims.exceptions import SIMSException
from sims.logging_config import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed pricing defaults before serving."""
    logger.info(
        "SIMS API starting",
        extra={"version": settings.VERSION, "environment": settings.ENVIRONMENT},
    )
    init_db()
    yield
    logger.info("SIMS API stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Filament stock, printers, print queue and product margins for a 3D printing shop",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)


def _error(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    content = {"error": code, "message": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


# ===================
# Exception Handlers
# ===================

@app.exception_handler(SIMSException)
async def sims_exception_handler(request: Request, exc: SIMSException):
    """Domain errors raised by the services (bad input, missing rows, margins)."""
    logger.warning(
        f"{request.method} {request.url.path} -> {exc.error_code}: {exc.message}",
        extra={"error_code": exc.error_code, "details": exc.details},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request bodies that do not match the schemas, one entry per bad field."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path} rejected by validation", extra={"errors": errors})
    return _error(422, "VALIDATION_ERROR", "Request validation failed", {"errors": errors})


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"{request.method} {request.url.path} database failure: {exc}", exc_info=True)
    return _error(500, "DATABASE_ERROR", "The database could not complete the request.")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} unhandled: {exc}", exc_info=True)
    return _error(500, "INTERNAL_ERROR", "Unexpected server error.")


app.include_router(api_v1_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    return {"message": "SIMS API", "version": settings.VERSION, "status": "online"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("sims.main:app", host="0.0.0.0", port=8175, reload=settings.DEBUG)
