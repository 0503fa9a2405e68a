"""Main entrypoint and application factory for the BrewBooks API.

This module initializes the FastAPI application, configures logging, creates the transactions table on startup,
maps domain and validation errors to JSON responses, and exposes the Scalar API reference endpoint for interactive
OpenAPI documentation.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from scalar_fastapi import get_scalar_api_reference
from sqlalchemy.exc import SQLAlchemyError

from brewbooks.api.routes import router, transactions
from brewbooks.core.db import init_db
from brewbooks.core.errors import InvalidTransactionError, TransactionNotFoundError
from brewbooks.core.settings import get_settings
from brewbooks.core.utils import ROOT_LOGGER, ensure_dir, get_logger

logger = get_logger("brewbooks.app")

# Friendlier wording for the checks the entry form cares about, keyed by (field, pydantic error type).
FIELD_MESSAGES = {
    ("type", "missing"): "Please select a transaction type",
    ("category", "missing"): "Please select a category",
    ("category", "string_too_short"): "Please select a category",
    ("description", "missing"): "Please enter a description",
    ("description", "string_too_short"): "Please enter a description",
    ("amount", "missing"): "Please enter an amount",
    ("amount", "greater_than_equal"): "Amount must be greater than 0",
}


# --- Logging Setup ---
def setup_logging() -> None:
    """Configure logging to file and console, and ensure the log directory exists."""
    settings = get_settings()
    log_path = Path(settings.log_file)
    ensure_dir(log_path.parent)
    get_logger(ROOT_LOGGER)
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(settings.log_level.upper())
    # Add file handler for persistent logs (not colorized)
    if not any(isinstance(h, logging.FileHandler) for h in root.handlers):
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        root.addHandler(file_handler)


setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan event handler that creates the transactions table."""
    _ = app  # Silence unused argument warning
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception("Failed to create the transactions table")
        raise
    logger.info("Database ready")
    yield


def _field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        parts = loc[1:] if loc and loc[0] in ("body", "query", "path") else loc
        field = ".".join(parts) or (loc[0] if loc else "request")
        name = parts[-1] if parts else field
        if err["type"] == "value_error" and "error" in err.get("ctx", {}):
            message = str(err["ctx"]["error"])
        else:
            message = FIELD_MESSAGES.get((name, err["type"]), err["msg"])
        errors.setdefault(field, []).append(message)
    return errors


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return field-level messages for requests that fail validation."""
    errors = _field_errors(exc)
    logger.warning(f"Rejected {request.method} {request.url.path}: {errors}")
    first = next(iter(errors.values()))[0] if errors else "The given data was invalid."
    return JSONResponse(status_code=422, content={"message": first, "errors": errors})


async def invalid_transaction_handler(request: Request, exc: InvalidTransactionError) -> JSONResponse:
    """Return field-level messages for cross-field checks made by the store."""
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc.errors}")
    return JSONResponse(
        status_code=422,
        content={"message": str(exc), "errors": exc.errors},
    )


async def not_found_handler(request: Request, exc: TransactionNotFoundError) -> JSONResponse:
    """Map a missing or deleted transaction to 404."""
    logger.info(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "Transaction not found"})


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()
    application = FastAPI(
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        title=f"{settings.app_name} API",
        description="""
    The BrewBooks API records a coffee shop's revenue and expenses and serves the dashboard figures.

    **Endpoints:**
    - `GET /transactions`, `POST /transactions`: List or record transactions.
    - `GET|PUT|DELETE /transactions/{id}`: Read, update or soft-delete a transaction.
    - `GET /transactions/stats/dashboard`: Totals, breakdowns and tax figures for a period.
    - `GET /transactions/meta/categories`, `GET /transactions/meta/payment-methods`: Form choices.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
        version="1.0.0",
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.frontend_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(RequestValidationError, validation_error_handler)
    application.add_exception_handler(InvalidTransactionError, invalid_transaction_handler)
    application.add_exception_handler(TransactionNotFoundError, not_found_handler)
    application.include_router(transactions, prefix=settings.api_prefix)
    application.include_router(router)

    @application.get("/scalar", include_in_schema=False)
    async def scalar_docs() -> HTMLResponse:
        """Return Scalar API reference."""
        return get_scalar_api_reference(openapi_url=application.openapi_url, title=application.title)

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("brewbooks.main:app", host=settings.server_host, port=settings.server_port, reload=True)
