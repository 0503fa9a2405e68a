"""FastAPI endpoints for the BrewBooks API.

This module defines the transaction CRUD routes, the dashboard statistics route, the static catalog lookups used by
the entry forms, and the health check. Route handlers only translate HTTP into ``TransactionStore`` calls.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from brewbooks.api.dependencies import get_settings, get_store
from brewbooks.core.catalog import PAYMENT_METHODS, TransactionKind, categories_for, parse_kind
from brewbooks.core.errors import InvalidTransactionError
from brewbooks.core.models import (
    CategoryList,
    DashboardStats,
    DeletedMessage,
    Health,
    PageMeta,
    PaymentMethodList,
    TransactionCreate,
    TransactionEnvelope,
    TransactionList,
    TransactionOut,
    TransactionUpdate,
)
from brewbooks.core.utils import get_logger, utcnow_iso
from brewbooks.services.transaction_store import TransactionStore

router = APIRouter()
transactions = APIRouter(prefix="/transactions", tags=["transactions"])
logger = get_logger("brewbooks.api")

NOT_FOUND_EXAMPLE = {
    "description": "Transaction not found or deleted.",
    "content": {"application/json": {"example": {"message": "Transaction not found"}}},
}
VALIDATION_EXAMPLE = {
    "description": "Validation failed.",
    "content": {
        "application/json": {
            "example": {
                "message": "Amount must be greater than 0",
                "errors": {"amount": ["Amount must be greater than 0"]},
            }
        }
    },
}


def _kind_filter(value: str | None, field: str = "type") -> TransactionKind | None:
    if value is None:
        return None
    try:
        return parse_kind(value)
    except ValueError as exc:
        logger.warning(f"Rejected {field} filter: {value!r}")
        raise InvalidTransactionError({field: [str(exc)]}) from exc


@transactions.get(
    "",
    response_model=TransactionList,
    response_model_exclude_unset=True,
    summary="List transactions",
    description=(
        "List transactions, newest first. Soft-deleted transactions are never listed.\n\n"
        "**Query parameters:**\n"
        "- `type`: `revenue` or `expense` (`income`/`transaction` are accepted as aliases).\n"
        "- `category`: exact category name.\n"
        "- `start_date`, `end_date`: inclusive date range; applied only when both are given.\n"
        "- `per_page`, `page`: paginate the result and include a `meta` block."
    ),
    responses={422: VALIDATION_EXAMPLE},
)
def list_transactions(
    type: str | None = None,  # noqa: A002
    category: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    per_page: int | None = Query(default=None, ge=1),
    page: int = Query(default=1, ge=1),
    store: TransactionStore = Depends(get_store),
) -> TransactionList:
    """List transactions, optionally filtered and paginated."""
    filters = {
        "kind": _kind_filter(type),
        "category": category,
        "start_date": start_date,
        "end_date": end_date,
    }
    if per_page is None:
        return TransactionList(data=[TransactionOut.from_record(r) for r in store.list(**filters)])
    result = store.paginate(per_page=per_page, page=page, **filters)
    return TransactionList(
        data=[TransactionOut.from_record(r) for r in result.items],
        meta=PageMeta(
            current_page=result.page,
            per_page=result.per_page,
            total=result.total,
            last_page=result.last_page,
        ),
    )


@transactions.post(
    "",
    response_model=TransactionEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transaction",
    description=(
        "Create a revenue or expense transaction. `type`, `category`, `description` and `amount` are required; "
        "keys may be snake_case or camelCase.\n\n"
        "Omitted values are filled in: `transactionNumber` and `receiptNumber` are generated, `paymentMethod` "
        "defaults to the category, `vat` to 0 and `date` to today."
    ),
    response_description="The stored transaction, including `vatAmount` and `amountWithVat`.",
    responses={422: VALIDATION_EXAMPLE},
)
def create_transaction(payload: TransactionCreate, store: TransactionStore = Depends(get_store)) -> TransactionEnvelope:
    """Create a transaction."""
    record = store.create(payload)
    return TransactionEnvelope(data=TransactionOut.from_record(record))


@transactions.get(
    "/stats/dashboard",
    response_model=DashboardStats,
    summary="Dashboard statistics",
    description=(
        "Totals, revenue per sales channel, expenses per category and tax figures (12% VAT, 2% withholding) "
        "for a date range. Defaults to the current calendar month."
    ),
)
def dashboard_stats(
    start_date: date | None = None,
    end_date: date | None = None,
    store: TransactionStore = Depends(get_store),
) -> DashboardStats:
    """Aggregate the transactions of a period for the dashboard."""
    summary = store.stats(start_date, end_date)
    return DashboardStats.model_validate(summary, from_attributes=True)


@transactions.get("/meta/categories", response_model=CategoryList, summary="Categories for a transaction type")
def categories(type: str = "revenue") -> CategoryList:  # noqa: A002
    """Return the categories the entry form offers for ``type``."""
    kind = _kind_filter(type)
    return CategoryList(type=kind, categories=list(categories_for(kind)))


@transactions.get("/meta/payment-methods", response_model=PaymentMethodList, summary="Payment methods")
def payment_methods() -> PaymentMethodList:
    """Return the payment methods the entry form offers."""
    return PaymentMethodList(payment_methods=list(PAYMENT_METHODS))


@transactions.get(
    "/{transaction_id}",
    response_model=TransactionEnvelope,
    summary="Get a transaction",
    responses={404: NOT_FOUND_EXAMPLE},
)
def get_transaction(transaction_id: int, store: TransactionStore = Depends(get_store)) -> TransactionEnvelope:
    """Fetch a single transaction."""
    return TransactionEnvelope(data=TransactionOut.from_record(store.get(transaction_id)))


@transactions.put(
    "/{transaction_id}",
    response_model=TransactionEnvelope,
    summary="Update a transaction",
    description="Apply a partial update. Only the fields present in the body change.",
    responses={404: NOT_FOUND_EXAMPLE, 422: VALIDATION_EXAMPLE},
)
def update_transaction(
    transaction_id: int,
    payload: TransactionUpdate,
    store: TransactionStore = Depends(get_store),
) -> TransactionEnvelope:
    """Update a transaction."""
    record = store.update(transaction_id, payload)
    return TransactionEnvelope(data=TransactionOut.from_record(record))


@transactions.delete(
    "/{transaction_id}",
    response_model=DeletedMessage,
    summary="Delete a transaction",
    description="Soft-delete a transaction. It no longer appears in listings or statistics.",
    responses={
        200: {
            "description": "Transaction deleted.",
            "content": {"application/json": {"example": {"message": "Transaction deleted successfully"}}},
        },
        404: NOT_FOUND_EXAMPLE,
    },
)
def delete_transaction(transaction_id: int, store: TransactionStore = Depends(get_store)) -> DeletedMessage:
    """Delete a transaction."""
    store.delete(transaction_id)
    return DeletedMessage(message="Transaction deleted successfully")


@router.get(
    "/health",
    response_model=Health,
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> Health:
    """Health check endpoint."""
    return Health(status="ok", timestamp=utcnow_iso(), app=get_settings().app_name)
