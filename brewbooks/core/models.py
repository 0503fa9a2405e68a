"""Pydantic models for the BrewBooks API.

Request models validate incoming transaction data at the boundary (accepting both snake_case and camelCase keys);
response models translate stored records and aggregates into the camelCase JSON the web and mobile clients read.
"""

from datetime import date as Date
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from brewbooks.core.catalog import ALLOWED_VAT_RATES, TransactionKind, check_category, parse_kind
from brewbooks.core.db import TransactionRecord
from brewbooks.core.utils import to_utc_iso

CENT = Decimal("0.01")


def _validate_vat(value: int) -> int:
    if value not in ALLOWED_VAT_RATES:
        msg = "VAT must be 0 or 12"
        raise ValueError(msg)
    return value


def _to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


Kind = Annotated[TransactionKind, BeforeValidator(parse_kind)]
Amount = Annotated[Decimal, Field(ge=Decimal("0.01"), le=Decimal("9999999999.99")), AfterValidator(_to_cents)]
VatRate = Annotated[int, AfterValidator(_validate_vat)]
ShortText = Annotated[str, Field(max_length=255)]
Category = Annotated[str, Field(min_length=1, max_length=255)]
Description = Annotated[str, Field(min_length=1, max_length=1000)]


class CamelModel(BaseModel):
    """Base model that reads either naming style and writes camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionCreate(CamelModel):
    """Fields accepted when recording a new transaction."""

    type: Kind
    category: Category
    description: Description
    amount: Amount
    date: Date | None = None
    payment_method: ShortText | None = None
    transaction_number: ShortText | None = None
    receipt_number: ShortText | None = None
    tin_number: ShortText | None = None
    vat: VatRate | None = None
    supplier_name: Annotated[str, Field(max_length=500)] | None = None
    supplier_address: Annotated[str, Field(max_length=1000)] | None = None

    @field_validator("category")
    @classmethod
    def category_matches_kind(cls, value: str, info: ValidationInfo) -> str:
        kind = info.data.get("type")
        if kind is not None:
            check_category(kind, value)
        return value


class TransactionUpdate(CamelModel):
    """Partial update; only the fields present in the request are applied."""

    type: Kind | None = None
    category: Category | None = None
    description: Description | None = None
    amount: Amount | None = None
    date: Date | None = None
    payment_method: ShortText | None = None
    transaction_number: ShortText | None = None
    receipt_number: ShortText | None = None
    tin_number: ShortText | None = None
    vat: VatRate | None = None
    supplier_name: Annotated[str, Field(max_length=500)] | None = None
    supplier_address: Annotated[str, Field(max_length=1000)] | None = None


class TransactionOut(CamelModel):
    """A stored transaction as the clients see it."""

    id: int
    date: Date
    type: TransactionKind
    category: str
    description: str
    amount: float
    payment_method: str | None
    transaction_number: str | None
    receipt_number: str | None
    tin_number: str | None
    vat: int
    supplier_name: str | None
    supplier_address: str | None
    vat_amount: float
    amount_with_vat: float
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "TransactionOut":
        """Build the response model from an ORM record, adding the VAT-derived amounts."""
        return cls(
            id=record.id,
            date=record.date,
            type=record.kind,
            category=record.category,
            description=record.description,
            amount=record.amount,
            payment_method=record.payment_method,
            transaction_number=record.transaction_number,
            receipt_number=record.receipt_number,
            tin_number=record.tin_number,
            vat=record.vat,
            supplier_name=record.supplier_name,
            supplier_address=record.supplier_address,
            vat_amount=record.vat_amount,
            amount_with_vat=record.amount_with_vat,
            created_at=to_utc_iso(record.created_at),
            updated_at=to_utc_iso(record.updated_at),
        )


class TransactionEnvelope(BaseModel):
    """Single transaction wrapped in a ``data`` key."""

    data: TransactionOut


class PageMeta(BaseModel):
    """Pagination details for a paginated listing."""

    current_page: int
    per_page: int
    total: int
    last_page: int


class TransactionList(BaseModel):
    """Transactions wrapped in a ``data`` key, with ``meta`` when paginated."""

    data: list[TransactionOut]
    meta: PageMeta | None = None


class DeletedMessage(BaseModel):
    """Confirmation returned after a delete."""

    message: str


# --- Dashboard statistics ---


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Period(_FromAttributes):
    """Date range the statistics cover."""

    start_date: Date
    end_date: Date


class Totals(_FromAttributes):
    """Revenue, expense and the difference between them."""

    revenue: float
    expense: float
    balance: float


class BreakdownItemOut(_FromAttributes):
    """One group of a breakdown."""

    key: str
    amount: float
    count: int
    percentage: int


class SalesByMethod(_FromAttributes):
    """Revenue per sales channel."""

    cash: float
    gcash: float
    grab: float
    paymaya: float
    others: float
    total: float
    breakdown: list[BreakdownItemOut]


class Taxes(_FromAttributes):
    """Tax figures derived from gross sales."""

    gross_sales: float
    vat_rate: float
    vat_amount: float
    withholding_rate: float
    withholding_amount: float
    total_taxes: float
    net_sales: float


class DashboardStats(_FromAttributes):
    """Everything the dashboard shows for a period."""

    period: Period
    totals: Totals
    sales_by_method: SalesByMethod
    expenses_by_category: list[BreakdownItemOut]
    taxes: Taxes
    transaction_count: int


class CategoryList(BaseModel):
    """Categories available for a transaction kind."""

    type: TransactionKind
    categories: list[str]


class PaymentMethodList(BaseModel):
    """Payment methods offered by the entry form."""

    payment_methods: list[str]


class Health(BaseModel):
    """Liveness check payload."""

    status: str
    timestamp: str
    app: str
