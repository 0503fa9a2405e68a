"""Static enumerations shared by the API and the input validators.

Transaction kinds, the categories allowed for each kind, and the payment methods offered by the client forms.
"""

from enum import StrEnum


class TransactionKind(StrEnum):
    """Whether money came in or went out."""

    REVENUE = "revenue"
    EXPENSE = "expense"


# Older clients send "transaction" or "income"/"expense".
KIND_ALIASES: dict[str, TransactionKind] = {
    "revenue": TransactionKind.REVENUE,
    "income": TransactionKind.REVENUE,
    "expense": TransactionKind.EXPENSE,
    "transaction": TransactionKind.EXPENSE,
}

REVENUE_CATEGORIES: tuple[str, ...] = ("Cash", "GCash", "Grab", "PayMaya", "Others")

EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Supplies",
    "Pastries",
    "Rent",
    "Utilities",
    "Manpower",
    "Marketing",
    "Others",
)

PAYMENT_METHODS: tuple[str, ...] = (
    "Cash",
    "Check",
    "Bank Transfer",
    "Credit Card",
    "GCash",
    "PayMaya",
    "Others",
)

ALLOWED_VAT_RATES: tuple[int, ...] = (0, 12)


def parse_kind(value: object) -> TransactionKind:
    """Normalize a kind or one of its aliases to a TransactionKind, raising ValueError otherwise."""
    if isinstance(value, TransactionKind):
        return value
    kind = KIND_ALIASES.get(str(value).strip().lower())
    if kind is None:
        msg = "Transaction type must be revenue or transaction"
        raise ValueError(msg)
    return kind


def categories_for(kind: TransactionKind) -> tuple[str, ...]:
    """Return the categories a transaction of ``kind`` may use."""
    return REVENUE_CATEGORIES if kind is TransactionKind.REVENUE else EXPENSE_CATEGORIES


def check_category(kind: TransactionKind, category: str) -> None:
    """Raise ValueError when ``category`` does not belong to ``kind``."""
    if category not in categories_for(kind):
        msg = f"Category {category} is not valid for {kind.value} transactions"
        raise ValueError(msg)
