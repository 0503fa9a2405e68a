"""Pure aggregation over transactions: totals, breakdowns and tax figures for the dashboard.

Every function accepts any iterable of objects exposing ``kind``, ``amount``, ``category`` and ``payment_method``
(ORM records in the service, plain objects in tests) and never mutates its input. Money is summed as Decimal.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from brewbooks.core.catalog import REVENUE_CATEGORIES, TransactionKind

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")

VAT_RATE = Decimal("0.12")
WITHHOLDING_RATE = Decimal("0.02")


@dataclass(frozen=True)
class BreakdownItem:
    key: str
    amount: Decimal
    count: int
    percentage: int


@dataclass(frozen=True)
class TaxSummary:
    vat: Decimal
    withholding: Decimal
    total: Decimal
    net: Decimal


@dataclass(frozen=True)
class Period:
    start_date: date
    end_date: date


@dataclass(frozen=True)
class Totals:
    revenue: Decimal
    expense: Decimal
    balance: Decimal


@dataclass(frozen=True)
class SalesByMethod:
    cash: Decimal
    gcash: Decimal
    grab: Decimal
    paymaya: Decimal
    others: Decimal
    total: Decimal
    breakdown: list[BreakdownItem]


@dataclass(frozen=True)
class Taxes:
    gross_sales: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    withholding_rate: Decimal
    withholding_amount: Decimal
    total_taxes: Decimal
    net_sales: Decimal


@dataclass(frozen=True)
class DashboardSummary:
    period: Period
    totals: Totals
    sales_by_method: SalesByMethod
    expenses_by_category: list[BreakdownItem]
    taxes: Taxes
    transaction_count: int


def _matching(transactions: Iterable[Any], kind: TransactionKind | None) -> list[Any]:
    if kind is None:
        return list(transactions)
    return [txn for txn in transactions if txn.kind == kind]


def _amount(txn: Any) -> Decimal:
    return Decimal(txn.amount or 0)


def percentage_of(part: Decimal, whole: Decimal) -> int:
    """Whole-number share of ``part`` in ``whole``, rounded half up; 0 when ``whole`` is 0."""
    if whole == ZERO:
        return 0
    return int((part / whole * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def total_by(transactions: Iterable[Any], kind: TransactionKind | None = None) -> Decimal:
    """Sum the amounts of the transactions of ``kind`` (all transactions when ``kind`` is None)."""
    return sum((_amount(txn) for txn in _matching(transactions, kind)), ZERO)


def breakdown_by(
    transactions: Iterable[Any],
    key: str | Callable[[Any], str],
    kind: TransactionKind | None = None,
) -> list[BreakdownItem]:
    """Group matching transactions by ``key`` and report each group's sum, count and share of the total.

    ``key`` is an attribute name or a callable. Groups are listed in the order their key first appears in
    ``transactions``; a missing key is grouped under an empty string.
    """
    key_fn = key if callable(key) else (lambda txn: getattr(txn, key))
    sums: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    for txn in _matching(transactions, kind):
        group = key_fn(txn) or ""
        sums[group] = sums.get(group, ZERO) + _amount(txn)
        counts[group] = counts.get(group, 0) + 1
    whole = sum(sums.values(), ZERO)
    return [
        BreakdownItem(key=group, amount=amount, count=counts[group], percentage=percentage_of(amount, whole))
        for group, amount in sums.items()
    ]


def compute_tax(gross_revenue: Decimal | int | str) -> TaxSummary:
    """VAT (12%) and withholding (2%) on gross revenue, with their total and the net left over."""
    gross = Decimal(gross_revenue)
    vat = (gross * VAT_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    withholding = (gross * WITHHOLDING_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    total = vat + withholding
    return TaxSummary(vat=vat, withholding=withholding, total=total, net=gross - total)


def balance(transactions: Iterable[Any]) -> Decimal:
    """Revenue minus expenses."""
    txns = list(transactions)
    return total_by(txns, TransactionKind.REVENUE) - total_by(txns, TransactionKind.EXPENSE)


def summarize(transactions: Iterable[Any], start_date: date, end_date: date) -> DashboardSummary:
    """Build the dashboard view for transactions already filtered to ``start_date``..``end_date``."""
    txns = list(transactions)
    revenue = total_by(txns, TransactionKind.REVENUE)
    expense = total_by(txns, TransactionKind.EXPENSE)

    channels = breakdown_by(txns, "category", TransactionKind.REVENUE)
    per_channel = {item.key: item.amount for item in channels}
    by_channel = {name: per_channel.get(name, ZERO) for name in REVENUE_CATEGORIES}

    tax = compute_tax(revenue)
    return DashboardSummary(
        period=Period(start_date=start_date, end_date=end_date),
        totals=Totals(revenue=revenue, expense=expense, balance=revenue - expense),
        sales_by_method=SalesByMethod(
            cash=by_channel["Cash"],
            gcash=by_channel["GCash"],
            grab=by_channel["Grab"],
            paymaya=by_channel["PayMaya"],
            others=by_channel["Others"],
            # Named channels only; Others is reported but left out of the total.
            total=by_channel["Cash"] + by_channel["GCash"] + by_channel["Grab"] + by_channel["PayMaya"],
            breakdown=channels,
        ),
        expenses_by_category=breakdown_by(txns, "category", TransactionKind.EXPENSE),
        taxes=Taxes(
            gross_sales=revenue,
            vat_rate=VAT_RATE,
            vat_amount=tax.vat,
            withholding_rate=WITHHOLDING_RATE,
            withholding_amount=tax.withholding,
            total_taxes=tax.total,
            net_sales=tax.net,
        ),
        transaction_count=len(txns),
    )
