"""Tests for the transaction repository: defaults, filters, soft delete and stats."""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from brewbooks.core.catalog import TransactionKind
from brewbooks.core.errors import InvalidTransactionError, TransactionNotFoundError
from brewbooks.core.models import TransactionCreate, TransactionUpdate
from brewbooks.services.transaction_store import TransactionStore, current_month


def make(store: TransactionStore, **fields: object) -> object:
    """Create a transaction with sensible defaults for the fields not given."""
    values = {"type": "revenue", "category": "Cash", "description": "Sales", "amount": Decimal("100")}
    values.update(fields)
    return store.create(TransactionCreate(**values))


def test_create_fills_defaults(session: Session) -> None:
    """Omitted reference numbers, payment method, VAT and date are filled in."""
    record = make(TransactionStore(session))
    if not record.transaction_number.startswith("TXN") or not record.receipt_number.startswith("RCP"):
        msg = f"Expected generated numbers, got {record.transaction_number}/{record.receipt_number}"
        raise AssertionError(msg)
    if record.payment_method != "Cash" or record.vat != 0:
        msg = f"Unexpected defaults: payment_method={record.payment_method}, vat={record.vat}"
        raise AssertionError(msg)
    if record.date != date.today():  # noqa: DTZ011
        msg = f"Expected today's date, got {record.date}"
        raise AssertionError(msg)


def test_create_keeps_given_values(session: Session) -> None:
    """Values supplied by the client are stored as given."""
    record = make(
        TransactionStore(session),
        type="transaction",
        category="Supplies",
        amount=Decimal("850.00"),
        payment_method="Bank Transfer",
        transaction_number="TXN-1",
        vat=12,
        date=date(2025, 11, 17),
    )
    if record.kind != TransactionKind.EXPENSE or record.transaction_number != "TXN-1":
        msg = f"Unexpected record: {record}"
        raise AssertionError(msg)
    if record.vat_amount != Decimal("102") or record.amount_with_vat != Decimal("952"):
        msg = f"Unexpected VAT figures: {record.vat_amount}, {record.amount_with_vat}"
        raise AssertionError(msg)


def test_list_filters_and_orders_newest_first(session: Session) -> None:
    """Listing filters by kind, category and date range and puts the latest date first."""
    store = TransactionStore(session)
    make(store, date=date(2025, 11, 1))
    make(store, date=date(2025, 11, 3), category="GCash")
    make(store, date=date(2025, 11, 2), type="expense", category="Rent")

    dates = [r.date.day for r in store.list()]
    if dates != [3, 2, 1]:
        msg = f"Expected newest first, got days {dates}"
        raise AssertionError(msg)
    if [r.category for r in store.list(kind=TransactionKind.REVENUE)] != ["GCash", "Cash"]:
        msg = "Kind filter returned the wrong records"
        raise AssertionError(msg)
    if [r.category for r in store.list(category="Rent")] != ["Rent"]:
        msg = "Category filter returned the wrong records"
        raise AssertionError(msg)
    ranged = store.list(start_date=date(2025, 11, 1), end_date=date(2025, 11, 2))
    if [r.date.day for r in ranged] != [2, 1]:
        msg = f"Date range filter returned days {[r.date.day for r in ranged]}"
        raise AssertionError(msg)
    if len(store.list(start_date=date(2025, 11, 2))) != 3:
        msg = "A single range bound should be ignored"
        raise AssertionError(msg)


def test_paginate(session: Session) -> None:
    """Pages slice the newest-first listing and report the page count."""
    store = TransactionStore(session)
    for day in range(1, 6):
        make(store, date=date(2025, 11, day))
    page = store.paginate(per_page=2, page=2)
    if [r.date.day for r in page.items] != [3, 2] or page.total != 5 or page.last_page != 3:
        msg = f"Unexpected page: {[r.date.day for r in page.items]}, total={page.total}, last={page.last_page}"
        raise AssertionError(msg)


def test_update_applies_only_given_fields(session: Session) -> None:
    """A partial update leaves the other fields alone."""
    store = TransactionStore(session)
    record = make(store, description="Morning sales")
    updated = store.update(record.id, TransactionUpdate(amount=Decimal("250.00")))
    if updated.amount != Decimal("250.00") or updated.description != "Morning sales":
        msg = f"Unexpected update result: {updated.amount}, {updated.description}"
        raise AssertionError(msg)


def test_update_rejects_category_of_other_kind(session: Session) -> None:
    """Switching the kind without a matching category is rejected."""
    store = TransactionStore(session)
    record = make(store)
    with pytest.raises(InvalidTransactionError) as excinfo:
        store.update(record.id, TransactionUpdate(type="expense"))
    if "category" not in excinfo.value.errors:
        msg = f"Expected a category error, got {excinfo.value.errors}"
        raise AssertionError(msg)
    moved = store.update(record.id, TransactionUpdate(type="expense", category="Rent"))
    if moved.kind != TransactionKind.EXPENSE or moved.category != "Rent":
        msg = f"Expected the record to become a Rent expense, got {moved}"
        raise AssertionError(msg)


def test_soft_delete_and_restore(session: Session) -> None:
    """Deleted transactions vanish from listings but can be restored."""
    store = TransactionStore(session)
    record = make(store)
    store.delete(record.id)
    if store.list():
        msg = "Deleted transaction still listed"
        raise AssertionError(msg)
    with pytest.raises(TransactionNotFoundError):
        store.get(record.id)
    with pytest.raises(TransactionNotFoundError):
        store.delete(record.id)
    if store.get(record.id, include_deleted=True).deleted_at is None:
        msg = "Expected the deleted record to keep a deleted_at marker"
        raise AssertionError(msg)
    store.restore(record.id)
    if [r.id for r in store.list()] != [record.id]:
        msg = "Restored transaction not listed"
        raise AssertionError(msg)


def test_missing_transaction(session: Session) -> None:
    """Unknown ids raise TransactionNotFoundError."""
    store = TransactionStore(session)
    with pytest.raises(TransactionNotFoundError):
        store.get(999)
    with pytest.raises(TransactionNotFoundError):
        store.update(999, TransactionUpdate(description="x"))


def test_stats_default_to_current_month(session: Session) -> None:
    """Stats cover the current month by default and skip deleted and out-of-range records."""
    store = TransactionStore(session)
    start, end = current_month()
    make(store, date=start, amount=Decimal("1000"))
    make(store, date=start, type="expense", category="Rent", amount=Decimal("400"))
    make(store, date=start - timedelta(days=1), amount=Decimal("999"))
    gone = make(store, date=start, amount=Decimal("50"))
    store.delete(gone.id)

    summary = store.stats()
    if (summary.period.start_date, summary.period.end_date) != (start, end):
        msg = f"Unexpected period: {summary.period}"
        raise AssertionError(msg)
    if summary.totals.revenue != Decimal("1000") or summary.totals.balance != Decimal("600"):
        msg = f"Unexpected totals: {summary.totals}"
        raise AssertionError(msg)
    if summary.taxes.vat_amount != 120 or summary.transaction_count != 2:  # noqa: PLR2004
        msg = f"Unexpected taxes/count: {summary.taxes}, {summary.transaction_count}"
        raise AssertionError(msg)


def test_stats_group_in_entry_order(session: Session) -> None:
    """Breakdown groups follow the order categories were first entered, even on the same day."""
    store = TransactionStore(session)
    day = date(2025, 11, 12)
    make(store, date=day, type="expense", category="Supplies", amount=Decimal("300"))
    make(store, date=day, type="expense", category="Rent", amount=Decimal("100"))
    make(store, date=day, category="GCash", amount=Decimal("200"))
    make(store, date=day, category="Cash", amount=Decimal("50"))

    summary = store.stats(date(2025, 11, 1), date(2025, 11, 30))
    if [item.key for item in summary.expenses_by_category] != ["Supplies", "Rent"]:
        msg = f"Unexpected expense group order: {summary.expenses_by_category}"
        raise AssertionError(msg)
    if [item.key for item in summary.sales_by_method.breakdown] != ["GCash", "Cash"]:
        msg = f"Unexpected sales group order: {summary.sales_by_method.breakdown}"
        raise AssertionError(msg)


def test_create_rounds_amount_to_cents(session: Session) -> None:
    """Amounts with more than two decimals are stored rounded half up."""
    store = TransactionStore(session)
    record = make(store, amount=Decimal("12.345"))
    if store.get(record.id).amount != Decimal("12.35"):
        msg = f"Expected 12.35, got {store.get(record.id).amount}"
        raise AssertionError(msg)
