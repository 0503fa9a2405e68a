"""Repository over the transactions table.

``TransactionStore`` wraps one SQLAlchemy session and exposes the CRUD operations, soft delete/restore, and the
dashboard statistics. Routes get a fresh store per request; nothing here is shared between requests.
"""

import calendar
import math
from dataclasses import dataclass
from datetime import date

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from brewbooks.core.catalog import TransactionKind, check_category
from brewbooks.core.db import TransactionRecord
from brewbooks.core.errors import InvalidTransactionError, TransactionNotFoundError
from brewbooks.core.models import TransactionCreate, TransactionUpdate
from brewbooks.core.utils import generate_reference, get_logger, today, utcnow
from brewbooks.services.aggregation import DashboardSummary, summarize

logger = get_logger("brewbooks.store")


@dataclass
class Page:
    """One page of a listing plus the numbers needed to render pagination."""

    items: list[TransactionRecord]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        """Index of the final page; 1 for an empty listing."""
        return max(1, math.ceil(self.total / self.per_page))


def current_month() -> tuple[date, date]:
    """First and last day of the current calendar month."""
    now = today()
    last_day = calendar.monthrange(now.year, now.month)[1]
    return now.replace(day=1), now.replace(day=last_day)


class TransactionStore:
    """Read and write transactions through a single session."""

    def __init__(self, session: Session) -> None:
        """Bind the store to a SQLAlchemy session."""
        self.session = session

    def _query(
        self,
        kind: TransactionKind | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Select:
        stmt = select(TransactionRecord).where(TransactionRecord.deleted_at.is_(None))
        if kind is not None:
            stmt = stmt.where(TransactionRecord.kind == kind)
        if category is not None:
            stmt = stmt.where(TransactionRecord.category == category)
        # A range only applies when both ends are given.
        if start_date is not None and end_date is not None:
            stmt = stmt.where(TransactionRecord.date.between(start_date, end_date))
        return stmt

    @staticmethod
    def _newest_first(stmt: Select) -> Select:
        return stmt.order_by(
            TransactionRecord.date.desc(),
            TransactionRecord.created_at.desc(),
            TransactionRecord.id.desc(),
        )

    def list(
        self,
        kind: TransactionKind | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[TransactionRecord]:
        """Return live transactions matching the filters, newest first."""
        stmt = self._newest_first(self._query(kind, category, start_date, end_date))
        return list(self.session.scalars(stmt))

    def paginate(
        self,
        per_page: int,
        page: int = 1,
        kind: TransactionKind | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Page:
        """Return one page of the same listing as :meth:`list`."""
        stmt = self._query(kind, category, start_date, end_date)
        total = self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        items = self.session.scalars(self._newest_first(stmt).limit(per_page).offset((page - 1) * per_page))
        return Page(items=list(items), total=total, page=page, per_page=per_page)

    def get(self, transaction_id: int, include_deleted: bool = False) -> TransactionRecord:
        """Fetch a transaction by id, raising TransactionNotFoundError if it is missing or soft-deleted."""
        record = self.session.get(TransactionRecord, transaction_id)
        if record is None or (record.is_deleted and not include_deleted):
            raise TransactionNotFoundError(transaction_id)
        return record

    def create(self, payload: TransactionCreate) -> TransactionRecord:
        """Store a new transaction, filling the defaults the entry form would have filled."""
        record = TransactionRecord(
            date=payload.date or today(),
            kind=payload.type,
            category=payload.category,
            description=payload.description,
            amount=payload.amount,
            payment_method=payload.payment_method or payload.category,
            transaction_number=payload.transaction_number or generate_reference("TXN"),
            receipt_number=payload.receipt_number or generate_reference("RCP"),
            tin_number=payload.tin_number,
            vat=payload.vat if payload.vat is not None else 0,
            supplier_name=payload.supplier_name,
            supplier_address=payload.supplier_address,
        )
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        logger.info(f"Created transaction {record.id}: {record.kind} {record.category} {record.amount}")
        return record

    def update(self, transaction_id: int, payload: TransactionUpdate) -> TransactionRecord:
        """Apply the fields present in ``payload`` to an existing transaction."""
        record = self.get(transaction_id)
        changes = payload.model_dump(exclude_unset=True)
        # Required columns cannot be cleared.
        for field in ("type", "category", "description", "amount", "date", "vat"):
            if field in changes and changes[field] is None:
                del changes[field]
        kind = changes.pop("type", record.kind)
        category = changes.get("category", record.category)
        try:
            check_category(kind, category)
        except ValueError as exc:
            logger.warning(f"Rejected update of transaction {transaction_id}: {exc}")
            raise InvalidTransactionError({"category": [str(exc)]}) from exc
        record.kind = kind
        for field, value in changes.items():
            setattr(record, field, value)
        self.session.commit()
        self.session.refresh(record)
        logger.info(f"Updated transaction {record.id}: fields={sorted(payload.model_fields_set)}")
        return record

    def delete(self, transaction_id: int) -> None:
        """Soft-delete a transaction; it disappears from listings and stats but stays in the table."""
        record = self.get(transaction_id)
        record.deleted_at = utcnow()
        self.session.commit()
        logger.info(f"Deleted transaction {transaction_id}")

    def restore(self, transaction_id: int) -> TransactionRecord:
        """Undo a soft delete."""
        record = self.get(transaction_id, include_deleted=True)
        record.deleted_at = None
        self.session.commit()
        self.session.refresh(record)
        logger.info(f"Restored transaction {transaction_id}")
        return record

    def stats(self, start_date: date | None = None, end_date: date | None = None) -> DashboardSummary:
        """Dashboard aggregates over live transactions in the range (default: the current month)."""
        month_start, month_end = current_month()
        start_date = start_date or month_start
        end_date = end_date or month_end
        # Entry order, so breakdown groups follow the order their keys were first recorded.
        stmt = self._query(start_date=start_date, end_date=end_date).order_by(TransactionRecord.id.asc())
        return summarize(self.session.scalars(stmt).all(), start_date, end_date)
