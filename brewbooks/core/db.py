"""DB engine, session factory and the transactions table for BrewBooks."""

from collections.abc import Iterator
from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, Enum, Index, Integer, Numeric, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from brewbooks.core.catalog import TransactionKind
from brewbooks.core.settings import get_settings
from brewbooks.core.utils import utcnow

Base = declarative_base()


class TransactionRecord(Base):
    """A single revenue or expense entry in the shop ledger."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)
    kind = Column(
        "type",
        Enum(
            TransactionKind,
            name="transaction_kind",
            native_enum=False,
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
        index=True,
    )
    category = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(255), nullable=True)
    transaction_number = Column(String(255), nullable=True)
    receipt_number = Column(String(255), nullable=True)
    tin_number = Column(String(255), nullable=True)
    vat = Column(Integer, nullable=False, default=0)
    supplier_name = Column(String(500), nullable=True)
    supplier_address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    __table_args__ = (Index("idx_transactions_type_date", "type", "date"),)

    @property
    def vat_amount(self) -> Decimal:
        """VAT charged on top of the amount."""
        return Decimal(self.amount) * Decimal(self.vat or 0) / Decimal(100)

    @property
    def amount_with_vat(self) -> Decimal:
        """Amount including VAT."""
        return Decimal(self.amount) + self.vat_amount

    @property
    def is_deleted(self) -> bool:
        """Whether the record has been soft-deleted."""
        return self.deleted_at is not None

    def __repr__(self) -> str:
        """Short debug representation."""
        return f"<TransactionRecord id={self.id} {self.kind} {self.category} {self.amount}>"


def get_engine(url: str | None = None) -> Engine:
    """Create a SQLAlchemy engine using the configured database URL."""
    url = url or get_settings().database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = get_engine()
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def init_db(bind: Engine | None = None) -> None:
    """Create the transactions table if it does not exist yet."""
    Base.metadata.create_all(bind or engine)


def get_session() -> Iterator[Session]:
    """Yield a session for one request and close it afterwards."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
