"""Seed the ledger with a few days of sample coffee shop transactions.

Run with ``python -m brewbooks.workers.seeder`` to fill a fresh database for demos and manual testing.
"""

from datetime import timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from brewbooks.core.catalog import TransactionKind
from brewbooks.core.db import SessionLocal, TransactionRecord, init_db
from brewbooks.core.models import TransactionCreate
from brewbooks.core.utils import get_logger, today
from brewbooks.services.transaction_store import TransactionStore

logger = get_logger("brewbooks.seeder")


def sample_transactions() -> list[TransactionCreate]:
    """Build the sample revenue and expense entries, dated relative to today."""
    day = today()
    revenue = [
        ("Cash", "Morning sales", "1500.00"),
        ("GCash", "Afternoon online orders", "850.00"),
        ("Grab", "Delivery orders", "620.00"),
        ("PayMaya", "Evening sales", "430.00"),
    ]
    entries = [
        TransactionCreate(
            type=TransactionKind.REVENUE,
            date=day,
            category=category,
            description=description,
            amount=Decimal(amount),
        )
        for category, description, amount in revenue
    ]
    entries += [
        TransactionCreate(
            type=TransactionKind.EXPENSE,
            date=day,
            category="Supplies",
            description="Coffee beans purchase",
            amount=Decimal("850.00"),
            payment_method="Bank Transfer",
            tin_number="123-456-789",
            vat=12,
            supplier_name="Premium Coffee Suppliers Inc.",
            supplier_address="Manila, Philippines",
        ),
        TransactionCreate(
            type=TransactionKind.EXPENSE,
            date=day,
            category="Pastries",
            description="Fresh pastries and breads",
            amount=Decimal("320.00"),
            payment_method="Cash",
            tin_number="987-654-321",
            vat=12,
            supplier_name="Local Bakery Co.",
            supplier_address="Quezon City, Philippines",
        ),
        TransactionCreate(
            type=TransactionKind.EXPENSE,
            date=day - timedelta(days=1),
            category="Utilities",
            description="Monthly electricity bill",
            amount=Decimal("1200.00"),
            payment_method="Check",
        ),
        TransactionCreate(
            type=TransactionKind.EXPENSE,
            date=day - timedelta(days=2),
            category="Manpower",
            description="Staff salaries - Week 1",
            amount=Decimal("5000.00"),
            payment_method="Bank Transfer",
        ),
    ]
    return entries


def seed(session: Session) -> list[TransactionRecord]:
    """Insert the sample transactions through the store and return the stored records."""
    store = TransactionStore(session)
    records = [store.create(entry) for entry in sample_transactions()]
    revenue = sum(1 for r in records if r.kind == TransactionKind.REVENUE)
    logger.info(f"Seeded {len(records)} transactions ({revenue} revenue, {len(records) - revenue} expense)")
    return records


def main() -> None:
    """Create the table if needed and seed it."""
    init_db()
    session = SessionLocal()
    try:
        seed(session)
    finally:
        session.close()


if __name__ == "__main__":
    main()
