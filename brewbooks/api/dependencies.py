"""FastAPI dependencies for DI (settings, DB session, transaction store).

Routes receive a ``TransactionStore`` bound to a per-request session; tests override ``get_session`` to point the
whole API at a throwaway database.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from brewbooks.core.db import get_session
from brewbooks.core.settings import get_settings  # noqa: F401
from brewbooks.services.transaction_store import TransactionStore


def get_store(session: Session = Depends(get_session)) -> TransactionStore:
    """Provide a TransactionStore for the current request."""
    return TransactionStore(session)
