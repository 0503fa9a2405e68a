"""Core package: provides the catalog, models, database helpers, settings, and shared utilities."""

from .catalog import TransactionKind  # noqa: F401
from .db import TransactionRecord, get_session  # noqa: F401
from .errors import InvalidTransactionError, TransactionNotFoundError  # noqa: F401
from .models import TransactionCreate, TransactionOut, TransactionUpdate  # noqa: F401
from .settings import Settings  # noqa: F401
