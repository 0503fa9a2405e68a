"""Domain exceptions raised by the transaction store and mapped to HTTP responses in the app factory."""


class BrewBooksError(Exception):
    """Base class for BrewBooks domain errors."""


class TransactionNotFoundError(BrewBooksError):
    """Raised when a transaction id does not exist or has been soft-deleted."""

    def __init__(self, transaction_id: int) -> None:
        """Remember the id that was looked up."""
        super().__init__(f"Transaction {transaction_id} not found")
        self.transaction_id = transaction_id


class InvalidTransactionError(BrewBooksError):
    """Raised when a transaction fails a check that spans several fields."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        """Store field-level messages keyed by field name."""
        first = next(iter(errors.values()))[0] if errors else "Invalid transaction"
        super().__init__(first)
        self.errors = errors
