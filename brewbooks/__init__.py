"""BrewBooks: revenue and expense ledger API for a coffee shop."""
