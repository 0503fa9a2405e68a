"""API package: provides FastAPI dependencies and route definitions for the application."""

from .dependencies import get_settings, get_store  # noqa: F401
from .routes import router, transactions  # noqa: F401
