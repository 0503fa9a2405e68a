"""Entrypoint for running the BrewBooks API with Uvicorn from the project root (``python main.py``)."""

from brewbooks.core.settings import get_settings
from brewbooks.main import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)
