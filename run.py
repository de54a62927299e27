"""Entry point for the Library Bookstore API.

Starts the FastAPI application under Uvicorn.  Intended to be executed
from the project root, e.g. in Docker or on a PaaS where only a single
Python file is specified.

Configuration such as MONGO_URL, DATABASE_NAME, SECRET_KEY and PORT is
read from the environment or from a `.env` file in the same directory.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from bookstore_api.app.core.config import settings
from bookstore_api.app.main import app


async def main() -> None:
    """Serve the API on ``settings.host``/``settings.port``."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info("Server running on port: %s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
