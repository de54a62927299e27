"""
Main entrypoint for the Library Bookstore API.

This module assembles the FastAPI application, sets up logging, CORS
and the MongoDB client, and includes the versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn bookstore_api.app.main:app --reload

A ``MongoClient`` may be passed to ``create_app``; tests use this to
run against mongomock.  A client created by the app itself is pinged
at startup and closed at shutdown; if the ping or the index creation
fails, startup fails.  An injected client belongs to the
caller and is left open.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import create_client, init_db
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(client: Optional[MongoClient] = None, database_name: Optional[str] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    client : Optional[MongoClient]
        Client to use for the document store.  When omitted one is
        created from ``settings.mongo_url``.
    database_name : Optional[str]
        Database to use; defaults to ``settings.database_name``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    owns_client = client is None
    mongo_client = client if client is not None else create_client()
    app.state.mongo_client = mongo_client
    app.state.db = mongo_client[database_name or settings.database_name]

    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    def startup_event() -> None:
        if owns_client:
            try:
                mongo_client.admin.command("ping")
                logger.info("Pinged MongoDB deployment; connection is up")
            except PyMongoError as e:
                logger.error("MongoDB ping failed: %s", e)
                raise
        # Uniqueness of users, wishlist entries and ratings rests on these
        # indexes; a failure here aborts startup.
        init_db(app.state.db)

    @app.on_event("shutdown")
    def shutdown_event() -> None:
        if owns_client:
            mongo_client.close()
            logger.info("MongoDB client closed")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.  The
# client connects lazily, so importing does not touch the network.
app = create_app()
