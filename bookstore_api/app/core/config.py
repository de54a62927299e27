"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  A ``.env`` file in the working directory is
loaded first (via ``python-dotenv``) so local deployments can keep
their MongoDB connection string and secret key out of the shell
profile.  Defaults are provided for all fields.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Library Bookstore API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    # Routes are served at the root by default so that the paths match
    # what the web client expects (``/books``, ``/orders`` ...).
    api_prefix: str = os.getenv("API_PREFIX", "")
    debug: bool = _as_bool(os.getenv("DEBUG", "false"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # MongoDB connection.  ``mongo_transactions`` enables multi-document
    # transactions for the cascading book delete; it requires a replica
    # set or sharded cluster and must stay off for standalone servers.
    mongo_url: str = os.getenv("MONGO_URL", "mongodb://localhost:27017")
    database_name: str = os.getenv("DATABASE_NAME", "library")
    mongo_transactions: bool = _as_bool(os.getenv("MONGO_TRANSACTIONS", "false"))

    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Role assigned to users created without an explicit role.
    default_role: str = os.getenv("DEFAULT_ROLE", "buyer")

    # Comma-separated list of origins allowed by the CORS middleware.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables
# should be set before importing this module.
settings = Settings()
