"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields, so the
application starts with a local SQLite file and console logging when
nothing is configured.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Portfolio API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Optional path of a log file.  When empty only the console handler
    # is installed.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path or connection string for the SQLite database.  A relative path
    # is resolved against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "portfolio.db")

    # Page size used by the experience listing when the request carries
    # no ``pageSize``.
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))

    # When enabled, the message of an unexpected exception is returned in
    # the ``payload`` of the error envelope.  When disabled the payload
    # carries a generic text and the detail only goes to the log.
    expose_fault_details: bool = _env_flag("EXPOSE_FAULT_DETAILS", "true")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
