"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (settings, logging, database), ``schemas``
(pydantic models), ``services`` (business logic and persistence) and
``api`` (versioned HTTP routes).
"""

from .main import app  # noqa: F401
