"""
Shared fixtures: every test gets its own migrated SQLite database.
"""

import pytest

from portfolio_api.app.core.db import init_db
from portfolio_api.app.services.experience_service import ExperienceService
from portfolio_api.app.services.experience_store import SQLiteExperienceStore


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "portfolio_test.db")
    init_db(path)
    return path


@pytest.fixture
def store(db_path):
    return SQLiteExperienceStore(db_path)


@pytest.fixture
def service(store):
    return ExperienceService(store, expose_fault_details=True, default_page_size=10)


@pytest.fixture
def make_experiences(service):
    """Create one record per company name and return their ids in creation order."""

    def _make(*companies, **fields):
        ids = []
        for company in companies:
            envelope = service.store({"company": company, **fields})
            assert envelope.is_success, envelope
            ids.append(envelope.payload["id"])
        return ids

    return _make
