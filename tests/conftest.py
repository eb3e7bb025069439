"""
PetSitter Connect Backend — Test Configuration (conftest.py)
=============================================================

What:  Shared pytest fixtures for the whole suite.
How:   pytest auto-discovers this module; environment overrides happen at
       import time, BEFORE any petsitter module reads settings.

Fixture Hierarchy (all function-scoped):
    ├── application_row / listing_row: factories for fake ORM rows
    ├── mock_store:   AsyncMock standing in for PetSitterStore (service unit tests)
    ├── db_engine:    engine on a throwaway SQLite file with tables created
    ├── store:        real PetSitterStore bound to db_engine
    ├── test_client:  HTTPX AsyncClient on a fresh app whose get_store uses `store`
    └── listing_payload: factory for valid POST /listings bodies (relative dates)
"""

import os
import tempfile
from datetime import date, timedelta
from types import SimpleNamespace
from typing import Any, Dict
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

_TEST_DB_DIR = tempfile.mkdtemp(prefix="petsitter_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/app.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_PREFIX"] = ""
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

from petsitter.database import build_engine, build_session_factory, init_models  # noqa: E402
from petsitter.store import PetSitterStore, get_store  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

def days_from_today(days: int) -> date:
    return date.today() + timedelta(days=days)


def make_application(id: int, listing_id: int = 1, sitter_id: str = "sitter", status: str = "pending"):
    """Attribute bag shaped like an Application row, for mocked stores."""
    return SimpleNamespace(id=id, listing_id=listing_id, sitter_id=sitter_id, status=status)


def make_listing(id: int = 1, start_in_days: int = 7, **overrides):
    """Attribute bag shaped like a Listing row, for mocked stores."""
    values = {
        "id": id,
        "owner_id": "owner1",
        "start_date": days_from_today(start_in_days),
        "end_date": days_from_today(start_in_days + 5),
        "species": "dog",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def application_row():
    return make_application


@pytest.fixture
def listing_row():
    return make_listing


@pytest.fixture
def mock_store():
    """
    AsyncMock standing in for PetSitterStore.

    Usage:
        mock_store.get_listing_by_id.return_value = listing_row(id=3)
        await application_service.apply(mock_store, "sitter1", 3)
    """
    store = AsyncMock(spec=PetSitterStore)
    store.query_applications_by_listing.return_value = []
    return store


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path}/petsitter.db")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def store(db_engine):
    return PetSitterStore(build_session_factory(db_engine))


@pytest_asyncio.fixture
async def test_client(store):
    """
    HTTPX AsyncClient talking to a fresh app instance over ASGITransport.

    The lifespan does not run under ASGITransport; tables come from db_engine.
    """
    from petsitter.main import create_app

    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def listing_payload():
    """Factory for a valid POST /listings body; keyword overrides win."""

    def build(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "ownerId": "owner1",
            "title": "Weekend care for Rex",
            "description": "Friendly labrador, needs two walks a day",
            "species": "dog",
            "listingType": ["house-sitting", "walks"],
            "startDate": days_from_today(7).isoformat(),
            "endDate": days_from_today(10).isoformat(),
            "sitterVerified": False,
            "price": 40.0,
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def listing_values():
    """Factory for store.create_listing() column dicts."""

    def build(**overrides: Any) -> Dict[str, Any]:
        values = {
            "owner_id": "owner1",
            "title": "Cat sitting",
            "description": "Two indoor cats",
            "species": "cat",
            "listing_type": ["drop-in-visit", "feeding"],
            "start_date": days_from_today(3),
            "end_date": days_from_today(6),
            "sitter_verified": False,
            "price": 20.0,
        }
        values.update(overrides)
        return values

    return build
