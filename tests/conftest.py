"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolate cached settings between tests
    - Data Fixtures: in-memory records with tied ordering keys
    - Database Fixtures: synchronous SQLAlchemy engine and session on SQLite
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from each_batch.core.settings import clear_all_caches
from tests.fixtures.models import Base, Widget
from tests.fixtures.records import make_records


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Clear cached settings and EACH_BATCH_ env vars around every test."""
    monkeypatch.delenv("EACH_BATCH_DEFAULT_BATCH_SIZE", raising=False)
    monkeypatch.delenv("EACH_BATCH_DEFAULT_ORDER", raising=False)
    monkeypatch.delenv("EACH_BATCH_LOG_LEVEL", raising=False)
    monkeypatch.delenv("EACH_BATCH_LOG_JSON_FORMAT", raising=False)
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def records() -> list[dict[str, Any]]:
    """Ten records with tied enabled_at values."""
    return make_records(10)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db_engine() -> Generator[Engine]:
    """Create SQLAlchemy engine with in-memory SQLite and all test tables."""
    engine = create_engine("sqlite://", echo=False)
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db_session(db_engine: Engine) -> Generator[Session]:
    """Session bound to the in-memory engine, rolled back after the test."""
    with Session(db_engine, expire_on_commit=False) as session:
        try:
            yield session
        finally:
            session.rollback()


@pytest.fixture
def seed_widgets(db_session: Session):
    """Factory inserting ``count`` widgets built by make_records()."""

    def _seed(count: int, *, distinct_times: int = 3) -> list[Widget]:
        widgets = [Widget(**record) for record in make_records(count, distinct_times=distinct_times)]
        db_session.add_all(widgets)
        db_session.flush()
        return widgets

    return _seed
