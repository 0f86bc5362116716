# tests/conftest.py
from __future__ import annotations

import os

# must be set before backoffice.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_MODE", "dev")

import pytest  # noqa: E402

from backoffice.db import Base, engine, init_db  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_tables():
    init_db()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
