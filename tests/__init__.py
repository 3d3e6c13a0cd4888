#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests run against in-memory SQLite, no external services required:

    # Run all tests
    python -m pytest tests/ -v

Database Setup:
    Every test builds its own in-memory database with
    create_test_session_factory(), so tests never share state. StaticPool
    keeps the single in-memory database alive across sessions and threads
    (the FastAPI TestClient runs endpoints in a worker thread).
"""

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.database import build_engine, init_db

TEST_DB_URL = "sqlite://"


def create_test_session_factory() -> sessionmaker:
    """
    Session factory bound to a fresh in-memory database.

    Returns:
        sessionmaker with expire_on_commit disabled so tests can inspect
        objects after the unit of work commits.
    """
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool, connect_args={"check_same_thread": False})
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
