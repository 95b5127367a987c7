"""Fixtures for running the catalog record stores against SQLite.

Each test gets a fresh in-memory database holding every catalog table,
with foreign keys enforced and JSON written the way the app engine writes
it.  ``session_factory`` feeds ``SqlUnitOfWork``; ``count_queries``
asserts how many statements one store call issues.
"""

from __future__ import annotations

from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.database import Base
from app.infra.db.repositories.record_store import SqlRecordStore
from app.infra.serialization import dump_json

# Force model registration so create_all picks up every table.
import app.models.catalog  # noqa: F401


@pytest.fixture
def engine():
    """Function-scoped :memory: SQLite engine with FK enforcement."""
    eng = create_engine("sqlite:///:memory:", json_serializer=dump_json)

    @event.listens_for(eng, "connect")
    def _set_fk_pragma(dbapi_conn, _):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def session(session_factory):
    """Function-scoped session bound to the in-memory engine."""
    sess = session_factory()
    yield sess
    sess.close()


@pytest.fixture
def store(session):
    """SqlRecordStore over the test session; rows added to *session* are visible."""
    return SqlRecordStore(session)


@contextmanager
def count_queries(engine):
    """Context manager that counts SQL statements executed.

    Usage::

        with count_queries(engine) as counter:
            store.count("assets", None)
        assert counter["count"] == 1
    """
    counter = {"count": 0}

    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        counter["count"] += 1

    event.listen(engine, "before_cursor_execute", _before_cursor_execute)
    try:
        yield counter
    finally:
        event.remove(engine, "before_cursor_execute", _before_cursor_execute)
