"""SQLAlchemy Unit of Work: concrete implementation of the domain UoW port.

Wraps a SQLAlchemy Session and exposes the record store bound to it, so
every query of one listing request runs on the same Session.
"""

from __future__ import annotations

from typing import Self

from sqlalchemy.orm import Session, sessionmaker

from app.domain.common.uow import UnitOfWork
from app.infra.db.repositories.record_store import SqlRecordStore


class SqlUnitOfWork(UnitOfWork):
    """Transactional boundary backed by a SQLAlchemy Session."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def __enter__(self) -> Self:
        self.session: Session = self._session_factory()
        self.records = SqlRecordStore(self.session)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            self.rollback()
        self.session.close()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
