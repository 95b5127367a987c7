"""Unit of Work port.

A use case opens the UoW as a context manager and reads through the
stores it exposes.  Concrete implementations live in ``app.infra``.
"""

from __future__ import annotations

import abc
from typing import Self

from app.domain.catalog.ports import RecordStore


class UnitOfWork(abc.ABC):
    """Transactional boundary shared by the stores of one request."""

    records: RecordStore

    @abc.abstractmethod
    def __enter__(self) -> Self:
        ...

    @abc.abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    @abc.abstractmethod
    def commit(self) -> None:
        ...

    @abc.abstractmethod
    def rollback(self) -> None:
        ...
