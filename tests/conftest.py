"""
Pytest fixtures for the quickstart tests.

Collections are MagicMocks keyed by name so the samples can run without a
cluster. Sessions and change streams get small hand-written fakes because
their control flow (commit/abort, try_next/alive) is what the tests check.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest


class FakeDatabase(dict):
    """Database stand-in: ``db.podcasts`` and ``db["podcasts"]`` are the same mock."""

    def __missing__(self, name: str) -> MagicMock:
        collection = MagicMock(name=name)
        self[name] = collection
        return collection

    def __getattr__(self, name: str) -> MagicMock:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]


class FakeSession:
    """Records the transaction calls a sample makes."""

    def __init__(self) -> None:
        self.events: list[str] = []

    def __enter__(self) -> FakeSession:
        return self

    def __exit__(self, *exc: Any) -> bool:
        self.events.append("end")
        return False

    def start_transaction(self) -> None:
        self.events.append("start")

    def commit_transaction(self) -> None:
        self.events.append("commit")

    def abort_transaction(self) -> None:
        self.events.append("abort")

    def with_transaction(self, callback):
        self.events.append("with_transaction")
        self.start_transaction()
        try:
            result = callback(self)
        except Exception:
            self.abort_transaction()
            raise
        self.commit_transaction()
        return result


class FakeClient:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db
        self.session = FakeSession()
        self.closed = False

    def __enter__(self) -> FakeClient:
        return self

    def __exit__(self, *exc: Any) -> bool:
        self.closed = True
        return False

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.db

    def start_session(self) -> FakeSession:
        return self.session


class FakeChangeStream:
    """Yields queued change events, then reports itself dead unless ``stay_open``."""

    def __init__(self, changes=(), stay_open: bool = False, error: Exception | None = None) -> None:
        self._changes = list(changes)
        self._stay_open = stay_open
        self._error = error
        self.closed = False

    @property
    def alive(self) -> bool:
        if self.closed:
            return False
        return self._stay_open or bool(self._changes) or self._error is not None

    def try_next(self):
        if self._changes:
            return self._changes.pop(0)
        if self._error is not None:
            raise self._error
        return None

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FakeChangeStream:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def client(db) -> FakeClient:
    return FakeClient(db)


@pytest.fixture
def patch_client(monkeypatch, client):
    """Point a sample module's ``get_client`` at the fake client."""

    def _patch(module) -> FakeClient:
        monkeypatch.setattr(module, "get_client", lambda *a, **kw: client)
        return client

    return _patch
