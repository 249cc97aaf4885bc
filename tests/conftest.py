"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator
from typing import Any

import pytest

from cypherkit.infrastructure.neo4j.driver import Neo4jDriver


class IndexedPerson:
    """Domain class with lucene indexes on ``name`` (exact) and ``bio`` (fulltext)."""

    _INDEXES = {"name": "exact", "bio": "fulltext"}

    @classmethod
    def index_type(cls, key: str) -> str | None:
        return cls._INDEXES.get(key)

    @classmethod
    def index_name_for_type(cls, index_type: str) -> str:
        return f"Person_{index_type}"


class FakeResult:
    def __init__(self, records: list[dict[str, Any]]) -> None:
        self._records = records

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        for record in self._records:
            yield record


class FakeSession:
    def __init__(self, records: list[dict[str, Any]], error: Exception | None = None) -> None:
        self.records = records
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    async def run(self, query: str, params: dict[str, Any]) -> FakeResult:
        self.calls.append((query, params))
        if self.error is not None:
            raise self.error
        return FakeResult(self.records)


class FakeAsyncDriver:
    def __init__(self, session: FakeSession, connect_error: Exception | None = None) -> None:
        self._session = session
        self.connect_error = connect_error
        self.closed = False
        self.database: str | None = None

    async def verify_connectivity(self) -> None:
        if self.connect_error is not None:
            raise self.connect_error

    def session(self, database: str | None = None) -> FakeSession:
        self.database = database
        return self._session

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def index_resolver() -> type[IndexedPerson]:
    """Provide an index metadata stub."""
    return IndexedPerson


@pytest.fixture
def fake_session() -> FakeSession:
    """Provide a session that answers every query with two rows."""
    return FakeSession([{"n": "Ann"}, {"n": "Bob"}])


@pytest.fixture
def neo4j_driver(fake_session: FakeSession) -> Neo4jDriver:
    """Provide a driver wrapper already connected to a fake neo4j driver."""
    driver = Neo4jDriver("bolt://localhost:7687", "neo4j", "secret")
    driver._driver = FakeAsyncDriver(fake_session)  # type: ignore[assignment]
    return driver
