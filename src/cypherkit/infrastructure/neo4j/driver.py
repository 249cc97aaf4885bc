"""Executes rendered query text against Neo4j."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol, Self

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession
from neo4j.exceptions import Neo4jError, ServiceUnavailable

from cypherkit.core.base import ErrorCode, ErrorLevel, ExecutionErrorDetails
from cypherkit.core.config import settings
from cypherkit.core.decorators import with_error_handling
from cypherkit.core.errors import ServiceError
from cypherkit.core.logging import get_logger

logger = get_logger(__name__)


class RendersCypher(Protocol):
    def to_cypher(self) -> str: ...


class Neo4jDriver:
    """Async neo4j driver that runs query text and returns plain rows.

    The underlying driver is created lazily on first use. Usable as an
    async context manager::

        async with Neo4jDriver(uri, user, password) as driver:
            rows = await driver.run(Query().match(n="Person").return_("n"))
    """

    def __init__(self, uri: str, username: str, password: str, database: str | None = None):
        self.uri = uri
        self.username = username
        self.password = password
        self.database = database
        self._driver: AsyncDriver | None = None

    async def connect(self) -> None:
        if self._driver is not None:
            return
        driver = AsyncGraphDatabase.driver(self.uri, auth=(self.username, self.password))
        try:
            await driver.verify_connectivity()
        except BaseException:
            await driver.close()
            raise
        self._driver = driver
        logger.info("Connected to Neo4j", uri=self.uri, database=self.database)

    async def close(self) -> None:
        if self._driver is None:
            return
        driver, self._driver = self._driver, None
        await driver.close()
        logger.info("Closed Neo4j connection", uri=self.uri)

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session on the configured database, connecting first if needed."""
        await self.connect()
        assert self._driver is not None
        async with self._driver.session(database=self.database) as neo4j_session:
            yield neo4j_session

    @with_error_handling(error_level=ErrorLevel.ERROR)
    async def run(self, query: str | RendersCypher, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run query text (or anything with ``to_cypher()``) and return its rows as dicts.

        Raises:
            ServiceError: If the database rejects the query or is unreachable
        """
        text = query if isinstance(query, str) else query.to_cypher()
        logger.debug("Executing query", query=text, params=params)
        try:
            async with self.session() as neo4j_session:
                result = await neo4j_session.run(text, params or {})
                rows = [dict(record) async for record in result]
        except (Neo4jError, ServiceUnavailable) as e:
            raise ServiceError(
                f"Query execution failed: {e}",
                details=ExecutionErrorDetails(
                    source="neo4j_driver",
                    operation="run",
                    endpoint=self.uri,
                    query=text,
                    driver_error=type(e).__name__,
                ),
                code=ErrorCode.SERVICE_UNAVAILABLE if isinstance(e, ServiceUnavailable) else ErrorCode.DB_QUERY,
            ) from e
        logger.debug("Query returned rows", rows=len(rows))
        return rows


_default_driver: Neo4jDriver | None = None


def get_driver() -> Neo4jDriver:
    """Shared driver built from ``settings`` on first call."""
    global _default_driver

    if _default_driver is None:
        _default_driver = Neo4jDriver(
            settings.neo4j_uri,
            settings.neo4j_user,
            settings.neo4j_password,
            database=settings.neo4j_database,
        )
    return _default_driver
