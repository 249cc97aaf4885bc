"""Main Cypher query builder implementation.

``Query`` values are immutable: every clause method returns a new ``Query``
holding the previous clause log plus the new entries, so a partially built
query can be handed to several concerns and extended independently.
"""

import copy
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from structlog.typing import FilteringBoundLogger

from cypherkit.core.config import settings
from cypherkit.core.logging import get_logger
from cypherkit.query_builder.clauses import (
    CLAUSE_PRECEDENCE,
    Clause,
    CreateClause,
    CreateUniqueClause,
    DeleteClause,
    LimitClause,
    MatchClause,
    MergeClause,
    OptionalMatchClause,
    OrderClause,
    RemoveClause,
    ReturnClause,
    SetClause,
    SkipClause,
    StartClause,
    UnwindClause,
    UsingClause,
    WhereClause,
    WithClause,
)
from cypherkit.query_builder.helpers import QueryHelpers

if TYPE_CHECKING:
    from cypherkit.infrastructure.neo4j.driver import Neo4jDriver

logger: FilteringBoundLogger = get_logger(name=__name__)


def _collect_args(args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> list[Any]:
    return [*args, dict(kwargs)] if kwargs else list(args)


class Query(QueryHelpers):
    """Copy-on-write Cypher query builder.

    Positional arguments of the clause methods are raw text, integers or
    mappings; keyword arguments are treated as one more mapping.

    Example:
        ```python
        Query().match(n="Person").where(n={"age": 30}).to_cypher()
        # MATCH (n:Person) WHERE n.age = 30
        ```
    """

    def __init__(self, parser: str | None = None) -> None:
        """Initialize an empty query.

        Args:
            parser: Parser/version directive (``CYPHER <parser> ...``);
                defaults to ``settings.cypher_parser``
        """
        self.parser: str | None = parser if parser is not None else settings.cypher_parser
        # None entries are break markers
        self._clauses: tuple[Clause | None, ...] = ()

    @property
    def clauses(self) -> tuple[Clause | None, ...]:
        return self._clauses

    def start(self, *args: Any, **kwargs: Any) -> "Query":
        """START clause."""
        return self.build_deeper_query(StartClause, _collect_args(args, kwargs))

    def match(self, *args: Any, **kwargs: Any) -> "Query":
        """MATCH clause.

        Example:
            ```python
            query.match(n="Person", m=["Person", "Admin"], c={"name": "Acme"})
            # MATCH (n:Person), (m:Person:Admin), (c {name: "Acme"})
            ```
        """
        return self.build_deeper_query(MatchClause, _collect_args(args, kwargs))

    def optional_match(self, *args: Any, **kwargs: Any) -> "Query":
        """OPTIONAL MATCH clause."""
        return self.build_deeper_query(OptionalMatchClause, _collect_args(args, kwargs))

    def using(self, *args: Any, **kwargs: Any) -> "Query":
        """USING clause."""
        return self.build_deeper_query(UsingClause, _collect_args(args, kwargs))

    def where(self, *args: Any, **kwargs: Any) -> "Query":
        """WHERE clause; all conditions of a partition are joined with AND.

        Example:
            ```python
            query.where(n={"age": 30, "name": ["Ann", "Bob"]}, m={"deleted": None})
            # WHERE n.age = 30 AND n.name IN ["Ann", "Bob"] AND m.deleted IS NULL
            ```
        """
        return self.build_deeper_query(WhereClause, _collect_args(args, kwargs))

    def with_(self, *args: Any, **kwargs: Any) -> "Query":
        """WITH clause; always starts a new query part."""
        return self.build_deeper_query(WithClause, _collect_args(args, kwargs))

    def order(self, *args: Any, **kwargs: Any) -> "Query":
        """ORDER BY clause."""
        return self.build_deeper_query(OrderClause, _collect_args(args, kwargs))

    order_by = order

    def limit(self, *args: Any, **kwargs: Any) -> "Query":
        """LIMIT clause."""
        return self.build_deeper_query(LimitClause, _collect_args(args, kwargs))

    def skip(self, *args: Any, **kwargs: Any) -> "Query":
        """SKIP clause."""
        return self.build_deeper_query(SkipClause, _collect_args(args, kwargs))

    offset = skip

    def set(self, *args: Any, **kwargs: Any) -> "Query":
        """SET clause; mappings set individual properties, strings set labels."""
        return self.build_deeper_query(SetClause, _collect_args(args, kwargs))

    def set_props(self, *args: Any, **kwargs: Any) -> "Query":
        """SET clause replacing whole property maps.

        Example:
            ```python
            Query().match(n="Person").set_props(n={"age": 19})
            # MATCH (n:Person) SET n = {age: 19}
            ```
        """
        return self.build_deeper_query(SetClause, _collect_args(args, kwargs), {"set_props": True})

    def remove(self, *args: Any, **kwargs: Any) -> "Query":
        """REMOVE clause."""
        return self.build_deeper_query(RemoveClause, _collect_args(args, kwargs))

    def unwind(self, *args: Any, **kwargs: Any) -> "Query":
        """UNWIND clause."""
        return self.build_deeper_query(UnwindClause, _collect_args(args, kwargs))

    def return_(self, *args: Any, **kwargs: Any) -> "Query":
        """RETURN clause."""
        return self.build_deeper_query(ReturnClause, _collect_args(args, kwargs))

    def create(self, *args: Any, **kwargs: Any) -> "Query":
        """CREATE clause."""
        return self.build_deeper_query(CreateClause, _collect_args(args, kwargs))

    def create_unique(self, *args: Any, **kwargs: Any) -> "Query":
        """CREATE UNIQUE clause."""
        return self.build_deeper_query(CreateUniqueClause, _collect_args(args, kwargs))

    def merge(self, *args: Any, **kwargs: Any) -> "Query":
        """MERGE clause."""
        return self.build_deeper_query(MergeClause, _collect_args(args, kwargs))

    def delete(self, *args: Any, **kwargs: Any) -> "Query":
        """DELETE clause."""
        return self.build_deeper_query(DeleteClause, _collect_args(args, kwargs))

    def break_(self) -> "Query":
        """Freeze what has been built so far; later clauses render as a new part.

        Example:
            ```python
            Query().match(q="Person").match("r:Car").break_().match("(p: Person)-->q")
            # MATCH (q:Person), r:Car MATCH (p: Person)-->q
            ```
        """
        return self.build_deeper_query(None)

    def build_deeper_query(
        self,
        clause_cls: type[Clause] | None,
        args: Iterable[Any] = (),
        options: Mapping[str, Any] | None = None,
    ) -> "Query":
        """Derive a new query with ``clause_cls`` clauses built from ``args`` appended.

        A ``None`` class appends only a break marker; WITH clauses are
        preceded by one.
        """
        new_entries: list[Clause | None] = []
        if clause_cls is None or clause_cls is WithClause:
            new_entries.append(None)
        if clause_cls is not None:
            new_entries.extend(clause_cls.from_args(args, options))

        new_query = copy.copy(self)
        new_query._clauses = self._clauses + tuple(new_entries)
        return new_query

    def partitioned_clauses(self) -> list[list[Clause]]:
        """Clause runs between break markers, without empty runs."""
        partitions: list[list[Clause]] = [[]]
        for clause in self._clauses:
            if clause is None:
                if partitions[-1]:
                    partitions.append([])
            else:
                partitions[-1].append(clause)
        return [partition for partition in partitions if partition]

    def to_cypher(self) -> str:
        """Render the query text.

        Returns:
            Cypher query string
        """
        rendered_parts: list[str] = []
        for partition in self.partitioned_clauses():
            clauses_by_class: dict[type[Clause], list[Clause]] = {}
            for clause in partition:
                clauses_by_class.setdefault(type(clause), []).append(clause)

            cypher_parts = [
                clause_cls.to_cypher(clauses_by_class[clause_cls])
                for clause_cls in CLAUSE_PRECEDENCE
                if clause_cls in clauses_by_class
            ]
            rendered_parts.append(" ".join(cypher_parts).strip())

        cypher = " ".join(rendered_parts)
        if self.parser:
            cypher = f"CYPHER {self.parser} {cypher}"
        cypher = cypher.strip()

        logger.debug("Rendered query", query=cypher)
        return cypher

    def union(self, other: "Query", all_: bool = False) -> str:
        """UNION of this query with ``other``.

        Example:
            ```python
            other = Query().match(o="Person").where(o={"age": 10})
            Query().match(n="Person").union(other)
            # MATCH (n:Person) UNION MATCH (o:Person) WHERE o.age = 10
            ```

        Args:
            other: Second half of the UNION
            all_: Use UNION ALL

        Returns:
            Resulting UNION query string
        """
        return f"{self.to_cypher()} UNION{' ALL' if all_ else ''} {other.to_cypher()}"

    union_cypher = union

    async def execute(self, driver: "Neo4jDriver", params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Hand the rendered query to ``driver`` and return its rows unchanged.

        Args:
            driver: Execution collaborator
            params: Optional query parameters

        Returns:
            Result rows as dictionaries
        """
        return await driver.run(self.to_cypher(), params)

    def __str__(self) -> str:
        return self.to_cypher()

    def __repr__(self) -> str:
        return f"Query({self.to_cypher()!r})"
