"""Block-evaluated Cypher DSL.

Example::

    def block(q):
        q.node(3).outgoing("r").outgoing("x")
        return "r"

    str(Cypher(block))  # START n0=node(3) MATCH (n0)-[r]->(x) RETURN r

The block receives the DSL object; whatever it returns becomes the RETURN
clause unless it already is one.
"""

from collections.abc import Callable
from typing import Any

from structlog.typing import FilteringBoundLogger

from cypherkit.core.errors import UnknownArgumentError
from cypherkit.core.logging import get_logger

from .expressions import Return, Where
from .patterns import MatchSegment
from .registry import ExpressionRegistry, Fragment, FragmentKind
from .variables import IndexResolver, NodeLookup, NodeQuery, NodeVar, RelVar, StartNode, StartRel

logger: FilteringBoundLogger = get_logger(name=__name__)

PREFIXES: dict[FragmentKind, str] = {
    FragmentKind.START: " START",
    FragmentKind.MATCH: " MATCH",
    FragmentKind.WHERE: " WHERE",
    FragmentKind.RETURN: " RETURN",
}


class Cypher:
    """A Cypher query assembled by evaluating a DSL block once."""

    def __init__(self, dsl_block: Callable[["Cypher"], Any]) -> None:
        self.expressions = ExpressionRegistry()
        self.variables: list[Any] = []
        result = dsl_block(self)
        if isinstance(result, Return) or result is None or result is self:
            return
        if isinstance(result, (list, tuple)):
            self.ret(*result)
        else:
            self.ret(result)

    def match(self, *_: Any) -> "Cypher":
        """No-op that keeps DSL blocks readable."""
        return self

    def start(self, *_: Any) -> "Cypher":
        """No-op that keeps DSL blocks readable."""
        return self

    def where(self, condition: Any = None) -> "Cypher":
        """Register a hand-written condition; filter expressions register themselves."""
        if isinstance(condition, str):
            Where(self.expressions, condition)
        return self

    def query(self, index_resolver: IndexResolver, lucene_query: str, index_type: str = "exact") -> NodeQuery:
        """Start node(s) found by a lucene index query."""
        return NodeQuery(index_resolver, lucene_query, index_type, self.expressions)

    def lookup(self, index_resolver: IndexResolver, key: str, value: Any) -> NodeLookup:
        """Start node(s) found by an exact index lookup on ``key``.

        Raises:
            MissingIndexError: If ``key`` is not indexed
        """
        return NodeLookup(index_resolver, key, value, self.expressions)

    def node(self, *nodes: Any) -> StartNode | NodeVar:
        """Node variable.

        * ``node()`` - an unbound, auto-named node variable
        * ``node("x")`` - an unbound node variable named ``x``
        * ``node(3, 4)`` - start node(s) by id
        """
        if not nodes:
            return NodeVar(self.expressions, self.variables)
        if isinstance(nodes[0], str):
            return NodeVar(self.expressions, self.variables).as_(nodes[0])
        if all(isinstance(n, int) and not isinstance(n, bool) for n in nodes):
            return StartNode(nodes, self.expressions)
        raise UnknownArgumentError(
            f"Unknown arg {nodes!r}", value=nodes, expected="str or int node ids", source="dsl", clause="node"
        )

    def rel(self, *rels: Any) -> StartRel | RelVar:
        """Relationship variable: start relationship(s) by id, or a pattern expression like ``"r?"``."""
        first = rels[0] if rels else None
        if isinstance(first, int) and not isinstance(first, bool):
            return StartRel(rels, self.expressions)
        if isinstance(first, str):
            return RelVar(self.expressions, self.variables, first)
        raise UnknownArgumentError(
            f"Unknown arg {rels!r}", value=rels, expected="str or int relationship ids", source="dsl", clause="rel"
        )

    def ret(self, *returns: Any) -> Fragment | None:
        for item in returns:
            Return(self.expressions, item)
        return self.expressions[-1] if len(self.expressions) else None

    def shortest_path(self, dsl_block: Callable[["Cypher"], MatchSegment]) -> MatchSegment:
        """Wrap the chain built by ``dsl_block`` in ``shortestPath(...)``; returns its tail."""
        match = dsl_block(self)
        match.chain.algorithm = "shortestPath"
        return match

    def to_cypher(self) -> str:
        """Render the registry, emitting each kind's keyword once per run."""
        parts = []
        expr_kind = None
        for expr in self.expressions:
            if expr.kind != expr_kind:
                parts.append(f"{PREFIXES.get(expr.kind, ' ' + expr.kind.value.upper())} {expr.render()}")
            else:
                parts.append(f"{expr.separator}{expr.render()}")
            expr_kind = expr.kind
        cypher = "".join(parts).strip()
        logger.debug("Rendered DSL query", query=cypher)
        return cypher

    def __str__(self) -> str:
        return self.to_cypher()

    def __repr__(self) -> str:
        return f"Cypher({self.to_cypher()!r})"
