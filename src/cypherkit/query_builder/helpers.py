"""Shortcuts for recurring clause combinations.

Every helper is expressed through the public clause methods, so it returns
a new ``Query`` and leaves the receiver untouched.
"""

from typing import TYPE_CHECKING, Any

from cypherkit.query_builder.patterns import NodePattern

if TYPE_CHECKING:
    from cypherkit.query_builder.builder import Query


class QueryHelpers:
    """Mixin for ``Query`` with label matching, traversal, paging and counting."""

    def match_node(self: "Query", label: str, alias: str = "n", **properties: Any) -> "Query":
        """MATCH ``(alias:label {properties})``.

        Example:
            ```python
            Query().match_node("Person", "p", name="Ann")
            # MATCH (p:Person {name: "Ann"})
            ```
        """
        return self.match(NodePattern(alias, [label], properties).build())

    def expand(
        self: "Query",
        from_alias: str,
        to_alias: str,
        relationship_types: list[str] | None = None,
        depth: int = 1,
        optional: bool = False,
    ) -> "Query":
        """Traverse undirected relationships from ``from_alias`` to ``to_alias``.

        Args:
            from_alias: Bound variable the traversal starts at
            to_alias: Variable bound to the reached nodes
            relationship_types: Relationship types joined with ``|``; any type when omitted
            depth: Upper bound of the variable-length pattern; 1 means a single hop
            optional: Emit OPTIONAL MATCH instead of MATCH
        """
        type_filter = ":" + "|".join(relationship_types) if relationship_types else ""
        hops = f"*1..{depth}" if depth > 1 else ""
        pattern = f"({from_alias})-[{type_filter}{hops}]-({to_alias})"
        if optional:
            return self.optional_match(pattern)
        return self.match(pattern)

    def paginate(self: "Query", page: int = 1, page_size: int = 20) -> "Query":
        """SKIP and LIMIT for a 1-based ``page`` of ``page_size`` rows; page 1 has no SKIP."""
        offset = (page - 1) * page_size
        query = self.skip(offset) if offset > 0 else self
        return query.limit(page_size)

    def count(self: "Query", alias: str = "n", distinct: bool = True) -> "Query":
        """RETURN the number of ``alias`` rows as ``count``."""
        counted = f"DISTINCT {alias}" if distinct else alias
        return self.return_(f"COUNT({counted}) AS count")
