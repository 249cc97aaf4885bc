"""Copy-on-write Cypher query builder.

Clauses accumulate in an immutable log that is split into parts at break
markers; each part renders its clauses in a fixed precedence order.
"""

from .builder import Query
from .clauses import CLAUSE_PRECEDENCE, Clause
from .patterns import NodePattern, format_literal, format_properties

__all__ = [
    "CLAUSE_PRECEDENCE",
    "Clause",
    "NodePattern",
    "Query",
    "format_literal",
    "format_properties",
]
