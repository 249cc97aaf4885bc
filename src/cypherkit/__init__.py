"""Programmatic Cypher query construction.

Two construction styles are provided:

* ``cypherkit.dsl.Cypher`` evaluates a block that builds START/MATCH/WHERE/RETURN
  fragments with pattern chains and filter expressions.
* ``cypherkit.query_builder.Query`` is an immutable, chainable clause builder.
"""

from cypherkit.core.errors import MissingIndexError, QueryConstructionError, UnknownArgumentError
from cypherkit.dsl import Cypher
from cypherkit.query_builder import Query

__all__ = [
    "Cypher",
    "MissingIndexError",
    "Query",
    "QueryConstructionError",
    "UnknownArgumentError",
]
