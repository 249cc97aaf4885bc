"""Block-evaluated Cypher DSL.

Fragments register into an ordered, kind-grouped registry as the block runs;
pattern chains and filter expressions splice themselves in and out of it.
"""

from .cypher import Cypher
from .expressions import BooleanExpression, Property, Return, Where
from .patterns import (
    Direction,
    MatchSegment,
    NodeHop,
    PatternChain,
    RelationshipEntry,
    RelationshipExit,
)
from .registry import ExpressionRegistry, Fragment, FragmentKind
from .variables import (
    IndexResolver,
    NodeLookup,
    NodeQuery,
    NodeVar,
    RelVar,
    Start,
    StartNode,
    StartRel,
)

__all__ = [
    "BooleanExpression",
    "Cypher",
    "Direction",
    "ExpressionRegistry",
    "Fragment",
    "FragmentKind",
    "IndexResolver",
    "MatchSegment",
    "NodeHop",
    "NodeLookup",
    "NodeQuery",
    "NodeVar",
    "PatternChain",
    "Property",
    "RelVar",
    "RelationshipEntry",
    "RelationshipExit",
    "Return",
    "Start",
    "StartNode",
    "StartRel",
    "Where",
]
