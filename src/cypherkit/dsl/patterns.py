"""Pattern chains for MATCH traversals.

A chain is an arena of segments linked by index. Only the current tail of a
chain lives in the registry: extending a segment removes it from the
registry and registers the new tail, so a partially built pattern is never
emitted twice. Rendering from the tail walks back to the head and then
forward over every segment.
"""

from enum import Enum
from typing import Any

from .expressions import reference_name
from .registry import ExpressionRegistry, Fragment, FragmentKind


class Direction(str, Enum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"
    BOTH = "both"


class PatternChain:
    """Arena holding the segments of one traversal."""

    def __init__(self, registry: ExpressionRegistry) -> None:
        self.registry = registry
        self.segments: list["MatchSegment"] = []
        self.algorithm: str | None = None

    def add(self, segment: "MatchSegment") -> int:
        self.segments.append(segment)
        return len(self.segments) - 1

    def head_of(self, segment: "MatchSegment") -> "MatchSegment":
        current = segment
        while current.prev_index is not None:
            current = self.segments[current.prev_index]
        return current

    def walk(self, segment: "MatchSegment") -> list["MatchSegment"]:
        """Segments from the head of ``segment``'s chain, following ``next``."""
        walked = []
        current: MatchSegment | None = self.head_of(segment)
        while current is not None:
            walked.append(current)
            current = current.next
        return walked

    def render_from(self, segment: "MatchSegment") -> str:
        text = "".join(s.pattern_text() for s in self.walk(segment))
        if self.algorithm:
            return f"{segment.var_name} = {self.algorithm}({text})"
        return text


class MatchSegment(Fragment):
    """One link of a pattern chain."""

    def __init__(self, chain: PatternChain, left: Any, right: Any, direction: Direction) -> None:
        super().__init__(chain.registry, FragmentKind.MATCH)
        self.chain = chain
        self.left = left
        self.right = right
        self.direction = direction
        self.prev_index: int | None = left.index if isinstance(left, MatchSegment) else None
        self.next_index: int | None = None
        self.index = chain.add(self)
        self.var_name = f"m{len(chain.registry)}"

    @property
    def connector(self) -> str:
        raise NotImplementedError

    @property
    def prev(self) -> "MatchSegment | None":
        return None if self.prev_index is None else self.chain.segments[self.prev_index]

    @property
    def next(self) -> "MatchSegment | None":
        return None if self.next_index is None else self.chain.segments[self.next_index]

    @property
    def left_var_name(self) -> str:
        return reference_name(self.left)

    @property
    def right_expr(self) -> str:
        # relationship variables may carry raw pattern text such as "r?"
        return self.right.expr if hasattr(self.right, "expr") else reference_name(self.right)

    def pattern_text(self) -> str:
        raise NotImplementedError

    def head_text(self, local: str) -> str:
        return local if self.prev_index is not None else f"({self.left_var_name}){local}"

    def find_match_start(self) -> "MatchSegment":
        return self.chain.head_of(self)

    def _extend(self, segment_cls: type["MatchSegment"], other: Any, direction: Direction) -> "MatchSegment":
        self.registry.remove(self)
        segment = segment_cls(self.chain, self, other, direction)
        self.next_index = segment.index
        return segment

    def render(self) -> str:
        return self.chain.render_from(self)


class NodeHop(MatchSegment):
    """Node to node hop without a named relationship: ``(a)-->(b)``."""

    CONNECTORS = {Direction.OUTGOING: "-->", Direction.INCOMING: "<--", Direction.BOTH: "--"}

    @property
    def connector(self) -> str:
        return self.CONNECTORS[self.direction]

    def pattern_text(self) -> str:
        return self.head_text(f"{self.connector}({self.right_expr})")

    def relate_to(self, other: Any) -> "NodeHop":
        return self._extend(NodeHop, other, Direction.BOTH)

    def outgoing_to(self, other: Any) -> "NodeHop":
        return self._extend(NodeHop, other, Direction.OUTGOING)

    def incoming_from(self, other: Any) -> "NodeHop":
        return self._extend(NodeHop, other, Direction.INCOMING)

    def outgoing(self, rel: Any) -> "RelationshipEntry":
        return self._extend(RelationshipEntry, rel, Direction.OUTGOING)

    def incoming(self, rel: Any) -> "RelationshipEntry":
        return self._extend(RelationshipEntry, rel, Direction.INCOMING)

    def related(self, rel: Any) -> "RelationshipEntry":
        return self._extend(RelationshipEntry, rel, Direction.BOTH)


class RelationshipEntry(MatchSegment):
    """Opening half of a relationship hop: ``(a)-[r]``."""

    @property
    def connector(self) -> str:
        return "<-" if self.direction is Direction.INCOMING else "-"

    def pattern_text(self) -> str:
        return self.head_text(f"{self.connector}[{self.right_expr}]")

    def outgoing(self, node: Any) -> "RelationshipExit":
        return self._extend(RelationshipExit, node, Direction.OUTGOING)

    def incoming(self, node: Any) -> "RelationshipExit":
        return self._extend(RelationshipExit, node, Direction.INCOMING)

    def related(self, node: Any) -> "RelationshipExit":
        return self._extend(RelationshipExit, node, Direction.BOTH)


class RelationshipExit(MatchSegment):
    """Closing half of a relationship hop: ``->(b)``."""

    @property
    def connector(self) -> str:
        return "->" if self.direction is Direction.OUTGOING else "-"

    def pattern_text(self) -> str:
        return f"{self.connector}({reference_name(self.right)})"

    def outgoing(self, rel: Any) -> RelationshipEntry:
        return self._extend(RelationshipEntry, rel, Direction.OUTGOING)

    def incoming(self, rel: Any) -> RelationshipEntry:
        return self._extend(RelationshipEntry, rel, Direction.INCOMING)

    def related(self, rel: Any) -> RelationshipEntry:
        return self._extend(RelationshipEntry, rel, Direction.BOTH)


class PatternAnchor:
    """Chain construction methods for bindings that can start a pattern."""

    registry: ExpressionRegistry

    def _start_chain(self, segment_cls: type[MatchSegment], other: Any, direction: Direction) -> Any:
        return segment_cls(PatternChain(self.registry), self, other, direction)

    def relate_to(self, other: Any) -> NodeHop:
        """Related in any direction: ``(a)--(b)``."""
        return self._start_chain(NodeHop, other, Direction.BOTH)

    def outgoing_to(self, other: Any) -> NodeHop:
        """``(a)-->(b)``"""
        return self._start_chain(NodeHop, other, Direction.OUTGOING)

    def incoming_from(self, other: Any) -> NodeHop:
        """``(a)<--(b)``"""
        return self._start_chain(NodeHop, other, Direction.INCOMING)

    def outgoing(self, rel: Any) -> RelationshipEntry:
        """Enter an outgoing relationship: ``(a)-[r]->...``"""
        return self._start_chain(RelationshipEntry, rel, Direction.OUTGOING)

    def incoming(self, rel: Any) -> RelationshipEntry:
        """Enter an incoming relationship: ``(a)<-[r]-...``"""
        return self._start_chain(RelationshipEntry, rel, Direction.INCOMING)

    def related(self, rel: Any) -> RelationshipEntry:
        """Enter a relationship of any direction: ``(a)-[r]-...``"""
        return self._start_chain(RelationshipEntry, rel, Direction.BOTH)
