"""Ordered registry of typed query fragments.

The registry is the shared state of one DSL evaluation. Fragments register
themselves on construction and are grouped by kind: a new fragment lands
right after the last fragment of the same kind, so each kind forms one
contiguous run positioned where its first member was registered.
"""

from collections.abc import Iterator
from enum import Enum


class FragmentKind(str, Enum):
    """Cypher clause categories a fragment can belong to."""

    START = "start"
    MATCH = "match"
    WHERE = "where"
    RETURN = "return"
    WITH = "with"
    CREATE = "create"
    SET = "set"
    REMOVE = "remove"
    UNWIND = "unwind"
    DELETE = "delete"
    ORDER = "order"
    LIMIT = "limit"
    SKIP = "skip"
    USING = "using"
    OPTIONAL_MATCH = "optional_match"
    CREATE_UNIQUE = "create_unique"
    MERGE = "merge"


class Fragment:
    """A typed piece of generated query text.

    Subclasses implement ``render``. Constructing a fragment registers it.
    """

    separator: str = ","

    def __init__(self, registry: "ExpressionRegistry", kind: FragmentKind) -> None:
        self.registry = registry
        self.kind = kind
        registry.insert_grouped(self)

    def render(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()


class ExpressionRegistry:
    """Ordered, mutable sequence of fragments owned by one construction context."""

    def __init__(self) -> None:
        self._fragments: list[Fragment] = []

    def insert_grouped(self, fragment: Fragment) -> None:
        """Insert after the last fragment of the same kind, or append."""
        for pos in range(len(self._fragments) - 1, -1, -1):
            if self._fragments[pos].kind == fragment.kind:
                self._fragments.insert(pos + 1, fragment)
                return
        self._fragments.append(fragment)

    def remove(self, fragment: object) -> None:
        """Remove a superseded fragment; unknown objects are ignored."""
        # Identity, not equality: Property overloads ==
        pos = self._index_of(fragment)
        if pos is not None:
            del self._fragments[pos]

    def replace(self, old: Fragment, new: Fragment) -> None:
        """Put ``new`` at the position of ``old``.

        ``new`` may already be registered (fragments register themselves on
        construction); that registration is dropped first.
        """
        new_pos = self._index_of(new)
        if new_pos is not None:
            del self._fragments[new_pos]
        pos = self._index_of(old)
        if pos is None:
            self.insert_grouped(new)
        else:
            self._fragments[pos] = new

    def _index_of(self, fragment: object) -> int | None:
        for pos, candidate in enumerate(self._fragments):
            if candidate is fragment:
                return pos
        return None

    def __contains__(self, fragment: object) -> bool:
        return self._index_of(fragment) is not None

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self._fragments)

    def __len__(self) -> int:
        return len(self._fragments)

    def __getitem__(self, pos: int) -> Fragment:
        return self._fragments[pos]

    def kinds(self) -> list[FragmentKind]:
        return [fragment.kind for fragment in self._fragments]
