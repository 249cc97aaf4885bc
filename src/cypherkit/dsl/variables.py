"""Variable bindings: start entities and unbound node/relationship variables."""

import re
from typing import Any, Protocol, runtime_checkable

from cypherkit.core.errors import MissingIndexError

from .expressions import Property
from .patterns import PatternAnchor
from .registry import ExpressionRegistry, Fragment, FragmentKind

_LEADING_ALPHA = re.compile(r"[^\W\d_]*")


@runtime_checkable
class IndexResolver(Protocol):
    """Index metadata of a domain type.

    Implemented outside this package, typically by model classes that keep
    lucene indexes.
    """

    def index_name_for_type(self, index_type: str) -> str:
        """Name of the index serving ``index_type`` (e.g. "exact", "fulltext")."""
        ...

    def index_type(self, key: str) -> str | None:
        """Index category for a property key, or None when the key is not indexed."""
        ...


class Start(PatternAnchor, Fragment):
    """A START entity; its name is derived from the registry size."""

    def __init__(self, prefix: str, registry: ExpressionRegistry) -> None:
        self.var_name = f"{prefix}{len(registry)}"
        super().__init__(registry, FragmentKind.START)

    def __getitem__(self, prop_name: str) -> Property:
        return Property(self.registry, self, prop_name)

    def as_(self, name: str) -> "Start":
        self.var_name = name
        return self


class StartNode(Start):
    def __init__(self, nodes: tuple[int, ...], registry: ExpressionRegistry) -> None:
        super().__init__("n", registry)
        self.nodes = nodes

    def render(self) -> str:
        return f"{self.var_name}=node({','.join(str(n) for n in self.nodes)})"


class StartRel(Start):
    def __init__(self, rels: tuple[int, ...], registry: ExpressionRegistry) -> None:
        super().__init__("r", registry)
        self.rels = rels

    def render(self) -> str:
        return f"{self.var_name}=relationship({','.join(str(r) for r in self.rels)})"


class NodeQuery(Start):
    """Start nodes found by an index query."""

    def __init__(
        self,
        index_resolver: IndexResolver,
        query: str,
        index_type: str,
        registry: ExpressionRegistry,
    ) -> None:
        super().__init__("n", registry)
        self.index_name = index_resolver.index_name_for_type(index_type)
        self.query = query

    def render(self) -> str:
        return f"{self.var_name}=node:{self.index_name}({self.query})"


class NodeLookup(Start):
    """Start nodes found by an exact key/value index lookup."""

    def __init__(
        self,
        index_resolver: IndexResolver,
        key: str,
        value: Any,
        registry: ExpressionRegistry,
    ) -> None:
        index_type = index_resolver.index_type(str(key))
        if not index_type:
            owner = getattr(index_resolver, "__name__", type(index_resolver).__name__)
            raise MissingIndexError(f"No index on {owner} property {key}", index_owner=owner, key=str(key))
        super().__init__("n", registry)
        self.index_name = index_resolver.index_name_for_type(index_type)
        self.query = f'{key}="{value}"'

    def render(self) -> str:
        return f"{self.var_name}=node:{self.index_name}({self.query})"


class NodeVar(PatternAnchor):
    """Unbound node variable used in match statements."""

    def __init__(self, registry: ExpressionRegistry, variables: list[Any]) -> None:
        self.var_name = f"v{len(variables)}"
        variables.append(self)
        self.registry = registry

    def __getitem__(self, prop_name: str) -> Property:
        return Property(self.registry, self, prop_name)

    def as_(self, name: str) -> "NodeVar":
        self.var_name = name
        return self

    def __str__(self) -> str:
        return self.var_name

    def __repr__(self) -> str:
        return f"NodeVar({self.var_name!r})"


class RelVar:
    """Unbound relationship variable used in match, where and return statements.

    ``expr`` is the raw text placed between the brackets of a relationship
    pattern, e.g. ``"r?"`` or ``"r:friends"``; the variable name is guessed
    from its leading letters.
    """

    def __init__(self, registry: ExpressionRegistry, variables: list[Any], expr: str = "") -> None:
        variables.append(self)
        self.registry = registry
        self._expr = expr
        guess = _LEADING_ALPHA.match(expr).group(0) if expr else ""
        self.var_name = guess or f"v{len(variables)}"

    @property
    def expr(self) -> str:
        return self._expr or self.var_name

    def __getitem__(self, prop_name: str) -> Property:
        return Property(self.registry, self, prop_name)

    def as_(self, name: str) -> "RelVar":
        self.var_name = name
        return self

    def __str__(self) -> str:
        return self.var_name

    def __repr__(self) -> str:
        return f"RelVar({self.var_name!r})"
