"""Property references and boolean filter expressions.

Comparing a Property yields a BooleanExpression registered under WHERE.
Operands are absorbed into the new node (and dropped from the registry),
so only the outermost expression of a composed filter is emitted.
"""

import re
from typing import Any

from .registry import ExpressionRegistry, Fragment, FragmentKind

REGEX_OPERATOR = "=~"


def reference_name(ref: Any) -> str:
    """Name of a bound variable, property or raw symbol."""
    return ref.var_name if hasattr(ref, "var_name") else str(ref)


class Property:
    """``variable.property`` reference usable on either side of a comparison."""

    def __init__(self, registry: ExpressionRegistry, variable: Any, prop_name: str) -> None:
        self.registry = registry
        self.variable = variable
        self.prop_name = prop_name

    @property
    def var_name(self) -> str:
        return f"{reference_name(self.variable)}.{self.prop_name}"

    def __lt__(self, other: Any) -> "BooleanExpression":
        return BooleanExpression(self, other, "<")

    def __le__(self, other: Any) -> "BooleanExpression":
        return BooleanExpression(self, other, "<=")

    def __gt__(self, other: Any) -> "BooleanExpression":
        return BooleanExpression(self, other, ">")

    def __ge__(self, other: Any) -> "BooleanExpression":
        return BooleanExpression(self, other, ">=")

    def __eq__(self, other: Any) -> "BooleanExpression":  # type: ignore[override]
        return BooleanExpression(self, other, "=")

    def __ne__(self, other: Any) -> "BooleanExpression":  # type: ignore[override]
        return BooleanExpression(self, other, "<>")

    __hash__ = None  # type: ignore[assignment]

    def matches(self, pattern: "str | re.Pattern[str]") -> "BooleanExpression":
        """Regular expression match (``=~``)."""
        return BooleanExpression(self, pattern, REGEX_OPERATOR)

    def __str__(self) -> str:
        return self.var_name

    def __repr__(self) -> str:
        return f"Property({self.var_name!r})"


class BooleanExpression(Fragment):
    """Immutable comparison or logical node of a WHERE filter tree."""

    separator = " "

    def __init__(self, left: Any, right: Any, operator: str, negated: bool = False) -> None:
        super().__init__(left.registry, FragmentKind.WHERE)
        self.registry.remove(left)
        self.registry.remove(right)
        self._left = left
        self._right = right
        self._is_regex = operator == REGEX_OPERATOR or isinstance(right, re.Pattern)
        self._operator = REGEX_OPERATOR if self._is_regex else operator
        self._negated = negated

    @property
    def left(self) -> Any:
        return self._left

    @property
    def right(self) -> Any:
        return self._right

    @property
    def operator(self) -> str:
        return self._operator

    @property
    def negated(self) -> bool:
        return self._negated

    def __and__(self, other: "BooleanExpression") -> "BooleanExpression":
        return BooleanExpression(self, other, "and")

    def __or__(self, other: "BooleanExpression") -> "BooleanExpression":
        return BooleanExpression(self, other, "or")

    def not_(self) -> "BooleanExpression":
        """Negated copy that takes this node's place in the registry.

        A node already absorbed into a larger filter has no place to take;
        its negation is then left unregistered for the caller to combine.
        """
        negated = BooleanExpression(self._left, self._right, self._operator, negated=True)
        if self in self.registry:
            self.registry.replace(self, negated)
        else:
            self.registry.remove(negated)
        return negated

    __invert__ = not_
    __neg__ = not_

    def __bool__(self) -> bool:
        raise TypeError("Boolean value of a filter expression is undefined; use & and | instead of and/or")

    def render(self) -> str:
        right = _regex(self._right) if self._is_regex else _quote(self._right)
        prefix = "not " if self._negated else ""
        return f"{prefix}({_quote(self._left)} {self._operator} {right})"

    def __repr__(self) -> str:
        return f"BooleanExpression({self.render()!r})"


def _quote(value: Any) -> str:
    if isinstance(value, BooleanExpression):
        return value.render()
    if hasattr(value, "var_name"):
        return value.var_name
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def _regex(value: Any) -> str:
    source = value.pattern if isinstance(value, re.Pattern) else str(value)
    return f"/{source}/"


class Where(Fragment):
    """Hand-written WHERE condition."""

    def __init__(self, registry: ExpressionRegistry, condition: str) -> None:
        super().__init__(registry, FragmentKind.WHERE)
        self.condition = condition

    def render(self) -> str:
        return self.condition


class Return(Fragment):
    """One item of the RETURN clause."""

    def __init__(self, registry: ExpressionRegistry, name_or_ref: Any) -> None:
        super().__init__(registry, FragmentKind.RETURN)
        self.name_or_ref = name_or_ref

    def render(self) -> str:
        if isinstance(self.name_or_ref, str):
            return self.name_or_ref
        return reference_name(self.name_or_ref)
