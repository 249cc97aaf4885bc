"""Clause kinds and their argument renderers.

Each clause is built from one caller-supplied argument: raw text (``str``),
an integer, or a mapping of variable name to value. Argument text is
rendered when the clause is created, so bad input fails at the call that
introduced it and clauses are immutable afterwards. Clauses of one kind
that share a partition are rendered together under a single keyword.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from cypherkit.core.errors import UnknownArgumentError

from .patterns import NodePattern, format_literal, format_properties


def _flatten(args: Iterable[Any]) -> Iterable[Any]:
    for arg in args:
        if isinstance(arg, (list, tuple)):
            yield from _flatten(arg)
        else:
            yield arg


def _is_empty(arg: Any) -> bool:
    return isinstance(arg, (str, Mapping)) and len(arg) == 0


class Clause:
    """One clause instance of a given kind."""

    KEYWORD: ClassVar[str]
    JOINER: ClassVar[str] = ", "

    def __init__(self, arg: Any, options: Mapping[str, Any] | None = None) -> None:
        self.options: Mapping[str, Any] = options or {}
        self._values: tuple[str, ...] = tuple(self._render(arg))

    @classmethod
    def from_args(cls, args: Iterable[Any], options: Mapping[str, Any] | None = None) -> list["Clause"]:
        """One clause per non-empty argument; lists and tuples are flattened."""
        return [cls(arg, options) for arg in _flatten(args) if not _is_empty(arg)]

    @property
    def values(self) -> tuple[str, ...]:
        return self._values

    def _render(self, arg: Any) -> list[str]:
        if isinstance(arg, str):
            return [self.from_string(arg)]
        if isinstance(arg, int) and not isinstance(arg, bool):
            return [self.from_integer(arg)]
        if isinstance(arg, Mapping):
            rendered: list[str] = []
            for key, value in arg.items():
                result = self.from_key_and_value(str(key), value)
                rendered.extend([result] if isinstance(result, str) else result)
            return rendered
        raise self.arg_error(arg)

    def from_string(self, value: str) -> str:
        return value

    def from_integer(self, value: int) -> str:
        raise self.arg_error(value)

    def from_key_and_value(self, key: str, value: Any) -> str | list[str]:
        raise self.arg_error({key: value})

    def arg_error(self, value: Any) -> UnknownArgumentError:
        return UnknownArgumentError(
            f"Invalid argument for {self.KEYWORD}: {value!r}",
            value=value,
            expected=type(self).__name__,
            clause=self.KEYWORD,
        )

    @classmethod
    def clause_string(cls, clauses: list["Clause"]) -> str:
        return cls.JOINER.join(value for clause in clauses for value in clause.values)

    @classmethod
    def to_cypher(cls, clauses: list["Clause"]) -> str:
        return f"{cls.KEYWORD} {cls.clause_string(clauses)}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.JOINER.join(self._values)!r})"


class _NodePatternClause(Clause):
    """Clauses whose mapping arguments describe nodes: ``n="Person"`` -> ``(n:Person)``."""

    def from_key_and_value(self, key: str, value: Any) -> str:
        if isinstance(value, str):
            return NodePattern(key, [value]).build()
        if isinstance(value, (list, tuple)) and all(isinstance(label, str) for label in value):
            return NodePattern(key, list(value)).build()
        if isinstance(value, Mapping):
            return NodePattern(key, properties=value).build()
        raise self.arg_error({key: value})


class StartClause(Clause):
    KEYWORD = "START"

    def from_key_and_value(self, key: str, value: Any) -> str:
        if isinstance(value, str):
            return f"{key} = {value}"
        raise self.arg_error({key: value})


class MatchClause(_NodePatternClause):
    KEYWORD = "MATCH"


class OptionalMatchClause(_NodePatternClause):
    KEYWORD = "OPTIONAL MATCH"


class UsingClause(Clause):
    KEYWORD = "USING"
    JOINER = " USING "


class WhereClause(Clause):
    KEYWORD = "WHERE"
    JOINER = " AND "

    def from_key_and_value(self, key: str, value: Any) -> str | list[str]:
        if isinstance(value, Mapping):
            conditions: list[str] = []
            for prop, prop_value in value.items():
                result = self.from_key_and_value(f"{key}.{prop}", prop_value)
                conditions.extend([result] if isinstance(result, str) else result)
            return conditions
        if isinstance(value, (list, tuple)):
            return f"{key} IN {format_literal(list(value))}"
        if value is None:
            return f"{key} IS NULL"
        if isinstance(value, re.Pattern):
            return f"{key} =~ {format_literal(value)}"
        if isinstance(value, range):
            if not value:
                return f"{key} IN []"
            step = f", {value.step}" if value.step != 1 else ""
            return f"{key} IN RANGE({value.start}, {value[-1]}{step})"
        return f"{key} = {format_literal(value)}"


class WithClause(Clause):
    KEYWORD = "WITH"

    def from_key_and_value(self, key: str, value: Any) -> str:
        if isinstance(value, str):
            return f"{value} AS {key}"
        raise self.arg_error({key: value})


class CreateClause(_NodePatternClause):
    KEYWORD = "CREATE"


class CreateUniqueClause(_NodePatternClause):
    KEYWORD = "CREATE UNIQUE"


class MergeClause(_NodePatternClause):
    KEYWORD = "MERGE"
    JOINER = " MERGE "


class SetClause(Clause):
    """SET; with the ``set_props`` option a mapping replaces all properties."""

    KEYWORD = "SET"

    def from_key_and_value(self, key: str, value: Any) -> str | list[str]:
        if isinstance(value, str):
            return f"{key}:{value}"
        if isinstance(value, Mapping):
            if self.options.get("set_props"):
                return f"{key} = {format_properties(value)}"
            return [f"{key}.{prop} = {format_literal(prop_value)}" for prop, prop_value in value.items()]
        raise self.arg_error({key: value})


class RemoveClause(Clause):
    KEYWORD = "REMOVE"

    def from_key_and_value(self, key: str, value: Any) -> str | list[str]:
        if isinstance(value, str):
            return f"{key}.{value}"
        if isinstance(value, (list, tuple)):
            return [f"{key}.{prop}" for prop in value]
        raise self.arg_error({key: value})


class UnwindClause(Clause):
    KEYWORD = "UNWIND"
    JOINER = " UNWIND "

    def from_key_and_value(self, key: str, value: Any) -> str:
        if isinstance(value, str):
            return f"{value} AS {key}"
        if isinstance(value, (list, tuple)):
            return f"{format_literal(list(value))} AS {key}"
        raise self.arg_error({key: value})


class DeleteClause(Clause):
    KEYWORD = "DELETE"


class ReturnClause(Clause):
    KEYWORD = "RETURN"

    def from_key_and_value(self, key: str, value: Any) -> str | list[str]:
        if isinstance(value, str):
            return f"{key}.{value}"
        if isinstance(value, (list, tuple)):
            return [f"{key}.{prop}" for prop in value]
        raise self.arg_error({key: value})


class OrderClause(Clause):
    KEYWORD = "ORDER BY"

    def from_key_and_value(self, key: str, value: Any) -> str | list[str]:
        if isinstance(value, str):
            return f"{key}.{value}"
        if isinstance(value, Mapping):
            return [f"{key}.{prop} {str(direction).upper()}" for prop, direction in value.items()]
        if isinstance(value, (list, tuple)):
            ordered: list[str] = []
            for item in value:
                result = self.from_key_and_value(key, item)
                ordered.extend([result] if isinstance(result, str) else result)
            return ordered
        raise self.arg_error({key: value})


class _LastValueClause(Clause):
    """LIMIT and SKIP: only the most recent value in a partition counts."""

    def from_integer(self, value: int) -> str:
        return str(value)

    @classmethod
    def clause_string(cls, clauses: list[Clause]) -> str:
        return clauses[-1].values[-1]


class LimitClause(_LastValueClause):
    KEYWORD = "LIMIT"


class SkipClause(_LastValueClause):
    KEYWORD = "SKIP"


# Rendering order of clause kinds within one partition
CLAUSE_PRECEDENCE: tuple[type[Clause], ...] = (
    WithClause,
    CreateClause,
    CreateUniqueClause,
    MergeClause,
    StartClause,
    MatchClause,
    OptionalMatchClause,
    UsingClause,
    WhereClause,
    SetClause,
    RemoveClause,
    UnwindClause,
    DeleteClause,
    ReturnClause,
    OrderClause,
    LimitClause,
    SkipClause,
)
