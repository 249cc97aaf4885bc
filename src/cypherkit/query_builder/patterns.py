"""Literal and node pattern formatting for clause renderers."""

import re
from collections.abc import Mapping
from typing import Any


def format_literal(value: Any) -> str:
    """Format a Python value as a Cypher literal.

    Args:
        value: str, bool, None, number, list/tuple, mapping or compiled regex

    Returns:
        Cypher literal text
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, re.Pattern):
        return format_literal(value.pattern)
    if isinstance(value, Mapping):
        return format_properties(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_literal(item) for item in value) + "]"
    return str(value)


def format_properties(properties: Mapping[str, Any]) -> str:
    """Format a property map, e.g. ``{name: "Bob", age: 3}``."""
    prop_str = ", ".join(f"{key}: {format_literal(value)}" for key, value in properties.items())
    return f"{{{prop_str}}}"


class NodePattern:
    """A node pattern such as ``(n:Person:Admin {name: "Ann"})``.

    Any part may be omitted; ``NodePattern().build()`` is ``()``.
    """

    def __init__(
        self,
        variable: str = "",
        labels: list[str] | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> None:
        self.variable = variable
        self.labels = list(labels or [])
        self.properties: Mapping[str, Any] = properties or {}

    def build(self) -> str:
        labels = "".join(f":{label}" for label in self.labels)
        props = f" {format_properties(self.properties)}" if self.properties else ""
        return f"({self.variable}{labels}{props})"

    def __str__(self) -> str:
        return self.build()
