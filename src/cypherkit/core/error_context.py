"""Error context captured around a failing builder or driver call"""

import inspect
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import structlog
from pydantic import BaseModel, Field

from .base import CypherkitError


class ErrorContext(BaseModel):
    """What was being called, with which query text, when it failed"""

    function: str
    error_type: str
    error_message: str
    trace_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    query: str | None = None
    error_fields: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def capture(
        cls,
        error: Exception,
        func: Callable[..., Any],
        args: tuple[Any, ...] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> "ErrorContext":
        """Build the context for ``error`` raised by ``func(*args, **kwargs)``.

        A ``query`` argument of ``func`` is recorded as the query text.
        """
        fields = error.log_fields() if isinstance(error, CypherkitError) else {}
        return cls(
            function=func.__qualname__,
            error_type=type(error).__name__,
            error_message=str(error),
            query=_query_argument(func, args, kwargs or {}),
            error_fields=fields,
        )

    def to_dict(self) -> dict[str, Any]:
        """Flat dictionary for log events and error handlers"""
        result = self.model_dump(exclude={"error_fields"}, exclude_none=True, mode="json")
        result.update(self.error_fields)
        return result


def _query_argument(func: Callable[..., Any], args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> str | None:
    try:
        bound = inspect.signature(func).bind_partial(*args, **kwargs)
    except (TypeError, ValueError):
        return None
    query = bound.arguments.get("query")
    return query if isinstance(query, str) else None


@contextmanager
def bound_error_context(context: ErrorContext) -> Iterator[ErrorContext]:
    """Bind the trace id to structlog contextvars while the error is handled"""
    with structlog.contextvars.bound_contextvars(trace_id=context.trace_id):
        yield context
