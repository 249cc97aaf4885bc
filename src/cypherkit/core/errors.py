"""Specific error types for cypherkit."""

from typing import Any

from .base import (
    ArgumentErrorDetails,
    CypherkitError,
    ErrorCode,
    ErrorDetails,
    ErrorLevel,
    ExecutionErrorDetails,
)


class QueryConstructionError(CypherkitError):
    """Bad input handed to a query builder."""

    def __init__(
        self,
        message: str,
        details: ErrorDetails | None = None,
        code: ErrorCode = ErrorCode.INVALID_INPUT,
    ):
        super().__init__(
            message=message,
            code=code,
            level=ErrorLevel.ERROR,
            details=details or ArgumentErrorDetails(source="query_builder", operation="construct"),
        )


class UnknownArgumentError(QueryConstructionError):
    """An argument shape the receiving clause or DSL method does not understand."""

    def __init__(
        self,
        message: str,
        value: Any = None,
        expected: str | None = None,
        source: str = "query_builder",
        clause: str | None = None,
    ):
        super().__init__(
            message=message,
            code=ErrorCode.UNKNOWN_ARGUMENT,
            details=ArgumentErrorDetails(
                source=source,
                operation="parse_argument",
                clause=clause,
                argument=repr(value),
                expected=expected,
            ),
        )
        self.value = value


class MissingIndexError(QueryConstructionError):
    """Index lookup on a property key that has no index."""

    def __init__(self, message: str, index_owner: str, key: str):
        super().__init__(
            message=message,
            code=ErrorCode.MISSING_INDEX,
            details=ArgumentErrorDetails(
                source="dsl",
                operation="lookup",
                key=key,
                expected=f"a key indexed on {index_owner}",
            ),
        )
        self.key = key
        self.index_owner = index_owner


class ServiceError(CypherkitError):
    """The database rejected the query or could not be reached."""

    def __init__(
        self,
        message: str,
        details: ExecutionErrorDetails | None = None,
        code: ErrorCode = ErrorCode.SERVICE_UNAVAILABLE,
    ):
        super().__init__(
            message=message,
            code=code,
            level=ErrorLevel.ERROR,
            details=details or ExecutionErrorDetails(source="neo4j_driver", operation="run"),
        )
