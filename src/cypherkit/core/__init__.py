from .base import ArgumentErrorDetails, CypherkitError, ErrorCode, ErrorLevel, ExecutionErrorDetails
from .errors import (
    MissingIndexError,
    QueryConstructionError,
    ServiceError,
    UnknownArgumentError,
)

__all__ = [
    "ArgumentErrorDetails",
    "CypherkitError",
    "ErrorCode",
    "ErrorLevel",
    "ExecutionErrorDetails",
    "MissingIndexError",
    "QueryConstructionError",
    "ServiceError",
    "UnknownArgumentError",
]
