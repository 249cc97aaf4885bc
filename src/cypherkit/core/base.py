"""Base error classes and enums"""

import logging
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from logfire.integrations.pydantic import PluginSettings
from pydantic import BaseModel, Field, field_serializer


class ErrorLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_logging_level(self) -> int:
        """Numeric level understood by structlog and the logging module"""
        return logging.getLevelNamesMapping()[self.name]


class ErrorCode(str, Enum):
    """Error codes for query construction and execution."""

    # Construction (1xxx)
    INVALID_INPUT = "1001"
    UNKNOWN_ARGUMENT = "1002"
    MISSING_INDEX = "1003"

    # Execution (2xxx)
    DB_QUERY = "2002"
    SERVICE_UNAVAILABLE = "2003"


class ErrorDetails(BaseModel, plugin_settings=PluginSettings(logfire={"record": "all"})):
    """Structured context attached to every cypherkit error"""

    source: str = Field(description="Builder or component that raised the error")
    operation: str = Field(description="Call being made when the error occurred")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC), description="When the error occurred")

    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ArgumentErrorDetails(ErrorDetails):
    """Details for rejected builder arguments"""

    clause: str | None = Field(None, description="Clause keyword or DSL method receiving the argument")
    argument: str | None = Field(None, description="repr() of the rejected argument")
    expected: str | None = Field(None, description="Accepted argument shapes")
    key: str | None = Field(None, description="Property key the argument refers to")


class ExecutionErrorDetails(ErrorDetails):
    """Details for failures while running rendered query text"""

    endpoint: str | None = Field(None, description="Database URI")
    query: str | None = Field(None, description="Query text that was sent")
    driver_error: str | None = Field(None, description="Class name of the driver exception")


class CypherkitError(Exception):
    """Base class for all cypherkit errors"""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        level: ErrorLevel = ErrorLevel.ERROR,
        details: ErrorDetails | None = None,
    ):
        self.message = message
        self.code = code
        self.level = level
        self.details = details or ErrorDetails(source="cypherkit", operation="unknown")
        super().__init__(message)

    def log_fields(self) -> dict[str, Any]:
        """Flat fields for structured log events"""
        fields: dict[str, Any] = {"error_code": self.code.value, "error_level": self.level.value}
        for key, value in self.details.model_dump(mode="json", exclude_none=True).items():
            fields[f"details.{key}"] = value
        return fields
