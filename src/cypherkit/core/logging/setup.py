"""Structured logging for cypherkit.

Builders log rendered query text at debug level and the driver logs
execution. ``setup_logging`` wires those events through structlog into
Logfire (configured by the usual LOGFIRE_* environment variables) and the
console. Libraries embedding cypherkit can skip it and keep their own
structlog configuration.
"""

import logging

import logfire
import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.types import EventDict, Processor, WrappedLogger
from structlog.typing import FilteringBoundLogger

from cypherkit.core.config import settings


def add_query_context(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Annotate events that carry query text or an error.

    Args:
        _logger: The wrapped logger instance
        _method_name: The name of the logging method
        event_dict: The event dictionary

    Returns:
        The event dictionary with ``query_length`` and ``error_type`` added
    """
    if "error" in event_dict:
        event_dict["error_type"] = type(event_dict["error"]).__name__

    query = event_dict.get("query")
    if isinstance(query, str):
        event_dict["query_length"] = len(query)

    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        CallsiteParameterAdder(
            parameters=[CallsiteParameter.MODULE, CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO]
        ),
        add_query_context,
    ]


def setup_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog with Logfire forwarding.

    Args:
        level: Minimum level name; defaults to ``settings.log_level``
        json_logs: Render JSON lines instead of the console format;
            defaults to ``settings.log_json``

    Raises:
        ValueError: If the level name is not a logging level
    """
    level_name = (level or settings.log_level).upper()
    try:
        numeric_level = logging.getLevelNamesMapping()[level_name]
    except KeyError:
        raise ValueError(f"Unknown log level: {level_name!r}") from None
    use_json = settings.log_json if json_logs is None else json_logs
    renderer: Processor = structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()
    # ConsoleRenderer formats exceptions itself
    exc_processors: list[Processor] = [structlog.processors.format_exc_info] if use_json else []

    structlog.configure(
        processors=[
            *_shared_processors(),
            *exc_processors,
            logfire.StructlogProcessor(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # neo4j driver records go through the same renderer
    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_shared_processors())
    )
    neo4j_logger = logging.getLogger("neo4j")
    neo4j_logger.handlers = [handler]
    neo4j_logger.setLevel(max(numeric_level, logging.WARNING))
    neo4j_logger.propagate = False


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a structlog logger; call ``setup_logging`` once to route it to Logfire.

    Args:
        name: The name of the logger (usually __name__)
    """
    return structlog.get_logger(name)
