"""Error handling decorators"""

import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, Protocol, TypeVar, cast

from .base import CypherkitError, ErrorLevel
from .error_context import ErrorContext, bound_error_context
from .logging import get_logger

logger = get_logger(__name__)
P = ParamSpec("P")
T = TypeVar("T")


class ErrorHandlerProtocol(Protocol):
    """Receives errors caught by ``with_error_handling``"""

    async def handle_async(self, error: Exception, level: ErrorLevel, context: ErrorContext) -> None: ...

    def handle_sync(self, error: Exception, level: ErrorLevel, context: ErrorContext) -> None: ...


def _log_error(error: Exception, level: ErrorLevel, context: ErrorContext) -> None:
    logger.log(
        level.to_logging_level(),
        f"{context.function} failed: {error}",
        exc_info=error,
        **context.to_dict(),
    )


def with_error_handling(
    error_level: ErrorLevel = ErrorLevel.ERROR,
    reraise: bool = True,
    error_handler: ErrorHandlerProtocol | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Log (or hand off) exceptions raised by the decorated sync or async callable.

    cypherkit errors are reported at their own level; anything else at
    ``error_level``. The failing call's ``query`` argument, when present,
    is included in the context.

    Args:
        error_level: Level for exceptions that are not cypherkit errors
        reraise: Re-raise after reporting; otherwise the call returns None
        error_handler: Replaces the default structlog reporting
    """

    def level_for(error: Exception) -> ErrorLevel:
        return error.level if isinstance(error, CypherkitError) else error_level

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
                try:
                    return await cast("Callable[P, Awaitable[T]]", func)(*args, **kwargs)
                except Exception as e:
                    level = level_for(e)
                    with bound_error_context(ErrorContext.capture(e, func, args, kwargs)) as ctx:
                        if error_handler:
                            await error_handler.handle_async(e, level, ctx)
                        else:
                            _log_error(e, level, ctx)
                    if reraise:
                        raise
                    return cast("T", None)

            return cast("Callable[P, T]", async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                level = level_for(e)
                with bound_error_context(ErrorContext.capture(e, func, args, kwargs)) as ctx:
                    if error_handler:
                        error_handler.handle_sync(e, level, ctx)
                    else:
                        _log_error(e, level, ctx)
                if reraise:
                    raise
                return cast("T", None)

        return sync_wrapper

    return decorator
