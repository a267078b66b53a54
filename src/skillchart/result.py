"""Result type used by the CLI handlers.

Handlers run a workflow step and hand back a Result instead of raising, so
the click layer only decides how to print the outcome and which exit code
to use.
"""

from typing import Any, Callable, Optional, TypedDict, TypeVar

from loguru import logger

from skillchart.errors import SkillChartError

T = TypeVar("T")


class Result(TypedDict):
    """Outcome of a handler.

    Attributes:
        ok: True if the operation succeeded
        value: The successful value (None if failed)
        error: Error message (None if succeeded)
    """

    ok: bool
    value: Optional[Any]
    error: Optional[str]


def success(value: Any) -> Result:
    return Result(ok=True, value=value, error=None)


def failure(error: str) -> Result:
    return Result(ok=False, value=None, error=error)


def from_exception(exc: Exception) -> Result:
    """Convert an exception into a failed Result.

    Our own errors carry a message meant for the operator, so the type name
    is only prefixed for foreign exceptions (HTTP client errors and the like).
    """
    if isinstance(exc, SkillChartError):
        return failure(str(exc))
    return failure(f"{type(exc).__name__}: {exc}")


def try_operation(operation: Callable[[], T]) -> Result:
    """Execute an operation and return a Result.

    The traceback is logged before it is flattened into the error string.
    """
    try:
        return success(operation())
    except Exception as exc:
        logger.opt(exception=exc).debug("Operation failed")
        return from_exception(exc)
