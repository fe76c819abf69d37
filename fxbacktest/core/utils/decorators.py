"""
Operation logging decorator for core entry points.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from loguru import logger

_CONTEXT_PARAMS = ("name", "strategy_name")

F = TypeVar("F", bound=Callable[..., Any])


def _bind(func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()
    return bound_args


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool | int | float | str):
        return value
    return type(value).__name__


def _extract_context(bound_args: Any) -> dict[str, Any]:
    context = {}
    for param_name, value in bound_args.arguments.items():
        if param_name in _CONTEXT_PARAMS:
            context[param_name] = _serialize_parameter_value(value)
    return context


def log_operation(func: F) -> F:
    """Decorator to log core operations with correlation IDs and timing.

    Failures are logged and re-raised unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = {
            "correlation_id": str(uuid.uuid4())[:8],
            **_extract_context(_bind(func, args, kwargs)),
        }
        func_name = func.__qualname__
        log = logger.bind(**context)
        log.debug(f"Operation started: {func_name}")
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time_ms = (time.perf_counter() - start_time) * 1000
            log.error(
                f"Operation failed: {func_name} after {execution_time_ms:.2f}ms "
                f"({type(e).__name__}: {e})"
            )
            raise

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        log.debug(
            f"Operation completed: {func_name} in {execution_time_ms:.2f}ms "
            f"-> {type(result).__name__}"
        )
        return result

    return wrapper  # type: ignore
