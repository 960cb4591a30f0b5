"""Structured logging utilities with context support."""

import functools
import logging
import threading
import time
import uuid
from typing import Any, Callable, Dict, Optional, cast

# Thread-local storage for log context
_thread_local = threading.local()

# Field name fragments whose values are redacted before logging
SENSITIVE_FIELDS = {
    "password",
    "passwort",
    "token",
    "api_key",
    "apikey",
    "secret",
    "credentials",
    "authorization",
    "iban",
}

REDACTED = "***REDACTED***"


def generate_correlation_id() -> str:
    """
    Generate a unique correlation ID for tracking one CLI invocation.

    Returns:
        UUID string to use as correlation ID
    """
    return str(uuid.uuid4())


def get_correlation_id() -> Optional[str]:
    """
    Get the current correlation ID from thread-local context.

    Returns:
        Current correlation ID or None if not set
    """
    context = getattr(_thread_local, "context", None)
    if context:
        return context.get("correlation_id")
    return None


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the current thread's log context."""
    return dict(getattr(_thread_local, "context", {}) or {})


class LogContext:
    """
    Context manager for adding structured fields to log records.

    Fields live in thread-local storage, so requests issued from a worker
    pool must enter their own context (see ``ApiClient``).

    Example:
        with LogContext(method="GET", endpoint="/finanzen/rechnungen"):
            logger.info("Fetching invoices")
            # Log will include method and endpoint fields
    """

    def __init__(self, **kwargs):
        self.fields = kwargs
        self.previous_context: Optional[Dict[str, Any]] = None

    def __enter__(self):
        if not hasattr(_thread_local, "context"):
            _thread_local.context = {}

        self.previous_context = _thread_local.context.copy()
        _thread_local.context.update(self.fields)

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.previous_context is not None:
            _thread_local.context = self.previous_context
        else:
            _thread_local.context = {}


class _ContextFilter(logging.Filter):
    """Logging filter that adds context fields to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if hasattr(_thread_local, "context"):
            for key, value in _thread_local.context.items():
                setattr(record, key, value)
        return True


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(sensitive in lowered for sensitive in SENSITIVE_FIELDS)


def sanitize_sensitive_data(data: Any) -> Any:
    """
    Redact sensitive fields in request bodies and query parameters.

    Dictionaries are processed recursively, including dictionaries nested
    in lists. Any key containing a sensitive fragment (case-insensitive)
    has its value replaced.

    Args:
        data: Dictionary (or list of dictionaries) to sanitize

    Returns:
        Sanitized copy with sensitive values redacted
    """
    if isinstance(data, list):
        return [sanitize_sensitive_data(item) for item in data]

    if not isinstance(data, dict):
        return data

    sanitized: Dict[str, Any] = {}

    for key, value in data.items():
        if _is_sensitive(str(key)):
            sanitized[key] = REDACTED if value is not None else None
        elif isinstance(value, (dict, list)):
            sanitized[key] = sanitize_sensitive_data(cast(Any, value))
        else:
            sanitized[key] = value

    return sanitized


def log_function_call(
    func: Optional[Callable] = None, *, include_args: bool = False, level: str = "DEBUG"
) -> Callable:
    """
    Decorator to log function entry, exit and duration.

    Exceptions are logged (without stack trace, the caller decides how to
    report them) and re-raised.

    Args:
        func: Function to decorate (when used without arguments)
        include_args: Whether to include function arguments in logs
        level: Log level to use (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Decorated function

    Example:
        @log_function_call
        def get_monthly_analytics(self, months=12):
            ...

        @log_function_call(include_args=True, level="INFO")
        def get_financial_summary(self, year):
            ...
    """

    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(f.__module__)
            log_level = getattr(logging, level.upper())

            if include_args:
                args_repr = [repr(a) for a in args]
                kwargs_repr = [f"{k}={v!r}" for k, v in kwargs.items()]
                signature = ", ".join(args_repr + kwargs_repr)
                logger.log(log_level, f"Entering {f.__name__} with args: {signature}")
            else:
                logger.log(log_level, f"Entering {f.__name__}")

            started = time.perf_counter()
            try:
                result = f(*args, **kwargs)
            except Exception as e:
                logger.warning(f"Exception in {f.__name__}: {type(e).__name__}: {e}")
                raise

            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.log(log_level, f"Exiting {f.__name__} ({elapsed_ms:.1f} ms)")
            return result

        return wrapper

    if func is None:
        return decorator
    else:
        return decorator(func)
