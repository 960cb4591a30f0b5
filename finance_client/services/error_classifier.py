"""
Error classification and translation for backend requests.

Every failure of a backend call is translated into one of three domain
errors before it reaches a caller:

- ServerError: the server answered with a non-2xx status
- ConnectivityError: the request went out but no response came back
- ClientError: anything else (request could not be built, bad payload, ...)

Each call is attempted exactly once; none of these errors is retried.
"""

import logging
import socket
import threading
from enum import Enum
from typing import Any, Dict, Optional

import requests.exceptions

logger = logging.getLogger(__name__)

SERVER_ERROR_FALLBACK = "Ein Fehler ist aufgetreten"
CONNECTIVITY_ERROR_MESSAGE = (
    "Keine Verbindung zum Server. Bitte überprüfen Sie Ihre Internetverbindung."
)
CLIENT_ERROR_MESSAGE = "Ein unerwarteter Fehler ist aufgetreten."


class FinanceAPIError(Exception):
    """Base class for all translated backend errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ServerError(FinanceAPIError):
    """The backend responded with an error status."""

    def __init__(
        self,
        message: str = SERVER_ERROR_FALLBACK,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class ConnectivityError(FinanceAPIError):
    """The request was sent but no response was received."""

    def __init__(self, message: str = CONNECTIVITY_ERROR_MESSAGE):
        super().__init__(message)


class ClientError(FinanceAPIError):
    """Any other failure while preparing or processing a request."""

    def __init__(self, message: str = CLIENT_ERROR_MESSAGE):
        super().__init__(message)


class ErrorType(Enum):
    """Classification of request failures."""

    SERVER = "server"
    CONNECTIVITY = "connectivity"
    CLIENT = "client"


def extract_server_message(payload: Any) -> str:
    """
    Pick the user-facing message from an error payload.

    The backend sends ``{"message": ...}`` or ``{"error": ...}``; both are
    passed through verbatim.

    Args:
        payload: Decoded JSON body of the error response (any type)

    Returns:
        Message string, or the generic fallback
    """
    if isinstance(payload, dict):
        for field in ("message", "error"):
            value = payload.get(field)
            if isinstance(value, str) and value:
                return value
    return SERVER_ERROR_FALLBACK


def _decode_payload(response: Any) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class ErrorClassifier:
    """
    Classifies request exceptions and translates them into domain errors.

    Features:
    - HTTP error response detection (status code and payload)
    - Network error detection (connection errors, timeouts)
    - Pass-through of already translated errors
    - Statistics tracking
    """

    def __init__(self):
        """Initialize error classifier with statistics tracking."""
        self._lock = threading.Lock()
        self._stats: Dict[str, int] = {
            "server": 0,
            "connectivity": 0,
            "client": 0,
            "total": 0,
        }

    def classify(self, exception: Exception) -> ErrorType:
        """
        Classify an exception.

        Args:
            exception: The exception to classify

        Returns:
            ErrorType classification
        """
        error_type = self._classify(exception)
        with self._lock:
            self._stats["total"] += 1
            self._stats[error_type.value] += 1
        return error_type

    def _classify(self, exception: Exception) -> ErrorType:
        if isinstance(exception, ServerError):
            return ErrorType.SERVER
        if isinstance(exception, ConnectivityError):
            return ErrorType.CONNECTIVITY
        if isinstance(exception, ClientError):
            return ErrorType.CLIENT

        # An HTTPError only carries a response when the server answered
        if isinstance(exception, requests.exceptions.HTTPError):
            if exception.response is not None:
                return ErrorType.SERVER

        # Network-related errors: request went out, nothing came back
        if isinstance(
            exception,
            (
                socket.timeout,
                requests.exceptions.ConnectionError,
                requests.exceptions.Timeout,
            ),
        ):
            return ErrorType.CONNECTIVITY

        return ErrorType.CLIENT

    def translate(self, exception: Exception) -> FinanceAPIError:
        """
        Translate an exception into a domain error.

        Already translated errors are returned unchanged.

        Args:
            exception: The exception raised while performing a request

        Returns:
            ServerError, ConnectivityError or ClientError
        """
        if isinstance(exception, FinanceAPIError):
            return exception

        error_type = self.classify(exception)

        if error_type == ErrorType.SERVER:
            response = exception.response  # type: ignore[attr-defined]
            payload = _decode_payload(response)
            error: FinanceAPIError = ServerError(
                extract_server_message(payload),
                status_code=response.status_code,
                payload=payload,
            )
        elif error_type == ErrorType.CONNECTIVITY:
            error = ConnectivityError()
        else:
            error = ClientError()

        logger.debug(f"Translated {self.get_error_description(exception)}")
        return error

    def get_error_description(self, exception: Exception) -> str:
        """
        Get a human-readable error description for logs.

        Args:
            exception: The exception to describe

        Returns:
            Error description string
        """
        error_type = self._classify(exception)

        if isinstance(exception, requests.exceptions.HTTPError):
            if exception.response is not None:
                status_code = exception.response.status_code
                return f"Server error (HTTP {status_code}) - {error_type.value}"

        if isinstance(exception, (socket.timeout, requests.exceptions.Timeout)):
            return f"Network timeout error - {error_type.value}"

        if isinstance(exception, requests.exceptions.ConnectionError):
            return f"Network connection error - {error_type.value}"

        return f"{type(exception).__name__}: {str(exception)} - {error_type.value}"

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get error classification statistics.

        Returns:
            Dictionary with error counts
        """
        with self._lock:
            return self._stats.copy()

    def reset_statistics(self):
        """Reset error statistics."""
        with self._lock:
            self._stats = {"server": 0, "connectivity": 0, "client": 0, "total": 0}
