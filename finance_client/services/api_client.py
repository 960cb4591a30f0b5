"""
HTTP client for the finance backend.

Wraps a ``requests.Session`` with the response cache, envelope unwrapping and
error translation shared by all service classes.
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional

import requests

from finance_client.services.error_classifier import ErrorClassifier
from finance_client.services.response_cache import ResponseCache
from finance_client.utils.logging_utils import LogContext, sanitize_sensitive_data

logger = logging.getLogger(__name__)


def unwrap_envelope(body: Any) -> Any:
    """
    Strip the backend's response envelope.

    The backend wraps most payloads as ``{"data": ...}``. Bodies without a
    ``data`` key are returned unchanged, including falsy ``data`` values
    such as ``[]`` or ``0``.

    Args:
        body: Decoded JSON body, or None for an empty body

    Returns:
        The payload
    """
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Drop unset query parameters."""
    return {key: value for key, value in (params or {}).items() if value is not None}


class ApiClient:
    """
    Backend client with caching reads and cache-clearing writes.

    Features:
    - GET requests served from the response cache within its TTL
    - POST/PUT/DELETE clear the whole cache before they are sent
    - ``{"data": ...}`` envelopes unwrapped
    - Failures translated into ServerError, ConnectivityError or ClientError
    - Single attempt per call (no retries)

    One session is shared by the worker threads of a concurrent fetch.
    Headers are set once in ``__init__`` and never changed afterwards, so the
    threads only share the session's urllib3 connection pool.

    Example:
        >>> client = ApiClient("http://localhost:5000/api")
        >>> invoices = client.get("/finanzen/rechnungen", {"status": "offen"})
    """

    def __init__(
        self,
        base_url: str,
        cache: Optional[ResponseCache] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        error_classifier: Optional[ErrorClassifier] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API base URL, e.g. "http://localhost:5000/api"
            cache: Shared response cache (a private one is created if omitted)
            session: HTTP session to use (a new one is created if omitted)
            timeout: Request timeout in seconds
            headers: Headers sent with every request
            error_classifier: Classifier used to translate failures
        """
        self.base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else ResponseCache()
        self.session = session or requests.Session()
        self.timeout = timeout
        self.error_classifier = error_classifier or ErrorClassifier()

        if headers:
            self.session.headers.update(headers)

    @classmethod
    def from_config(
        cls, config: Any, cache: Optional[ResponseCache] = None
    ) -> "ApiClient":
        """
        Build a client from a ``FinanceClientConfig``.

        Args:
            config: Configuration object
            cache: Shared response cache (built from config if omitted)

        Returns:
            Configured ApiClient
        """
        return cls(
            base_url=config.api_base_url,
            cache=cache if cache is not None else ResponseCache.from_config(config),
            timeout=config.api_timeout,
            headers=config.get_request_headers(),
        )

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _send(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> requests.Response:
        """
        Perform one HTTP request.

        Raises:
            FinanceAPIError: Translated failure (never a raw requests error)
        """
        with LogContext(method=method, endpoint=endpoint):
            logger.debug(
                f"{method} {endpoint} params={sanitize_sensitive_data(params)} "
                f"body={sanitize_sensitive_data(body)}"
            )
            started = time.perf_counter()
            try:
                response = self.session.request(
                    method,
                    self._url(endpoint),
                    params=params or None,
                    json=body,
                    timeout=self.timeout,
                )
                response.raise_for_status()
            except Exception as e:
                error = self.error_classifier.translate(e)
                logger.warning(f"{method} {endpoint} failed: {error.message}")
                raise error from e

            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(
                f"{method} {endpoint} -> {response.status_code} ({elapsed_ms:.1f} ms)"
            )
            return response

    def _decode(self, response: requests.Response) -> Any:
        """Decode a JSON body and unwrap the envelope."""
        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError as e:
            raise self.error_classifier.translate(e) from e
        return unwrap_envelope(body)

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
    ) -> Any:
        response = self._send(method, endpoint, _clean_params(params), body)
        return self._decode(response)

    def get(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        use_cache: bool = True,
    ) -> Any:
        """
        Read from the backend, served from cache while fresh.

        Args:
            endpoint: Endpoint path, e.g. "/finanzen/rechnungen"
            params: Query parameters (None values are dropped)
            use_cache: Set False to always hit the backend

        Returns:
            Unwrapped payload

        Raises:
            FinanceAPIError: If the request fails (nothing is cached)
        """
        cleaned = _clean_params(params)
        cache_key = self.cache.make_key(endpoint, cleaned)

        if use_cache:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        data = self._decode(self._send("GET", endpoint, cleaned))

        if use_cache:
            self.cache.set(cache_key, data)
        return data

    def get_binary(
        self, endpoint: str, params: Optional[Mapping[str, Any]] = None
    ) -> bytes:
        """
        Download raw bytes (never cached).

        Raises:
            FinanceAPIError: If the request fails
        """
        response = self._send("GET", endpoint, _clean_params(params))
        return response.content

    def post(self, endpoint: str, body: Any = None) -> Any:
        """Create a record. Clears the response cache first."""
        self.cache.clear()
        return self._request("POST", endpoint, body=body)

    def put(self, endpoint: str, body: Any = None) -> Any:
        """Update a record. Clears the response cache first."""
        self.cache.clear()
        return self._request("PUT", endpoint, body=body)

    def delete(self, endpoint: str, body: Any = None) -> Any:
        """Delete a record. Clears the response cache first."""
        self.cache.clear()
        return self._request("DELETE", endpoint, body=body)

    def close(self) -> None:
        """Release the HTTP session."""
        self.session.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
