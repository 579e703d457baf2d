"""
HTTP transport shared by the Forma API clients.
"""

import time
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from forma.exceptions import ApiConnectionError
from forma.exceptions import ApiError
from forma.exceptions import ApiInvalidResponseError
from forma.exceptions import ApiResponseError
from forma.exceptions import ApiTimeoutError
from forma.utils.logging_utils import LoggerMixin


DEFAULT_ERROR_MESSAGE = "An error occurred"

class BaseAPI(LoggerMixin):
    """JSON-over-HTTP client for the Forma backend.

    Every request carries the shared ``x-api-key`` header. Whatever goes
    wrong (network, timeout, HTTP status, ``success: false``, a non-JSON
    body) reaches the caller as an ``ApiError``.
    """

    # (connect, read) seconds
    DEFAULT_TIMEOUT = (7, 20)

    API_KEY_HEADER = "x-api-key"

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: tuple[int, int] | None = None,
        session: requests.Session | None = None
    ):
        """
        Args:
            base_url: Site root, without the ``/api`` prefix
            api_key: Shared public API key
            timeout: (connect, read) timeout in seconds
            session: Pre-built session, mainly for tests
        """
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.session = session or self._create_session()
        self.session.headers.update({
            "Content-Type": "application/json",
            self.API_KEY_HEADER: api_key,
        })

    def _create_session(self) -> requests.Session:
        """Session without automatic retries; the operator re-triggers failed actions."""
        session = requests.Session()
        no_retries = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        for prefix in ("http://", "https://"):
            session.mount(prefix, no_retries)
        return session

    @staticmethod
    def _decode(response: requests.Response) -> dict[str, Any]:
        """Body as a dict: ``{}`` when empty, ``{"data": ...}`` for non-object JSON."""
        body = (response.text or "").strip()
        if not body:
            return {}
        try:
            decoded = response.json()
        except ValueError:
            raise ApiInvalidResponseError(
                response.status_code,
                f"Server returned a non-JSON response (HTTP {response.status_code})",
                {"body": body[:100]}
            ) from None
        return decoded if isinstance(decoded, dict) else {"data": decoded}

    @staticmethod
    def _check(response: requests.Response, body: dict[str, Any]) -> None:
        if not response.ok:
            raise ApiResponseError(response.status_code, str(body.get('error') or DEFAULT_ERROR_MESSAGE))
        if body.get('success') is False:
            message = body.get('error') or body.get('message') or DEFAULT_ERROR_MESSAGE
            raise ApiResponseError(response.status_code, str(message))

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        timeout: tuple[int, int] | None = None,
        headers: dict[str, str] | None = None,
        url: str | None = None
    ) -> dict[str, Any]:
        """Send one request and return the decoded body.

        ``None`` query parameters are dropped. ``url`` replaces
        ``base_url + endpoint`` for endpoints hosted elsewhere; ``headers``
        apply to this request only.
        """
        started = time.perf_counter()
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = self.session.request(
                method=method,
                url=url or f"{self.base_url}{endpoint}",
                params=params or None,
                json=data,
                headers=headers,
                timeout=timeout or self.timeout
            )
            body = self._decode(response)
            self._check(response, body)
        except requests.exceptions.Timeout as e:
            elapsed = time.perf_counter() - started
            self.warning("Request timed out", method=method, endpoint=endpoint, elapsed=f"{elapsed:.2f}s")
            raise ApiTimeoutError(f"Request timed out after {elapsed:.2f} seconds") from e
        except requests.exceptions.RequestException as e:
            self.warning("Request failed", method=method, endpoint=endpoint, error=str(e))
            raise ApiConnectionError(f"Could not connect to server: {e!s}") from e
        except ApiError as e:
            self.warning("API error", method=method, endpoint=endpoint, status=e.status_code, error=e.message)
            raise

        self.debug(f"{method} {endpoint} -> {response.status_code}", elapsed=f"{time.perf_counter() - started:.2f}s")
        return body
