"""Base API client: the single chokepoint for every HTTP call."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

import requests

from rtr.errors import APIError, ResponseDecodeError
from rtr.utils.step_logger import timed_operation

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass
class RequestMetrics:
    """Metrics for API requests."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_duration_ms: float = 0
    request_durations: list[float] = field(default_factory=list)

    def record_request(self, duration_ms: float, success: bool) -> None:
        """Record a request."""
        self.total_requests += 1
        self.total_duration_ms += duration_ms
        self.request_durations.append(duration_ms)
        if success:
            self.successful_requests += 1
        else:
            self.failed_requests += 1

    @property
    def avg_duration_ms(self) -> float:
        """Average request duration."""
        if not self.request_durations:
            return 0
        return sum(self.request_durations) / len(self.request_durations)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "total_duration_ms": round(self.total_duration_ms, 2),
            "avg_duration_ms": round(self.avg_duration_ms, 2),
        }


class BaseAPIClient(ABC):
    """Base class for API clients.

    Requests are fail-fast: no retry adapter, no backoff. Any status
    outside [200, 300) raises ``APIError`` with the raw body attached.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize base API client.

        Args:
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            session: Optional pre-built requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.metrics = RequestMetrics()
        self.session = session or requests.Session()

    @abstractmethod
    def get_auth_headers(self) -> dict:
        """Get authentication headers for requests."""
        pass

    def _build_headers(
        self,
        json_data: Optional[dict],
        form_data: Optional[dict],
        authenticate: bool,
    ) -> dict:
        headers = {"accept": JSON_CONTENT_TYPE}
        if json_data is not None:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        elif form_data is not None:
            headers["Content-Type"] = FORM_CONTENT_TYPE
        if authenticate:
            headers.update(self.get_auth_headers())
        return headers

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_data: Optional[dict] = None,
        form_data: Optional[dict] = None,
        authenticate: bool = True,
    ) -> requests.Response:
        """Make HTTP request with timing and logging.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (will be joined with base_url)
            params: Query parameters
            json_data: JSON body data
            form_data: Form-encoded body data
            authenticate: Attach the bearer token when one is held

        Returns:
            Response object with a 2xx status

        Raises:
            ValueError: If both json_data and form_data are given
            APIError: On transport failure or non-2xx response
        """
        if json_data is not None and form_data is not None:
            raise ValueError("json_data and form_data are mutually exclusive")

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = self._build_headers(json_data, form_data, authenticate)

        logger.debug(
            f"Making {method} request",
            extra={"url": url, "params": params}
        )

        with timed_operation(f"{method} {endpoint}", logger) as timer:
            try:
                response = self.session.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json_data,
                    data=form_data,
                    headers=headers,
                    timeout=self.timeout,
                )
            except requests.exceptions.RequestException as e:
                response = None
                error = e

        if response is None:
            self.metrics.record_request(timer.duration_ms, success=False)
            logger.error(
                "API request failed",
                extra={
                    "method": method,
                    "endpoint": endpoint,
                    "error": str(error),
                    "duration_ms": round(timer.duration_ms, 2),
                }
            )
            raise APIError(f"{method} {endpoint} failed: {error}") from error

        success = 200 <= response.status_code < 300
        self.metrics.record_request(timer.duration_ms, success=success)

        logger.info(
            "API request completed",
            extra={
                "method": method,
                "endpoint": endpoint,
                "status_code": response.status_code,
                "duration_ms": round(timer.duration_ms, 2),
                "response_size_bytes": len(response.content or b""),
            }
        )

        if not success:
            raise APIError(
                f"{method} {endpoint} returned status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    def request(
        self,
        method: str,
        endpoint: str,
        parser: Callable[[Any], T],
        params: Optional[dict] = None,
        json_data: Optional[dict] = None,
        form_data: Optional[dict] = None,
        authenticate: bool = True,
    ) -> T:
        """Make a request and decode the JSON body with ``parser``.

        Raises:
            APIError: On transport failure or non-2xx response
            ResponseDecodeError: If the body is not JSON or ``parser`` rejects it
        """
        response = self._make_request(
            method,
            endpoint,
            params=params,
            json_data=json_data,
            form_data=form_data,
            authenticate=authenticate,
        )
        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                f"{method} {endpoint} returned invalid JSON",
                status_code=response.status_code,
                body=response.text,
            ) from e
        return parser(payload)

    def get(
        self,
        endpoint: str,
        parser: Callable[[Any], T],
        params: Optional[dict] = None,
    ) -> T:
        """Make GET request and return the parsed response."""
        return self.request("GET", endpoint, parser, params=params)

    def post(
        self,
        endpoint: str,
        parser: Callable[[Any], T],
        json_data: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> T:
        """Make JSON POST request and return the parsed response."""
        return self.request(
            "POST", endpoint, parser, params=params, json_data=json_data
        )
