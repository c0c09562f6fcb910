"""Exception types for the RTR client."""

from typing import Optional


class RTRError(Exception):
    """Base class for all RTR client errors."""


class ConfigurationError(RTRError):
    """Raised when required configuration is missing or invalid."""


class MissingStateError(ConfigurationError):
    """Raised when a step needs session state an earlier step never produced."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"{field_name.replace('_', ' ')} not available")


class APIError(RTRError):
    """Raised on transport failures and non-2xx responses."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.body:
            return f"{message}: {self.body}"
        return message


class ResponseDecodeError(APIError):
    """Raised when a 2xx response is not JSON or lacks an expected field."""
