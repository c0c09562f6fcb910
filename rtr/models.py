"""Typed response structures and session state for the RTR workflow."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from rtr.errors import MissingStateError, ResponseDecodeError

logger = logging.getLogger(__name__)

# Falcon tokens live for 30 minutes.
DEFAULT_TOKEN_EXPIRES_IN = 1799


def _require_dict(payload: Any, what: str) -> dict:
    if not isinstance(payload, dict):
        raise ResponseDecodeError(f"{what} response is not a JSON object")
    return payload


def _require_str(data: dict, key: str, what: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ResponseDecodeError(f"{what} response is missing '{key}'")
    return value


def _first_resource(payload: Any, what: str) -> dict:
    """Return ``resources[0]`` from a Falcon envelope."""
    data = _require_dict(payload, what)
    resources = data.get("resources")
    if not isinstance(resources, list) or not resources:
        raise ResponseDecodeError(f"{what} response has no resources")
    return _require_dict(resources[0], what)


def _log_envelope_errors(payload: dict, what: str) -> None:
    errors = payload.get("errors")
    if errors:
        logger.debug(f"{what} response carried errors", extra={"errors": errors})


@dataclass
class TokenResponse:
    """Body of ``POST /oauth2/token``."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = DEFAULT_TOKEN_EXPIRES_IN

    @classmethod
    def from_dict(cls, payload: Any) -> "TokenResponse":
        data = _require_dict(payload, "token")
        expires_in = data.get("expires_in", DEFAULT_TOKEN_EXPIRES_IN)
        if not isinstance(expires_in, int):
            expires_in = DEFAULT_TOKEN_EXPIRES_IN
        return cls(
            access_token=_require_str(data, "access_token", "token"),
            token_type=data.get("token_type") or "bearer",
            expires_in=expires_in,
        )


@dataclass
class SessionResponse:
    """Body of ``POST /real-time-response/entities/sessions/v1``."""

    session_id: str

    @classmethod
    def from_dict(cls, payload: Any) -> "SessionResponse":
        resource = _first_resource(payload, "session")
        _log_envelope_errors(payload, "session")
        return cls(session_id=_require_str(resource, "session_id", "session"))


@dataclass
class CommandResponse:
    """Body of ``POST /real-time-response/entities/admin-command/v1``."""

    cloud_request_id: str

    @classmethod
    def from_dict(cls, payload: Any) -> "CommandResponse":
        resource = _first_resource(payload, "admin command")
        _log_envelope_errors(payload, "admin command")
        return cls(
            cloud_request_id=_require_str(resource, "cloud_request_id", "admin command")
        )


@dataclass
class CommandStatus:
    """Body of ``GET /real-time-response/entities/admin-command/v1``.

    The document is kept verbatim in ``raw``; the properties are read
    from ``resources[0]`` when present and are ``None`` otherwise.
    """

    raw: dict

    @classmethod
    def from_dict(cls, payload: Any) -> "CommandStatus":
        return cls(raw=_require_dict(payload, "command status"))

    def _resource_field(self, key: str) -> Any:
        resources = self.raw.get("resources")
        if isinstance(resources, list) and resources and isinstance(resources[0], dict):
            return resources[0].get(key)
        return None

    @property
    def complete(self) -> Optional[bool]:
        return self._resource_field("complete")

    @property
    def stdout(self) -> Optional[str]:
        return self._resource_field("stdout")

    @property
    def stderr(self) -> Optional[str]:
        return self._resource_field("stderr")


@dataclass
class SessionState:
    """Values threaded between workflow steps.

    Each field starts empty and is set once by the step that produces it.
    """

    access_token: Optional[str] = None
    session_id: Optional[str] = None
    cloud_request_id: Optional[str] = None

    def _require(self, name: str) -> str:
        value = getattr(self, name)
        if not value:
            raise MissingStateError(name)
        return value

    def require_session_id(self) -> str:
        return self._require("session_id")

    def require_cloud_request_id(self) -> str:
        return self._require("cloud_request_id")

    @property
    def authenticated(self) -> bool:
        return bool(self.access_token)
