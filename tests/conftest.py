"""Pytest configuration and fixtures."""

import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from rtr.clients import RTRClient
from rtr.config import ClientConfig


def make_response(
    status_code: int = 200,
    json_body: Any = None,
    text: Optional[str] = None,
) -> MagicMock:
    """Build a fake ``requests.Response``.

    When ``json_body`` is None, ``.json()`` raises ValueError like a
    non-JSON body does.
    """
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = "OK" if status_code < 400 else "Error"
    if json_body is not None:
        response.json.return_value = json_body
        response.text = text if text is not None else json.dumps(json_body)
    else:
        response.json.side_effect = ValueError("Expecting value")
        response.text = text or ""
    response.content = response.text.encode("utf-8")
    return response


@pytest.fixture
def config():
    """Valid client configuration."""
    return ClientConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        device_id="device-123",
    )


@pytest.fixture
def config_without_device():
    """Configuration with no device id."""
    return ClientConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
    )


@pytest.fixture
def http_session():
    """Fake requests session; set ``request.side_effect`` per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(config, http_session):
    """RTR client wired to the fake session."""
    return RTRClient(config, session=http_session)


@pytest.fixture
def happy_path_responses():
    """Responses for the four steps, in call order."""
    return [
        make_response(200, {"access_token": "T1", "expires_in": 1799}),
        make_response(201, {"resources": [{"session_id": "S1"}], "errors": []}),
        make_response(201, {"resources": [{"cloud_request_id": "R1"}]}),
        make_response(200, {"status": "done"}),
    ]


@pytest.fixture
def falcon_env(monkeypatch):
    """Environment for a full CLI run."""
    monkeypatch.setenv("CLIENT_ID", "env-client-id")
    monkeypatch.setenv("CLIENT_SECRET", "env-client-secret")
    monkeypatch.setenv("DEVICE_ID", "env-device")
    monkeypatch.delenv("FALCON_BASE_URL", raising=False)
    monkeypatch.delenv("SCRIPT_NAME", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)


@pytest.fixture
def response_factory():
    """Access to ``make_response`` from tests."""
    return make_response
