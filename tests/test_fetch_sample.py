"""Tests for the sample URL fetch."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from rtr import fetch_sample
from rtr.clients.sample import fetch_url
from rtr.errors import APIError


def fake_get(status_code=200, content=b'{"products": []}'):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.reason = "OK" if status_code == 200 else "Not Found"
    response.content = content
    return response


class TestFetchUrl:
    """Tests for fetch_url."""

    def test_returns_body(self):
        """Test the raw body is returned on 200."""
        with patch("rtr.clients.sample.requests.get", return_value=fake_get()) as get:
            assert fetch_url("https://example.com/products") == b'{"products": []}'

        get.assert_called_once_with("https://example.com/products", timeout=30)

    def test_non_200(self):
        """Test any other status raises."""
        with patch("rtr.clients.sample.requests.get", return_value=fake_get(404)):
            with pytest.raises(APIError, match="404 Not Found") as excinfo:
                fetch_url("https://example.com/missing")

        assert excinfo.value.status_code == 404

    def test_transport_error(self):
        """Test connection errors raise APIError."""
        error = requests.exceptions.ConnectionError("unreachable")
        with patch("rtr.clients.sample.requests.get", side_effect=error):
            with pytest.raises(APIError, match="unreachable"):
                fetch_url("https://example.com")


@pytest.fixture
def quiet_fetch():
    with patch.object(fetch_sample, "load_dotenv"), \
            patch.object(fetch_sample, "setup_logging"):
        yield


class TestFetchSampleMain:
    """Tests for the fetch CLI."""

    def test_prints_body(self, quiet_fetch, monkeypatch, capsys):
        """Test the body is printed."""
        monkeypatch.setenv("API_URL", "https://example.com/products")

        with patch("rtr.clients.sample.requests.get", return_value=fake_get()):
            assert fetch_sample.main() == 0

        out = capsys.readouterr().out
        assert "Fetching data from: https://example.com/products" in out
        assert '{"products": []}' in out

    def test_missing_url(self, quiet_fetch, monkeypatch):
        """Test missing API_URL exits 1."""
        monkeypatch.delenv("API_URL", raising=False)

        with pytest.raises(SystemExit) as excinfo:
            fetch_sample.main()

        assert excinfo.value.code == 1

    def test_fetch_failure(self, quiet_fetch, monkeypatch):
        """Test a failed fetch exits 1."""
        monkeypatch.setenv("API_URL", "https://example.com/missing")

        with patch("rtr.clients.sample.requests.get", return_value=fake_get(500)):
            with pytest.raises(SystemExit) as excinfo:
                fetch_sample.main()

        assert excinfo.value.code == 1
