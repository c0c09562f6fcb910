"""Plain GET of an arbitrary URL, used to sanity-check connectivity."""

import logging

import requests

from rtr.errors import APIError

logger = logging.getLogger(__name__)


def fetch_url(api_url: str, timeout: int = 30) -> bytes:
    """GET ``api_url`` and return the raw body.

    Raises:
        APIError: On transport failure or any status other than 200
    """
    try:
        response = requests.get(api_url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise APIError(f"error making HTTP request: {e}") from e

    if response.status_code != 200:
        raise APIError(
            f"API request failed with status code: {response.status_code} {response.reason}",
            status_code=response.status_code,
        )

    logger.info(
        "Fetched sample data",
        extra={"url": api_url, "response_size_bytes": len(response.content)}
    )
    return response.content
