"""Fetch the URL in API_URL and print the response body.

Usage:
    python -m rtr.fetch_sample
"""

import logging
import os
import sys

from dotenv import load_dotenv

from rtr.clients import fetch_url
from rtr.errors import APIError
from rtr.utils import setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    """CLI entrypoint."""
    load_dotenv()
    setup_logging()

    api_url = os.getenv("API_URL")
    if not api_url:
        print("API_URL environment variable not set", file=sys.stderr)
        sys.exit(1)

    print("Fetching data from:", api_url)

    try:
        body = fetch_url(api_url)
    except APIError as e:
        print(f"Error fetching data: {e}", file=sys.stderr)
        sys.exit(1)

    print("\nAPI Response:")
    print(body.decode("utf-8", errors="replace"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
