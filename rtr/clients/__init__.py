"""API client wrappers for the Falcon API.

Each client handles:
- Authentication
- Header and body encoding
- Fail-fast status checking
"""

from .base import BaseAPIClient
from .rtr_client import RTRClient
from .sample import fetch_url

__all__ = ["BaseAPIClient", "RTRClient", "fetch_url"]
