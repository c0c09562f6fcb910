"""Client configuration loaded from the environment."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from rtr.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.crowdstrike.com"
DEFAULT_TIMEOUT = 30

TOKEN_PATH = "oauth2/token"
SESSION_PATH = "real-time-response/entities/sessions/v1"
ADMIN_COMMAND_PATH = "real-time-response/entities/admin-command/v1"


@dataclass(frozen=True)
class ClientConfig:
    """Credentials, target device and endpoint URLs for one RTR run.

    Immutable after construction. ``device_id`` may be empty; operations
    that need it fail before touching the network.
    """

    client_id: str
    client_secret: str
    device_id: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT

    def __post_init__(self):
        if not self.client_id:
            raise ConfigurationError("CLIENT_ID is required")
        if not self.client_secret:
            raise ConfigurationError("CLIENT_SECRET is required")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build configuration from CLIENT_ID, CLIENT_SECRET, DEVICE_ID.

        FALCON_BASE_URL overrides the default API host.
        """
        device_id = os.getenv("DEVICE_ID")
        if not device_id:
            logger.warning("DEVICE_ID is not set; session initialization will fail")

        return cls(
            client_id=os.getenv("CLIENT_ID", ""),
            client_secret=os.getenv("CLIENT_SECRET", ""),
            device_id=device_id or None,
            base_url=os.getenv("FALCON_BASE_URL") or DEFAULT_BASE_URL,
        )

    def __repr__(self) -> str:
        return (
            f"ClientConfig(client_id={self.client_id!r}, client_secret='***', "
            f"device_id={self.device_id!r}, base_url={self.base_url!r})"
        )
