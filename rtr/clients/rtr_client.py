"""Real Time Response client: token, session, runscript, status."""

import logging
from typing import Optional

import requests

from rtr.auth.oauth2 import OAuth2Client
from rtr.clients.base import BaseAPIClient
from rtr.config import ADMIN_COMMAND_PATH, SESSION_PATH, ClientConfig
from rtr.errors import ConfigurationError, RTRError
from rtr.models import CommandResponse, CommandStatus, SessionResponse, SessionState

logger = logging.getLogger(__name__)

SESSION_TIMEOUT_PARAMS = {"timeout": 30, "timeout_duration": "30s"}
RUNSCRIPT_COMMAND = "runscript"


def build_runscript_command(script_name: str) -> str:
    """Command string that runs a script stored in the Falcon cloud."""
    return f'{RUNSCRIPT_COMMAND} -CloudFile="{script_name}"'


class RTRClient(BaseAPIClient):
    """Client for one RTR workflow against a single device.

    Steps must run in order; each one reads the value the previous one
    stored in ``state``:

    1. ``authenticate`` -> ``state.access_token``
    2. ``initialize_session`` -> ``state.session_id``
    3. ``run_script`` -> ``state.cloud_request_id``
    4. ``get_command_status``

    Steps 1-3 return ``False`` on failure instead of raising; the caller
    is expected to abort.
    """

    def __init__(
        self,
        config: ClientConfig,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout,
            session=session,
        )
        self.config = config
        self.state = SessionState()
        self.oauth_client = OAuth2Client(
            client_id=config.client_id,
            client_secret=config.client_secret,
        )

    @property
    def device_id(self) -> Optional[str]:
        return self.config.device_id

    def get_auth_headers(self) -> dict:
        """Bearer header once a token is held, otherwise nothing."""
        if not self.state.authenticated:
            return {}
        return {"authorization": f"Bearer {self.state.access_token}"}

    def _require_device_id(self) -> str:
        if not self.device_id:
            raise ConfigurationError("device id is required (set DEVICE_ID)")
        return self.device_id

    def authenticate(self) -> bool:
        """Fetch an OAuth2 token and keep it for later calls."""
        try:
            token = self.oauth_client.request_token(self)
        except RTRError as e:
            logger.error(f"Authentication failed: {e}")
            return False

        self.state.access_token = token.access_token
        return True

    def initialize_session(self) -> bool:
        """Open an RTR session on the configured device."""
        try:
            device_id = self._require_device_id()
            response = self.request(
                "POST",
                SESSION_PATH,
                SessionResponse.from_dict,
                params=dict(SESSION_TIMEOUT_PARAMS),
                json_data={"device_id": device_id, "queue_offline": False},
            )
        except RTRError as e:
            logger.error(f"Session initialization failed: {e}")
            return False

        self.state.session_id = response.session_id
        logger.info(
            "RTR session opened",
            extra={"device_id": device_id, "session_id": response.session_id}
        )
        return True

    def run_script(self, script_name: str) -> bool:
        """Submit ``runscript -CloudFile="<script_name>"`` in the open session."""
        try:
            device_id = self._require_device_id()
            session_id = self.state.require_session_id()
            payload = {
                "base_command": RUNSCRIPT_COMMAND,
                "command_string": build_runscript_command(script_name),
                "device_id": device_id,
                "id": 0,
                "persist": True,
                "session_id": session_id,
            }
            response = self.request(
                "POST",
                ADMIN_COMMAND_PATH,
                CommandResponse.from_dict,
                json_data=payload,
            )
        except RTRError as e:
            logger.error(f"Running script '{script_name}' failed: {e}")
            return False

        self.state.cloud_request_id = response.cloud_request_id
        logger.info(
            "Script submitted",
            extra={
                "script_name": script_name,
                "cloud_request_id": response.cloud_request_id,
            }
        )
        return True

    def get_command_status(self, cloud_request_id: Optional[str] = None) -> dict:
        """Fetch the status document of a submitted command.

        Args:
            cloud_request_id: Request to poll; defaults to the one stored
                by ``run_script``

        Returns:
            The decoded JSON document, unmodified

        Raises:
            MissingStateError: If no cloud request id is available
            APIError: On transport failure or non-2xx response
        """
        request_id = cloud_request_id or self.state.require_cloud_request_id()
        status = self.get(
            ADMIN_COMMAND_PATH,
            CommandStatus.from_dict,
            params={"cloud_request_id": request_id, "sequence_id": "0"},
        )
        logger.debug(
            "Command status received",
            extra={"cloud_request_id": request_id, "complete": status.complete}
        )
        return status.raw
