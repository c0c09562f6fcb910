"""OAuth2 client-credentials authentication."""

import logging
from typing import TYPE_CHECKING

from rtr.config import TOKEN_PATH
from rtr.models import TokenResponse

if TYPE_CHECKING:
    from rtr.clients.base import BaseAPIClient

logger = logging.getLogger(__name__)


class OAuth2Client:
    """Requests a bearer token with the client_credentials flow.

    The token is fetched once per run and handed back to the caller;
    there is no refresh.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_endpoint: str = TOKEN_PATH,
    ):
        """Initialize OAuth2 client.

        Args:
            client_id: OAuth2 client ID
            client_secret: OAuth2 client secret
            token_endpoint: Token path relative to the API base URL
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_endpoint = token_endpoint

    def request_token(self, transport: "BaseAPIClient") -> TokenResponse:
        """POST the credentials form and return the decoded token.

        Raises:
            APIError: On transport failure or non-2xx response
            ResponseDecodeError: If ``access_token`` is missing
        """
        logger.info("Requesting access token via client_credentials")

        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        token = transport.request(
            "POST",
            self.token_endpoint,
            TokenResponse.from_dict,
            form_data=data,
            authenticate=False,
        )

        logger.info(
            "Token obtained successfully",
            extra={"token_type": token.token_type, "expires_in": token.expires_in}
        )
        return token
