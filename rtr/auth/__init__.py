"""Authentication against the Falcon OAuth2 token endpoint."""

from .oauth2 import OAuth2Client

__all__ = ["OAuth2Client"]
