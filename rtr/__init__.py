"""CrowdStrike Real Time Response script runner.

Runs one fixed workflow against the Falcon API:
- OAuth2 token
- RTR session against a device
- runscript admin command
- command status
"""

__version__ = "0.1.0"
