"""Main entrypoint: token -> RTR session -> runscript -> status.

Usage:
    python -m rtr.run_script --script collect_logs.ps1
    python -m rtr.run_script --script collect_logs.ps1 --wait 10 --log-level DEBUG
    SCRIPT_NAME=collect_logs.ps1 rtr-run-script
"""

import argparse
import json
import logging
import os
import sys
import time
import uuid
from typing import Callable, Optional

from dotenv import load_dotenv

from rtr.clients import RTRClient
from rtr.config import ClientConfig
from rtr.errors import ConfigurationError, RTRError
from rtr.utils import StepLogger, setup_logging

logger = logging.getLogger(__name__)

DEFAULT_WAIT_SECONDS = 5


class WorkflowError(RTRError):
    """Raised when a workflow step fails; the run must stop."""

    def __init__(self, step: str, message: str):
        self.step = step
        super().__init__(f"{step}: {message}")


def run_workflow(
    client: RTRClient,
    script_name: str,
    wait_seconds: float = DEFAULT_WAIT_SECONDS,
    sleep: Optional[Callable[[float], None]] = None,
    step_logger: Optional[StepLogger] = None,
) -> dict:
    """Run the four RTR steps in order.

    Args:
        client: Configured RTR client
        script_name: Cloud script to run on the device
        wait_seconds: Pause between submitting the command and polling it
        sleep: Sleep function, defaults to time.sleep
        step_logger: Optional structured step logger

    Returns:
        The command status document

    Raises:
        WorkflowError: On the first failing step
    """
    steps = step_logger or StepLogger(uuid.uuid4().hex[:12], client.device_id)

    print("Authenticating...")
    steps.start("authenticate")
    if not client.authenticate():
        steps.error("authenticate", "authentication failed")
        raise WorkflowError("authenticate", "could not obtain an access token")
    steps.success("authenticate")

    print(f"Initializing RTR session on device {client.device_id or '<unset>'}...")
    steps.start("initialize_session")
    if not client.initialize_session():
        steps.error("initialize_session", "session initialization failed")
        raise WorkflowError("initialize_session", "could not open an RTR session")
    steps.success("initialize_session", session_id=client.state.session_id)

    print(f"Running script '{script_name}'...")
    steps.start("run_script")
    if not client.run_script(script_name):
        steps.error("run_script", "command submission failed")
        raise WorkflowError("run_script", f"could not run script '{script_name}'")
    steps.success("run_script", cloud_request_id=client.state.cloud_request_id)

    print(f"Waiting {wait_seconds}s for the command to run...")
    (sleep or time.sleep)(wait_seconds)

    print("Fetching command status...")
    steps.start("get_command_status")
    try:
        status = client.get_command_status()
    except RTRError as e:
        steps.error("get_command_status", str(e))
        raise WorkflowError("get_command_status", str(e)) from e
    steps.success("get_command_status")

    logger.info(
        "Workflow complete",
        extra={**steps.get_metrics(), "requests": client.metrics.to_dict()}
    )
    return status


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a cloud script on a device through CrowdStrike RTR"
    )
    parser.add_argument(
        "--script",
        type=str,
        default=os.getenv("SCRIPT_NAME"),
        help="Name of the cloud script to run (default: env SCRIPT_NAME)",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=DEFAULT_WAIT_SECONDS,
        help=f"Seconds to wait before polling status (default: {DEFAULT_WAIT_SECONDS})",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: env LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Emit logs as JSON lines",
    )

    args = parser.parse_args(argv)
    if not args.script:
        parser.error("--script is required (or set SCRIPT_NAME)")
    return args


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint."""
    load_dotenv()
    args = parse_args(argv)

    setup_logging(level=args.log_level, json_format=args.json_logs)

    try:
        config = ClientConfig.from_env()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    client = RTRClient(config)

    try:
        status = run_workflow(client, args.script, wait_seconds=args.wait)
    except WorkflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print("\nCommand status:")
    print(json.dumps(status, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
