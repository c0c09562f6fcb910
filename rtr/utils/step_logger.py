"""Structured logging for workflow steps.

Every record carries the same fields:
- run_id
- device_id
- step
- status
- duration_ms
"""

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class StepLogContext:
    """Fields attached to a step log record."""

    run_id: str
    device_id: Optional[str]
    step: str = ""
    status: str = "started"
    duration_ms: Optional[float] = None
    error: Optional[str] = None
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = datetime.now(timezone.utc).isoformat()
        return {k: v for k, v in data.items() if v is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class StepLogger:
    """Structured logger for the four RTR workflow steps."""

    def __init__(self, run_id: str, device_id: Optional[str] = None):
        """Initialize step logger.

        Args:
            run_id: Identifier of this workflow run
            device_id: Target device, if known
        """
        self.run_id = run_id
        self.device_id = device_id
        self.logger = logging.getLogger("rtr.workflow")
        self._start_time: Optional[float] = None
        self._durations: dict[str, float] = {}

    def _log(self, level: int, step: str, **kwargs) -> None:
        ctx = StepLogContext(
            run_id=self.run_id,
            device_id=self.device_id,
            step=step,
            **kwargs
        )
        self.logger.log(level, ctx.to_json(), extra=ctx.to_dict())

    def _elapsed_ms(self) -> Optional[float]:
        if self._start_time is None:
            return None
        return round((time.time() - self._start_time) * 1000, 2)

    def start(self, step: str) -> None:
        """Log step start."""
        self._start_time = time.time()
        self._log(logging.INFO, step, status="started")

    def success(self, step: str, **extra) -> None:
        """Log step success."""
        duration = self._elapsed_ms()
        if duration is not None:
            self._durations[step] = duration
        self._log(logging.INFO, step, status="success", duration_ms=duration, extra=extra)

    def error(self, step: str, error: str, **extra) -> None:
        """Log step failure."""
        duration = self._elapsed_ms()
        self._log(
            logging.ERROR,
            step,
            status="error",
            error=error,
            duration_ms=duration,
            extra=extra,
        )

    def get_metrics(self) -> dict:
        """Per-step durations of the successful steps."""
        return {
            "run_id": self.run_id,
            "steps_completed": len(self._durations),
            "step_durations_ms": dict(self._durations),
            "total_duration_ms": round(sum(self._durations.values()), 2),
        }


@contextmanager
def timed_operation(name: str, logger: logging.Logger = None):
    """Context manager to time an operation.

    Usage:
        with timed_operation("token_request") as timer:
            response = session.post(...)
        print(f"Took {timer.duration_ms}ms")

    Args:
        name: Operation name for logging
        logger: Optional logger instance

    Yields:
        Timer object with duration_ms attribute
    """
    class Timer:
        def __init__(self):
            self.start_time = time.time()
            self.end_time = None
            self.duration_ms = 0

    timer = Timer()

    try:
        yield timer
    finally:
        timer.end_time = time.time()
        timer.duration_ms = (timer.end_time - timer.start_time) * 1000

        if logger:
            logger.debug(
                f"Operation '{name}' completed",
                extra={"operation": name, "duration_ms": timer.duration_ms}
            )
