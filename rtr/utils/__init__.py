"""Utility modules for the RTR runner.

Includes:
- Logging configuration
- Structured per-step workflow logging
"""

from .logging_config import setup_logging, get_logger
from .step_logger import StepLogger, timed_operation

__all__ = [
    "setup_logging",
    "get_logger",
    "StepLogger",
    "timed_operation",
]
