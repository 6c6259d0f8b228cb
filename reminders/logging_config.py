"""
Structured Logging Setup

JSON logging through structlog on top of the stdlib logging module, so
CloudWatch receives one JSON document per log line.
"""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO") -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once; the last call wins.

    Args:
        level: Stdlib level name (DEBUG, INFO, WARNING, ERROR)
    """
    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(logging.StreamHandler(sys.stdout))
    root.setLevel(level.upper())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def mask_token(token: str | None) -> str | None:
    """Keep only the last few characters of a device token for logs."""
    if not token:
        return None
    if len(token) <= 8:
        return "****"
    return f"****{token[-6:]}"
