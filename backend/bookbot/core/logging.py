"""
Logging configuration with field masking for customer data
"""
import logging
import re
from typing import Any

from bookbot.core.config import settings


# Patterns to mask in logs
MASK_PATTERNS = [
    (r'"email":\s*"[^"]*"', '"email": "***@***"'),
    (r"'email':\s*'[^']*'", "'email': '***@***'"),
    (r'"address":\s*"[^"]*"', '"address": "***"'),
    (r"'address':\s*'[^']*'", "'address': '***'"),
    (r"[\w.+-]+@[\w-]+(\.[\w-]+)+", "***@***"),
]


class MaskingFormatter(logging.Formatter):
    """Custom formatter that masks customer contact fields."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for pattern, replacement in MASK_PATTERNS:
            message = re.sub(pattern, replacement, message, flags=re.IGNORECASE)
        return message


def setup_logging() -> logging.Logger:
    """Configure application logging."""
    logger = logging.getLogger("bookbot")
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    formatter = MaskingFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    return logger


# Global logger instance
logger = setup_logging()


def log_audit_event(
    event_type: str,
    actor_id: str,
    actor_type: str,
    details: dict[str, Any],
) -> None:
    """Log an audit event for a processed turn."""
    logger.info(
        f"AUDIT: {event_type} | actor={actor_id} ({actor_type}) | details={details}"
    )
