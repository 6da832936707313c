"""
Core module exports
"""
from bookbot.core.config import settings, get_settings
from bookbot.core.logging import logger, log_audit_event

__all__ = [
    "settings",
    "get_settings",
    "logger",
    "log_audit_event",
]
