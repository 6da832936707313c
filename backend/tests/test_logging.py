"""
Tests for log masking.
"""

import logging

from bookbot.core.logging import MaskingFormatter


def format_message(message: str) -> str:
    record = logging.LogRecord("bookbot", logging.INFO, __file__, 1, message, None, None)
    return MaskingFormatter("%(message)s").format(record)


def test_plain_email_is_masked():
    assert format_message("Order confirmation sent to jane@example.com") == "Order confirmation sent to ***@***"


def test_profile_fields_are_masked():
    line = format_message("profile={'name': 'Jane', 'address': '123 Main St', 'email': 'jane@example.com'}")

    assert "123 Main St" not in line
    assert "jane@example.com" not in line
    assert "'name': 'Jane'" in line
