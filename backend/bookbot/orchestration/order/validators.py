"""
Field validators for the order dialog.

Every validator is total: malformed input returns False instead of raising.
"""
import re

import usaddress
from pydantic import EmailStr, TypeAdapter, ValidationError


DIGIT_RE = re.compile(r"\d")

REQUIRED_ADDRESS_PARTS = ("AddressNumber", "StreetName", "ZipCode")

_email_adapter = TypeAdapter(EmailStr)


def is_valid_name(text) -> bool:
    """A name is non-empty after trimming and contains no digits."""
    if not isinstance(text, str):
        return False
    name = text.strip()
    if not name:
        return False
    return DIGIT_RE.search(name) is None


def is_valid_address(text) -> bool:
    """An address must parse into a street number, street name and postal code."""
    if not isinstance(text, str) or not text.strip():
        return False

    try:
        parsed, _ = usaddress.tag(text)
    except usaddress.RepeatedLabelError:
        return False

    if not parsed:
        return False

    return all(parsed.get(part) for part in REQUIRED_ADDRESS_PARTS)


def is_valid_email(text) -> bool:
    """Syntax-only e-mail check (local-part@domain with valid labels)."""
    if not isinstance(text, str):
        return False
    try:
        _email_adapter.validate_python(text.strip())
    except ValidationError:
        return False
    return True
