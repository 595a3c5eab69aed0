"""Identifier helpers."""

from uuid import UUID


def is_identifier(value) -> bool:
    """True when ``value`` is a well-formed UUID string."""
    if not isinstance(value, str):
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True
