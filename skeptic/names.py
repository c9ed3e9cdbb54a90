"""Canonical identifiers for test names."""

from __future__ import annotations


def sanitize_test_name(s: str) -> str:
    """Map arbitrary text to a lowercase identifier made of ``[a-z0-9_]``.

    Every character that is not ASCII alphanumeric becomes an underscore,
    then runs of underscores collapse and leading/trailing ones are dropped.
    The result may be empty. Applying the function twice changes nothing.

    Args:
        s: File stem, heading text or any other string

    Returns:
        The sanitized identifier

    Example:
        >>> sanitize_test_name("Getting Started!")
        'getting_started'
    """
    mapped = "".join(
        ch.lower() if ch.isascii() and ch.isalnum() else "_" for ch in s
    )
    return "_".join(part for part in mapped.split("_") if part)
