from __future__ import annotations
from typing import Tuple

from .headers import Header


def parse_header(raw: str) -> Header:
    """Parse ``Name: value`` into a header."""
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Expected 'Name: value', got {raw!r}")
    return Header(name.strip(), value.strip())


def parse_property(raw: str) -> Tuple[str, str]:
    """Parse ``key=value`` into a property pair."""
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise ValueError(f"Expected 'key=value', got {raw!r}")
    return key.strip(), value
