from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Mapping


DEFAULT_URI = "http://dynamic:80"
INSTANCE_URI_TEMPLATE = "http://dynamic-{}:80"


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for clients created from a destination."""

    timeout_s: float = 8.0
    verify_tls: bool = True
    follow_redirects: bool = True
    extra_headers: Optional[Mapping[str, str]] = None
