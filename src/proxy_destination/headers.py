from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Protocol, runtime_checkable

import httpx

if TYPE_CHECKING:
    from .destination import TransparentProxyDestination


DESTINATION_NAME = "X-Destination-Name"
FRAGMENT_NAME = "X-Fragment-Name"
TENANT_SUBDOMAIN = "X-Tenant-Subdomain"
TENANT_ID = "X-Tenant-Id"
FRAGMENT_OPTIONAL = "X-Fragment-Optional"


@dataclass(frozen=True)
class Header:
    """A single HTTP header sent with every request to a destination."""
    name: str
    value: str


@dataclass(frozen=True)
class DestinationRequestContext:
    """What a header provider gets to see about the outgoing request."""
    destination: "TransparentProxyDestination"
    request_uri: httpx.URL


@runtime_checkable
class DestinationHeaderProvider(Protocol):
    """Computes additional headers for each outgoing request."""

    def get_headers(self, context: DestinationRequestContext) -> List[Header]:
        ...
