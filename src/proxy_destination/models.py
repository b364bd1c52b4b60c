from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import httpx


class ProxyType(str, Enum):
    INTERNET = "Internet"
    ON_PREMISE = "OnPremise"


class AuthenticationType(str, Enum):
    NO_AUTHENTICATION = "NoAuthentication"
    BASIC_AUTHENTICATION = "BasicAuthentication"
    OAUTH2_CLIENT_CREDENTIALS = "OAuth2ClientCredentials"


@dataclass(frozen=True)
class BasicCredentials:
    username: str
    password: str = field(default="", repr=False)


@dataclass(frozen=True)
class ProxyConfiguration:
    """Forward proxy that requests to a destination are routed through."""
    uri: httpx.URL
    credentials: Optional[BasicCredentials] = None

    def to_httpx(self) -> httpx.Proxy:
        auth = None
        if self.credentials is not None:
            auth = (self.credentials.username, self.credentials.password)
        return httpx.Proxy(self.uri, auth=auth)
