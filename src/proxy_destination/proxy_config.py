from __future__ import annotations
import logging
from typing import Optional

import httpx

from .errors import PropertyConversionError, ProxyConfigurationError
from .models import BasicCredentials, ProxyConfiguration, ProxyType
from .properties import DestinationProperties, DestinationProperty

log = logging.getLogger("proxy_destination.proxy")

DEFAULT_PROXY_PORT = 80
PROXY_SCHEMES = ("http", "https")


class ProxyConfigurationFactory:
    """Derives the proxy configuration of a destination from its properties.

    Resolution order for internet destinations:
      - ``ProxyUri``, taken as is
      - ``ProxyHost`` with ``ProxyPort`` (default 80)
      - nothing configured: no proxy

    ``ProxyUser``/``ProxyPassword`` or userinfo in ``ProxyUri`` become the
    proxy credentials. On-premise proxies need a connectivity service and are
    rejected.
    """

    def get_proxy_configuration(self, properties: DestinationProperties) -> Optional[ProxyConfiguration]:
        try:
            return self._derive(properties)
        except ProxyConfigurationError as e:
            log.warning("Cannot derive proxy configuration: %s", e)
            raise

    def _derive(self, properties: DestinationProperties) -> Optional[ProxyConfiguration]:
        proxy_type = self._read(properties, DestinationProperty.PROXY_TYPE)
        if proxy_type is not None and proxy_type != ProxyType.INTERNET.value:
            if proxy_type == ProxyType.ON_PREMISE.value:
                raise ProxyConfigurationError("On-premise proxies are not available for this destination")
            raise ProxyConfigurationError(f"Unknown proxy type {proxy_type!r}")

        raw_uri = self._read(properties, DestinationProperty.PROXY_URI)
        host = self._read(properties, DestinationProperty.PROXY_HOST)
        if raw_uri:
            uri = self._parse_uri(raw_uri)
        elif host:
            port = self._read(properties, DestinationProperty.PROXY_PORT)
            port = DEFAULT_PROXY_PORT if port is None else port
            if not 0 < port < 65536:
                raise ProxyConfigurationError(f"Proxy port out of range: {port}")
            uri = self._parse_uri(f"http://{host}:{port}")
        else:
            return None

        credentials = None
        user = self._read(properties, DestinationProperty.PROXY_USER)
        if user:
            password = self._read(properties, DestinationProperty.PROXY_PASSWORD) or ""
            credentials = BasicCredentials(user, password)
        elif uri.username:
            credentials = BasicCredentials(uri.username, uri.password)
        if uri.userinfo:
            uri = uri.copy_with(username=None, password=None)

        log.debug("Derived proxy configuration %s", uri)
        return ProxyConfiguration(uri=uri, credentials=credentials)

    @staticmethod
    def _read(properties: DestinationProperties, key):
        try:
            return properties.get(key)
        except PropertyConversionError as e:
            raise ProxyConfigurationError(str(e)) from e

    @staticmethod
    def _parse_uri(raw: str) -> httpx.URL:
        try:
            uri = httpx.URL(raw)
        except httpx.InvalidURL as e:
            raise ProxyConfigurationError(f"Invalid proxy URI {raw!r}: {e}") from e
        if uri.scheme not in PROXY_SCHEMES or not uri.host:
            raise ProxyConfigurationError(f"Proxy URI must be an absolute http(s) URI: {raw!r}")
        return uri
