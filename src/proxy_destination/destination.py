from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple, Union

import httpx

from . import headers as fixed_headers
from .config import DEFAULT_URI, INSTANCE_URI_TEMPLATE
from .errors import MalformedUriError, MissingPropertyError, PropertyConversionError, UnsupportedPropertyError
from .headers import DestinationHeaderProvider, Header
from .models import AuthenticationType, ProxyConfiguration, ProxyType
from .properties import (
    DestinationProperties,
    DestinationPropertiesBuilder,
    DestinationProperty,
    KeyLike,
    PropertyKey,
)
from .proxy_config import ProxyConfigurationFactory

log = logging.getLogger("proxy_destination.destination")

# RFC 3986 characters, with every "%" starting a percent-encoded octet
URI_RE = re.compile(r"(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2})+")


@dataclass(frozen=True, init=False)
class TransparentProxyDestination:
    """Immutable HTTP destination that routes through a transparent forward proxy.

    Equality and hashing cover ``properties`` and ``custom_headers`` only. The
    proxy configuration is derived from ``properties`` once, in the constructor,
    and never changes afterwards, so comparing it would add nothing. Header
    providers are collaborators, not data, and are not compared either.

    Use :meth:`builder` to create instances.
    """

    properties: DestinationProperties
    custom_headers: Tuple[Header, ...]
    header_providers: Tuple[DestinationHeaderProvider, ...] = field(compare=False, repr=False)
    cached_proxy_configuration: Optional[ProxyConfiguration] = field(compare=False, repr=False)

    def __init__(
        self,
        properties: DestinationProperties,
        custom_headers: Optional[Iterable[Header]] = None,
        header_providers: Iterable[DestinationHeaderProvider] = (),
        proxy_configuration_factory: Optional[ProxyConfigurationFactory] = None,
    ) -> None:
        factory = proxy_configuration_factory or ProxyConfigurationFactory()
        object.__setattr__(self, "properties", properties)
        object.__setattr__(self, "custom_headers", tuple(custom_headers or ()))
        object.__setattr__(self, "header_providers", tuple(header_providers))
        object.__setattr__(self, "cached_proxy_configuration", factory.get_proxy_configuration(properties))

    @classmethod
    def builder(cls) -> "TransparentProxyDestination.Builder":
        return cls.Builder()

    # ---------------------------
    # Supported attributes
    # ---------------------------
    def get_uri(self) -> httpx.URL:
        """Parse the ``URI`` property. Raises :class:`MalformedUriError` if it is not a URI.

        The result is normalized by httpx: a default port is dropped, so
        ``http://dynamic:80`` reads back with ``port`` set to ``None``. Read the
        raw ``URI`` property to see the value exactly as it was configured.
        """
        try:
            raw = self.properties.get(DestinationProperty.URI)
        except PropertyConversionError as e:
            raise MalformedUriError(str(e)) from e
        if raw is None:
            raise MissingPropertyError(f"Property {DestinationProperty.URI.name!r} is not set")
        if not URI_RE.fullmatch(raw):
            raise MalformedUriError(f"Invalid destination URI {raw!r}: illegal character")
        try:
            uri = httpx.URL(raw)
        except httpx.InvalidURL as e:
            raise MalformedUriError(f"Invalid destination URI {raw!r}: {e}") from e
        if b"%" in uri.raw_host:
            raise MalformedUriError(f"Invalid destination URI {raw!r}: illegal host")
        return uri

    def get_headers(self, request_uri: Union[httpx.URL, str, None] = None) -> Tuple[Header, ...]:
        # Same headers for every request; per-request headers come from header providers.
        return self.custom_headers

    def get_header_providers(self) -> Tuple[DestinationHeaderProvider, ...]:
        return self.header_providers

    def get_tls_version(self) -> Optional[str]:
        return self.properties.get(DestinationProperty.TLS_VERSION)

    def get_proxy_configuration(self) -> Optional[ProxyConfiguration]:
        return self.cached_proxy_configuration

    def get_proxy_type(self) -> ProxyType:
        return ProxyType.INTERNET

    def is_trusting_all_certificates(self) -> bool:
        return False

    def get_authentication_type(self) -> AuthenticationType:
        return AuthenticationType.NO_AUTHENTICATION

    def get(self, key: PropertyKey) -> Any:
        return self.properties.get(key)

    def property_names(self) -> List[str]:
        return self.properties.property_names()

    # ---------------------------
    # Unsupported attributes
    # ---------------------------
    def _unsupported(self, attribute: str) -> UnsupportedPropertyError:
        return UnsupportedPropertyError(attribute, type(self).__name__)

    def get_key_store(self):
        raise self._unsupported("key stores")

    def get_key_store_password(self):
        raise self._unsupported("key store passwords")

    def get_trust_store(self):
        raise self._unsupported("trust stores")

    def get_trust_store_password(self):
        raise self._unsupported("trust store passwords")

    def get_basic_credentials(self):
        raise self._unsupported("basic credentials")

    def get_property(self, name: str):
        raise self._unsupported(f"lookup of arbitrary properties ({name!r})")

    class Builder:
        """Fluent builder for :class:`TransparentProxyDestination`.

        State is kept across :meth:`build` calls, so one builder can produce
        several destinations that share everything configured so far.
        """

        def __init__(self, proxy_configuration_factory: Optional[ProxyConfigurationFactory] = None) -> None:
            self._headers: List[Header] = []
            self._properties = DestinationPropertiesBuilder()
            self._header_providers: List[DestinationHeaderProvider] = []
            self._proxy_configuration_factory = proxy_configuration_factory

        def property(self, key: KeyLike, value: Any) -> "TransparentProxyDestination.Builder":
            """Set ``key`` to ``value``, replacing any value already assigned."""
            self._properties.property(key, value)
            return self

        def remove_property(self, key: KeyLike) -> "TransparentProxyDestination.Builder":
            self._properties.remove_property(key)
            return self

        def get(self, key: KeyLike, conversion=None):
            return self._properties.get(key, conversion)

        def header(self, header: Union[Header, str], value: Optional[str] = None) -> "TransparentProxyDestination.Builder":
            """Add a header to every outgoing request.

            Accepts either a :class:`Header` or a header name and value.
            """
            if isinstance(header, Header):
                if value is not None:
                    raise TypeError("value must not be given together with a Header")
                self._headers.append(header)
            elif value is None:
                raise TypeError(f"missing value for header {header!r}")
            else:
                self._headers.append(Header(header, value))
            return self

        def headers(self, headers: Iterable[Header]) -> "TransparentProxyDestination.Builder":
            self._headers.extend(headers)
            return self

        def destination_name(self, destination_name: str) -> "TransparentProxyDestination.Builder":
            return self.header(fixed_headers.DESTINATION_NAME, destination_name)

        def fragment_name(self, fragment_name: str) -> "TransparentProxyDestination.Builder":
            return self.header(fixed_headers.FRAGMENT_NAME, fragment_name)

        def tenant_subdomain(self, tenant_subdomain: str) -> "TransparentProxyDestination.Builder":
            return self.header(fixed_headers.TENANT_SUBDOMAIN, tenant_subdomain)

        def tenant_id(self, tenant_id: str) -> "TransparentProxyDestination.Builder":
            return self.header(fixed_headers.TENANT_ID, tenant_id)

        def fragment_optional(self, fragment_optional: str) -> "TransparentProxyDestination.Builder":
            return self.header(fixed_headers.FRAGMENT_OPTIONAL, fragment_optional)

        def instance_name(self, instance_name: str) -> "TransparentProxyDestination.Builder":
            return self.property(DestinationProperty.URI, INSTANCE_URI_TEMPLATE.format(instance_name))

        def header_providers(self, *header_providers: DestinationHeaderProvider) -> "TransparentProxyDestination.Builder":
            """Register providers invoked for every outgoing request."""
            for provider in header_providers:
                if not isinstance(provider, DestinationHeaderProvider):
                    raise TypeError(f"{provider!r} has no get_headers method")
            self._header_providers.extend(header_providers)
            return self

        def build(self) -> "TransparentProxyDestination":
            if not self._properties.contains(DestinationProperty.URI):
                self.property(DestinationProperty.URI, DEFAULT_URI)
            return self._build_internal()

        def _build_internal(self) -> "TransparentProxyDestination":
            destination = TransparentProxyDestination(
                self._properties.build(),
                list(self._headers),
                list(self._header_providers),
                self._proxy_configuration_factory,
            )
            log.debug(
                "Built destination %s with %d header(s)",
                destination.properties.get(DestinationProperty.URI.name),
                len(destination.custom_headers),
            )
            return destination
