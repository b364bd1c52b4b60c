from __future__ import annotations
import logging
import ssl
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .config import Settings
from .destination import TransparentProxyDestination
from .errors import DestinationError
from .headers import DestinationRequestContext

log = logging.getLogger("proxy_destination.http")

TLS_VERSIONS = {
    "TLSv1": ssl.TLSVersion.TLSv1,
    "TLSv1.1": ssl.TLSVersion.TLSv1_1,
    "TLSv1.2": ssl.TLSVersion.TLSv1_2,
    "TLSv1.3": ssl.TLSVersion.TLSv1_3,
}


def build_ssl_context(tls_version: Optional[str], verify: bool) -> ssl.SSLContext:
    """Create an SSL context pinned to ``tls_version`` when one is given."""
    ctx = httpx.create_ssl_context(verify=verify)
    if tls_version is None:
        return ctx
    version = TLS_VERSIONS.get(tls_version)
    if version is None:
        raise DestinationError(f"Unsupported TLS version {tls_version!r}; expected one of {', '.join(TLS_VERSIONS)}")
    ctx.minimum_version = version
    ctx.maximum_version = version
    return ctx


class HttpClient:
    """Synchronous HTTP client that sends requests to a destination.

    Static destination headers are set on the client, header providers are
    asked for more headers on every request. Proxy settings come from the
    destination only, never from the environment.
    """

    def __init__(
        self,
        destination: TransparentProxyDestination,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._destination = destination
        self._settings = settings = settings or Settings()
        headers: List[Tuple[str, str]] = []
        if settings.extra_headers:
            headers.extend(dict(settings.extra_headers).items())
        headers.extend((h.name, h.value) for h in destination.get_headers(None))

        proxy_config = destination.get_proxy_configuration()
        self._client = httpx.Client(
            base_url=destination.get_uri(),
            timeout=settings.timeout_s,
            follow_redirects=settings.follow_redirects,
            headers=headers,
            verify=build_ssl_context(destination.get_tls_version(), settings.verify_tls),
            proxy=proxy_config.to_httpx() if proxy_config else None,
            transport=transport,
            trust_env=False,
            event_hooks={"request": [self._apply_header_providers]},
        )

    def _apply_header_providers(self, request: httpx.Request) -> None:
        providers = self._destination.get_header_providers()
        if not providers:
            return
        context = DestinationRequestContext(destination=self._destination, request_uri=request.url)
        for provider in providers:
            for header in provider.get_headers(context):
                request.headers[header.name] = header.value
        log.debug("Applied %d header provider(s) to %s", len(providers), request.url)

    def get(self, url: str) -> httpx.Response:
        return self._client.get(url)

    def post_json(self, url: str, payload: Dict[str, Any]) -> httpx.Response:
        return self._client.post(url, json=payload)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
