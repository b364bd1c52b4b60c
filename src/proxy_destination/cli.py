from __future__ import annotations
import logging
from typing import List, Optional

import typer
from rich.console import Console

from .destination import TransparentProxyDestination
from .errors import DestinationError
from .properties import DestinationProperty
from .reporter import Reporter
from .util import parse_header, parse_property

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _builder(
    uri: str | None,
    instance_name: str | None,
    tls_version: str | None,
    headers: List[str],
    properties: List[str],
) -> TransparentProxyDestination.Builder:
    builder = TransparentProxyDestination.builder()
    for raw in properties:
        try:
            key, value = parse_property(raw)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--property")
        builder.property(key, value)
    if uri:
        builder.property(DestinationProperty.URI, uri)
    if instance_name:
        builder.instance_name(instance_name)
    if tls_version:
        builder.property(DestinationProperty.TLS_VERSION, tls_version)
    for raw in headers:
        try:
            builder.header(parse_header(raw))
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--header")
    return builder


@app.callback()
def main() -> None:
    pass


@app.command("show")
def show(
    uri: Optional[str] = typer.Option(None, "--uri", help="Destination URI (default http://dynamic:80)"),
    instance_name: Optional[str] = typer.Option(None, "--instance-name", help="Route to http://dynamic-<name>:80"),
    destination_name: Optional[str] = typer.Option(None, "--destination-name"),
    fragment_name: Optional[str] = typer.Option(None, "--fragment-name"),
    tenant_subdomain: Optional[str] = typer.Option(None, "--tenant-subdomain"),
    tenant_id: Optional[str] = typer.Option(None, "--tenant-id"),
    fragment_optional: Optional[str] = typer.Option(None, "--fragment-optional"),
    tls_version: Optional[str] = typer.Option(None, "--tls-version"),
    header: Optional[List[str]] = typer.Option(None, "--header", "-H", help="Extra header as 'Name: value'. Repeatable."),
    prop: Optional[List[str]] = typer.Option(None, "--property", "-p", help="Raw property as 'key=value'. Repeatable."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Build a transparent proxy destination and print what it resolves to."""
    _configure_logging(verbose)
    console = Console()
    reporter = Reporter(console)
    builder = _builder(uri, instance_name, tls_version, header or [], prop or [])
    if destination_name:
        builder.destination_name(destination_name)
    if fragment_name:
        builder.fragment_name(fragment_name)
    if tenant_subdomain:
        builder.tenant_subdomain(tenant_subdomain)
    if tenant_id:
        builder.tenant_id(tenant_id)
    if fragment_optional:
        builder.fragment_optional(fragment_optional)
    try:
        destination = builder.build()
        reporter.destination(destination)
    except DestinationError as e:
        reporter.error(e)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
