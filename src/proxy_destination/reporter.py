from __future__ import annotations
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

from .destination import TransparentProxyDestination
from .errors import DestinationError
from .properties import DestinationProperty


class Reporter:
    def __init__(self, console: Console) -> None:
        self.console = console

    def destination(self, destination: TransparentProxyDestination) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Attribute", style="bold")
        table.add_column("Value")
        proxy = destination.get_proxy_configuration()
        # parse first so malformed URIs fail, then show the configured text
        destination.get_uri()
        table.add_row("URI", Text(destination.properties.get(DestinationProperty.URI.name)))
        table.add_row("Proxy type", destination.get_proxy_type().value)
        table.add_row("Proxy", str(proxy.uri) if proxy else "-")
        table.add_row("TLS version", destination.get_tls_version() or "-")
        table.add_row("Authentication", destination.get_authentication_type().value)
        table.add_row("Header providers", str(len(destination.get_header_providers())))
        self.console.print(Panel.fit(table, title=Text("Destination", style="bold blue")))
        self.headers(destination)

    def headers(self, destination: TransparentProxyDestination) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Name", style="bold")
        table.add_column("Value")
        for h in destination.get_headers(None):
            table.add_row(h.name, h.value)
        style = "bold blue" if destination.custom_headers else "bold yellow"
        self.console.print(Panel.fit(table, title=Text("Headers", style=style)))

    def error(self, error: DestinationError) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {error}")
