"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import ssl

import typer
from rich.console import Console
from rich.table import Table

from dockside.adapters.cert_resolver import DockerCertResolver
from dockside.adapters.tls import build_ssl_context
from dockside.core.config import ClientConfig, DockerSettings, SecureTcpTransport
from dockside.core.errors import DockerError
from dockside.core.services.docker import Docker

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_ping(config: ClientConfig) -> tuple[bool, str]:
    try:
        async with Docker(config) as docker:
            body = await docker.ping()
        return True, body.decode("utf-8", errors="replace") or "OK"
    except DockerError as exc:
        return False, str(exc)


def _check_identity(config: ClientConfig) -> tuple[str, str]:
    if not config.tls.mutual_tls:
        return "SKIPPED", "DOCKER_TLS_VERIFY not set -> no client certificate"
    try:
        bundle = DockerCertResolver(config.tls).resolve()
    except DockerError as exc:
        return "FAIL", str(exc)
    if bundle is None:
        return "FAIL", "no identity resolved"
    return "OK", f"{len(bundle.certificates)} certs, key from {bundle.key_path}"


def _check_trust_store(config: ClientConfig) -> tuple[str, str]:
    try:
        context = build_ssl_context(config.tls)
    except (DockerError, ssl.SSLError) as exc:
        return "FAIL", str(exc)
    stats = context.cert_store_stats()
    return "OK", f"{stats.get('x509_ca', 0)} CA certificates"


@app.command()
def run() -> None:
    """Show the resolved Docker environment and check the daemon."""

    try:
        config = ClientConfig.from_settings(DockerSettings())
    except DockerError as exc:
        _console.print(f"[red]Invalid Docker environment:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    table = Table(title="dockside doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    transport = config.transport
    if isinstance(transport, SecureTcpTransport):
        table.add_row("Transport", "TLS", transport.base_url)
        table.add_row("Trust store", *_check_trust_store(config))
        table.add_row("Client certificate", *_check_identity(config))
    else:
        table.add_row("Transport", "UNIX", transport.socket_path)

    ok, detail = asyncio.run(_check_ping(config))
    table.add_row("Daemon ping", "OK" if ok else "FAIL", detail)

    _console.print(table)
    if not ok:
        raise typer.Exit(code=1)
