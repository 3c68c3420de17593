"""CLI principal (Typer).

Cada comando abre un cliente con `Docker.connect_with_defaults()`, hace una
llamada y pinta el resultado con Rich (o JSON con `--json`).
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from dockside.adapters.archive_exporter import write_response_to_file
from dockside.adapters.json_exporter import export_records_json, records_to_json
from dockside.cli import doctor
from dockside.cli.ui_components import (
    build_changes_table,
    build_containers_table,
    build_images_table,
    build_info_panel,
    build_processes_table,
    build_version_panel,
)
from dockside.core.domain.options import ContainerListOptions
from dockside.core.errors import DockerError
from dockside.core.services.docker import Docker

app = typer.Typer(no_args_is_help=True, help="Talk to the Docker daemon over its Unix socket or TLS.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

T = TypeVar("T")

_OUTPUT_HELP = "Write the JSON to this file (implies --json)."


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, rich_tracebacks=verbose, show_path=False)],
        force=True,
    )


def _call(action: Callable[[Docker], Awaitable[T]]) -> T:
    async def _run() -> T:
        async with Docker.connect_with_defaults() as docker:
            return await action(docker)

    try:
        return asyncio.run(_run())
    except DockerError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        cause = exc.__cause__
        if cause is not None:
            _err_console.print(f"[dim]caused by: {cause}[/dim]")
        raise typer.Exit(code=1) from exc


def _print_json(records: Any, output: Path | None) -> None:
    if output is not None:
        export_records_json(records, output)
        _console.print(f"[green]Wrote JSON to[/green] {output}")
        return
    _console.print_json(records_to_json(records))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log connection details."),
) -> None:
    _setup_logging(verbose)


@app.command()
def ping() -> None:
    """Check that the daemon answers."""

    body = _call(lambda d: d.ping())
    _console.print(body.decode("utf-8", errors="replace"))


@app.command()
def version(
    as_json: bool = typer.Option(False, "--json", help="Raw JSON output."),
    output: Path | None = typer.Option(None, "--output", "-o", help=_OUTPUT_HELP),
) -> None:
    """Show the daemon version."""

    result = _call(lambda d: d.version())
    if as_json or output is not None:
        _print_json(result, output)
        return
    _console.print(build_version_panel(result))


@app.command()
def info(
    as_json: bool = typer.Option(False, "--json", help="Raw JSON output."),
    output: Path | None = typer.Option(None, "--output", "-o", help=_OUTPUT_HELP),
) -> None:
    """Show system-wide information."""

    result = _call(lambda d: d.system_info())
    if as_json or output is not None:
        _print_json(result, output)
        return
    _console.print(build_info_panel(result))


@app.command()
def containers(
    all: bool = typer.Option(False, "--all", "-a", help="Include stopped containers."),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Show the last N containers."),
    status: list[str] = typer.Option([], "--status", help="Filter by status (repeatable)."),
    as_json: bool = typer.Option(False, "--json", help="Raw JSON output."),
    output: Path | None = typer.Option(None, "--output", "-o", help=_OUTPUT_HELP),
) -> None:
    """List containers."""

    opts = ContainerListOptions(all=all, limit=limit)
    for value in status:
        opts = opts.with_filter("status", value)
    result = _call(lambda d: d.containers(opts))
    if as_json or output is not None:
        _print_json(result, output)
        return
    _console.print(build_containers_table(result))


@app.command()
def images(
    all: bool = typer.Option(False, "--all", "-a", help="Include intermediate images."),
    as_json: bool = typer.Option(False, "--json", help="Raw JSON output."),
    output: Path | None = typer.Option(None, "--output", "-o", help=_OUTPUT_HELP),
) -> None:
    """List images."""

    result = _call(lambda d: d.images(all))
    if as_json or output is not None:
        _print_json(result, output)
        return
    _console.print(build_images_table(result))


@app.command()
def top(container_id: str = typer.Argument(..., help="Container ID or name.")) -> None:
    """Show the processes running inside a container."""

    result = _call(lambda d: d.processes(container_id))
    _console.print(build_processes_table(result))


@app.command()
def changes(container_id: str = typer.Argument(..., help="Container ID or name.")) -> None:
    """Show filesystem changes of a container."""

    result = _call(lambda d: d.filesystem_changes(container_id))
    _console.print(build_changes_table(result))


@app.command()
def inspect(
    container_id: str = typer.Argument(..., help="Container ID or name."),
    output: Path | None = typer.Option(None, "--output", "-o", help=_OUTPUT_HELP),
) -> None:
    """Show low-level information about a container."""

    result = _call(lambda d: d.container_info(container_id))
    _print_json(result, output)


@app.command()
def export(
    container_id: str = typer.Argument(..., help="Container ID or name."),
    output: Path = typer.Option(..., "--output", "-o", help="Destination tar file."),
) -> None:
    """Export a container's filesystem as a tar archive."""

    async def _export(docker: Docker) -> int:
        response = await docker.export_container(container_id)
        return await write_response_to_file(response, output)

    written = _call(_export)
    _console.print(f"[green]Wrote {written} bytes to[/green] {output}")


def run() -> None:
    app()
