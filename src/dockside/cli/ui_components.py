"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from datetime import datetime, timezone

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dockside.core.domain.models import (
    Container,
    FilesystemChange,
    Image,
    Process,
    SystemInfo,
    Version,
)


def _format_epoch(value: int) -> str:
    if not value:
        return "-"
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _format_size(value: int | None) -> str:
    if value is None:
        return "-"
    size = float(value)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1000:
            return f"{size:.1f}{unit}" if unit != "B" else f"{int(size)}B"
        size /= 1000
    return f"{size:.1f}TB"


def build_containers_table(containers: list[Container]) -> Table:
    table = Table(title="Containers")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Image", style="white")
    table.add_column("Created", style="dim")
    table.add_column("Status", style="green")
    table.add_column("Names", style="magenta")
    for c in containers:
        names = ", ".join(n.lstrip("/") for n in c.names)
        table.add_row(c.short_id, c.image, _format_epoch(c.created), c.status, names)
    return table


def build_images_table(images: list[Image]) -> Table:
    table = Table(title="Images")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Tags", style="white")
    table.add_column("Created", style="dim")
    table.add_column("Size", style="green", justify="right")
    for img in images:
        image_id = img.id.split(":", 1)[-1][:12]
        tags = ", ".join(img.repo_tags or ["<none>"])
        table.add_row(image_id, tags, _format_epoch(img.created), _format_size(img.size))
    return table


def build_processes_table(processes: list[Process]) -> Table:
    table = Table(title="Processes")
    table.add_column("User", style="cyan")
    table.add_column("PID", style="white", justify="right")
    table.add_column("Start", style="dim")
    table.add_column("Time", style="dim")
    table.add_column("Command", style="green")
    for p in processes:
        table.add_row(p.user, p.pid, p.start or "-", p.time or "-", p.command)
    return table


def build_changes_table(changes: list[FilesystemChange]) -> Table:
    styles = {0: "yellow", 1: "green", 2: "red"}
    table = Table(title="Filesystem changes")
    table.add_column("Kind", no_wrap=True)
    table.add_column("Path", style="white")
    for change in changes:
        kind = Text(change.kind.name.lower(), style=styles.get(int(change.kind), "white"))
        table.add_row(kind, change.path)
    return table


def build_info_panel(info: SystemInfo) -> Panel:
    body = Text()
    body.append(f"Name: {info.name}\n")
    body.append(f"Server version: {info.server_version}\n")
    body.append(f"OS: {info.operating_system} ({info.os_type}/{info.architecture})\n")
    body.append(f"Kernel: {info.kernel_version}\n")
    body.append(f"Storage driver: {info.driver}\n")
    body.append(f"Containers: {info.containers} ")
    body.append(
        f"(running {info.containers_running}, paused {info.containers_paused}, "
        f"stopped {info.containers_stopped})\n",
        style="dim",
    )
    body.append(f"Images: {info.images}\n")
    body.append(f"CPUs: {info.ncpu}  Memory: {_format_size(info.mem_total)}")
    return Panel(body, title=Text("Docker daemon", style="bold cyan"), border_style="cyan")


def build_version_panel(version: Version) -> Panel:
    body = Text()
    body.append(f"Version: {version.version}\n")
    body.append(f"API version: {version.api_version}")
    if version.min_api_version:
        body.append(f" (minimum {version.min_api_version})", style="dim")
    body.append(f"\nGo version: {version.go_version}\n")
    body.append(f"Git commit: {version.git_commit}\n")
    body.append(f"OS/Arch: {version.os}/{version.arch}")
    if version.build_time:
        body.append(f"\nBuilt: {version.build_time}", style="dim")
    return Panel(body, title=Text("Server", style="bold yellow"), border_style="yellow")
