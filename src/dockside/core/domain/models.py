"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Un único primitivo de decodificación (`TypeAdapter.validate_json`) sirve
  para todos los endpoints.
- Los nombres de campo de la API Docker (`Id`, `RepoTags`...) quedan como
  alias; en Python se usan nombres snake_case.

Nota:
- Estos modelos describen *qué* devuelve el daemon, no *cómo* se obtiene.
- Los campos desconocidos se ignoran: el daemon añade campos entre versiones.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

_DOCKER_MODEL = ConfigDict(extra="ignore", populate_by_name=True)


class Port(BaseModel):
    model_config = _DOCKER_MODEL

    ip: str | None = Field(default=None, alias="IP")
    private_port: int = Field(..., alias="PrivatePort")
    public_port: int | None = Field(default=None, alias="PublicPort")
    type: str = Field(default="tcp", alias="Type")


class Container(BaseModel):
    """Entrada de `GET /containers/json`."""

    model_config = _DOCKER_MODEL

    id: str = Field(..., alias="Id", min_length=1)
    image: str = Field(default="", alias="Image")
    status: str = Field(default="", alias="Status")
    state: str | None = Field(default=None, alias="State")
    command: str = Field(default="", alias="Command")
    created: int = Field(default=0, alias="Created", description="Epoch (segundos).")
    names: list[str] = Field(default_factory=list, alias="Names")
    ports: list[Port] = Field(default_factory=list, alias="Ports")
    labels: dict[str, str] | None = Field(default=None, alias="Labels")
    size_rw: int | None = Field(default=None, alias="SizeRw")
    size_root_fs: int | None = Field(default=None, alias="SizeRootFs")

    @property
    def short_id(self) -> str:
        return self.id[:12]


class ContainerState(BaseModel):
    model_config = _DOCKER_MODEL

    status: str | None = Field(default=None, alias="Status")
    running: bool = Field(default=False, alias="Running")
    paused: bool = Field(default=False, alias="Paused")
    restarting: bool = Field(default=False, alias="Restarting")
    oom_killed: bool = Field(default=False, alias="OOMKilled")
    dead: bool = Field(default=False, alias="Dead")
    pid: int = Field(default=0, alias="Pid")
    exit_code: int = Field(default=0, alias="ExitCode")
    error: str = Field(default="", alias="Error")
    started_at: str | None = Field(default=None, alias="StartedAt")
    finished_at: str | None = Field(default=None, alias="FinishedAt")


class ContainerInfo(BaseModel):
    """Resultado de `GET /containers/{id}/json` (inspect)."""

    model_config = _DOCKER_MODEL

    id: str = Field(..., alias="Id")
    name: str = Field(default="", alias="Name")
    created: str = Field(default="", alias="Created")
    path: str = Field(default="", alias="Path")
    args: list[str] = Field(default_factory=list, alias="Args")
    image: str = Field(default="", alias="Image")
    state: ContainerState = Field(default_factory=ContainerState, alias="State")
    restart_count: int = Field(default=0, alias="RestartCount")
    driver: str = Field(default="", alias="Driver")
    config: dict[str, Any] = Field(default_factory=dict, alias="Config")
    host_config: dict[str, Any] = Field(default_factory=dict, alias="HostConfig")
    network_settings: dict[str, Any] = Field(default_factory=dict, alias="NetworkSettings")
    mounts: list[dict[str, Any]] = Field(default_factory=list, alias="Mounts")


class Image(BaseModel):
    """Entrada de `GET /images/json`."""

    model_config = _DOCKER_MODEL

    id: str = Field(..., alias="Id")
    parent_id: str = Field(default="", alias="ParentId")
    repo_tags: list[str] | None = Field(default=None, alias="RepoTags")
    repo_digests: list[str] | None = Field(default=None, alias="RepoDigests")
    created: int = Field(default=0, alias="Created")
    size: int = Field(default=0, alias="Size")
    virtual_size: int | None = Field(default=None, alias="VirtualSize")
    labels: dict[str, str] | None = Field(default=None, alias="Labels")


class SystemInfo(BaseModel):
    """Resultado de `GET /info`."""

    model_config = _DOCKER_MODEL

    id: str = Field(default="", alias="ID")
    name: str = Field(default="", alias="Name")
    containers: int = Field(default=0, alias="Containers")
    containers_running: int = Field(default=0, alias="ContainersRunning")
    containers_paused: int = Field(default=0, alias="ContainersPaused")
    containers_stopped: int = Field(default=0, alias="ContainersStopped")
    images: int = Field(default=0, alias="Images")
    driver: str = Field(default="", alias="Driver")
    docker_root_dir: str = Field(default="", alias="DockerRootDir")
    kernel_version: str = Field(default="", alias="KernelVersion")
    operating_system: str = Field(default="", alias="OperatingSystem")
    os_type: str = Field(default="", alias="OSType")
    architecture: str = Field(default="", alias="Architecture")
    ncpu: int = Field(default=0, alias="NCPU")
    mem_total: int = Field(default=0, alias="MemTotal")
    server_version: str = Field(default="", alias="ServerVersion")
    debug: bool = Field(default=False, alias="Debug")


class Version(BaseModel):
    """Resultado de `GET /version`."""

    model_config = _DOCKER_MODEL

    version: str = Field(..., alias="Version")
    api_version: str = Field(..., alias="ApiVersion")
    min_api_version: str | None = Field(default=None, alias="MinAPIVersion")
    git_commit: str = Field(default="", alias="GitCommit")
    go_version: str = Field(default="", alias="GoVersion")
    os: str = Field(default="", alias="Os")
    arch: str = Field(default="", alias="Arch")
    kernel_version: str | None = Field(default=None, alias="KernelVersion")
    build_time: str | None = Field(default=None, alias="BuildTime")


class Top(BaseModel):
    """Tabla cruda de `GET /containers/{id}/top` (salida de `ps`)."""

    model_config = _DOCKER_MODEL

    titles: list[str] = Field(default_factory=list, alias="Titles")
    processes: list[list[str]] = Field(default_factory=list, alias="Processes")


class Process(BaseModel):
    """Una fila de `Top` normalizada por título de columna."""

    user: str = ""
    pid: str = ""
    cpu: str | None = None
    memory: str | None = None
    vsz: str | None = None
    rss: str | None = None
    tty: str | None = None
    stat: str | None = None
    start: str | None = None
    time: str | None = None
    command: str = ""


class ChangeKind(IntEnum):
    MODIFIED = 0
    ADDED = 1
    DELETED = 2


class FilesystemChange(BaseModel):
    """Entrada de `GET /containers/{id}/changes`."""

    model_config = _DOCKER_MODEL

    path: str = Field(..., alias="Path")
    kind: ChangeKind = Field(..., alias="Kind")
