"""Cliente Docker: fachada sobre `RequestExecutor`.

Cada endpoint es una plantilla de URL + el esquema Pydantic con el que se
decodifica la respuesta. El transporte se elige una vez en la construcción.
"""

from __future__ import annotations

import logging
from typing import Any

import httpcore
import httpx

from dockside.adapters.http_client import build_async_client
from dockside.adapters.url_builder import UrlBuilder, url_builder_for
from dockside.core.config import (
    ClientConfig,
    DockerSettings,
    TlsConfig,
    secure_tcp_transport,
    unix_transport,
)
from dockside.core.domain.models import (
    Container,
    ContainerInfo,
    FilesystemChange,
    Image,
    Process,
    SystemInfo,
    Top,
    Version,
)
from dockside.core.domain.options import ContainerListOptions
from dockside.core.errors import ContainerInfoError, DockerError
from dockside.core.interfaces.identity import ClientIdentityProvider
from dockside.core.services.executor import RequestExecutor

logger = logging.getLogger(__name__)

# Título de columna de `ps` -> campo de `Process`.
_TOP_COLUMNS: dict[str, str] = {
    "UID": "user",
    "USER": "user",
    "PID": "pid",
    "%CPU": "cpu",
    "%MEM": "memory",
    "VSZ": "vsz",
    "RSS": "rss",
    "TTY": "tty",
    "STAT": "stat",
    "START": "start",
    "STIME": "start",
    "TIME": "time",
    "CMD": "command",
    "COMMAND": "command",
}


def _container_id(container: Container | str) -> str:
    return container.id if isinstance(container, Container) else container


def processes_from_top(top: Top) -> list[Process]:
    """Normaliza la tabla de `ps` por título de columna."""

    processes: list[Process] = []
    for row in top.processes:
        values: dict[str, str] = {}
        for title, value in zip(top.titles, row):
            field_name = _TOP_COLUMNS.get(title)
            if field_name is not None:
                values[field_name] = value
        processes.append(Process(**values))
    return processes


class Docker:
    """Cliente asíncrono del daemon Docker.

    Uso:
        async with Docker.connect_with_defaults() as docker:
            for container in await docker.containers(ContainerListOptions(all=True)):
                ...
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        client: httpx.AsyncClient | None = None,
        identity_provider: ClientIdentityProvider | None = None,
        network_backend: httpcore.AsyncNetworkBackend | None = None,
    ) -> None:
        self._config = config
        self._client = client or build_async_client(
            config,
            identity_provider=identity_provider,
            network_backend=network_backend,
        )
        self._executor = RequestExecutor(self._client, url_builder_for(config))

    @classmethod
    def connect_with_defaults(
        cls,
        settings: DockerSettings | None = None,
        **kwargs: Any,
    ) -> "Docker":
        """Conecta usando DOCKER_HOST, DOCKER_TLS_VERIFY, DOCKER_CERT_PATH y DOCKER_CONFIG."""

        config = ClientConfig.from_settings(settings or DockerSettings())
        logger.debug("using Docker transport %s", config.transport.kind)
        return cls(config, **kwargs)

    @classmethod
    def connect_with_unix(cls, addr: str, **kwargs: Any) -> "Docker":
        return cls(ClientConfig(transport=unix_transport(addr)), **kwargs)

    @classmethod
    def connect_with_ssl(cls, addr: str, *, tls: TlsConfig | None = None, **kwargs: Any) -> "Docker":
        return cls(
            ClientConfig(transport=secure_tcp_transport(addr), tls=tls or TlsConfig()),
            **kwargs,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def url_builder(self) -> UrlBuilder:
        return self._executor.url_builder

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "Docker":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def containers(self, opts: ContainerListOptions | None = None) -> list[Container]:
        params = (opts or ContainerListOptions()).to_url_params()
        path = f"/containers/json?{params}" if params else "/containers/json"
        return await self._executor.decode_url("Container", path, list[Container])

    async def processes(self, container: Container | str) -> list[Process]:
        top: Top = await self._executor.decode_url(
            "Top",
            f"/containers/{_container_id(container)}/top",
            Top,
        )
        return processes_from_top(top)

    async def images(self, all: bool = False) -> list[Image]:
        return await self._executor.decode_url(
            "Image",
            f"/images/json?all={1 if all else 0}",
            list[Image],
        )

    async def system_info(self) -> SystemInfo:
        return await self._executor.decode_url("SystemInfo", "/info", SystemInfo)

    async def container_info(self, container: Container | str) -> ContainerInfo:
        container_id = _container_id(container)
        try:
            return await self._executor.decode_url(
                "ContainerInfo",
                f"/containers/{container_id}/json",
                ContainerInfo,
            )
        except DockerError as exc:
            raise ContainerInfoError(container_id) from exc

    async def filesystem_changes(self, container: Container | str) -> list[FilesystemChange]:
        return await self._executor.decode_url(
            "FilesystemChange",
            f"/containers/{_container_id(container)}/changes",
            list[FilesystemChange],
        )

    async def export_container(self, container: Container | str) -> httpx.Response:
        """Exporta el filesystem como tar, sin bufferizar.

        Devuelve la respuesta abierta; el llamador itera `aiter_raw()` y la
        cierra con `aclose()`.
        """

        url = self._executor.get_url(f"/containers/{_container_id(container)}/export")
        request = self._executor.build_empty_get_request(url)
        return await self._executor.start_request(request)

    async def ping(self) -> bytes:
        return await self._executor.get("/_ping")

    async def version(self) -> Version:
        return await self._executor.decode_url("Version", "/version", Version)
