"""dockside: cliente asíncrono del daemon Docker (socket Unix o TLS mutuo)."""

from dockside.core.config import ClientConfig, DockerSettings, TlsConfig
from dockside.core.domain.models import (
    ChangeKind,
    Container,
    ContainerInfo,
    FilesystemChange,
    Image,
    Process,
    SystemInfo,
    Version,
)
from dockside.core.domain.options import ContainerListOptions
from dockside.core.errors import (
    CertificateError,
    ContainerInfoError,
    DecodeError,
    DockerConnectionError,
    DockerError,
    HttpStatusError,
    RequestBuildError,
    StreamError,
    UnsupportedSchemeError,
)
from dockside.core.services.docker import Docker

__all__ = [
    "CertificateError",
    "ChangeKind",
    "ClientConfig",
    "Container",
    "ContainerInfo",
    "ContainerInfoError",
    "ContainerListOptions",
    "DecodeError",
    "Docker",
    "DockerConnectionError",
    "DockerError",
    "DockerSettings",
    "FilesystemChange",
    "HttpStatusError",
    "Image",
    "Process",
    "RequestBuildError",
    "StreamError",
    "SystemInfo",
    "TlsConfig",
    "UnsupportedSchemeError",
    "Version",
]
