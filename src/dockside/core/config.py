"""Configuración del cliente.

Por qué aquí:
- Centraliza las variables de entorno del ecosistema Docker (pydantic-settings)
  y las convierte una sola vez en valores inmutables (`ClientConfig`).
- Los adaptadores reciben `ClientConfig` y nunca vuelven a leer `os.environ`.

Variables soportadas (mismo significado que el CLI oficial de `docker`):
- DOCKER_HOST          -> `unix://<path>` o `tcp://<host:port>`
- DOCKER_TLS_VERIFY    -> si está definida, activa TLS mutuo
- DOCKER_CERT_PATH     -> directorio con ca.pem/cert.pem/key.pem
- DOCKER_CONFIG        -> alternativa a DOCKER_CERT_PATH
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from dockside.core.errors import CertificateError, UnsupportedSchemeError

if sys.platform.startswith("win"):
    # Los named pipes no están soportados, pero el puerto TCP sigue disponible.
    DEFAULT_DOCKER_HOST = "tcp://localhost:2375"
else:
    DEFAULT_DOCKER_HOST = "unix:///var/run/docker.sock"

UNIX_SCHEME = "unix://"
TCP_SCHEME = "tcp://"
HTTPS_SCHEME = "https://"


def supports_unix_sockets() -> bool:
    return not sys.platform.startswith("win")


class DockerSettings(BaseSettings):
    """Entorno Docker tal y como lo ve el proceso.

    Nota:
    - `tls_verify` se interpreta por presencia, no por valor: cualquier valor
      (incluso vacío) activa TLS mutuo, igual que el CLI oficial.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCKER_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    host: str = Field(
        default=DEFAULT_DOCKER_HOST,
        min_length=1,
        description="Dirección del daemon (DOCKER_HOST).",
    )
    tls_verify: str | None = Field(
        default=None,
        description="Si está definida, se presenta certificado cliente (DOCKER_TLS_VERIFY).",
    )
    cert_path: Path | None = Field(
        default=None,
        description="Directorio con ca.pem, cert.pem y key.pem (DOCKER_CERT_PATH).",
    )
    config: Path | None = Field(
        default=None,
        description="Directorio de configuración Docker (DOCKER_CONFIG).",
    )

    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por request (segundos). Sin definir: sin timeout.",
    )
    user_agent: str = Field(
        default="dockside/0.1",
        min_length=1,
        description="User-Agent enviado al daemon.",
    )

    @property
    def mutual_tls(self) -> bool:
        return self.tls_verify is not None


class UnixSocketTransport(BaseModel):
    """Transporte local: socket Unix sin cifrado."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unix"] = "unix"
    socket_path: str = Field(..., min_length=1)


class SecureTcpTransport(BaseModel):
    """Transporte remoto: TLS sobre TCP."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["tcp"] = "tcp"
    host: str = Field(..., min_length=1)
    port: int | None = Field(default=None, ge=0, le=65535)
    base_url: str = Field(..., min_length=len(HTTPS_SCHEME) + 1)


TransportConfig = Union[UnixSocketTransport, SecureTcpTransport]


class TlsConfig(BaseModel):
    """Reglas de descubrimiento del material TLS, fijadas en construcción."""

    model_config = ConfigDict(frozen=True)

    mutual_tls: bool = False
    cert_path: Path | None = None
    config_dir: Path | None = None

    def cert_dir(self) -> Path:
        """Directorio donde buscar ca.pem, cert.pem y key.pem.

        Orden:
        1) DOCKER_CERT_PATH
        2) DOCKER_CONFIG
        3) <home>/.docker
        """

        if self.cert_path is not None:
            return self.cert_path
        if self.config_dir is not None:
            return self.config_dir
        try:
            home = Path.home()
        except RuntimeError as exc:
            raise CertificateError("cannot find home directory for Docker certificates") from exc
        return home / ".docker"

    def ca_path(self) -> Path:
        return self.cert_dir() / "ca.pem"


class ClientConfig(BaseModel):
    """Configuración resuelta una vez por cliente."""

    model_config = ConfigDict(frozen=True)

    transport: TransportConfig = Field(..., discriminator="kind")
    tls: TlsConfig = Field(default_factory=TlsConfig)
    timeout_seconds: float | None = None
    user_agent: str = "dockside/0.1"

    @classmethod
    def from_settings(cls, settings: DockerSettings | None = None) -> "ClientConfig":
        settings = settings or DockerSettings()
        return cls(
            transport=select_transport(settings.host),
            tls=TlsConfig(
                mutual_tls=settings.mutual_tls,
                cert_path=settings.cert_path,
                config_dir=settings.config,
            ),
            timeout_seconds=settings.http_timeout_seconds,
            user_agent=settings.user_agent,
        )


def unix_transport(addr: str) -> UnixSocketTransport:
    """Transporte local para `unix://<path>` (o una ruta desnuda)."""

    if not supports_unix_sockets():
        raise UnsupportedSchemeError(addr)
    path = addr[len(UNIX_SCHEME):] if addr.startswith(UNIX_SCHEME) else addr
    return UnixSocketTransport(socket_path=path)


def secure_tcp_transport(addr: str) -> SecureTcpTransport:
    """Transporte TLS; `tcp://` se reescribe a `https://` como hace docker-machine."""

    base_url = HTTPS_SCHEME + addr[len(TCP_SCHEME):] if addr.startswith(TCP_SCHEME) else addr
    authority = base_url.split("://", 1)[-1].split("/", 1)[0]
    host, sep, port = authority.rpartition(":")
    if not sep or not port.isdigit():
        host, port = authority, ""
    return SecureTcpTransport(
        host=host.strip("[]"),
        port=int(port) if port else None,
        base_url=base_url.rstrip("/"),
    )


def select_transport(host: str) -> TransportConfig:
    """Elige la variante de transporte a partir de DOCKER_HOST."""

    if host.startswith(UNIX_SCHEME):
        return unix_transport(host)
    if host.startswith(TCP_SCHEME):
        return secure_tcp_transport(host)
    raise UnsupportedSchemeError(host)
