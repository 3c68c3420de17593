"""Taxonomía de errores del cliente.

Reglas:
- Todo lo que sale hacia el llamador es un `DockerError`.
- La causa original se conserva encadenada (`raise ... from exc`).
- Nada se reintenta internamente: la política de retry es del llamador.
"""

from __future__ import annotations

from pathlib import Path


class DockerError(Exception):
    """Raíz de todos los errores de dockside."""


class DockerConnectionError(DockerError):
    """Fallo de socket, DNS o handshake TLS al conectar con el daemon."""


class UnsupportedSchemeError(DockerConnectionError):
    """`DOCKER_HOST` usa un esquema que este cliente no sabe transportar."""

    def __init__(self, host: str) -> None:
        super().__init__(f"unsupported Docker URL scheme: {host}")
        self.host = host


class CertificateError(DockerError):
    """Material TLS ausente, ambiguo o ilegible."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class RequestBuildError(DockerError):
    """No se pudo construir la URL/petición."""


class HttpStatusError(DockerError):
    """El daemon respondió con un status fuera del rango 2xx."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        status = f"{status_code} {reason}".strip()
        super().__init__(f"HTTP request failed: {status}")
        self.status_code = status_code


class StreamError(DockerError):
    """El body se cortó o falló a mitad de transferencia."""


class DecodeError(DockerError):
    """El body no encaja con el esquema esperado.

    Conserva el nombre lógico del tipo pedido y el texto crudo de la respuesta
    para diagnóstico.
    """

    def __init__(self, type_name: str, raw: str) -> None:
        super().__init__(f"could not parse Docker response as {type_name}: {raw}")
        self.type_name = type_name
        self.raw = raw


class ContainerInfoError(DockerError):
    """Fallo al inspeccionar un contenedor concreto."""

    def __init__(self, container_id: str) -> None:
        super().__init__(f"could not get info about container '{container_id}'")
        self.container_id = container_id
