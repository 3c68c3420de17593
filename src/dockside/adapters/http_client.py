"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y el transporte (socket Unix o TLS) para
  todas las llamadas al daemon.
- Facilita testeo: se puede sustituir el backend de red o el resolver de
  certificados sin tocar el resto del cliente.
"""

from __future__ import annotations

import httpcore
import httpx

from dockside.adapters.cert_resolver import DockerCertResolver
from dockside.adapters.connector import UnifiedConnector
from dockside.adapters.transport import DockerTransport
from dockside.core.config import ClientConfig
from dockside.core.interfaces.identity import ClientIdentityProvider


def build_transport(
    config: ClientConfig,
    *,
    identity_provider: ClientIdentityProvider | None = None,
    network_backend: httpcore.AsyncNetworkBackend | None = None,
) -> DockerTransport:
    """Crea el transporte con la variante de conector que pide `config`."""

    if identity_provider is None:
        identity_provider = DockerCertResolver(config.tls)
    connector = UnifiedConnector.for_config(
        config,
        identity_provider=identity_provider,
        backend=network_backend,
    )
    return DockerTransport(connector)


def build_async_client(
    config: ClientConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    identity_provider: ClientIdentityProvider | None = None,
    network_backend: httpcore.AsyncNetworkBackend | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` para hablar con el daemon.

    - Sin timeout salvo que se configure (DOCKER_HTTP_TIMEOUT_SECONDS).
    - Sin seguir redirecciones ni reintentar.
    """

    if transport is None:
        transport = build_transport(
            config,
            identity_provider=identity_provider,
            network_backend=network_backend,
        )
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.timeout_seconds),
        follow_redirects=False,
        headers={
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        },
    )
