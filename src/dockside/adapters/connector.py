"""Conector unificado: socket Unix o TLS sobre TCP tras una sola interfaz.

Responsabilidad:
- `UnifiedConnector` es el backend de red del pool de `httpcore`. La variante
  (`SecureTcp` o `LocalSocket`) se elige una vez al construirlo.
- `UnifiedStream` envuelve el stream concreto y delega todo; el pool HTTP
  nunca distingue de qué transporte viene.

Reglas:
- Sin reintentos ni fallback entre variantes.
- Un fallo de conexión no deja nada cacheado.
"""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Union

import httpcore

from dockside.adapters.tls import ALPN_PROTOCOLS, build_ssl_context, install_client_identity
from dockside.adapters.url_builder import decode_socket_host
from dockside.core.config import ClientConfig, SecureTcpTransport, supports_unix_sockets
from dockside.core.errors import DockerConnectionError, UnsupportedSchemeError
from dockside.core.interfaces.identity import ClientIdentityProvider

logger = logging.getLogger(__name__)

TransportKind = Literal["tcp", "unix"]


@dataclass
class SecureTcp:
    """Variante remota: TCP + TLS con identidad cliente opcional."""

    ssl_context: ssl.SSLContext
    identity_provider: ClientIdentityProvider | None = None
    identity_installed: bool = field(default=False, init=False)


@dataclass(frozen=True)
class LocalSocket:
    """Variante local: la ruta del socket viaja en el host de la URL."""


ConnectorVariant = Union[SecureTcp, LocalSocket]


@dataclass(frozen=True)
class Connected:
    """Metadatos de conexión, iguales para ambos transportes."""

    transport: TransportKind
    alpn: str | None = None
    peer: Any = None


class UnifiedStream(httpcore.AsyncNetworkStream):
    """Stream dúplex que delega en el stream del transporte activo.

    No bufferiza ni transforma bytes: lecturas/escrituras parciales y
    cancelaciones llegan tal cual al llamador.
    """

    def __init__(
        self,
        inner: httpcore.AsyncNetworkStream,
        transport: TransportKind,
        *,
        alpn_protocols: list[str] | None = None,
    ) -> None:
        self._inner = inner
        self._transport = transport
        self._alpn_protocols = alpn_protocols

    @property
    def transport(self) -> TransportKind:
        return self._transport

    async def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        return await self._inner.read(max_bytes, timeout=timeout)

    async def write(self, buffer: bytes, timeout: float | None = None) -> None:
        await self._inner.write(buffer, timeout=timeout)

    async def aclose(self) -> None:
        await self._inner.aclose()

    async def start_tls(
        self,
        ssl_context: ssl.SSLContext,
        server_hostname: str | None = None,
        timeout: float | None = None,
    ) -> httpcore.AsyncNetworkStream:
        # httpcore reescribe ALPN en cada conexión; se restaura el orden h2 > http/1.1.
        if self._alpn_protocols:
            ssl_context.set_alpn_protocols(self._alpn_protocols)
        inner = await self._inner.start_tls(ssl_context, server_hostname=server_hostname, timeout=timeout)
        return UnifiedStream(inner, self._transport, alpn_protocols=self._alpn_protocols)

    def get_extra_info(self, info: str) -> Any:
        return self._inner.get_extra_info(info)

    def connected(self) -> Connected:
        alpn = None
        ssl_object = self._inner.get_extra_info("ssl_object")
        if ssl_object is not None:
            alpn = ssl_object.selected_alpn_protocol()
        return Connected(
            transport=self._transport,
            alpn=alpn,
            peer=self._inner.get_extra_info("server_addr"),
        )


class UnifiedConnector(httpcore.AsyncNetworkBackend):
    """Backend de red que produce `UnifiedStream` para la variante activa."""

    def __init__(
        self,
        variant: ConnectorVariant,
        *,
        backend: httpcore.AsyncNetworkBackend | None = None,
    ) -> None:
        self._variant = variant
        self._backend = backend or httpcore.AnyIOBackend()

    @classmethod
    def https(
        cls,
        config: ClientConfig,
        *,
        identity_provider: ClientIdentityProvider | None = None,
        backend: httpcore.AsyncNetworkBackend | None = None,
    ) -> "UnifiedConnector":
        variant = SecureTcp(
            ssl_context=build_ssl_context(config.tls),
            identity_provider=identity_provider,
        )
        return cls(variant, backend=backend)

    @classmethod
    def unix(cls, *, backend: httpcore.AsyncNetworkBackend | None = None) -> "UnifiedConnector":
        if not supports_unix_sockets():
            raise UnsupportedSchemeError("unix://")
        return cls(LocalSocket(), backend=backend)

    @classmethod
    def for_config(
        cls,
        config: ClientConfig,
        *,
        identity_provider: ClientIdentityProvider | None = None,
        backend: httpcore.AsyncNetworkBackend | None = None,
    ) -> "UnifiedConnector":
        if isinstance(config.transport, SecureTcpTransport):
            return cls.https(config, identity_provider=identity_provider, backend=backend)
        return cls.unix(backend=backend)

    @property
    def variant(self) -> ConnectorVariant:
        return self._variant

    @property
    def is_secure(self) -> bool:
        return isinstance(self._variant, SecureTcp)

    @property
    def ssl_context(self) -> ssl.SSLContext | None:
        if isinstance(self._variant, SecureTcp):
            return self._variant.ssl_context
        return None

    def _prepare_identity(self, variant: SecureTcp) -> None:
        """Instala la identidad cliente la primera vez que hace falta.

        Si falla no se marca como instalada: el siguiente connect reintenta
        la resolución (y vuelve a fallar de la misma forma).
        """

        if variant.identity_installed or variant.identity_provider is None:
            return
        bundle = variant.identity_provider.resolve((), ())
        if bundle is not None:
            install_client_identity(variant.ssl_context, bundle)
            logger.debug("installed Docker client certificate (%d certs in chain)", len(bundle.certificates))
        variant.identity_installed = True

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: float | None = None,
        local_address: str | None = None,
        socket_options: Iterable[httpcore.SOCKET_OPTION] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        variant = self._variant
        if isinstance(variant, SecureTcp):
            self._prepare_identity(variant)
            logger.debug("connecting to %s:%s over TLS", host, port)
            stream = await self._backend.connect_tcp(
                host,
                port,
                timeout=timeout,
                local_address=local_address,
                socket_options=socket_options,
            )
            return UnifiedStream(stream, "tcp", alpn_protocols=ALPN_PROTOCOLS)

        path = decode_socket_host(host)
        return await self.connect_unix_socket(path, timeout=timeout, socket_options=socket_options)

    async def connect_unix_socket(
        self,
        path: str,
        timeout: float | None = None,
        socket_options: Iterable[httpcore.SOCKET_OPTION] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        if isinstance(self._variant, SecureTcp):
            raise DockerConnectionError(f"cannot open Unix socket {path} on a TLS connector")
        logger.debug("connecting to Unix socket %s", path)
        stream = await self._backend.connect_unix_socket(path, timeout=timeout, socket_options=socket_options)
        return UnifiedStream(stream, "unix")

    async def sleep(self, seconds: float) -> None:
        await self._backend.sleep(seconds)
