"""Transporte `httpx` sobre un pool de `httpcore` con el conector unificado.

`httpx.AsyncHTTPTransport` no deja inyectar el backend de red, así que este
transporte hace la misma traducción request/response pero con un
`httpcore.AsyncConnectionPool(network_backend=UnifiedConnector)`.
"""

from __future__ import annotations

import contextlib
from typing import AsyncIterator, Iterator

import httpcore
import httpx

from dockside.adapters.connector import UnifiedConnector

_HTTPCORE_EXC_MAP: tuple[tuple[type[Exception], type[httpx.TransportError]], ...] = (
    (httpcore.ConnectTimeout, httpx.ConnectTimeout),
    (httpcore.ReadTimeout, httpx.ReadTimeout),
    (httpcore.WriteTimeout, httpx.WriteTimeout),
    (httpcore.PoolTimeout, httpx.PoolTimeout),
    (httpcore.TimeoutException, httpx.TimeoutException),
    (httpcore.ConnectError, httpx.ConnectError),
    (httpcore.ReadError, httpx.ReadError),
    (httpcore.WriteError, httpx.WriteError),
    (httpcore.NetworkError, httpx.NetworkError),
    (httpcore.RemoteProtocolError, httpx.RemoteProtocolError),
    (httpcore.LocalProtocolError, httpx.LocalProtocolError),
    (httpcore.ProtocolError, httpx.ProtocolError),
    (httpcore.UnsupportedProtocol, httpx.UnsupportedProtocol),
)


@contextlib.contextmanager
def map_httpcore_exceptions() -> Iterator[None]:
    try:
        yield
    except Exception as exc:
        for source, target in _HTTPCORE_EXC_MAP:
            if isinstance(exc, source):
                raise target(str(exc)) from exc
        raise


class _ResponseStream(httpx.AsyncByteStream):
    def __init__(self, stream: AsyncIterator[bytes]) -> None:
        self._stream = stream

    async def __aiter__(self) -> AsyncIterator[bytes]:
        with map_httpcore_exceptions():
            async for part in self._stream:
                yield part

    async def aclose(self) -> None:
        if hasattr(self._stream, "aclose"):
            await self._stream.aclose()


class DockerTransport(httpx.AsyncBaseTransport):
    """Transporte httpx para el daemon (socket Unix o TLS)."""

    def __init__(self, connector: UnifiedConnector) -> None:
        self._connector = connector
        self._pool = httpcore.AsyncConnectionPool(
            ssl_context=connector.ssl_context,
            http1=True,
            # HTTP/2 solo si ALPN lo negocia sobre TLS.
            http2=connector.is_secure,
            network_backend=connector,
        )

    @property
    def connector(self) -> UnifiedConnector:
        return self._connector

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        assert isinstance(request.stream, httpx.AsyncByteStream)

        core_request = httpcore.Request(
            method=request.method,
            url=httpcore.URL(
                scheme=request.url.raw_scheme,
                host=request.url.raw_host,
                port=request.url.port,
                target=request.url.raw_path,
            ),
            headers=request.headers.raw,
            content=request.stream,
            extensions=request.extensions,
        )
        with map_httpcore_exceptions():
            core_response = await self._pool.handle_async_request(core_request)

        return httpx.Response(
            status_code=core_response.status,
            headers=core_response.headers,
            stream=_ResponseStream(core_response.stream),
            extensions=core_response.extensions,
        )

    async def aclose(self) -> None:
        await self._pool.aclose()
