"""Construcción de URLs según el transporte.

- HTTPS: `base + path` tal cual.
- Socket Unix: la ruta del socket va codificada en hex como host de una URL
  `http://`, de modo que el conector sabe a qué socket ir sin host/puerto
  reales. `parse_socket_url` hace el camino inverso.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import httpx

from dockside.core.config import ClientConfig, SecureTcpTransport, TransportConfig
from dockside.core.errors import RequestBuildError

SOCKET_URL_SCHEME = "http"


def encode_socket_host(socket_path: str) -> str:
    return socket_path.encode("utf-8").hex()


def decode_socket_host(host: str) -> str:
    try:
        return bytes.fromhex(host).decode("utf-8")
    except (ValueError, UnicodeDecodeError) as exc:
        raise RequestBuildError(f"not a Unix socket URL host: {host!r}") from exc


def parse_socket_url(url: httpx.URL | str) -> tuple[str, str]:
    """Devuelve `(socket_path, resource_path)` de una URL de socket."""

    url = httpx.URL(url)
    target = url.raw_path.decode("ascii")
    return decode_socket_host(url.host), target


@dataclass(frozen=True)
class AbsoluteHttps:
    base: str

    def build_url(self, path: str) -> httpx.URL:
        raw = f"{self.base}{path}"
        try:
            url = httpx.URL(raw)
        except httpx.InvalidURL as exc:
            raise RequestBuildError(f"cannot parse URL {raw}: {exc}") from exc
        if not url.scheme or not url.host:
            raise RequestBuildError(f"cannot parse URL {raw}: missing scheme or host")
        return url


@dataclass(frozen=True)
class RelativeSocketPath:
    base: str

    def build_url(self, path: str) -> httpx.URL:
        if not path.startswith("/"):
            path = "/" + path
        raw = f"{SOCKET_URL_SCHEME}://{encode_socket_host(self.base)}{path}"
        try:
            return httpx.URL(raw)
        except httpx.InvalidURL as exc:
            raise RequestBuildError(f"cannot build socket URL for {self.base}{path}: {exc}") from exc


UrlBuilder = Union[AbsoluteHttps, RelativeSocketPath]


def url_builder_for(transport: TransportConfig | ClientConfig) -> UrlBuilder:
    if isinstance(transport, ClientConfig):
        transport = transport.transport
    if isinstance(transport, SecureTcpTransport):
        return AbsoluteHttps(transport.base_url)
    return RelativeSocketPath(transport.socket_path)
