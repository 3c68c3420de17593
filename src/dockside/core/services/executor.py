"""Ejecución de peticiones contra el daemon.

Ciclo de una petición: construir URL -> GET vacío -> enviar (el pool conecta
vía `UnifiedConnector`) -> leer el body chunk a chunk -> decodificar.
Nada persiste entre peticiones salvo las conexiones que reutilice el pool.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from dockside.adapters.url_builder import UrlBuilder
from dockside.core.errors import (
    DecodeError,
    DockerConnectionError,
    HttpStatusError,
    RequestBuildError,
    StreamError,
)

logger = logging.getLogger(__name__)


class RequestExecutor:
    """Envía peticiones, acumula respuestas y las decodifica."""

    def __init__(self, client: httpx.AsyncClient, url_builder: UrlBuilder) -> None:
        self._client = client
        self._url_builder = url_builder

    @property
    def url_builder(self) -> UrlBuilder:
        return self._url_builder

    def get_url(self, path: str) -> httpx.URL:
        return self._url_builder.build_url(path)

    def build_empty_get_request(self, url: httpx.URL) -> httpx.Request:
        try:
            return self._client.build_request("GET", url)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, TypeError, ValueError) as exc:
            raise RequestBuildError(f"error building request for {url}") from exc

    async def start_request(self, request: httpx.Request) -> httpx.Response:
        """Envía `request` y devuelve la respuesta con el body sin leer.

        Un status fuera de 2xx se rechaza sin tocar el body. El llamador es
        dueño de la respuesta y debe cerrarla (`aclose`).
        """

        try:
            response = await self._client.send(request, stream=True)
        except httpx.TransportError as exc:
            raise DockerConnectionError(f"could not connect to {request.url}: {exc}") from exc

        if not response.is_success:
            await response.aclose()
            raise HttpStatusError(response.status_code, response.reason_phrase)
        return response

    async def execute_request(self, request: httpx.Request) -> bytes:
        """Envía `request` y acumula el body completo, en orden de llegada."""

        response = await self.start_request(request)
        data = bytearray()
        try:
            async for chunk in response.aiter_raw():
                data.extend(chunk)
        except httpx.HTTPError as exc:
            raise StreamError(f"error reading response body from {request.url}: {exc}") from exc
        finally:
            await response.aclose()
        logger.debug("GET %s -> %d bytes", request.url, len(data))
        return bytes(data)

    async def get(self, path: str) -> bytes:
        request = self.build_empty_get_request(self.get_url(path))
        return await self.execute_request(request)

    async def decode_url(self, type_name: str, path: str, schema: Any) -> Any:
        """`GET path` y valida el JSON contra `schema` (modelo o tipo genérico)."""

        body = await self.get(path)
        try:
            return TypeAdapter(schema).validate_json(body)
        except ValidationError as exc:
            raise DecodeError(type_name, body.decode("utf-8", errors="replace")) from exc
