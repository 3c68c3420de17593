"""Volcado a disco de payloads binarios (p.ej. `docker export`).

El body no se bufferiza: cada chunk se escribe según llega.
"""

from __future__ import annotations

from pathlib import Path

import httpx

from dockside.core.errors import StreamError


async def write_response_to_file(response: httpx.Response, output_path: Path) -> int:
    """Escribe el body de `response` en `output_path` y cierra la respuesta.

    Devuelve el número de bytes escritos.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    try:
        with output_path.open("wb") as fh:
            async for chunk in response.aiter_raw():
                fh.write(chunk)
                written += len(chunk)
    except httpx.HTTPError as exc:
        raise StreamError(f"error reading export stream: {exc}") from exc
    finally:
        await response.aclose()
    return written
