"""Opciones de consulta para endpoints con filtros."""

from __future__ import annotations

import json
from urllib.parse import urlencode

from pydantic import BaseModel, Field


class ContainerListOptions(BaseModel):
    """Parámetros de `GET /containers/json`.

    `filters` sigue el formato de la API: `{"status": ["running"], ...}`.
    """

    all: bool = Field(default=False, description="Incluir contenedores parados.")
    limit: int | None = Field(default=None, ge=1, description="Últimos N contenedores.")
    size: bool = Field(default=False, description="Calcular SizeRw/SizeRootFs.")
    since: str | None = None
    before: str | None = None
    filters: dict[str, list[str]] = Field(default_factory=dict)

    def with_all(self) -> "ContainerListOptions":
        return self.model_copy(update={"all": True})

    def with_filter(self, key: str, value: str) -> "ContainerListOptions":
        filters = {k: list(v) for k, v in self.filters.items()}
        filters.setdefault(key, []).append(value)
        return self.model_copy(update={"filters": filters})

    def to_url_params(self) -> str:
        params: list[tuple[str, str]] = []
        if self.all:
            params.append(("all", "1"))
        if self.limit is not None:
            params.append(("limit", str(self.limit)))
        if self.size:
            params.append(("size", "1"))
        if self.since:
            params.append(("since", self.since))
        if self.before:
            params.append(("before", self.before))
        if self.filters:
            params.append(("filters", json.dumps(self.filters, separators=(",", ":"))))
        return urlencode(params)
