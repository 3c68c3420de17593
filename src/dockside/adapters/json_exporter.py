"""Exportación JSON de registros del daemon.

Por qué JSON:
- Interoperabilidad con `jq` y pipelines.
- Se serializa con los nombres de la API Docker (alias), no los de Python.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel


def records_to_json(records: BaseModel | Iterable[BaseModel]) -> str:
    """Serializa uno o varios modelos a JSON estable (UTF-8, indentado)."""

    if isinstance(records, BaseModel):
        payload: object = records.model_dump(mode="json", by_alias=True)
    else:
        payload = [r.model_dump(mode="json", by_alias=True) for r in records]
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_records_json(records: BaseModel | Iterable[BaseModel], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(records_to_json(records), encoding="utf-8")
    return output_path
