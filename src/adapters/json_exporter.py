"""Exportación JSON de resultados de consultas.

Por qué JSON:
- Interoperabilidad con hojas de cálculo, scripts y otras herramientas.
- Usa la misma forma camelCase que el backend, así el fichero se puede
  reenviar tal cual.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from pydantic import BaseModel


def to_jsonable(data: BaseModel | Iterable[BaseModel] | Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    return data


def export_json(*, data: BaseModel | Iterable[BaseModel] | Any, output_path: Path) -> Path:
    """Exporta modelos (o listas de modelos) a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = to_jsonable(data)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
