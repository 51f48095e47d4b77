"""Traducción de `QuerySpec` a la query del backend.

Dos pasos separados:
- `to_backend_query`: mapping con las claves `filters`, `pagination`, `sort`,
  `populate`, presentes solo si el campo del `QuerySpec` lo está. Los valores pasan
  tal cual (un filtro vacío explícito no es lo mismo que ningún filtro).
- `encode_query_params`: aplanado a la sintaxis de corchetes que Strapi parsea
  con `qs` (`filters[title][$contains]=hello`, `sort[0]=title:asc`).
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from core.domain.models import QuerySpec


def to_backend_query(query: QuerySpec | None) -> dict[str, Any]:
    if query is None:
        return {}

    out: dict[str, Any] = {}
    if query.filters is not None:
        out["filters"] = query.filters
    if query.pagination is not None:
        out["pagination"] = query.pagination.to_backend()
    if query.sort is not None:
        out["sort"] = query.sort
    if query.populate is not None:
        out["populate"] = query.populate
    return out


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (int, float, str)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def _flatten(prefix: str, value: Any, out: list[tuple[str, str]]) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(f"{prefix}[{key}]", item, out)
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten(f"{prefix}[{index}]", item, out)
        return
    out.append((prefix, _scalar(value)))


def encode_query_params(query: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Aplana el mapping a pares (clave, valor) para `httpx`.

    Un objeto vacío no produce pares: `qs` no tiene forma de representarlo.
    """

    params: list[tuple[str, str]] = []
    for key, value in query.items():
        _flatten(key, value, params)
    return params
