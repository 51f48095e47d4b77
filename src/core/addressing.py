"""Esquema de direcciones `strapi://` para recursos MCP.

Gramática:
    strapi://content-type/{uid}[/{entryId}][?filters=<json>&page=<int>
        &pageSize=<int>&sort=<csv>&populate=<json-o-csv>]

`parse_address` es local y estructural: nunca llama al backend.
"""

from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import parse_qs, unquote

from pydantic import ValidationError

from core.domain.errors import InvalidAddress, InvalidQuery
from core.domain.models import Pagination, QuerySpec, ResourceAddress

SCHEME = "strapi"
ADDRESS_PREFIX = f"{SCHEME}://content-type/"

_ADDRESS_RE = re.compile(r"strapi://content-type/([^/?]+)(?:/([^/?]+))?(?:\?(.+))?", re.DOTALL)


def format_address(uid: str, entry_id: str | None = None) -> str:
    if entry_id is None:
        return f"{ADDRESS_PREFIX}{uid}"
    return f"{ADDRESS_PREFIX}{uid}/{entry_id}"


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw, 10)
    except ValueError as exc:
        raise InvalidQuery(f"Invalid query parameters: {name} must be an integer, got {raw!r}") from exc


def _parse_populate(raw: str) -> str | list[str] | dict[str, Any]:
    # JSON primero; si no es JSON (o no es una forma válida de populate), lista por comas.
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return raw.split(",")
    if isinstance(value, (str, dict)):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    return raw.split(",")


def decode_query(query_string: str) -> QuerySpec:
    """Decodifica la query embebida en una dirección.

    Solo aparecen en el resultado las claves presentes en la entrada.
    """

    params = parse_qs(query_string, keep_blank_values=False)

    def first(name: str) -> str | None:
        values = params.get(name)
        return values[0] if values else None

    fields: dict[str, Any] = {}

    filters_raw = first("filters")
    if filters_raw is not None:
        try:
            filters = json.loads(filters_raw)
        except json.JSONDecodeError as exc:
            raise InvalidQuery(f"Invalid query parameters: filters is not valid JSON ({exc})") from exc
        if not isinstance(filters, dict):
            raise InvalidQuery("Invalid query parameters: filters must be a JSON object")
        fields["filters"] = filters

    page_raw = first("page")
    page_size_raw = first("pageSize")
    if page_raw is not None or page_size_raw is not None:
        pagination: dict[str, int] = {}
        if page_raw is not None:
            pagination["page"] = _parse_int("page", page_raw)
        if page_size_raw is not None:
            pagination["pageSize"] = _parse_int("pageSize", page_size_raw)
        try:
            fields["pagination"] = Pagination.model_validate(pagination)
        except ValidationError as exc:
            raise InvalidQuery(f"Invalid query parameters: {exc.errors()[0]['msg']}") from exc

    sort_raw = first("sort")
    if sort_raw is not None:
        fields["sort"] = sort_raw.split(",")

    populate_raw = first("populate")
    if populate_raw is not None:
        fields["populate"] = _parse_populate(populate_raw)

    return QuerySpec(**fields)


def parse_address(raw: str) -> ResourceAddress:
    match = _ADDRESS_RE.fullmatch(raw or "")
    if match is None:
        raise InvalidAddress(f"Invalid URI format: {raw}")

    uid, entry_id, query_string = match.groups()
    # La URI llega percent-encoded desde el SDK MCP (`x%20y`).
    uid = unquote(uid)
    if entry_id is not None:
        entry_id = unquote(entry_id)

    query = decode_query(query_string) if query_string else None
    if entry_id is not None:
        query = None

    return ResourceAddress(content_type_uid=uid, entry_id=entry_id, query=query)
