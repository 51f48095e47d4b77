"""Contratos del backend de contenido.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El dispatcher y el directorio de content types se prueban con dobles en
  memoria que cuentan llamadas, sin red.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import JsonValue, QuerySpec


@runtime_checkable
class ContentTypeSource(Protocol):
    """Origen de la metadata de content types (una llamada de red por invocación)."""

    async def fetch_content_types(self) -> list[dict[str, Any]]:
        """Devuelve los descriptores crudos tal como los publica el backend."""

        ...


@runtime_checkable
class EntryBackend(Protocol):
    """Superficie CRUD genérica, parametrizada por UID de content type.

    Reglas de diseño:
    - Todas las operaciones son asíncronas porque hacen I/O (HTTP).
    - Los registros son JSON opaco; el sobre `{data: ...}` de Strapi no se filtra
      hacia los llamadores.
    """

    async def list_entries(self, uid: str, query: QuerySpec | None = None) -> dict[str, Any]:
        ...

    async def get_entry(self, uid: str, entry_id: str) -> JsonValue:
        ...

    async def create_entry(self, uid: str, data: dict[str, Any]) -> JsonValue:
        ...

    async def update_entry(self, uid: str, entry_id: str, data: dict[str, Any]) -> JsonValue:
        ...

    async def delete_entry(self, uid: str, entry_id: str) -> None:
        ...

    async def upload_media(self, file_data: str, file_name: str, file_type: str) -> JsonValue:
        ...
