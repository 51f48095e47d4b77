"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los payloads de entradas (entries) NO se modelan: son JSON opaco que viaja
  sin tocar entre MCP y Strapi.

Nota:
- Estos modelos describen *qué* se pide al backend, no *cómo* se obtiene.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

# Valor JSON sin esquema (null/bool/number/string/lista/objeto).
JsonValue = Union[None, bool, int, float, str, list[Any], dict[str, Any]]

# Prefijos de content types internos de Strapi que nunca se exponen.
INTERNAL_UID_PREFIXES: tuple[str, ...] = ("admin::", "plugin::")


class ContentTypeDescriptor(BaseModel):
    """Metadata de un content type tal como la publica Strapi.

    Por qué existe:
    - Es la única fuente de verdad sobre qué colecciones existen; el resto del
      sistema es agnóstico al tipo.
    - Acepta tanto la forma anidada (`info.displayName`) como la plana.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    uid: str = Field(
        ...,
        min_length=1,
        description="UID con namespace (p.ej. 'api::article.article').",
    )
    collection_name: str = Field(
        default="",
        alias="collectionName",
        description="Nombre de la colección/tabla en el backend.",
    )
    display_name: str = Field(
        default="",
        alias="displayName",
        description="Nombre legible para humanos.",
    )
    description: str = Field(
        default="",
        description="Descripción libre del content type.",
    )

    @classmethod
    def from_backend(cls, raw: dict[str, Any]) -> "ContentTypeDescriptor":
        """Normaliza un item de `/api/content-types` o `/content-type-builder/content-types`.

        El content-type-builder anida todo bajo `schema`; el content-manager bajo `info`.
        """

        schema = raw.get("schema") if isinstance(raw.get("schema"), dict) else {}
        info = raw.get("info") if isinstance(raw.get("info"), dict) else {}
        if not info and isinstance(schema.get("info"), dict):
            info = schema["info"]

        return cls(
            uid=raw.get("uid"),
            collectionName=raw.get("collectionName") or schema.get("collectionName") or "",
            displayName=info.get("displayName") or raw.get("displayName") or schema.get("displayName") or "",
            description=info.get("description") or raw.get("description") or schema.get("description") or "",
        )

    @property
    def is_internal(self) -> bool:
        return self.uid.startswith(INTERNAL_UID_PREFIXES)

    def summary(self) -> dict[str, str]:
        """Forma pública usada por la tool `list_content_types`."""

        return {
            "uid": self.uid,
            "displayName": self.display_name,
            "description": self.description,
        }


class Pagination(BaseModel):
    """Paginación estilo Strapi (page/pageSize). Solo se emiten las claves presentes."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    page: int | None = Field(default=None, ge=1)
    page_size: int | None = Field(default=None, ge=1, alias="pageSize")

    def to_backend(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class QuerySpec(BaseModel):
    """Filtros/paginación/orden/populate para listar entradas.

    Reglas:
    - Todos los campos son opcionales e independientes.
    - Ausencia significa "no restringir este eje", nunca "valor por defecto".
    - `filters` y el populate estructurado son JSON opaco: no se interpretan.
    """

    model_config = ConfigDict(extra="forbid")

    filters: dict[str, Any] | None = None
    pagination: Pagination | None = None
    sort: list[str] | None = None
    populate: str | list[str] | dict[str, Any] | None = None


class ResourceAddress(BaseModel):
    """Dirección `strapi://content-type/{uid}[/{id}][?query]` ya parseada.

    Si `entry_id` está presente la query se ignora: las lecturas de un único
    registro no son filtrables.
    """

    content_type_uid: str = Field(..., min_length=1)
    entry_id: str | None = None
    query: QuerySpec | None = None

    @property
    def is_single_entry(self) -> bool:
        return self.entry_id is not None
