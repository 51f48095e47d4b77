"""Directorio de content types con caché de proceso.

Por qué un objeto caché explícito (y no una global):
- Hoy la política es "se pide una vez y vale hasta reiniciar el proceso".
- El reloj y el `version` son inyectables/observables, así que una política
  de refresco (TTL o `invalidate()` explícito) se añade sin tocar llamadores.

Concurrencia: el runtime MCP atiende una petición a la vez, no hay lock.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from core.domain.errors import BackendUnavailable, StrapiMcpError
from core.domain.models import ContentTypeDescriptor
from core.interfaces.backend import ContentTypeSource

logger = logging.getLogger(__name__)


class ContentTypeCache:
    """Última lista de descriptores obtenida del backend."""

    def __init__(
        self,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: list[ContentTypeDescriptor] | None = None
        self._stored_at: float | None = None
        self.version = 0

    def get(self) -> list[ContentTypeDescriptor] | None:
        if self._items is None:
            return None
        if self._ttl_seconds is not None and self._stored_at is not None:
            if self._clock() - self._stored_at >= self._ttl_seconds:
                return None
        return self._items

    def store(self, items: list[ContentTypeDescriptor]) -> list[ContentTypeDescriptor]:
        self._items = items
        self._stored_at = self._clock()
        self.version += 1
        return items

    def invalidate(self) -> None:
        if self._items is not None:
            self.version += 1
        self._items = None
        self._stored_at = None


class ContentTypeDirectory:
    """Fuente única de verdad sobre las colecciones disponibles."""

    def __init__(self, source: ContentTypeSource, cache: ContentTypeCache | None = None) -> None:
        self._source = source
        self._cache = cache or ContentTypeCache()

    @property
    def cache(self) -> ContentTypeCache:
        return self._cache

    async def list_content_types(self) -> list[ContentTypeDescriptor]:
        cached = self._cache.get()
        if cached is not None:
            return cached

        logger.info("[API] Fetching content types from Strapi")
        try:
            raw_items = await self._source.fetch_content_types()
            descriptors = [ContentTypeDescriptor.from_backend(item) for item in raw_items]
        except Exception as exc:
            message = exc.message if isinstance(exc, StrapiMcpError) else str(exc)
            logger.error("[Error] Failed to fetch content types: %s", message)
            raise BackendUnavailable(f"Failed to fetch content types: {message}") from exc

        public = [descriptor for descriptor in descriptors if not descriptor.is_internal]
        return self._cache.store(public)
