"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeouts, headers y autenticación Bearer contra Strapi.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando a la instancia Strapi.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las operaciones se comporten igual.
    - No fija `Content-Type`: httpx lo pone según el cuerpo (JSON o multipart).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if settings.api_token:
        headers["Authorization"] = f"Bearer {settings.api_token}"
    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
