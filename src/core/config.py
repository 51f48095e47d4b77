"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/MCP) lean config de forma consistente.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.errors import ConfigurationError


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias).

    Objetivo: permitir lanzar el servidor desde un cliente MCP sin editar `.env`
    en el proyecto.
    """

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "strapi-mcp"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "strapi-mcp"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "strapi-mcp"
    return Path.home() / ".config" / "strapi-mcp"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# strapi-mcp user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="STRAPI_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    url: str = Field(
        default="http://localhost:1337",
        min_length=8,
        description="Base URL de la instancia Strapi (sin /api).",
    )
    api_token: str | None = Field(
        default=None,
        description="Token Bearer de la API de Strapi. Obligatorio para arrancar.",
    )
    dev_mode: bool = Field(
        default=False,
        description="Usa la API content-type-builder para listar content types.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request contra Strapi (segundos).",
    )
    user_agent: str = Field(
        default="strapi-mcp/0.2 (+https://local)",
        min_length=1,
        description="User-Agent para peticiones al backend.",
    )

    log_level: str = Field(
        default="INFO",
        min_length=1,
        description="Nivel de logging (los logs van a stderr).",
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r} (use DEBUG, INFO, WARNING, ERROR or CRITICAL)")
        return level

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")

    @property
    def content_types_endpoint(self) -> str:
        """Endpoint de metadata según el modo (content-manager vs content-type-builder)."""

        if self.dev_mode:
            return "/content-type-builder/content-types"
        return "/api/content-types"

    def require_token(self) -> str:
        """Devuelve el token o falla: sin token no hay servidor."""

        token = (self.api_token or "").strip()
        if not token:
            raise ConfigurationError("Missing STRAPI_API_TOKEN environment variable")
        return token
