"""Errores de la capa de traducción.

Por qué una jerarquía propia:
- Los adaptadores (HTTP) y el Core hablan en términos del problema
  (dirección inválida, backend caído, entrada inexistente), no de httpx ni MCP.
- El servidor MCP convierte cada tipo en un `McpError` con su código JSON-RPC
  en un único punto.
"""

from __future__ import annotations

# Códigos JSON-RPC usados por MCP (mcp.types).
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class StrapiMcpError(Exception):
    """Base de todos los errores del adaptador."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(StrapiMcpError):
    """Configuración incompleta (p.ej. falta el token). Fatal al arrancar."""


class InvalidAddress(StrapiMcpError):
    code = INVALID_REQUEST


class InvalidQuery(StrapiMcpError):
    code = INVALID_REQUEST


class InvalidParams(StrapiMcpError):
    code = INVALID_PARAMS


class UnknownOperation(StrapiMcpError):
    code = METHOD_NOT_FOUND


class BackendUnavailable(StrapiMcpError):
    """Fallo de red/transporte, respuesta no decodificable o status no mapeado."""


class NotFound(StrapiMcpError):
    """El backend respondió 404."""


class ValidationFailed(StrapiMcpError):
    """El backend rechazó una escritura con un 4xx."""
