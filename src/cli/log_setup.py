"""Logging a stderr con Rich.

Por qué stderr:
- En transporte stdio, stdout es el canal JSON-RPC de MCP; cualquier print ahí
  rompe el protocolo.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

stderr_console = Console(stderr=True)


def configure_logging(level: str = "INFO") -> None:
    handler = RichHandler(
        console=stderr_console,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx loguea cada request a INFO; con los logs "[API]" propios basta.
    logging.getLogger("httpx").setLevel(logging.WARNING)
