"""CLI principal (Typer).

Comandos:
- `serve` (por defecto): arranca el servidor MCP sobre stdio.
- `doctor`: diagnósticos de configuración/conectividad.
"""

from __future__ import annotations

import asyncio
import logging

import typer
from pydantic import ValidationError
from rich.markup import escape

from adapters.mcp_server import build_server
from cli import doctor
from cli.log_setup import configure_logging, stderr_console
from cli.ui_components import print_banner
from core.config import AppSettings
from core.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    invoke_without_command=True,
    help="MCP server exposing Strapi content types and entries.",
)
app.add_typer(doctor.app, name="doctor")


def _load_settings() -> AppSettings:
    try:
        return AppSettings()
    except ValidationError as exc:
        stderr_console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _serve(settings: AppSettings) -> None:
    configure_logging(settings.log_level)
    try:
        settings.require_token()
    except ConfigurationError as exc:
        logger.error("[Error] %s", exc.message)
        raise typer.Exit(code=1) from exc

    logger.info("[Setup] Connecting to Strapi at %s", settings.base_url)
    logger.info("[Setup] Development mode: %s", "enabled" if settings.dev_mode else "disabled")

    server = build_server(settings)
    logger.info("[Setup] Starting Strapi MCP server")
    asyncio.run(server.run_stdio())


@app.callback()
def main(ctx: typer.Context) -> None:
    """Without a subcommand, behaves like `serve` (what MCP clients launch)."""

    if ctx.invoked_subcommand is None:
        _serve(_load_settings())


@app.command()
def serve() -> None:
    """Run the MCP server over stdio."""

    _serve(_load_settings())


@app.command()
def info() -> None:
    """Show the effective configuration (token masked)."""

    settings = _load_settings()
    print_banner(stderr_console)
    token = settings.api_token or ""
    masked = f"{token[:4]}…{token[-4:]}" if len(token) > 8 else ("set" if token else "missing")
    stderr_console.print(f"URL: {settings.base_url}")
    stderr_console.print(f"Token: {masked}")
    stderr_console.print(f"Dev mode: {'enabled' if settings.dev_mode else 'disabled'}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
