"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.table import Table

from adapters.strapi_gateway import StrapiGateway
from cli.log_setup import stderr_console
from cli.ui_components import build_content_types_table
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import StrapiMcpError
from core.domain.models import ContentTypeDescriptor
from core.services.content_types import ContentTypeDirectory

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = stderr_console


async def _check_backend(settings: AppSettings) -> tuple[bool, str, list[ContentTypeDescriptor]]:
    directory = ContentTypeDirectory(StrapiGateway(settings))
    try:
        content_types = await directory.list_content_types()
    except StrapiMcpError as exc:
        return False, exc.message, []
    return True, f"{len(content_types)} content types", content_types


@app.command()
def run() -> None:
    """Run baseline diagnostics against the configured Strapi instance."""

    settings = AppSettings()

    table = Table(title="strapi-mcp Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Strapi URL", "OK", settings.base_url)
    table.add_row(
        "Dev mode",
        "ON" if settings.dev_mode else "OFF",
        settings.content_types_endpoint,
    )

    if not settings.api_token:
        table.add_row("API token", "FAIL", "Set STRAPI_API_TOKEN (or run `strapi-mcp doctor setup`)")
        _console.print(table)
        raise typer.Exit(code=1)
    table.add_row("API token", "OK", "Bearer token configured")

    ok, detail, content_types = asyncio.run(_check_backend(settings))
    table.add_row("Content types", "OK" if ok else "FAIL", detail)

    _console.print(table)
    if content_types:
        _console.print(build_content_types_table(content_types))
    if not ok:
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env).

    Useful when the server is launched by an MCP client that does not forward env vars.
    """

    current = AppSettings()

    url = typer.prompt("Strapi URL", default=current.base_url, show_default=True).strip()
    token = typer.prompt("Strapi API token", hide_input=True, confirmation_prompt=False).strip()
    dev_mode = typer.confirm("Development mode (content-type-builder API)?", default=current.dev_mode)

    if not url or not token:
        raise typer.BadParameter("url and token are required")

    env_path = write_user_env_vars(
        {
            "STRAPI_URL": url,
            "STRAPI_API_TOKEN": token,
            "STRAPI_DEV_MODE": "true" if dev_mode else "false",
        }
    )

    _console.print(f"[green]Saved Strapi config to:[/green] {env_path}")
