"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Todo se pinta en la consola de stderr: stdout queda libre para MCP.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ContentTypeDescriptor


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo comandos interactivos)."""

    title = Text("strapi-mcp", style="bold cyan")
    subtitle = Text("Strapi content types & entries over MCP", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_content_types_table(content_types: list[ContentTypeDescriptor]) -> Table:
    table = Table(title="Content Types")
    table.add_column("UID", style="cyan", no_wrap=True)
    table.add_column("Display name", style="white")
    table.add_column("Collection", style="magenta")
    table.add_column("Description", style="dim")
    for ct in content_types:
        table.add_row(ct.uid, ct.display_name, ct.collection_name, ct.description)
    return table
