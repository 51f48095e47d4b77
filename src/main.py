"""Script de ejecución.

Permite `python -m main` desde `src/` además del script `strapi-mcp`.
"""

from __future__ import annotations

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
