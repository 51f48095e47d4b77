"""Entry point de desarrollo (sin instalar el paquete).

Permite lanzar el servidor MCP con:
- `python main.py` (lo que un cliente MCP ejecuta como comando)
- `python main.py doctor run`

El código vive en `src/`, así que sin `pip install -e .` Python no encuentra
`cli`, `core`, etc.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    project_root = Path(__file__).resolve().parent
    src = project_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
