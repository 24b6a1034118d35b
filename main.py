"""Entry point de desarrollo para `python main.py backup ./backup-dir`.

Sin instalación editable Python no ve los paquetes de `src/`; este script
los añade al path y lanza la misma app Typer que el script `ec-backup`.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def main(argv: list[str] | None = None) -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    from cli.main import app  # noqa: PLC0415

    app(args=argv, prog_name="ec-backup")


if __name__ == "__main__":
    main()
