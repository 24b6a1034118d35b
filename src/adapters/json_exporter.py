"""Exportación JSON de documentos del backup.

Por qué JSON estable (sort_keys + indent):
- Backups repetidos del mismo servidor producen ficheros idénticos, fáciles
  de comparar con diff.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def export_json(*, payload: Any, output_path: Path) -> Path:
    """Write `payload` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
