"""Structured export of generated levels.

``level_to_dict`` produces the document shared by the CLI JSON export and the
HTTP API::

    {
      "width": 80, "height": 25, "seed": 42,
      "rooms": [{"x": 3, "y": 4, "w": 6, "h": 5, "elevation": 0}, ...],
      "tiles": ["####....", ...],
      "marble_tiles": [[{"tile_type": "Straight", "elevation": 0,
                          "rotation": 1, "has_walls": true, "metadata": ""}, ...], ...]
    }

``marble_tiles`` is null for classic levels. Diagnostics and metrics are only
included on request so the default document stays stable across runs.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict


def level_to_dict(level, include_diagnostics: bool = False, include_metrics: bool = False) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "width": level.width,
        "height": level.height,
        "seed": level.seed,
        "rooms": [r.to_dict() for r in level.rooms],
        "tiles": level.tiles,
        "marble_tiles": None,
    }
    if level.marble_tiles is not None:
        doc["marble_tiles"] = [[t.to_dict() for t in row] for row in level.marble_tiles]
    if include_diagnostics:
        doc["diagnostics"] = [d.to_dict() for d in level.diagnostics]
    if include_metrics:
        doc["metrics"] = dict(level.metrics)
    return doc


def level_to_json(level, indent: int | None = 2, **kwargs) -> str:
    return json.dumps(level_to_dict(level, **kwargs), indent=indent, ensure_ascii=False)


def write_text(path: str, text: str) -> str:
    """Write ``text`` to ``path`` creating parent directories. Returns the path."""
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


__all__ = ["level_to_dict", "level_to_json", "write_text"]
