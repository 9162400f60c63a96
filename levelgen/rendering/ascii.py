"""Text preview of a generated level.

Marble levels use the tile glyphs (``#`` empty, ``O`` obstacle, ``.`` walled
path, ``·`` open floor); classic levels print the plain ``#``/``.`` rows.
"""

from typing import List


def ascii_rows(level) -> List[str]:
    if level.marble_tiles is None:
        return list(level.tiles)
    return ["".join(t.to_ascii() for t in row) for row in level.marble_tiles]


def to_ascii(level) -> str:
    return "\n".join(ascii_rows(level))


def legend(level) -> str:
    if level.marble_tiles is None:
        return "# wall   . floor"
    return "# empty   O obstacle   . walled path   · open floor"


__all__ = ["to_ascii", "ascii_rows", "legend"]
