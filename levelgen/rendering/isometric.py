"""Isometric HTML/SVG view of marble levels.

Tiles are projected with ``iso_x = (x - y) * TILE_WIDTH / 2`` and
``iso_y = (x + y) * TILE_HEIGHT / 4 - z * ELEVATION_HEIGHT`` and drawn back to
front (ascending ``x + y``). The palette lives here rather than on TileType;
higher tiles are drawn 10% brighter per elevation level, lower ones darker.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from jinja2 import Environment, PackageLoader, select_autoescape

from ..generation.tiles import TileType

TILE_WIDTH = 32.0
TILE_HEIGHT = 16.0
ELEVATION_HEIGHT = 12.0
WALL_HEIGHT = 20.0

PALETTE = {
    TileType.EMPTY: "#2b2b2b",
    TileType.STRAIGHT: "#5a9fd4",
    TileType.CURVE_90: "#5aa4d4",
    TileType.T_JUNCTION: "#4c8fc7",
    TileType.Y_JUNCTION: "#4c8fc7",
    TileType.CROSS_JUNCTION: "#4080b8",
    TileType.SLOPE_UP: "#e8a847",
    TileType.SLOPE_DOWN: "#d48f3a",
    TileType.OPEN_PLATFORM: "#a6a6a6",
    TileType.OBSTACLE: "#8b4513",
    TileType.MERGE: "#6b7fc7",
    TileType.ONE_WAY_GATE: "#c74c8f",
    TileType.LOOP_DE_LOOP: "#c7478f",
    TileType.HALF_PIPE: "#8f47c7",
    TileType.LAUNCH_PAD: "#ff4444",
    TileType.BRIDGE: "#7fc76b",
    TileType.TUNNEL: "#4c6bc7",
}

LEGEND = [
    (TileType.STRAIGHT, "Straight Path"),
    (TileType.CURVE_90, "Curve"),
    (TileType.T_JUNCTION, "Junction"),
    (TileType.CROSS_JUNCTION, "Crossing"),
    (TileType.SLOPE_UP, "Slope Up"),
    (TileType.SLOPE_DOWN, "Slope Down"),
    (TileType.OPEN_PLATFORM, "Open Platform"),
    (TileType.OBSTACLE, "Obstacle"),
]

_env = Environment(loader=PackageLoader("levelgen", "templates"), autoescape=select_autoescape(["html"]))


def to_isometric(x: float, y: float, z: float) -> Tuple[float, float]:
    return (x - y) * TILE_WIDTH / 2.0, (x + y) * TILE_HEIGHT / 4.0 - z * ELEVATION_HEIGHT


def _rgb(hex_color: str) -> Tuple[int, int, int]:
    return int(hex_color[1:3], 16), int(hex_color[3:5], 16), int(hex_color[5:7], 16)


def _hex(r: float, g: float, b: float) -> str:
    return "#{:02x}{:02x}{:02x}".format(*(max(0, min(255, int(c))) for c in (r, g, b)))


def adjust_for_elevation(hex_color: str, elevation: int) -> str:
    factor = 1.0 + elevation * 0.1
    return _hex(*(c * factor for c in _rgb(hex_color)))


def darken(hex_color: str, factor: float) -> str:
    return _hex(*(c * factor for c in _rgb(hex_color)))


def _points(corners) -> str:
    return " ".join(f"{px:g},{py:g}" for px, py in corners)


def painter_order(width: int, height: int):
    """Yield (x, y) back to front: ascending x + y, then ascending y."""
    for s in range(width + height - 1):
        for y in range(height):
            x = s - y
            if 0 <= x < width:
                yield x, y


def tile_shapes(tile, x: int, y: int) -> Dict[str, Any]:
    z = float(tile.elevation)
    color = adjust_for_elevation(PALETTE[tile.tile_type], tile.elevation)
    c0 = to_isometric(x, y, z)
    c1 = to_isometric(x + 1, y, z)
    c2 = to_isometric(x + 1, y + 1, z)
    c3 = to_isometric(x, y + 1, z)
    shape: Dict[str, Any] = {
        "x": x,
        "y": y,
        "label": tile.tile_type.value,
        "elevation": tile.elevation,
        "top": _points((c0, c1, c2, c3)),
        "fill": color,
        "walls": [],
        "marker": None,
    }
    if tile.has_walls:
        drop = z - WALL_HEIGHT / ELEVATION_HEIGHT
        b1 = to_isometric(x + 1, y, drop)
        b2 = to_isometric(x + 1, y + 1, drop)
        b3 = to_isometric(x, y + 1, drop)
        shape["walls"] = [
            {"points": _points((c3, c2, b2, b3)), "fill": darken(color, 0.7), "opacity": 0.9},
            {"points": _points((c1, c2, b2, b1)), "fill": darken(color, 0.6), "opacity": 0.8},
        ]
    if tile.tile_type.is_slope:
        cx, cy = to_isometric(x + 0.5, y + 0.5, z)
        glyph = "▲" if tile.tile_type is TileType.SLOPE_UP else "▼"
        shape["marker"] = {"x": f"{cx:g}", "y": f"{cy:g}", "glyph": glyph}
    return shape


def build_scene(level) -> Dict[str, Any]:
    """Template context for ``isometric.html``."""
    ctx: Dict[str, Any] = {
        "seed": level.seed,
        "width": level.width,
        "height": level.height,
        "room_count": len(level.rooms),
        "legend": [{"label": label, "color": PALETTE[t]} for t, label in LEGEND],
        "svg": None,
    }
    if level.marble_tiles is None:
        return ctx
    w, h = level.width, level.height
    svg_w = (w + h) * TILE_WIDTH / 2.0 + 200.0
    svg_h = (w + h) * TILE_HEIGHT / 4.0 + 400.0
    shapes: List[Dict[str, Any]] = []
    for x, y in painter_order(w, h):
        tile = level.marble_tiles[y][x]
        if tile.tile_type is TileType.EMPTY:
            continue
        shapes.append(tile_shapes(tile, x, y))
    ctx["svg"] = {
        "width": f"{svg_w:g}",
        "height": f"{svg_h:g}",
        "offset_x": f"{svg_w / 2.0:g}",
        "offset_y": "150",
        "tiles": shapes,
    }
    return ctx


def generate_html(level) -> str:
    return _env.get_template("isometric.html").render(**build_scene(level))


__all__ = [
    "generate_html",
    "build_scene",
    "to_isometric",
    "adjust_for_elevation",
    "darken",
    "painter_order",
    "PALETTE",
]
