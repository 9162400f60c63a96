from __future__ import annotations

import hashlib
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Tuple

from .errors import ConfigurationError

# Minimum sensible map dimension to avoid degenerate results.
MIN_MAP_DIM = 10

MODES = ("marble", "classic")
MODE_ALIASES = {"marbles": "marble", "dungeon": "classic"}


@dataclass(frozen=True)
class TrendVector:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    strength: float = 0.5

    @property
    def horizontal(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class GenerationParams:
    width: int = 80
    height: int = 25
    rooms: int = 12
    min_room: int = 4
    max_room: int = 10
    margin: int = 1
    seed: Optional[int] = None
    mode: str = "marble"
    channel_width: int = 2
    corner_radius: int = 2
    enable_elevation: bool = False
    max_elevation: int = 3
    max_elevation_change: int = 1
    enable_obstacles: bool = False
    obstacle_density: float = 0.3
    trend: Optional[TrendVector] = None
    start_point: Optional[Tuple[int, int]] = None

    @property
    def marble(self) -> bool:
        return self.mode == "marble"

    def validate(self) -> "GenerationParams":
        """Raise ConfigurationError for the first invalid field, else return self."""
        if self.width < MIN_MAP_DIM or self.height < MIN_MAP_DIM:
            raise ConfigurationError(
                f"map must be at least {MIN_MAP_DIM}x{MIN_MAP_DIM} (got {self.width}x{self.height})",
                field="width" if self.width < MIN_MAP_DIM else "height",
            )
        if self.rooms < 0:
            raise ConfigurationError("room count must not be negative", field="rooms")
        if self.min_room < 1 or self.max_room < 1:
            raise ConfigurationError("room sizes must be positive", field="min_room" if self.min_room < 1 else "max_room")
        if self.min_room > self.max_room:
            raise ConfigurationError(
                f"min_room ({self.min_room}) is larger than max_room ({self.max_room})", field="min_room"
            )
        if self.margin < 0:
            raise ConfigurationError("margin must not be negative", field="margin")
        if self.mode not in MODES:
            raise ConfigurationError(f"invalid mode: {self.mode} (expected marble|classic)", field="mode")
        if self.channel_width < 1:
            raise ConfigurationError("channel width must be at least 1", field="channel_width")
        if self.corner_radius < 0:
            raise ConfigurationError("corner radius must not be negative", field="corner_radius")
        if self.max_elevation < 0:
            raise ConfigurationError("max elevation must not be negative", field="max_elevation")
        if self.max_elevation_change < 1:
            raise ConfigurationError("max elevation change must be at least 1", field="max_elevation_change")
        if not 0.0 <= self.obstacle_density <= 1.0:
            raise ConfigurationError("obstacle density must be within [0, 1]", field="obstacle_density")
        if self.trend is not None and not 0.0 <= self.trend.strength <= 1.0:
            raise ConfigurationError("trend strength must be within [0, 1]", field="trend_strength")
        if self.start_point is not None:
            sx, sy = self.start_point
            if not (0 <= sx < self.width and 0 <= sy < self.height):
                raise ConfigurationError(f"start point {self.start_point} lies outside the map", field="start_point")
        return self


_INT_FIELDS = {
    "width",
    "height",
    "rooms",
    "min_room",
    "max_room",
    "margin",
    "channel_width",
    "corner_radius",
    "max_elevation",
    "max_elevation_change",
}
_BOOL_FIELDS = {"enable_elevation", "enable_obstacles"}
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _as_int(key: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ConfigurationError(f"{key} must be an integer", field=key)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be an integer (got {raw!r})", field=key) from None


def _as_float(key: str, raw: Any) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number (got {raw!r})", field=key) from None


def _as_bool(key: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    val = str(raw).strip().lower()
    if val in _TRUTHY:
        return True
    if val in _FALSY:
        return False
    raise ConfigurationError(f"{key} must be a boolean (got {raw!r})", field=key)


def params_from_mapping(data: Mapping[str, Any]) -> GenerationParams:
    """Build validated params from a flat mapping (CLI namespace dict or HTTP query args).

    Recognised extra keys: trend_x, trend_y, trend_z, trend_strength, start_x, start_y.
    A trend vector is only built when all three components are present; likewise the
    start point needs both coordinates. Keys with value None are ignored.
    """
    known = {f.name for f in fields(GenerationParams)}
    kwargs: dict = {}
    for key, raw in data.items():
        if raw is None or key not in known or key in ("trend", "start_point"):
            continue
        if key in _INT_FIELDS:
            kwargs[key] = _as_int(key, raw)
        elif key in _BOOL_FIELDS:
            kwargs[key] = _as_bool(key, raw)
        elif key == "obstacle_density":
            kwargs[key] = _as_float(key, raw)
        elif key == "seed":
            kwargs[key] = coerce_seed(raw)
        elif key == "mode":
            mode = str(raw).strip().lower()
            kwargs[key] = MODE_ALIASES.get(mode, mode)
    components = [data.get(k) for k in ("trend_x", "trend_y", "trend_z")]
    if all(c is not None for c in components):
        strength = data.get("trend_strength")
        kwargs["trend"] = TrendVector(
            *(_as_float(k, c) for k, c in zip(("trend_x", "trend_y", "trend_z"), components)),
            strength=_as_float("trend_strength", strength) if strength is not None else TrendVector.strength,
        )
    sx, sy = data.get("start_x"), data.get("start_y")
    if sx is not None and sy is not None:
        kwargs["start_point"] = (_as_int("start_x", sx), _as_int("start_y", sy))
    return GenerationParams(**kwargs).validate()


SEED_MODULUS = 2**63 - 1


def coerce_seed(raw: Any) -> Optional[int]:
    """Convert a provided seed (int or str) into a bounded non-negative int.

    Numeric strings parse directly; other strings hash deterministically so
    textual seeds like "castle" stay reproducible. Empty input means random.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ConfigurationError("seed must be an integer or string", field="seed")
    if isinstance(raw, int):
        return raw % SEED_MODULUS
    s = str(raw).strip()
    if not s:
        return None
    if s.isdigit():
        return int(s) % SEED_MODULUS
    h = hashlib.sha256(s.encode("utf-8")).digest()
    return int.from_bytes(h[:8], "big") % SEED_MODULUS


__all__ = ["GenerationParams", "TrendVector", "params_from_mapping", "coerce_seed", "MIN_MAP_DIM", "MODES"]
