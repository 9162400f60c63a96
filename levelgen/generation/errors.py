"""Generation error taxonomy.

Two fatal exceptions stop a generation call:
  * ConfigurationError  - invalid parameters, raised before any grid exists.
  * ClassificationGap   - a passable cell matched no connectivity pattern.

Two non-fatal diagnostics are attached to the finished Level instead of raised:
  * PlacementShortfall          - fewer rooms placed than requested.
  * ElevationConvergenceWarning - smoothing hit its pass cap with violations left.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


class ConfigurationError(ValueError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        return {"error": "configuration_error", "message": str(self), "field": self.field}


class ClassificationGap(RuntimeError):
    def __init__(self, x: int, y: int, mask: int):
        super().__init__(f"passable cell ({x}, {y}) has unclassifiable connectivity mask {mask:04b}")
        self.x = x
        self.y = y
        self.mask = mask

    def to_dict(self) -> Dict[str, Any]:
        return {"error": "classification_gap", "message": str(self), "x": self.x, "y": self.y, "mask": self.mask}


@dataclass(frozen=True)
class GenerationDiagnostic:
    code = "diagnostic"

    @property
    def message(self) -> str:  # pragma: no cover - overridden
        return self.code

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["code"] = self.code
        data["message"] = self.message
        return data


@dataclass(frozen=True)
class PlacementShortfall(GenerationDiagnostic):
    requested: int
    placed: int
    attempts: int

    code = "placement_shortfall"

    @property
    def message(self) -> str:
        return f"placed {self.placed} of {self.requested} rooms after {self.attempts} attempts"


@dataclass(frozen=True)
class ElevationConvergenceWarning(GenerationDiagnostic):
    passes: int
    violations: int

    code = "elevation_convergence"

    @property
    def message(self) -> str:
        return f"{self.violations} elevation steps still exceed tolerance after {self.passes} smoothing passes"


__all__ = [
    "ConfigurationError",
    "ClassificationGap",
    "GenerationDiagnostic",
    "PlacementShortfall",
    "ElevationConvergenceWarning",
]
