from typing import Dict


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'rooms_requested': 0,
        'rooms_placed': 0,
        'placement_attempts': 0,
        'channels_carved': 0,
        'passable_cells': 0,
        'corridor_cells_seeded': 0,
        'smoothing_passes': 0,
        'smoothing_nudges': 0,
        'elevation_violations': 0,
        'obstacles_placed': 0,
        'slope_tiles': 0,
        'diagnostics': 0,
        'runtime_ms': 0.0,
    }


__all__ = ["init_metrics"]
