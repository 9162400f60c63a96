"""
project: levelgen
module: level_api.py
License: MIT

HTTP surface for level generation.

Endpoints (query arguments mirror ``GenerationParams`` field names plus
``trend_x``/``trend_y``/``trend_z``/``trend_strength`` and ``start_x``/``start_y``):

  GET /api/level          level document (``marble_tiles`` null in classic mode)
  GET /api/level/metrics  seed, metrics and diagnostics only
  GET /level/view         isometric HTML page

Invalid parameters answer 400 with ``{"error", "message", "field"}``; a
classification failure answers 500.
"""

import os
import threading

from flask import Blueprint, current_app, jsonify, render_template, request

from levelgen.generation import ClassificationGap, ConfigurationError, generate, params_from_mapping
from levelgen.logging_utils import get_logger
from levelgen.rendering.isometric import build_scene
from levelgen.utils.serialize import level_to_dict

log = get_logger("levelgen.api")

# In-process cache params -> Level. Levels are read-only once generated; the lock
# guards the dict itself under threaded servers.
_level_cache = {}
_level_cache_lock = threading.Lock()
_LEVEL_CACHE_MAX = 8


def _cache_disabled() -> bool:
    if os.environ.get("LEVELGEN_DISABLE_CACHE") == "1":
        return True
    return bool(current_app.config.get("LEVELGEN_DISABLE_CACHE"))


def get_cached_level(params):
    """Return the level for ``params``, generating it on a cache miss.

    Only seeded params are cached; an unseeded request is random by definition.
    """
    if params.seed is None or _cache_disabled():
        return generate(params)
    cap = int(current_app.config.get("LEVELGEN_CACHE_SIZE", _LEVEL_CACHE_MAX))
    with _level_cache_lock:
        level = _level_cache.get(params)
        if level is not None:
            return level
    level = generate(params)
    with _level_cache_lock:
        _level_cache[params] = level
        while len(_level_cache) > max(cap, 1):
            first_key = next(iter(_level_cache.keys()))
            if first_key == params:
                break
            _level_cache.pop(first_key, None)
    return level


def clear_level_cache():
    with _level_cache_lock:
        _level_cache.clear()


bp_level = Blueprint("level", __name__)


@bp_level.errorhandler(ConfigurationError)
def _bad_params(err):
    log.info(event="bad_params", field=err.field, detail=str(err))
    return jsonify(err.to_dict()), 400


@bp_level.errorhandler(ClassificationGap)
def _classification_gap(err):
    log.error(event="classification_gap", x=err.x, y=err.y, mask=err.mask)
    return jsonify(err.to_dict()), 500


def _level_from_request():
    return get_cached_level(params_from_mapping(request.args.to_dict()))


@bp_level.route("/api/level")
def level_document():
    """Return the level document.

    ``diagnostics=1`` and ``metrics=1`` add the optional keys.
    """
    level = _level_from_request()
    want_diag = request.args.get("diagnostics", "0") in ("1", "true", "yes")
    want_metrics = request.args.get("metrics", "0") in ("1", "true", "yes")
    return jsonify(level_to_dict(level, include_diagnostics=want_diag, include_metrics=want_metrics))


@bp_level.route("/api/level/metrics")
def level_metrics():
    level = _level_from_request()
    return jsonify(
        {
            "seed": level.seed,
            "metrics": level.metrics,
            "diagnostics": [d.to_dict() for d in level.diagnostics],
        }
    )


@bp_level.route("/level/view")
def level_view():
    level = _level_from_request()
    return render_template("isometric.html", **build_scene(level))
