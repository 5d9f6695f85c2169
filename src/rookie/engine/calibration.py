"""Rating-to-settings calibration.

Every tunable is a straight line between two anchors: its value at the
weakest supported rating and its value at the strongest. Ratings outside
the supported band are clamped first.
"""

from __future__ import annotations

from rookie.config import DEFAULT_CONFIG, EngineConfig
from rookie.engine.search import EngineSettings

# name -> (value at rating_min, value at rating_max)
_ANCHORS: dict[str, tuple[float, float]] = {
    "search_depth": (1, 5),
    "time_limit_ms": (300, 7000),
    "max_nodes": (2_000, 400_000),
    "position_weight": (0.0, 1.2),
    "mobility_weight": (0.0, 0.5),
    "pawn_structure_weight": (0.0, 1.0),
    "king_safety_weight": (0.0, 1.0),
    "mistake_rate": (0.6, 0.02),
    "mistake_size_cp": (400, 60),
    "temperature": (60.0, 2.0),
    "softmax_window": (150, 15),
}

_INTEGER_PARAMS = frozenset(
    {"search_depth", "time_limit_ms", "max_nodes", "mistake_size_cp", "softmax_window"}
)


def clamp_rating(rating: int, config: EngineConfig = DEFAULT_CONFIG) -> int:
    return max(config.rating_min, min(config.rating_max, int(rating)))


def interpolate(
    name: str, rating: int, config: EngineConfig = DEFAULT_CONFIG
) -> float:
    """Value of parameter *name* at *rating* (clamped)."""
    low, high = _ANCHORS[name]
    rating = clamp_rating(rating, config)
    t = (rating - config.rating_min) / (config.rating_max - config.rating_min)
    return low + (high - low) * t


def settings_for_rating(
    rating: int,
    *,
    seed: int | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EngineSettings:
    """Build the full settings bundle for a target playing strength."""
    rating = clamp_rating(rating, config)
    values: dict[str, float | int] = {}
    for name in _ANCHORS:
        value = interpolate(name, rating, config)
        values[name] = round(value) if name in _INTEGER_PARAMS else value

    return EngineSettings(
        use_quiescence=rating >= config.quiescence_min_rating,
        quiescence_depth=config.quiescence_depth,
        seed=seed,
        rating=rating,
        **values,
    )
