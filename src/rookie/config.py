"""Engine-wide configuration shared by the search, calibrator and Qt bridge."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class EngineConfig:
    """Process-level knobs that are not derived from a skill rating."""

    # Transposition cache is cleared wholesale once it grows past this.
    tt_max_entries: int = 100_000
    # Searches aim to finish this share of their time budget early.
    deadline_fraction: float = 0.9
    # Backstop for a worker that misses its soft deadline.
    hard_deadline_grace_ms: int = 500
    quiescence_depth: int = 4
    max_killer_ply: int = 64
    # Briefly release the GIL every N nodes so a UI thread stays responsive.
    yield_every_nodes: int = 4096

    rating_min: int = 400
    rating_max: int = 2400
    quiescence_min_rating: int = 1400

    def __post_init__(self) -> None:
        if self.tt_max_entries <= 0:
            raise ValueError("tt_max_entries must be positive")
        if not 0.0 < self.deadline_fraction <= 1.0:
            raise ValueError("deadline_fraction must be in (0, 1]")
        if self.hard_deadline_grace_ms < 0:
            raise ValueError("hard_deadline_grace_ms must be >= 0")
        if self.rating_min >= self.rating_max:
            raise ValueError("rating_min must be below rating_max")


DEFAULT_CONFIG = EngineConfig()
