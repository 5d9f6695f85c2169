"""Choose the move to play from the ranked root moves."""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence

from rookie.core.move import Move
from rookie.engine.search import EngineSettings, ScoredMove

_LOGGER = logging.getLogger(__name__)

# Half-width of the band around the mistake target, and the minimum loss
# for a move to count as a mistake at all.
MISTAKE_TOLERANCE_CP = 50


class MoveSelector:
    """Applies the intentional-mistake and softmax policies.

    All randomness comes from the supplied ``rng`` so a seeded generator
    makes the whole selection reproducible.
    """

    __slots__ = ("_settings", "_rng")

    def __init__(self, settings: EngineSettings, rng: random.Random) -> None:
        self._settings = settings
        self._rng = rng

    def select(self, ranked: Sequence[ScoredMove]) -> tuple[Move | None, bool]:
        """Return ``(move, is_mistake)``; *ranked* must be sorted best first."""
        if not ranked:
            return None, False
        if len(ranked) == 1:
            return ranked[0].move, False

        settings = self._settings
        if settings.mistake_rate > 0 and self._rng.random() < settings.mistake_rate:
            mistake = self._pick_mistake(ranked)
            best = ranked[0].score_cp
            _LOGGER.info(
                "Playing mistake %s (%d cp, best %d cp)",
                mistake.move,
                mistake.score_cp,
                best,
            )
            return mistake.move, mistake.score_cp < best

        return self._pick_softmax(ranked), False

    def _pick_mistake(self, ranked: Sequence[ScoredMove]) -> ScoredMove:
        best = ranked[0].score_cp
        target = best - self._settings.mistake_size_cp
        candidates = [
            s
            for s in ranked
            if abs(s.score_cp - target) <= MISTAKE_TOLERANCE_CP
            and s.score_cp < best - MISTAKE_TOLERANCE_CP
        ]
        if candidates:
            return self._rng.choice(candidates)
        # No move near the target: settle for the middle of the ranking.
        return ranked[min(len(ranked) // 2, len(ranked) - 1)]

    def _pick_softmax(self, ranked: Sequence[ScoredMove]) -> Move:
        best = ranked[0].score_cp
        window = self._settings.softmax_window
        pool = [s for s in ranked if best - s.score_cp <= window]
        if len(pool) == 1:
            return pool[0].move

        temperature = self._settings.temperature
        # Shifted by the best score so the largest exponent is 0.
        weights = [math.exp((s.score_cp - best) / temperature) for s in pool]
        return self._rng.choices(pool, weights=weights, k=1)[0].move
