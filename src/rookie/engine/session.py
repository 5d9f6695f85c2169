"""Per-search mutable state: node clock, killer/history tables, repetitions."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from rookie.core.move import Move
from rookie.engine.clock import SearchClock

KILLER_PRIMARY_BONUS = 8_000
KILLER_SECONDARY_BONUS = 7_000
# History weight stays below the killer bonuses so it only breaks ties.
HISTORY_MAX_SCORE = 6_000


class SearchSession:
    """State owned by exactly one top-level search.

    A fresh session is created for every search, which resets the killer
    and history tables. The engine's transposition table is deliberately
    not part of it.
    """

    __slots__ = (
        "clock",
        "_killers",
        "_history",
        "_history_keys",
        "_path_keys",
    )

    def __init__(
        self,
        clock: SearchClock,
        *,
        history: Iterable[str] = (),
        max_killer_ply: int = 64,
    ) -> None:
        self.clock = clock
        self._killers: list[list[Move | None]] = [
            [None, None] for _ in range(max_killer_ply)
        ]
        self._history: list[list[int]] = [[0] * 64 for _ in range(64)]
        self._history_keys: Counter[str] = Counter(history)
        self._path_keys: Counter[str] = Counter()

    # -- Node accounting --------------------------------------------------------

    @property
    def nodes(self) -> int:
        return self.clock.nodes

    def should_stop(self) -> bool:
        return self.clock.should_stop()

    # -- Repetitions ------------------------------------------------------------

    def prior_occurrences(self, key: str) -> int:
        """Times *key* was seen before: game history plus the current path."""
        return self._history_keys[key] + self._path_keys[key]

    def enter(self, key: str) -> None:
        self._path_keys[key] += 1

    def leave(self, key: str) -> None:
        remaining = self._path_keys[key] - 1
        if remaining:
            self._path_keys[key] = remaining
        else:
            del self._path_keys[key]

    # -- Killer moves -----------------------------------------------------------

    def record_killer(self, move: Move, ply: int) -> None:
        if ply < 0 or ply >= len(self._killers):
            return
        killers = self._killers[ply]
        if move in killers:
            return
        killers[1] = killers[0]
        killers[0] = move

    def killer_score(self, move: Move, ply: int) -> int:
        if ply < 0 or ply >= len(self._killers):
            return 0
        killers = self._killers[ply]
        if killers[0] == move:
            return KILLER_PRIMARY_BONUS
        if killers[1] == move:
            return KILLER_SECONDARY_BONUS
        return 0

    def killers(self, ply: int) -> tuple[Move | None, ...]:
        if ply < 0 or ply >= len(self._killers):
            return ()
        return tuple(self._killers[ply])

    # -- History heuristic ------------------------------------------------------

    def history_score(self, move: Move) -> int:
        return min(HISTORY_MAX_SCORE, self._history[move.from_sq][move.to_sq])

    def update_history(self, move: Move, depth: int) -> None:
        self._history[move.from_sq][move.to_sq] += depth * depth
