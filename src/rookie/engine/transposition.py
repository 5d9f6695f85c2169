"""Position cache keyed by canonical position keys."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rookie.core.move import Move

_LOGGER = logging.getLogger(__name__)


class Bound(IntEnum):
    """How a cached score relates to the true value of the position."""

    EXACT = 0
    LOWER = 1
    UPPER = 2


@dataclass(slots=True)
class TTEntry:
    depth: int
    score: int
    bound: Bound
    best_move: Move | None


class TranspositionTable:
    """Dict-backed cache with a coarse full-clear memory policy.

    There is no per-entry eviction: once the table holds more than
    ``max_entries`` positions it is emptied and refilled from scratch.
    """

    __slots__ = ("_entries", "_max_entries", "clears")

    def __init__(self, max_entries: int = 100_000) -> None:
        self._entries: dict[str, TTEntry] = {}
        self._max_entries = max_entries
        self.clears = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> TTEntry | None:
        return self._entries.get(key)

    def store(
        self,
        key: str,
        depth: int,
        score: int,
        bound: Bound,
        best_move: Move | None,
    ) -> None:
        existing = self._entries.get(key)
        if existing is not None and existing.depth > depth:
            return
        self._entries[key] = TTEntry(
            depth=depth, score=score, bound=bound, best_move=best_move
        )
        self.trim()

    def trim(self) -> None:
        """Clear everything if the table grew past its ceiling."""
        if len(self._entries) > self._max_entries:
            _LOGGER.debug(
                "Transposition table over %d entries, clearing", self._max_entries
            )
            self._entries.clear()
            self.clears += 1

    def clear(self) -> None:
        self._entries.clear()
