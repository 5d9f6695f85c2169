"""Cooperative cancellation token: stop callback, deadline and node budget."""

from __future__ import annotations

from time import perf_counter, sleep

from rookie.config import DEFAULT_CONFIG, EngineConfig
from rookie.engine.search import CancelCheck


def _never_cancelled() -> bool:
    return False


class SearchClock:
    """Polled at every recursion entry and move-loop iteration.

    Once any stop condition trips the clock stays tripped, so an
    unwinding search never re-enters deeper recursion.
    """

    __slots__ = (
        "nodes",
        "_started",
        "_deadline",
        "_hard_deadline",
        "_max_nodes",
        "_cancel_check",
        "_yield_every",
        "_last_yield_nodes",
        "_tripped",
    )

    def __init__(
        self,
        *,
        time_limit_ms: int | None = None,
        max_nodes: int | None = None,
        is_cancelled: CancelCheck | None = None,
        config: EngineConfig = DEFAULT_CONFIG,
        started: float | None = None,
    ) -> None:
        self.nodes = 0
        self._started = perf_counter() if started is None else started
        self._deadline: float | None = None
        self._hard_deadline: float | None = None
        if time_limit_ms is not None:
            budget = time_limit_ms * config.deadline_fraction / 1000.0
            self._deadline = self._started + budget
            self._hard_deadline = (
                self._deadline + config.hard_deadline_grace_ms / 1000.0
            )
        self._max_nodes = max_nodes
        self._cancel_check: CancelCheck = is_cancelled or _never_cancelled
        self._yield_every = config.yield_every_nodes
        self._last_yield_nodes = 0
        self._tripped = False

    def tick(self) -> None:
        """Count one searched node."""
        self.nodes += 1

    def should_stop(self) -> bool:
        if self._tripped:
            return True
        if self.nodes - self._last_yield_nodes >= self._yield_every:
            self._last_yield_nodes = self.nodes
            sleep(0.001)
        if (
            self._cancel_check()
            or (self._deadline is not None and perf_counter() >= self._deadline)
            or (self._max_nodes is not None and self.nodes > self._max_nodes)
        ):
            self._tripped = True
        return self._tripped

    @property
    def tripped(self) -> bool:
        return self._tripped

    @property
    def hard_deadline(self) -> float | None:
        """Soft deadline plus grace, in ``perf_counter`` seconds."""
        return self._hard_deadline

    def elapsed_ms(self) -> int:
        return int((perf_counter() - self._started) * 1000)
