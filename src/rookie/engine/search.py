"""Shared engine search models and protocol."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from rookie.core.move import Move
    from rookie.core.position import Position

CancelCheck = Callable[[], bool]

INF_SCORE = 1_000_000
MATE_SCORE = 100_000


@dataclass(slots=True, frozen=True)
class EngineSettings:
    """Every tunable for one search invocation.

    Built once per request (usually by
    :func:`rookie.engine.calibration.settings_for_rating`) and passed
    through the search unchanged. ``None`` budgets mean unlimited.
    """

    search_depth: int = 3
    time_limit_ms: int | None = None
    max_nodes: int | None = None
    use_quiescence: bool = True
    quiescence_depth: int = 4

    # Evaluation term weights; a zero weight skips the term entirely.
    position_weight: float = 1.0
    mobility_weight: float = 0.0
    pawn_structure_weight: float = 1.0
    king_safety_weight: float = 1.0

    # Move selection.
    mistake_rate: float = 0.0
    mistake_size_cp: int = 0
    temperature: float = 1.0
    softmax_window: int = 0
    seed: int | None = None

    rating: int | None = None

    def __post_init__(self) -> None:
        if self.search_depth < 0:
            raise ValueError("search_depth must be >= 0")
        if self.time_limit_ms is not None and self.time_limit_ms < 0:
            raise ValueError("time_limit_ms must be >= 0")
        if self.max_nodes is not None and self.max_nodes <= 0:
            raise ValueError("max_nodes must be positive")
        if self.quiescence_depth < 0:
            raise ValueError("quiescence_depth must be >= 0")
        if not 0.0 <= self.mistake_rate <= 1.0:
            raise ValueError("mistake_rate must be within [0, 1]")
        if self.temperature <= 0:
            raise ValueError("temperature must be positive")
        if self.softmax_window < 0 or self.mistake_size_cp < 0:
            raise ValueError("selection windows must be >= 0")
        weights = (
            self.position_weight,
            self.mobility_weight,
            self.pawn_structure_weight,
            self.king_safety_weight,
        )
        if any(w < 0 for w in weights):
            raise ValueError("evaluation weights must be >= 0")


@dataclass(slots=True, frozen=True)
class ScoredMove:
    """A root move with its score from the mover's perspective."""

    move: Move
    score_cp: int


@dataclass(slots=True, frozen=True)
class SearchProgress:
    """Emitted once per completed iterative-deepening depth."""

    depth: int
    nodes: int
    score_cp: int
    best_move: Move | None


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search."""

    best_move: Move | None
    score_cp: int
    depth: int
    nodes: int
    elapsed_ms: int = 0
    # Root moves of the deepest completed depth, best first.
    ranked: tuple[ScoredMove, ...] = ()
    stopped: bool = False


ProgressCallback = Callable[[SearchProgress], None]


class IEngine(Protocol):
    """Protocol for search engines driven by the service layer."""

    def search(
        self,
        position: Position,
        settings: EngineSettings,
        *,
        history: Iterable[str] = (),
        is_cancelled: CancelCheck | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> SearchResult: ...
