"""Skill-calibrated engine facade: request in, chosen move out."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from rookie.config import DEFAULT_CONFIG, EngineConfig
from rookie.core.move import Move
from rookie.core.move_generator import MoveGenerator
from rookie.core.position import Position
from rookie.engine.calibration import settings_for_rating
from rookie.engine.negamax import NegamaxEngine
from rookie.engine.request import InvalidRequestError, SearchRequest
from rookie.engine.search import (
    MATE_SCORE,
    CancelCheck,
    EngineSettings,
    IEngine,
    ProgressCallback,
)
from rookie.engine.selection import MoveSelector

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class EngineResult:
    """Final answer for one request.

    ``move`` is ``None`` only when the side to move has no legal move;
    ``score_cp`` is then the terminal score (mate or stalemate).
    """

    move: Move | None
    score_cp: int
    depth: int
    nodes: int
    elapsed_ms: int
    stopped: bool = False
    mistake: bool = False


class SkillEngine:
    """Runs a calibrated search and picks the move a player of that level would."""

    __slots__ = ("_config", "_engine")

    def __init__(
        self,
        engine: IEngine | None = None,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self._config = config
        self._engine: IEngine = engine or NegamaxEngine(config)

    @property
    def config(self) -> EngineConfig:
        return self._config

    def settings_for(self, request: SearchRequest) -> EngineSettings:
        if request.settings is not None:
            return request.settings
        if request.rating is None:
            raise InvalidRequestError("Request needs either settings or a rating")
        return settings_for_rating(
            request.rating, seed=request.seed, config=self._config
        )

    def run(
        self,
        request: SearchRequest,
        *,
        is_cancelled: CancelCheck | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> EngineResult:
        """Validate *request*, search it and select the move to play.

        Raises :class:`~rookie.engine.request.InvalidRequestError` before
        any search work if the request is malformed.
        """
        position = request.to_position()
        settings = self.settings_for(request)
        seed = settings.seed if settings.seed is not None else request.seed
        rng = random.Random(seed)

        if settings.search_depth == 0:
            return self._random_move(position, rng)

        result = self._engine.search(
            position,
            settings,
            history=request.history,
            is_cancelled=is_cancelled,
            on_progress=on_progress,
        )

        move = result.best_move
        score = result.score_cp
        mistake = False
        if result.ranked:
            move, mistake = MoveSelector(settings, rng).select(result.ranked)
            score = next(s.score_cp for s in result.ranked if s.move == move)

        _LOGGER.info(
            "Selected %s (score %d, depth %d, nodes %d, %d ms%s%s)",
            move,
            score,
            result.depth,
            result.nodes,
            result.elapsed_ms,
            ", stopped" if result.stopped else "",
            ", mistake" if mistake else "",
        )
        return EngineResult(
            move=move,
            score_cp=score,
            depth=result.depth,
            nodes=result.nodes,
            elapsed_ms=result.elapsed_ms,
            stopped=result.stopped,
            mistake=mistake,
        )

    def _random_move(self, position: Position, rng: random.Random) -> EngineResult:
        gen = MoveGenerator(position)
        legal = gen.generate_legal_moves()
        if not legal:
            score = -MATE_SCORE if gen.is_in_check(position.side_to_move) else 0
            return EngineResult(None, score, 0, 0, 0)
        move = rng.choice(legal)
        _LOGGER.info("Depth 0: playing random move %s", move)
        return EngineResult(move, 0, 0, 0, 0)
