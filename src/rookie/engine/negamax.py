"""Pure-Python chess search: iterative-deepening negamax with alpha-beta."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rookie.config import DEFAULT_CONFIG, EngineConfig
from rookie.core.enums import Color, MoveKind, PieceType
from rookie.core.move import Move
from rookie.core.move_generator import MoveGenerator
from rookie.core.position import Position
from rookie.core.types import center_distance, rank_of
from rookie.engine.clock import SearchClock
from rookie.engine.evaluation import PIECE_VALUES, Evaluator
from rookie.engine.search import (
    INF_SCORE,
    MATE_SCORE,
    CancelCheck,
    EngineSettings,
    IEngine,
    ProgressCallback,
    ScoredMove,
    SearchProgress,
    SearchResult,
)
from rookie.engine.session import SearchSession
from rookie.engine.transposition import Bound, TranspositionTable

_LOGGER = logging.getLogger(__name__)

_TT_MOVE_BONUS = 100_000
_CAPTURE_BONUS = 10_000
_PROMOTION_BONUS = 9_000
_CENTRALITY_STEP = 10
_DEVELOPMENT_BONUS = 50

# MVV-LVA attacker values; a capturing king sorts after every other attacker.
_ATTACKER_VALUES: dict[PieceType, int] = {
    **PIECE_VALUES,
    PieceType.KING: 1_000,
}
_MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)


class NegamaxEngine(IEngine):
    """Classical searcher with iterative deepening and quiescence.

    The transposition table lives on the engine and is reused by
    consecutive searches; everything else is per-search state held in a
    :class:`SearchSession`.
    """

    __slots__ = ("_config", "_evaluator", "_tt")

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        evaluator: Evaluator | None = None,
    ) -> None:
        self._config = config
        self._evaluator = evaluator or Evaluator()
        self._tt = TranspositionTable(config.tt_max_entries)

    @property
    def transposition_table(self) -> TranspositionTable:
        return self._tt

    def search(
        self,
        position: Position,
        settings: EngineSettings,
        *,
        history: Iterable[str] = (),
        is_cancelled: CancelCheck | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> SearchResult:
        clock = SearchClock(
            time_limit_ms=settings.time_limit_ms,
            max_nodes=settings.max_nodes,
            is_cancelled=is_cancelled,
            config=self._config,
        )
        session = self._new_session(clock, history)
        self._tt.trim()

        root_gen = MoveGenerator(position)
        root_moves = root_gen.generate_legal_moves()
        if not root_moves:
            score = -MATE_SCORE if root_gen.is_in_check(position.side_to_move) else 0
            return SearchResult(None, score, 0, clock.nodes, clock.elapsed_ms())

        ordered = self._order_moves(position, root_moves, session, ply=0)
        best_move = ordered[0]
        best_score = self._evaluator.material(position)
        completed_depth = 0
        ranked: tuple[ScoredMove, ...] = ()

        root_key = position.key()
        session.enter(root_key)
        try:
            for depth in range(1, settings.search_depth + 1):
                if session.should_stop():
                    break
                scored = self._search_root(position, session, settings, ordered, depth)
                if scored is None:
                    break

                ranked = tuple(sorted(scored, key=lambda s: s.score_cp, reverse=True))
                best_move = ranked[0].move
                best_score = ranked[0].score_cp
                completed_depth = depth
                # Next iteration starts from this depth's principal variation.
                ordered = [s.move for s in ranked]

                _LOGGER.debug(
                    "depth %d: best %s score %d nodes %d",
                    depth,
                    best_move,
                    best_score,
                    session.nodes,
                )
                if on_progress is not None:
                    on_progress(
                        SearchProgress(depth, session.nodes, best_score, best_move)
                    )
        finally:
            session.leave(root_key)

        return SearchResult(
            best_move,
            best_score,
            completed_depth,
            session.nodes,
            clock.elapsed_ms(),
            ranked,
            stopped=clock.tripped,
        )

    def _new_session(self, clock: SearchClock, history: Iterable[str]) -> SearchSession:
        return SearchSession(
            clock, history=history, max_killer_ply=self._config.max_killer_ply
        )

    def _search_root(
        self,
        position: Position,
        session: SearchSession,
        settings: EngineSettings,
        root_moves: list[Move],
        depth: int,
    ) -> list[ScoredMove] | None:
        """Score every root move with a full window; ``None`` if interrupted."""
        scored: list[ScoredMove] = []
        for move in root_moves:
            if session.should_stop():
                return None
            with position.applied(move):
                score = -self._negamax(
                    position, session, settings, depth - 1, -INF_SCORE, INF_SCORE, ply=1
                )
            scored.append(ScoredMove(move, score))

        if session.clock.tripped:
            return None
        return scored

    def _negamax(
        self,
        position: Position,
        session: SearchSession,
        settings: EngineSettings,
        depth: int,
        alpha: int,
        beta: int,
        ply: int,
    ) -> int:
        if session.should_stop():
            return self._evaluator.material(position)
        session.clock.tick()

        key = position.key()
        if session.prior_occurrences(key) >= 2:
            return 0

        alpha_orig = alpha
        beta_orig = beta
        tt_entry = self._tt.get(key)
        tt_move = tt_entry.best_move if tt_entry is not None else None
        if tt_entry is not None and tt_entry.depth >= depth:
            if tt_entry.bound == Bound.EXACT:
                return tt_entry.score
            if tt_entry.bound == Bound.LOWER:
                alpha = max(alpha, tt_entry.score)
            else:
                beta = min(beta, tt_entry.score)
            if alpha >= beta:
                return tt_entry.score

        if depth <= 0:
            if settings.use_quiescence:
                return self._quiescence(position, session, settings, alpha, beta, ply)
            return self._evaluator.evaluate(position, settings)

        gen = MoveGenerator(position)
        legal = gen.generate_legal_moves()
        if not legal:
            if gen.is_in_check(position.side_to_move):
                return -MATE_SCORE + ply
            return 0

        ordered = self._order_moves(position, legal, session, tt_move=tt_move, ply=ply)
        best_score = -INF_SCORE
        best_move: Move | None = None

        session.enter(key)
        try:
            for move in ordered:
                if session.should_stop():
                    break
                is_quiet = not position.is_capture(move)

                undo = position.make_move(move)
                try:
                    score = -self._negamax(
                        position, session, settings, depth - 1, -beta, -alpha, ply + 1
                    )
                finally:
                    position.unmake_move(undo)

                if score > best_score:
                    best_score = score
                    best_move = move
                if score > alpha:
                    alpha = score
                if alpha >= beta:
                    if is_quiet:
                        session.record_killer(move, ply)
                    session.update_history(move, depth)
                    break
        finally:
            session.leave(key)

        if best_move is None:
            return self._evaluator.material(position)
        if session.clock.tripped:
            return best_score

        bound = Bound.EXACT
        if best_score <= alpha_orig:
            bound = Bound.UPPER
        elif best_score >= beta_orig:
            bound = Bound.LOWER
        self._tt.store(key, depth, best_score, bound, best_move)
        return best_score

    def _quiescence(
        self,
        position: Position,
        session: SearchSession,
        settings: EngineSettings,
        alpha: int,
        beta: int,
        ply: int,
        q_depth: int = 0,
    ) -> int:
        if session.should_stop():
            return self._evaluator.material(position)
        session.clock.tick()

        stand_pat = self._evaluator.evaluate(position, settings)
        if q_depth >= settings.quiescence_depth:
            return stand_pat
        if stand_pat >= beta:
            return beta
        if stand_pat > alpha:
            alpha = stand_pat

        gen = MoveGenerator(position)
        legal = gen.generate_legal_moves()
        if not legal:
            if gen.is_in_check(position.side_to_move):
                return -MATE_SCORE + ply
            return 0

        tactical = [m for m in legal if self._is_noisy_move(position, gen, m)]
        for move in self._order_moves(position, tactical, session, ply=ply):
            if session.should_stop():
                break
            undo = position.make_move(move)
            try:
                score = -self._quiescence(
                    position, session, settings, -beta, -alpha, ply + 1, q_depth + 1
                )
            finally:
                position.unmake_move(undo)

            if score >= beta:
                return beta
            if score > alpha:
                alpha = score
        return alpha

    def _is_noisy_move(
        self, position: Position, gen: MoveGenerator, move: Move
    ) -> bool:
        if position.is_capture(move):
            return True
        if position.classify(move) == MoveKind.PROMOTION:
            return True
        return gen.gives_check(move)

    # -- Move ordering ------------------------------------------------------------

    def _order_moves(
        self,
        position: Position,
        moves: list[Move],
        session: SearchSession,
        tt_move: Move | None = None,
        ply: int = 0,
    ) -> list[Move]:
        return sorted(
            moves,
            key=lambda move: self._move_order_score(
                position, move, session, tt_move, ply
            ),
            reverse=True,
        )

    def _move_order_score(
        self,
        position: Position,
        move: Move,
        session: SearchSession,
        tt_move: Move | None = None,
        ply: int = 0,
    ) -> int:
        board = position.board
        moving_piece = board[move.from_sq]
        if moving_piece is None:
            return -INF_SCORE

        score = 0
        if tt_move is not None and move == tt_move:
            score += _TT_MOVE_BONUS

        kind = position.classify(move)
        target_piece = board[move.to_sq]
        attacker_value = _ATTACKER_VALUES[moving_piece.piece_type]
        if target_piece is not None:
            score += _CAPTURE_BONUS
            score += 10 * PIECE_VALUES[target_piece.piece_type] - attacker_value
        elif kind == MoveKind.EN_PASSANT:
            score += _CAPTURE_BONUS
            score += 10 * PIECE_VALUES[PieceType.PAWN] - attacker_value
        else:
            score += session.killer_score(move, ply)

        if kind == MoveKind.PROMOTION:
            score += _PROMOTION_BONUS

        score += session.history_score(move)
        score += (7 - center_distance(move.to_sq)) * _CENTRALITY_STEP

        if moving_piece.piece_type in _MINOR_PIECES:
            home_rank = 0 if moving_piece.color == Color.WHITE else 7
            if rank_of(move.from_sq) == home_rank:
                score += _DEVELOPMENT_BONUS
        return score
