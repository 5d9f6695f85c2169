"""Tests for the static evaluator."""

from __future__ import annotations

import pytest

from rookie.core.enums import Color, PieceType
from rookie.core.notation import STARTING_FEN, position_from_fen
from rookie.core.types import parse_square
from rookie.engine.evaluation import Evaluator, piece_square_bonus
from rookie.engine.search import EngineSettings

ZERO_WEIGHTS = EngineSettings(
    position_weight=0.0,
    mobility_weight=0.0,
    pawn_structure_weight=0.0,
    king_safety_weight=0.0,
)


def only(**weights: float) -> EngineSettings:
    values = {
        "position_weight": 0.0,
        "mobility_weight": 0.0,
        "pawn_structure_weight": 0.0,
        "king_safety_weight": 0.0,
    }
    values.update(weights)
    return EngineSettings(**values)


class TestEvaluator:
    def test_start_position_is_balanced(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        settings = EngineSettings(mobility_weight=0.5)
        assert Evaluator().evaluate(pos, settings) == 0

    def test_score_is_side_to_move_relative(self) -> None:
        white = position_from_fen("4k3/8/8/8/8/8/8/Q3K3 w - - 0 1")
        black = position_from_fen("4k3/8/8/8/8/8/8/Q3K3 b - - 0 1")
        evaluator = Evaluator()
        assert evaluator.material(white) == 900
        assert evaluator.material(black) == -900
        assert evaluator.evaluate(white, ZERO_WEIGHTS) == 900

    def test_mirrored_position_negates(self) -> None:
        fen = "r1bqk2r/pppp1ppp/2n2n2/2b1p3/2B1P3/3P1N2/PPP2PPP/RNBQK2R w KQkq - 0 1"
        mirrored = (
            "rnbqk2r/ppp2ppp/3p1n2/2b1p3/2B1P3/2N2N2/PPPP1PPP/R1BQK2R b KQkq - 0 1"
        )
        settings = EngineSettings(mobility_weight=0.5)
        evaluator = Evaluator()
        assert evaluator.evaluate(position_from_fen(fen), settings) == evaluator.evaluate(
            position_from_fen(mirrored), settings
        )


class TestPieceSquareTables:
    def test_central_knight_beats_rim_knight(self) -> None:
        centre = piece_square_bonus(PieceType.KNIGHT, Color.WHITE, parse_square("e4"))
        rim = piece_square_bonus(PieceType.KNIGHT, Color.WHITE, parse_square("a1"))
        assert centre > rim

    def test_advanced_pawn_rewarded_for_its_owner(self) -> None:
        white = piece_square_bonus(PieceType.PAWN, Color.WHITE, parse_square("e7"))
        black = piece_square_bonus(PieceType.PAWN, Color.BLACK, parse_square("e2"))
        assert white == black == 50

    def test_tables_mirror_between_colours(self) -> None:
        for name, mirror in (("g1", "g8"), ("c3", "c6"), ("d2", "d7")):
            assert piece_square_bonus(
                PieceType.KING, Color.WHITE, parse_square(name)
            ) == piece_square_bonus(PieceType.KING, Color.BLACK, parse_square(mirror))

    def test_rook_and_queen_have_no_table(self) -> None:
        for sq in (0, 27, 63):
            assert piece_square_bonus(PieceType.ROOK, Color.WHITE, sq) == 0
            assert piece_square_bonus(PieceType.QUEEN, Color.BLACK, sq) == 0


class TestTerms:
    def test_zero_weight_is_material_only(self) -> None:
        pos = position_from_fen("4k3/pp6/8/8/3N4/8/PPP5/4K3 w - - 0 1")
        evaluator = Evaluator()
        assert evaluator.evaluate(pos, ZERO_WEIGHTS) == evaluator.material(pos)

    def test_mobility_counts_legal_moves(self) -> None:
        # White king has 5 moves, black king 3 (corner).
        pos = position_from_fen("k7/8/8/8/8/8/8/4K3 w - - 0 1")
        assert Evaluator().evaluate(pos, only(mobility_weight=1.0)) == 20

    def test_doubled_pawns_penalised(self) -> None:
        healthy = position_from_fen("4k3/8/8/8/8/8/3PP3/4K3 w - - 0 1")
        doubled = position_from_fen("4k3/8/8/8/8/4P3/4P3/4K3 w - - 0 1")
        settings = only(pawn_structure_weight=1.0)
        evaluator = Evaluator()
        assert evaluator.evaluate(doubled, settings) < evaluator.evaluate(
            healthy, settings
        )

    def test_passed_pawn_rewarded_by_rank(self) -> None:
        settings = only(pawn_structure_weight=1.0)
        evaluator = Evaluator()
        far = position_from_fen("4k3/8/4P3/8/8/8/8/4K3 w - - 0 1")
        near = position_from_fen("4k3/8/8/8/8/8/4P3/4K3 w - - 0 1")
        assert evaluator.evaluate(far, settings) - evaluator.evaluate(
            near, settings
        ) == 40

    def test_blocked_pawn_is_not_passed(self) -> None:
        settings = only(pawn_structure_weight=1.0)
        evaluator = Evaluator()
        free = position_from_fen("4k3/8/8/8/4P3/8/8/4K3 w - - 0 1")
        opposed = position_from_fen("4k3/3p4/8/8/4P3/8/8/4K3 w - - 0 1")
        assert evaluator.evaluate(free, settings) > evaluator.evaluate(
            opposed, settings
        )

    def test_pawn_shield_helps_king_safety(self) -> None:
        settings = only(king_safety_weight=1.0)
        evaluator = Evaluator()
        sheltered = position_from_fen(
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQ1RK1 w kq - 0 1"
        )
        exposed = position_from_fen(
            "rnbqkbnr/pppppppp/8/8/8/5PPP/PPPPP3/RNBQ1RK1 w kq - 0 1"
        )
        assert evaluator.evaluate(sheltered, settings) > evaluator.evaluate(
            exposed, settings
        )

    @pytest.mark.parametrize("weight", [0.5, 1.0, 2.0])
    def test_weights_scale_terms(self, weight: float) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4P3/4K3 w - - 0 1")
        evaluator = Evaluator()
        base = evaluator.evaluate(pos, only(position_weight=1.0))
        scaled = evaluator.evaluate(pos, only(position_weight=weight))
        material = evaluator.material(pos)
        assert scaled - material == round((base - material) * weight)
