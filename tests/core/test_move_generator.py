"""Perft tests, the gold standard for move-generator correctness.

Reference values: https://www.chessprogramming.org/Perft_Results

Only positions and depths whose trees contain no promotions are used:
promotion is always to a queen here, so under-promotions are not counted.
"""

import pytest

from rookie.core.enums import Color
from rookie.core.move import Move
from rookie.core.move_generator import MoveGenerator
from rookie.core.notation import STARTING_FEN, position_from_fen
from rookie.core.position import Position
from rookie.core.types import parse_square


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth* using make/unmake."""
    if depth == 0:
        return 1
    moves = MoveGenerator(position).generate_legal_moves()
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        undo = position.make_move(move)
        nodes += perft(position, depth - 1)
        position.unmake_move(undo)
    return nodes


def uci_moves(fen: str) -> set[str]:
    pos = position_from_fen(fen)
    return {m.uci for m in MoveGenerator(pos).generate_legal_moves()}


# ── Starting position ────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 1) == 20

    def test_depth_2(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 2) == 400

    def test_depth_3(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 3) == 8_902

    @pytest.mark.slow
    def test_depth_4(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 4) == 197_281


# ── Kiwipete (rich in tactics: castling, en passant, pins) ───────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 1) == 48

    def test_depth_2(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 2) == 2_039

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 3) == 97_862


# ── Position 3 (rook endgame with en passant and discovered checks) ─────────

POS3 = "8/2p5/3p4/KP5r/1R3p2/4P3/6P1/8 w - - 0 1"


class TestPerftPos3:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 1) == 14

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 2) == 191

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 3) == 2_812

    @pytest.mark.slow
    def test_depth_4(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 4) == 43_238


# ── Targeted legality checks ─────────────────────────────────────────────────


class TestLegality:
    def test_checkmate_has_no_moves(self) -> None:
        # Fool's mate
        fen = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        assert uci_moves(fen) == set()

    def test_stalemate_has_no_moves(self) -> None:
        assert uci_moves("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1") == set()

    def test_no_move_leaves_king_in_check(self) -> None:
        pos = position_from_fen(KIWIPETE)
        gen = MoveGenerator(pos)
        for move in gen.generate_legal_moves():
            with pos.applied(move):
                assert not MoveGenerator(pos).is_in_check(Color.WHITE), move

    def test_pinned_piece_cannot_leave_line(self) -> None:
        # The e2 knight is pinned by the e8 rook.
        moves = uci_moves("4r1k1/8/8/8/8/8/4N3/4K3 w - - 0 1")
        assert not any(m.startswith("e2") for m in moves)

    def test_castling_through_attack_forbidden(self) -> None:
        # Black rook on f8 covers f1.
        moves = uci_moves("5rk1/8/8/8/8/8/8/4K2R w K - 0 1")
        assert "e1g1" not in moves

    def test_castling_when_clear(self) -> None:
        moves = uci_moves("6k1/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        assert {"e1g1", "e1c1"} <= moves

    def test_castling_out_of_check_forbidden(self) -> None:
        moves = uci_moves("4r1k1/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        assert "e1g1" not in moves
        assert "e1c1" not in moves

    def test_queenside_castling_with_attacked_b_file_allowed(self) -> None:
        # b1 may be attacked; only the king's path must be safe.
        moves = uci_moves("1r4k1/8/8/8/8/8/8/R3K3 w Q - 0 1")
        assert "e1c1" in moves

    def test_en_passant_generated(self) -> None:
        fen = "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3"
        assert "e5f6" in uci_moves(fen)

    def test_promotion_is_single_move(self) -> None:
        moves = uci_moves("8/4P3/8/8/8/8/k7/4K3 w - - 0 1")
        assert "e7e8" in moves
        assert sum(1 for m in moves if m.startswith("e7")) == 1

    def test_gives_check(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        gen = MoveGenerator(pos)
        assert gen.gives_check(Move(parse_square("a1"), parse_square("a8")))
        assert not gen.gives_check(Move(parse_square("a1"), parse_square("a2")))
        assert pos.key() == "4k3/8/8/8/8/8/8/R3K3 w - -"
