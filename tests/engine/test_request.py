"""Tests for request validation."""

from __future__ import annotations

import pytest

from rookie.core.enums import CastlingRights, Color
from rookie.core.notation import STARTING_FEN
from rookie.core.types import parse_square
from rookie.engine.request import InvalidRequestError, SearchRequest
from rookie.engine.search import EngineSettings


def empty_grid() -> list[list[str | None]]:
    return [[None] * 8 for _ in range(8)]


def kings_only() -> list[list[str | None]]:
    grid = empty_grid()
    grid[0][4] = "k"
    grid[7][4] = "K"
    return grid


class TestSearchRequest:
    def test_from_fen_round_trip(self) -> None:
        request = SearchRequest.from_fen(STARTING_FEN, rating=1200)
        pos = request.to_position()
        assert pos.key() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -"
        assert request.castling == CastlingRights.ALL

    def test_grid_request(self) -> None:
        request = SearchRequest(
            board=kings_only(),
            side_to_move=Color.BLACK,
            engine_color=Color.BLACK,
            castling="-",
            settings=EngineSettings(),
        )
        pos = request.to_position()
        assert pos.side_to_move == Color.BLACK
        assert pos.castling == CastlingRights.NONE

    def test_en_passant_accepted(self) -> None:
        fen = "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3"
        pos = SearchRequest.from_fen(fen, rating=1500).to_position()
        assert pos.en_passant == parse_square("f6")

    def test_history_is_kept(self) -> None:
        request = SearchRequest.from_fen(STARTING_FEN, history=["a", "b"], rating=800)
        assert request.history == ("a", "b")


class TestValidation:
    def test_needs_settings_or_rating(self) -> None:
        with pytest.raises(InvalidRequestError, match="settings or a rating"):
            SearchRequest.from_fen(STARTING_FEN).to_position()

    def test_bad_fen(self) -> None:
        with pytest.raises(InvalidRequestError):
            SearchRequest.from_fen("not a fen", rating=1000)

    def test_wrong_grid_shape(self) -> None:
        request = SearchRequest(board=[[None] * 8] * 7, rating=1000)
        with pytest.raises(InvalidRequestError, match="Malformed board"):
            request.to_position()

    def test_bad_piece_character(self) -> None:
        grid = kings_only()
        grid[3][3] = "z"
        with pytest.raises(InvalidRequestError, match="Malformed board"):
            SearchRequest(board=grid, rating=1000).to_position()

    def test_missing_king(self) -> None:
        grid = kings_only()
        grid[0][4] = None
        with pytest.raises(InvalidRequestError, match="black king"):
            SearchRequest(board=grid, rating=1000).to_position()

    def test_two_kings(self) -> None:
        grid = kings_only()
        grid[5][0] = "K"
        with pytest.raises(InvalidRequestError, match="white king, found 2"):
            SearchRequest(board=grid, rating=1000).to_position()

    def test_engine_not_to_move(self) -> None:
        request = SearchRequest.from_fen(
            STARTING_FEN, engine_color=Color.BLACK, rating=1000
        )
        with pytest.raises(InvalidRequestError, match="to move"):
            request.to_position()

    def test_side_to_move_must_be_a_color(self) -> None:
        request = SearchRequest(
            board=kings_only(), side_to_move="white", rating=1000  # type: ignore[arg-type]
        )
        with pytest.raises(InvalidRequestError, match="side to move"):
            request.to_position()

    def test_engine_color_must_be_a_color(self) -> None:
        request = SearchRequest(
            board=kings_only(), engine_color="w", rating=1000  # type: ignore[arg-type]
        )
        with pytest.raises(InvalidRequestError, match="engine color"):
            request.to_position()

    def test_pawn_on_back_rank(self) -> None:
        grid = kings_only()
        grid[7][0] = "P"
        with pytest.raises(InvalidRequestError, match="back rank"):
            SearchRequest(board=grid, rating=1000).to_position()

    def test_en_passant_without_pawn(self) -> None:
        request = SearchRequest(board=kings_only(), en_passant="d6", rating=1000)
        with pytest.raises(InvalidRequestError, match="no pawn"):
            request.to_position()

    def test_en_passant_wrong_rank(self) -> None:
        request = SearchRequest(board=kings_only(), en_passant="d3", rating=1000)
        with pytest.raises(InvalidRequestError, match="en-passant"):
            request.to_position()

    def test_en_passant_bad_name(self) -> None:
        request = SearchRequest(board=kings_only(), en_passant="z9", rating=1000)
        with pytest.raises(InvalidRequestError, match="en-passant"):
            request.to_position()

    def test_bad_castling_text(self) -> None:
        request = SearchRequest(board=kings_only(), castling="KX", rating=1000)
        with pytest.raises(InvalidRequestError, match="castling"):
            request.to_position()

    def test_side_not_to_move_in_check(self) -> None:
        # Black king attacked by the rook while white is to move.
        grid = kings_only()
        grid[3][4] = "R"
        with pytest.raises(InvalidRequestError, match="in check"):
            SearchRequest(board=grid, rating=1000).to_position()

    def test_is_a_value_error(self) -> None:
        assert issubclass(InvalidRequestError, ValueError)
