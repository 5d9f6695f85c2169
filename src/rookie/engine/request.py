"""Search request model and its validation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color, PieceType
from rookie.core.move_generator import MoveGenerator
from rookie.core.notation import parse_castling, position_from_fen
from rookie.core.position import Position
from rookie.core.types import Square, file_of, make_square, parse_square, rank_of
from rookie.engine.search import EngineSettings

BoardGrid = Sequence[Sequence[str | None]]


class InvalidRequestError(ValueError):
    """The request cannot be searched; raised before any search work."""


@dataclass(frozen=True, slots=True)
class SearchRequest:
    """Everything a caller hands the engine for one move decision.

    ``board`` is an 8x8 grid of FEN piece letters or ``None`` with row 0
    being rank 8. Exactly one of ``settings`` and ``rating`` is normally
    given; an explicit ``settings`` bundle wins when both are.
    """

    board: BoardGrid
    side_to_move: Color = Color.WHITE
    engine_color: Color | None = None
    castling: CastlingRights | str = CastlingRights.NONE
    en_passant: Square | str | None = None
    history: tuple[str, ...] = field(default_factory=tuple)
    settings: EngineSettings | None = None
    rating: int | None = None
    seed: int | None = None

    @classmethod
    def from_fen(
        cls,
        fen: str,
        *,
        engine_color: Color | None = None,
        history: Sequence[str] = (),
        settings: EngineSettings | None = None,
        rating: int | None = None,
        seed: int | None = None,
    ) -> SearchRequest:
        try:
            pos = position_from_fen(fen)
        except ValueError as exc:
            raise InvalidRequestError(str(exc)) from exc
        return cls(
            board=pos.board.to_grid(),
            side_to_move=pos.side_to_move,
            engine_color=engine_color,
            castling=pos.castling,
            en_passant=pos.en_passant,
            history=tuple(history),
            settings=settings,
            rating=rating,
            seed=seed,
        )

    def to_position(self) -> Position:
        """Validate the request and build the root :class:`Position`."""
        if self.settings is None and self.rating is None:
            raise InvalidRequestError("Request needs either settings or a rating")
        if not isinstance(self.side_to_move, Color):
            raise InvalidRequestError(f"Bad side to move {self.side_to_move!r}")
        if self.engine_color is not None and not isinstance(self.engine_color, Color):
            raise InvalidRequestError(f"Bad engine color {self.engine_color!r}")
        if self.engine_color is not None and self.engine_color != self.side_to_move:
            raise InvalidRequestError(
                f"Engine plays {self.engine_color} but {self.side_to_move} is to move"
            )

        try:
            board = Board.from_grid(self.board)
        except (TypeError, ValueError) as exc:
            raise InvalidRequestError(f"Malformed board: {exc}") from exc
        _check_kings(board)
        _check_pawn_ranks(board)

        castling = self.castling
        if isinstance(castling, str):
            try:
                castling = parse_castling(castling)
            except ValueError as exc:
                raise InvalidRequestError(str(exc)) from exc

        en_passant = self._en_passant_square()
        if en_passant is not None:
            _check_en_passant(board, self.side_to_move, en_passant)

        position = Position(board, self.side_to_move, castling, en_passant)
        if MoveGenerator(position).is_in_check(self.side_to_move.opposite):
            raise InvalidRequestError(
                f"{self.side_to_move.opposite} is in check but not to move"
            )
        return position

    def _en_passant_square(self) -> Square | None:
        ep = self.en_passant
        if ep is None or ep == "-":
            return None
        if isinstance(ep, str):
            try:
                return parse_square(ep)
            except ValueError as exc:
                raise InvalidRequestError(f"Bad en-passant cell {ep!r}") from exc
        if not 0 <= ep < 64:
            raise InvalidRequestError(f"Bad en-passant cell {ep!r}")
        return ep


def _check_kings(board: Board) -> None:
    for color in Color:
        count = len(board.pieces(color, PieceType.KING))
        if count != 1:
            raise InvalidRequestError(
                f"Expected exactly one {color} king, found {count}"
            )


def _check_pawn_ranks(board: Board) -> None:
    for color in Color:
        for sq in board.pieces(color, PieceType.PAWN):
            if rank_of(sq) in (0, 7):
                raise InvalidRequestError(f"{color} pawn on back rank")


def _check_en_passant(board: Board, side_to_move: Color, ep: Square) -> None:
    """The target must sit behind an enemy pawn that just double-stepped."""
    expected_rank = 5 if side_to_move == Color.WHITE else 2
    if rank_of(ep) != expected_rank or not board.is_empty(ep):
        raise InvalidRequestError(f"Bad en-passant cell for {side_to_move} to move")

    pawn_rank = 4 if side_to_move == Color.WHITE else 3
    pawn = board[make_square(file_of(ep), pawn_rank)]
    if (
        pawn is None
        or pawn.piece_type != PieceType.PAWN
        or pawn.color == side_to_move
    ):
        raise InvalidRequestError("En-passant cell has no pawn to capture")
