"""Complete game state (board plus metadata) with make/unmake."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color, MoveKind, PieceType
from rookie.core.move import Move
from rookie.core.piece import Piece
from rookie.core.types import Square, file_of, make_square, rank_of, square_name


@dataclass(frozen=True, slots=True)
class UndoRecord:
    """Everything needed to take back one :meth:`Position.make_move`."""

    move: Move
    kind: MoveKind
    piece: Piece
    captured: Piece | None
    capture_sq: Square
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int

    @property
    def is_capture(self) -> bool:
        return self.captured is not None


_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}

_CASTLING_CHARS: tuple[tuple[CastlingRights, str], ...] = (
    (CastlingRights.WHITE_KINGSIDE, "K"),
    (CastlingRights.WHITE_QUEENSIDE, "Q"),
    (CastlingRights.BLACK_KINGSIDE, "k"),
    (CastlingRights.BLACK_QUEENSIDE, "q"),
)


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    :meth:`make_move` mutates the position in place and returns an
    :class:`UndoRecord`; :meth:`unmake_move` consumes it. Records must be
    taken back in strict LIFO order, anything else is a corrupted search
    and raises :class:`RuntimeError`.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_undo_stack",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._undo_stack: list[UndoRecord] = []

    # ── Move inference ───────────────────────────────────────────────────

    def classify(self, move: Move) -> MoveKind:
        """Reconstruct the special-move semantics of *move* from the board."""
        piece = self.board[move.from_sq]
        if piece is None:
            return MoveKind.NORMAL

        if piece.piece_type == PieceType.PAWN:
            last_rank = 7 if piece.color == Color.WHITE else 0
            if rank_of(move.to_sq) == last_rank:
                return MoveKind.PROMOTION
            if abs(move.to_sq - move.from_sq) == 16:
                return MoveKind.DOUBLE_PAWN
            if (
                move.to_sq == self.en_passant
                and file_of(move.to_sq) != file_of(move.from_sq)
                and self.board[move.to_sq] is None
            ):
                return MoveKind.EN_PASSANT
            return MoveKind.NORMAL

        if piece.piece_type == PieceType.KING:
            file_delta = file_of(move.to_sq) - file_of(move.from_sq)
            if file_delta == 2:
                return MoveKind.CASTLE_KINGSIDE
            if file_delta == -2:
                return MoveKind.CASTLE_QUEENSIDE
        return MoveKind.NORMAL

    def is_capture(self, move: Move) -> bool:
        """Whether *move* removes an enemy piece (en passant included)."""
        if self.board[move.to_sq] is not None:
            return True
        return self.classify(move) == MoveKind.EN_PASSANT

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> UndoRecord:
        """Apply *move* and return the record that takes it back."""
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {square_name(move.from_sq)}")

        kind = self.classify(move)
        capture_sq = move.to_sq
        if kind == MoveKind.EN_PASSANT:
            # The captured pawn sits beside the origin, not on the target.
            capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
        captured = self.board[capture_sq]

        undo = UndoRecord(
            move=move,
            kind=kind,
            piece=piece,
            captured=captured,
            capture_sq=capture_sq,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
        )
        self._undo_stack.append(undo)

        board = self.board
        board[move.from_sq] = None
        if captured is not None:
            board[capture_sq] = None
        if kind == MoveKind.PROMOTION:
            board[move.to_sq] = Piece(piece.color, PieceType.QUEEN)
        else:
            board[move.to_sq] = piece

        if kind == MoveKind.CASTLE_KINGSIDE:
            r = rank_of(move.from_sq)
            board[make_square(5, r)] = board[make_square(7, r)]
            board[make_square(7, r)] = None
        elif kind == MoveKind.CASTLE_QUEENSIDE:
            r = rank_of(move.from_sq)
            board[make_square(3, r)] = board[make_square(0, r)]
            board[make_square(0, r)] = None

        if kind == MoveKind.DOUBLE_PAWN:
            self.en_passant = (move.from_sq + move.to_sq) // 2
        else:
            self.en_passant = None

        self._update_castling(move, piece)

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1
        self.side_to_move = self.side_to_move.opposite
        return undo

    def unmake_move(self, undo: UndoRecord) -> None:
        """Take back the most recent :meth:`make_move`."""
        if not self._undo_stack or self._undo_stack[-1] is not undo:
            raise RuntimeError(f"Unmake out of order for move {undo.move}")
        self._undo_stack.pop()

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        move = undo.move
        board = self.board
        board[move.to_sq] = None
        board[move.from_sq] = undo.piece
        if undo.captured is not None:
            board[undo.capture_sq] = undo.captured

        if undo.kind == MoveKind.CASTLE_KINGSIDE:
            r = rank_of(move.from_sq)
            board[make_square(7, r)] = board[make_square(5, r)]
            board[make_square(5, r)] = None
        elif undo.kind == MoveKind.CASTLE_QUEENSIDE:
            r = rank_of(move.from_sq)
            board[make_square(0, r)] = board[make_square(3, r)]
            board[make_square(3, r)] = None

        self.castling = undo.castling
        self.en_passant = undo.en_passant
        self.halfmove_clock = undo.halfmove_clock

    @contextmanager
    def applied(self, move: Move) -> Iterator[UndoRecord]:
        """Scope in which *move* is on the board; always taken back on exit."""
        undo = self.make_move(move)
        try:
            yield undo
        finally:
            self.unmake_move(undo)

    @property
    def ply_depth(self) -> int:
        """Number of moves currently made on top of the initial state."""
        return len(self._undo_stack)

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _update_castling(self, move: Move, piece: Piece) -> None:
        castling = self.castling
        if piece.piece_type == PieceType.KING:
            if piece.color == Color.WHITE:
                castling &= ~CastlingRights.WHITE_BOTH
            else:
                castling &= ~CastlingRights.BLACK_BOTH

        for sq in (move.from_sq, move.to_sq):
            corner = _ROOK_CORNERS.get(sq)
            if corner is not None:
                castling &= ~corner
        self.castling = castling

    # ── Keys / utilities ─────────────────────────────────────────────────

    def placement(self) -> str:
        """FEN piece-placement field."""
        rows: list[str] = []
        for row in self.board.to_grid():
            empty = 0
            text = ""
            for cell in row:
                if cell is None:
                    empty += 1
                    continue
                if empty:
                    text += str(empty)
                    empty = 0
                text += cell
            if empty:
                text += str(empty)
            rows.append(text)
        return "/".join(rows)

    def castling_field(self) -> str:
        text = "".join(ch for right, ch in _CASTLING_CHARS if self.castling & right)
        return text or "-"

    def key(self) -> str:
        """Canonical key: FEN without the move clocks.

        Two positions with the same key are search-equivalent; the key
        drives the transposition cache and repetition counting.
        """
        side = "w" if self.side_to_move == Color.WHITE else "b"
        ep = square_name(self.en_passant) if self.en_passant is not None else "-"
        return f"{self.placement()} {side} {self.castling_field()} {ep}"

    def copy(self) -> Position:
        """Deep copy without undo history."""
        return Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def __repr__(self) -> str:
        return f"Position({self.key()!r})"
