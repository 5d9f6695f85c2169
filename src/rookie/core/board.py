"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Sequence

from rookie.core.enums import Color, PieceType
from rookie.core.piece import Piece
from rookie.core.types import Square, make_square

_PIECE_TYPE_COUNT = 6
_COLOR_COUNT = 2

_BACK_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-cell board with incremental per-piece bitboards.

    Cells are indexed by :data:`~rookie.core.types.Square`. The bitboards
    and king-square cache are kept in sync by ``__setitem__`` so move
    generation never scans empty cells.
    """

    __slots__ = ("_squares", "_piece_bitboards", "_color_bitboards", "_king_squares")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color][piece_type-1] -> bitboard of occupied squares.
        self._piece_bitboards: list[list[int]] = [
            [0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)
        ]
        self._color_bitboards: list[int] = [0] * _COLOR_COUNT
        self._king_squares: list[Square | None] = [None] * _COLOR_COUNT

    @staticmethod
    def _squares_from_bitboard(bitboard: int) -> list[Square]:
        squares: list[Square] = []
        while bitboard:
            lsb = bitboard & -bitboard
            squares.append(lsb.bit_length() - 1)
            bitboard ^= lsb
        return squares

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old_piece = self._squares[sq]
        if old_piece == piece:
            return

        mask = 1 << sq

        if old_piece is not None:
            color_idx = int(old_piece.color)
            self._piece_bitboards[color_idx][old_piece.piece_type - 1] &= ~mask
            self._color_bitboards[color_idx] &= ~mask
            if (
                old_piece.piece_type == PieceType.KING
                and self._king_squares[color_idx] == sq
            ):
                self._king_squares[color_idx] = None

        self._squares[sq] = piece
        if piece is None:
            return

        color_idx = int(piece.color)
        self._piece_bitboards[color_idx][piece.piece_type - 1] |= mask
        self._color_bitboards[color_idx] |= mask
        if piece.piece_type == PieceType.KING:
            self._king_squares[color_idx] = sq

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return self._squares_from_bitboard(self.pieces_bitboard(color, piece_type))

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        return self._piece_bitboards[int(color)][piece_type - 1]

    def all_pieces_bitboard(self, color: Color) -> int:
        return self._color_bitboards[int(color)]

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return self._squares_from_bitboard(self.all_pieces_bitboard(color))

    def piece_count(self) -> int:
        """Number of pieces of both colors, kings included."""
        return (self._color_bitboards[0] | self._color_bitboards[1]).bit_count()

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        sq = self._king_squares[int(color)]
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    # -- Copying ------------------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        b._piece_bitboards = [row.copy() for row in self._piece_bitboards]
        b._color_bitboards = self._color_bitboards.copy()
        b._king_squares = self._king_squares.copy()
        return b

    # -- Factories / grid conversion ------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f, pt in enumerate(_BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[str | None]]) -> Board:
        """Build a board from 8 rows of FEN letters or ``None``.

        Row 0 is rank 8 and column 0 is the a-file, matching FEN order.
        """
        if len(grid) != 8:
            raise ValueError(f"Board grid must have 8 rows, got {len(grid)}")
        b = cls()
        for row_idx, row in enumerate(grid):
            if len(row) != 8:
                raise ValueError(
                    f"Board grid row {row_idx} must have 8 cells, got {len(row)}"
                )
            for file, cell in enumerate(row):
                if cell is None:
                    continue
                b[make_square(file, 7 - row_idx)] = Piece.from_char(cell)
        return b

    def to_grid(self) -> list[list[str | None]]:
        """Inverse of :meth:`from_grid`."""
        grid: list[list[str | None]] = []
        for rank in range(7, -1, -1):
            row: list[str | None] = []
            for file in range(8):
                piece = self._squares[make_square(file, rank)]
                row.append(str(piece) if piece is not None else None)
            grid.append(row)
        return grid

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank_idx, row in enumerate(self.to_grid()):
            cells = " ".join(cell or "." for cell in row)
            rows.append(f"{8 - rank_idx} {cells}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
