"""Static position evaluation in centipawns."""

from __future__ import annotations

from rookie.core.board import Board
from rookie.core.enums import Color, PieceType
from rookie.core.move_generator import KING_OFFSETS, MoveGenerator
from rookie.core.position import Position
from rookie.core.types import Square, center_distance, file_of, make_square, rank_of
from rookie.engine.search import EngineSettings

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    # Sentinel; both kings are always on the board so it cancels out.
    PieceType.KING: 20_000,
}

MOBILITY_MOVE_VALUE = 10
DOUBLED_PAWN_PENALTY = 20
ISOLATED_PAWN_PENALTY = 15
PASSED_PAWN_RANK_BONUS = 10
SHIELD_PAWN_BONUS = 20
KING_DEFENDER_BONUS = 8
OPEN_FILE_PENALTY = 15
ENDGAME_PIECE_COUNT = 12

# Piece-square tables, written from White's point of view with rank 8 on
# the first line (as the board is usually drawn).
_PAWN_TABLE = (
    0,  0,  0,  0,  0,  0,  0,  0,
    50, 50, 50, 50, 50, 50, 50, 50,
    10, 10, 20, 30, 30, 20, 10, 10,
    5,  5, 10, 25, 25, 10,  5,  5,
    0,  0,  0, 20, 20,  0,  0,  0,
    5, -5,-10,  0,  0,-10, -5,  5,
    5, 10, 10,-20,-20, 10, 10,  5,
    0,  0,  0,  0,  0,  0,  0,  0,
)  # fmt: skip

_KNIGHT_TABLE = (
    -50,-40,-30,-30,-30,-30,-40,-50,
    -40,-20,  0,  0,  0,  0,-20,-40,
    -30,  0, 10, 15, 15, 10,  0,-30,
    -30,  5, 15, 20, 20, 15,  5,-30,
    -30,  0, 15, 20, 20, 15,  0,-30,
    -30,  5, 10, 15, 15, 10,  5,-30,
    -40,-20,  0,  5,  5,  0,-20,-40,
    -50,-40,-30,-30,-30,-30,-40,-50,
)  # fmt: skip

_BISHOP_TABLE = (
    -20,-10,-10,-10,-10,-10,-10,-20,
    -10,  0,  0,  0,  0,  0,  0,-10,
    -10,  0,  5, 10, 10,  5,  0,-10,
    -10,  5,  5, 10, 10,  5,  5,-10,
    -10,  0, 10, 10, 10, 10,  0,-10,
    -10, 10, 10, 10, 10, 10, 10,-10,
    -10,  5,  0,  0,  0,  0,  5,-10,
    -20,-10,-10,-10,-10,-10,-10,-20,
)  # fmt: skip

_KING_TABLE = (
    -30,-40,-40,-50,-50,-40,-40,-30,
    -30,-40,-40,-50,-50,-40,-40,-30,
    -30,-40,-40,-50,-50,-40,-40,-30,
    -30,-40,-40,-50,-50,-40,-40,-30,
    -20,-30,-30,-40,-40,-30,-30,-20,
    -10,-20,-20,-20,-20,-20,-20,-10,
     20, 20,  0,  0,  0,  0, 20, 20,
     20, 30, 10,  0,  0, 10, 30, 20,
)  # fmt: skip

_PIECE_SQUARE_TABLES: dict[PieceType, tuple[int, ...]] = {
    PieceType.PAWN: _PAWN_TABLE,
    PieceType.KNIGHT: _KNIGHT_TABLE,
    PieceType.BISHOP: _BISHOP_TABLE,
    PieceType.KING: _KING_TABLE,
}


def piece_square_bonus(piece_type: PieceType, color: Color, sq: Square) -> int:
    """Positional bonus for a piece, mirrored vertically for Black."""
    table = _PIECE_SQUARE_TABLES.get(piece_type)
    if table is None:
        return 0
    rank = rank_of(sq)
    if color == Color.WHITE:
        rank = 7 - rank
    return table[rank * 8 + file_of(sq)]


class Evaluator:
    """Weighted static evaluation.

    Both entry points return centipawns from the perspective of the side
    to move, as negamax expects.
    """

    __slots__ = ()

    def evaluate(self, position: Position, settings: EngineSettings) -> int:
        board = position.board
        score = float(self._material(board))

        if settings.position_weight > 0:
            score += self._piece_squares(board) * settings.position_weight
        if settings.mobility_weight > 0:
            score += (
                self._mobility(position)
                * MOBILITY_MOVE_VALUE
                * settings.mobility_weight
            )
        if settings.pawn_structure_weight > 0:
            score += self._pawn_structure(board) * settings.pawn_structure_weight
        if settings.king_safety_weight > 0:
            score += self._king_safety(board) * settings.king_safety_weight

        white_score = round(score)
        return white_score if position.side_to_move == Color.WHITE else -white_score

    def material(self, position: Position) -> int:
        """Cheap material-only evaluation, used when time is up."""
        white_score = self._material(position.board)
        return white_score if position.side_to_move == Color.WHITE else -white_score

    # -- Terms (all White-relative) -----------------------------------------

    @staticmethod
    def _material(board: Board) -> int:
        total = 0
        for piece_type, value in PIECE_VALUES.items():
            total += value * (
                board.pieces_bitboard(Color.WHITE, piece_type).bit_count()
                - board.pieces_bitboard(Color.BLACK, piece_type).bit_count()
            )
        return total

    @staticmethod
    def _piece_squares(board: Board) -> int:
        total = 0
        for piece_type in _PIECE_SQUARE_TABLES:
            for sq in board.pieces(Color.WHITE, piece_type):
                total += piece_square_bonus(piece_type, Color.WHITE, sq)
            for sq in board.pieces(Color.BLACK, piece_type):
                total -= piece_square_bonus(piece_type, Color.BLACK, sq)
        return total

    @staticmethod
    def _mobility(position: Position) -> int:
        gen = MoveGenerator(position)
        return len(gen.generate_legal_moves(Color.WHITE)) - len(
            gen.generate_legal_moves(Color.BLACK)
        )

    @staticmethod
    def _pawn_structure(board: Board) -> int:
        white = _pawn_cells(board, Color.WHITE)
        black = _pawn_cells(board, Color.BLACK)
        return _pawn_side_score(white, black, Color.WHITE) - _pawn_side_score(
            black, white, Color.BLACK
        )

    @staticmethod
    def _king_safety(board: Board) -> int:
        endgame = board.piece_count() <= ENDGAME_PIECE_COUNT
        return _king_side_score(board, Color.WHITE, endgame) - _king_side_score(
            board, Color.BLACK, endgame
        )


def _pawn_cells(board: Board, color: Color) -> list[tuple[int, int]]:
    return [(file_of(sq), rank_of(sq)) for sq in board.pieces(color, PieceType.PAWN)]


def _pawn_side_score(
    own: list[tuple[int, int]],
    enemy: list[tuple[int, int]],
    color: Color,
) -> int:
    """Pawn-structure score for *color*'s pawns, positive is good for *color*."""
    forward = 1 if color == Color.WHITE else -1
    own_files = {f for f, _ in own}
    score = 0
    for file, rank in own:
        if any(f == file and (r - rank) * forward > 0 for f, r in own):
            score -= DOUBLED_PAWN_PENALTY
        if file - 1 not in own_files and file + 1 not in own_files:
            score -= ISOLATED_PAWN_PENALTY
        blocked = any(
            abs(f - file) <= 1 and (r - rank) * forward > 0 for f, r in enemy
        )
        if not blocked:
            ranks_advanced = rank - 1 if color == Color.WHITE else 6 - rank
            score += ranks_advanced * PASSED_PAWN_RANK_BONUS
    return score


def _king_side_score(board: Board, color: Color, endgame: bool) -> int:
    """King-safety score for *color*'s king, positive is good for *color*."""
    king_sq = board.king_square(color)
    file = file_of(king_sq)
    rank = rank_of(king_sq)
    forward = 1 if color == Color.WHITE else -1
    pawn_files = {file_of(sq) for sq in board.pieces(color, PieceType.PAWN)}

    score = 0
    shield_rank = rank + forward
    if 0 <= shield_rank < 8:
        for df in (-1, 0, 1):
            if not 0 <= file + df < 8:
                continue
            piece = board[make_square(file + df, shield_rank)]
            if (
                piece is not None
                and piece.color == color
                and piece.piece_type == PieceType.PAWN
            ):
                score += SHIELD_PAWN_BONUS

    for df, dr in KING_OFFSETS:
        f, r = file + df, rank + dr
        if 0 <= f < 8 and 0 <= r < 8:
            piece = board[make_square(f, r)]
            if piece is not None and piece.color == color:
                score += KING_DEFENDER_BONUS

    distance = center_distance(king_sq)
    if endgame:
        score += (7 - distance) * 15
    else:
        score += distance * 5

    for f in (file - 1, file, file + 1):
        if 0 <= f < 8 and f not in pawn_files:
            score -= OPEN_FILE_PENALTY
    return score
