"""Core rules layer: board, moves, legality and FEN with no external dependencies.

Quick start::

    from rookie.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    for move in MoveGenerator(pos).generate_legal_moves():
        with pos.applied(move):
            print(move, pos.key())
"""

from rookie.core.board import Board
from rookie.core.enums import CastlingRights, Color, MoveKind, PieceType
from rookie.core.move import Move
from rookie.core.move_generator import MoveGenerator
from rookie.core.notation import (
    STARTING_FEN,
    parse_castling,
    position_from_fen,
    position_key,
    position_to_fen,
)
from rookie.core.piece import Piece
from rookie.core.position import Position, UndoRecord
from rookie.core.rules import Rules
from rookie.core.types import (
    Square,
    center_distance,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "MoveKind",
    "PieceType",
    # Types / helpers
    "Square",
    "center_distance",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    "UndoRecord",
    # Notation
    "STARTING_FEN",
    "parse_castling",
    "position_from_fen",
    "position_key",
    "position_to_fen",
]
