"""High-level chess rules: check, checkmate, stalemate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rookie.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from rookie.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Draws by rule (fifty moves, insufficient material) are left to the
    caller; repetition is handled by the search from the position history.
    """

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return MoveGenerator(position).is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        gen = MoveGenerator(position)
        if not gen.is_in_check(position.side_to_move):
            return False
        return not gen.generate_legal_moves()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        gen = MoveGenerator(position)
        if gen.is_in_check(position.side_to_move):
            return False
        return not gen.generate_legal_moves()
