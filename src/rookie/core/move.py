"""Move value object (origin and destination only)."""

from __future__ import annotations

from dataclasses import dataclass

from rookie.core.types import Square, parse_square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """A move from one cell to another.

    Castling, en passant and promotion are not stored: :class:`Position`
    reconstructs them from the board when the move is made. Promotion is
    always to a queen.
    """

    from_sq: Square
    to_sq: Square

    def __str__(self) -> str:
        return f"{square_name(self.from_sq)}{square_name(self.to_sq)}"

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation (without promotion suffix)."""
        return str(self)

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse ``e2e4``; a trailing ``q`` promotion suffix is accepted."""
        if len(text) == 5 and text[4] == "q":
            text = text[:4]
        if len(text) != 4:
            raise ValueError(f"Invalid UCI move: {text!r}")
        return cls(parse_square(text[:2]), parse_square(text[2:]))
