"""
Move representation.

A move places a stone of one color at a position, or passes. Moves are plain
values: they know nothing about any particular board until applied to one.

Text encoding:
- Position: column letter without 'I' + 1-based row, e.g. 'A1', 'J9'
- Pass: 'PASS'
- Color tag: 'B' or 'W'
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from .board import Board, MoveResult, PieceType
from .geometry import BoardGeometry, HOLLOW_9X9, PASS_TOKEN

COLOR_TAGS = {PieceType.BLACK: "B", PieceType.WHITE: "W"}


def color_from_tag(tag: str) -> PieceType:
    """Parse 'b', 'black', 'W', ... into a color."""
    token = tag.strip().lower()
    if token in ("b", "black"):
        return PieceType.BLACK
    if token in ("w", "white"):
        return PieceType.WHITE
    raise ValueError(f"Invalid color '{tag}'")


@dataclass(frozen=True)
class Move:
    """
    Place a stone of `color` at flat `position` (None = pass).

    `size` is the board edge the position refers to; it is only needed to
    turn the position into text.
    """

    position: Optional[int]
    color: PieceType
    size: int = 9

    @classmethod
    def place(cls, position: int, color: PieceType, geometry: BoardGeometry = HOLLOW_9X9) -> Move:
        return cls(position=position, color=PieceType(color), size=geometry.size)

    @classmethod
    def pass_move(cls, color: PieceType, geometry: BoardGeometry = HOLLOW_9X9) -> Move:
        """The no-move sentinel returned when no legal placement exists."""
        return cls(position=None, color=PieceType(color), size=geometry.size)

    @classmethod
    def parse(cls, text: str, color: PieceType, geometry: BoardGeometry = HOLLOW_9X9) -> Move:
        """Parse 'A1' / 'pass' for the given color."""
        return cls(position=geometry.parse(text), color=PieceType(color), size=geometry.size)

    @property
    def is_pass(self) -> bool:
        return self.position is None

    @property
    def tag(self) -> str:
        return COLOR_TAGS.get(self.color, "?")

    def apply(self, board: Board) -> MoveResult:
        """Apply to a board; only a LEGAL result mutates it."""
        return board.place(self.position, self.color)

    def encode(self) -> str:
        """Position text, e.g. 'C7' or 'PASS'."""
        if self.position is None:
            return PASS_TOKEN
        return BoardGeometry.standard(self.size).name(self.position)

    def __str__(self) -> str:
        return f"{self.tag} {self.encode()}"


@lru_cache(maxsize=None)
def _move_space(geometry: BoardGeometry, color: PieceType) -> tuple[Move, ...]:
    return tuple(Move(position=i, color=color, size=geometry.size) for i in geometry.playable)


def candidate_moves(geometry: BoardGeometry, color: PieceType) -> list[Move]:
    """
    Every placement a color could ever make on this geometry.

    The list is in canonical (ascending position) order and is a fresh copy,
    so callers may shuffle it.
    """
    return list(_move_space(geometry, PieceType(color)))
