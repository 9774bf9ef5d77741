"""
One game between two agents.

Black moves on even steps and white on odd steps. An episode ends when the
side to move returns a move the board rejects (including the pass
sentinel); the last side that moved successfully wins.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List, Optional, TypeVar

from ..game import Board, BoardGeometry, HOLLOW_9X9, Move, MoveResult, PieceType

A = TypeVar("A")


def millisec() -> int:
    return int(time.time() * 1000)


@dataclass
class MoveRecord:
    """A move that was applied, with its reward and thinking time."""

    move: Move
    reward: int
    time_ms: int


@dataclass
class Mark:
    """Open/close tag with a wall-clock timestamp (ms)."""

    tag: str = "N/A"
    when: int = 0


class Episode:
    """
    Record of one game.

    Args:
        geometry: Board geometry of the game
    """

    def __init__(self, geometry: BoardGeometry = HOLLOW_9X9):
        self.board = Board(geometry)
        self.moves: List[MoveRecord] = []
        self.opened = Mark()
        self.closed: Optional[Mark] = None
        self.last_result: Optional[MoveResult] = None
        self._turn_start = 0

    def state(self) -> Board:
        return self.board

    def open_episode(self, tag: str) -> None:
        self.opened = Mark(tag, millisec())

    def close_episode(self, tag: str) -> None:
        self.closed = Mark(tag, millisec())

    @property
    def is_open(self) -> bool:
        return self.closed is None

    def take_turns(self, black: A, white: A) -> A:
        """Return the agent to move and start its clock."""
        self._turn_start = millisec()
        return white if self.step() % 2 else black

    def last_turns(self, black: A, white: A) -> A:
        """Return the agent that moved last (the winner once the game is over)."""
        return black if self.step() % 2 else white

    def apply_action(self, move: Move) -> bool:
        """
        Apply a move to the game board.

        Returns:
            True if the move was legal and recorded
        """
        result = move.apply(self.board)
        self.last_result = result
        if result != MoveResult.LEGAL:
            return False
        self.moves.append(MoveRecord(move, int(result), millisec() - self._turn_start))
        return True

    def step(self, color: Optional[PieceType] = None) -> int:
        """Number of moves played, in total or by one color."""
        size = len(self.moves)
        if color == PieceType.BLACK:
            return size // 2 + size % 2
        if color == PieceType.WHITE:
            return size // 2
        return size

    def time(self, color: Optional[PieceType] = None) -> int:
        """Thinking time in ms of one color, or the episode duration."""
        if color == PieceType.BLACK:
            return sum(record.time_ms for record in self.moves[0::2])
        if color == PieceType.WHITE:
            return sum(record.time_ms for record in self.moves[1::2])
        if self.closed is None:
            return millisec() - self.opened.when
        return self.closed.when - self.opened.when

    def actions(self, color: Optional[PieceType] = None) -> List[Move]:
        if color == PieceType.BLACK:
            return [record.move for record in self.moves[0::2]]
        if color == PieceType.WHITE:
            return [record.move for record in self.moves[1::2]]
        return [record.move for record in self.moves]

    @property
    def winner_color(self) -> PieceType:
        """Side that moved last; with no moves at all, white wins."""
        return PieceType.BLACK if self.step() % 2 else PieceType.WHITE

    def __repr__(self) -> str:
        return f"Episode(tag={self.opened.tag!r}, moves={self.step()})"
