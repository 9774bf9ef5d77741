"""
NoGo game logic.

Board representation:
- size x size grid addressed as [x][y] (see geometry.py)
- 0 = empty, 1 = black, 2 = white, 3 = hollow
- Black moves first; turns alternate after every legal placement

NoGo rules:
- Passing is never legal
- A placement that leaves its own group without liberties is suicide
- A placement that removes the last liberty of an opponent group is a take
- Both are illegal; the player who cannot place a stone loses

Illegal placements are reported through MoveResult codes, not exceptions,
and leave the board unchanged.
"""

from __future__ import annotations

from collections import deque
from enum import IntEnum
from typing import Optional, TYPE_CHECKING

import numpy as np

from .geometry import BoardGeometry, Symmetry, COLUMN_LABELS, HOLLOW_9X9

if TYPE_CHECKING:
    from .move import Move


class PieceType(IntEnum):
    EMPTY = 0
    BLACK = 1
    WHITE = 2
    HOLLOW = 3


class MoveResult(IntEnum):
    """Outcome of a placement. Only LEGAL mutates the board."""

    LEGAL = 0
    ILLEGAL_TURN = -1
    ILLEGAL_PASS = -2
    ILLEGAL_OUT_OF_RANGE = -3
    ILLEGAL_NOT_EMPTY = -4
    ILLEGAL_SUICIDE = -5
    ILLEGAL_TAKE = -6

    @property
    def reason(self) -> str:
        return self.name.lower()


def opponent(color: PieceType) -> PieceType:
    """Return the other player's color."""
    if color == PieceType.BLACK:
        return PieceType.WHITE
    if color == PieceType.WHITE:
        return PieceType.BLACK
    raise ValueError(f"{PieceType(color).name} has no opponent")


def initial_cells(geometry: BoardGeometry) -> np.ndarray:
    """Empty [x][y] grid with the hollow cells of the geometry marked."""
    cells = np.zeros((geometry.size, geometry.size), dtype=np.int8)
    for i in geometry.hollow:
        x, y = geometry.coords(i)
        cells[x, y] = PieceType.HOLLOW
    return cells


class Board:
    """
    Mutable NoGo position.

    Args:
        geometry: Board configuration (defaults to 9x9 Hollow NoGo)
        cells: Optional [x][y] grid to start from
        to_move: Color to play next
    """

    def __init__(
        self,
        geometry: BoardGeometry = HOLLOW_9X9,
        cells: Optional[np.ndarray] = None,
        to_move: PieceType = PieceType.BLACK,
    ):
        self.geometry = geometry
        if cells is None:
            cells = initial_cells(geometry)
        else:
            cells = np.ascontiguousarray(cells, dtype=np.int8)
            if cells.shape != (geometry.size, geometry.size):
                raise ValueError(f"Board must be {geometry.size}x{geometry.size}")
            if not np.array_equal(cells == PieceType.HOLLOW, initial_cells(geometry) == PieceType.HOLLOW):
                raise ValueError("Hollow cells do not match the board geometry")
            if cells.min() < PieceType.EMPTY or cells.max() > PieceType.HOLLOW:
                raise ValueError("Cells must hold empty, black, white or hollow")
        self.cells = cells
        self.to_move = PieceType(to_move)

    def copy(self) -> Board:
        return Board(self.geometry, self.cells.copy(), self.to_move)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self.geometry == other.geometry
            and self.to_move == other.to_move
            and np.array_equal(self.cells, other.cells)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"Board(size={self.geometry.size}, to_move={self.to_move.name}, stones={self.stone_count()})"

    def __getitem__(self, xy) -> PieceType:
        x, y = xy
        return PieceType(int(self.cells[x, y]))

    def at(self, position: int) -> PieceType:
        x, y = self.geometry.coords(position)
        return PieceType(int(self.cells[x, y]))

    def stone_count(self) -> int:
        """Number of stones on the board, i.e. the number of moves played."""
        return int(np.count_nonzero((self.cells == PieceType.BLACK) | (self.cells == PieceType.WHITE)))

    # ------------------------------------------------------------------
    # Rules

    def place(self, position: Optional[int], color: Optional[PieceType] = None) -> MoveResult:
        """
        Place a stone at a flat position.

        Args:
            position: Flat index, or None to pass
            color: Color to place; None plays the side to move

        Returns:
            MoveResult.LEGAL if the stone was placed, otherwise the reason
            the placement was rejected (the board is unchanged)
        """
        if color is None:
            color = self.to_move
        if color != self.to_move:
            return MoveResult.ILLEGAL_TURN
        if position is None:
            return MoveResult.ILLEGAL_PASS
        geometry = self.geometry
        if not 0 <= position < geometry.num_cells or position in geometry.hollow:
            return MoveResult.ILLEGAL_OUT_OF_RANGE

        flat = self.cells.reshape(-1)
        if flat[position] != PieceType.EMPTY:
            return MoveResult.ILLEGAL_NOT_EMPTY

        # try the stone first, roll back if it breaks a rule
        flat[position] = color
        grid = flat.tolist()
        if self._liberties(grid, position, color) == 0:
            flat[position] = PieceType.EMPTY
            return MoveResult.ILLEGAL_SUICIDE

        opp = opponent(color)
        for near in geometry.neighbors[position]:
            if grid[near] == opp and self._liberties(grid, near, opp) == 0:
                flat[position] = PieceType.EMPTY
                return MoveResult.ILLEGAL_TAKE

        self.to_move = opp
        return MoveResult.LEGAL

    def place_at(self, x: int, y: int, color: Optional[PieceType] = None) -> MoveResult:
        """Place a stone at [x][y]; coordinates off the grid are out of range."""
        if color is None:
            color = self.to_move
        if color != self.to_move:
            return MoveResult.ILLEGAL_TURN
        if not self.geometry.on_grid(x, y):
            return MoveResult.ILLEGAL_OUT_OF_RANGE
        return self.place(self.geometry.index(x, y), color)

    def check_liberty(self, position: int, color: PieceType) -> int:
        """
        Count the liberties of the group containing a position.

        Returns:
            Number of distinct empty cells adjacent to the group, or -1 if
            the cell does not hold a stone of the given color
        """
        if not 0 <= position < self.geometry.num_cells:
            return -1
        grid = self.cells.reshape(-1).tolist()
        if grid[position] != color:
            return -1
        return self._liberties(grid, position, color)

    def _liberties(self, grid: list, start: int, color: int) -> int:
        """Breadth-first walk over the group at `start` in a flat scratch grid."""
        neighbors = self.geometry.neighbors
        seen = {start}
        liberties = set()
        frontier = deque([start])
        while frontier:
            cell = frontier.popleft()
            for near in neighbors[cell]:
                value = grid[near]
                if value == PieceType.EMPTY:
                    liberties.add(near)
                elif value == color and near not in seen:
                    seen.add(near)
                    frontier.append(near)
        return len(liberties)

    def legal_moves(self, color: Optional[PieceType] = None) -> list[Move]:
        """Legal placements for a color, in canonical (ascending) order."""
        from .move import candidate_moves

        if color is None:
            color = self.to_move
        legal = []
        for move in candidate_moves(self.geometry, color):
            if move.apply(self.copy()) == MoveResult.LEGAL:
                legal.append(move)
        return legal

    # ------------------------------------------------------------------
    # Symmetries

    def transform(self, sym: Symmetry) -> Board:
        """Return a new board moved by one of the 8 symmetries."""
        return Board(self.geometry.transformed(sym), sym.apply(self.cells), self.to_move)

    def transpose(self) -> Board:
        return self.transform(Symmetry.TRANSPOSE)

    def reflect_horizontal(self) -> Board:
        return self.transform(Symmetry.REFLECT_HORIZONTAL)

    def reflect_vertical(self) -> Board:
        return self.transform(Symmetry.REFLECT_VERTICAL)

    def rotate(self, r: int = 1) -> Board:
        """Rotate clockwise by r quarter turns (negative turns counterclockwise)."""
        turns = ((r % 4) + 4) % 4
        return self.transform(
            (Symmetry.IDENTITY, Symmetry.ROTATE_90, Symmetry.ROTATE_180, Symmetry.ROTATE_270)[turns]
        )

    def rotate_right(self) -> Board:
        return self.rotate(1)

    def rotate_left(self) -> Board:
        return self.rotate(-1)

    def reverse(self) -> Board:
        return self.rotate(2)

    # ------------------------------------------------------------------
    # Display

    def render(self) -> str:
        """
        Render the board as text.

        Rows are printed from the top (highest y) down:
        - '·' = empty
        - '●' = black
        - '○' = white
        - ' ' = hollow
        """
        size = self.geometry.size
        width = 1 if size < 10 else 2
        symbols = {
            PieceType.EMPTY: "·",
            PieceType.BLACK: "●",
            PieceType.WHITE: "○",
            PieceType.HOLLOW: " ",
        }
        axis = " " * width + "".join(f" {COLUMN_LABELS[x]}" for x in range(size)) + " " * (width + 1)
        lines = [axis]
        for y in range(size - 1, -1, -1):
            row = "".join(f" {symbols[PieceType(int(self.cells[x, y]))]}" for x in range(size))
            lines.append(f"{y + 1:>{width}}{row} {y + 1:<{width}}")
        lines.append(axis)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
