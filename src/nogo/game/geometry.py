"""
Board geometry for NoGo.

A geometry is the immutable part of a board: its edge length, which cells
are hollow, and the lookup tables derived from those two facts. It is built
once and shared by every board, move list and search tree that needs it.

Indexing:
- Cells are addressed as [x][y], x = column (A, B, ...), y = row (1, 2, ...)
- The flat index of [x][y] is x * size + y
- Column letters skip 'I', so a 9x9 board runs A..H, J

Hollow cells are permanently non-playable. They are not empty, so they are
never counted as a liberty; they act as extra borders inside the board.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Optional, Tuple

import numpy as np

COLUMN_LABELS = "ABCDEFGHJKLMNOPQRST"
PASS_TOKEN = "PASS"


class Symmetry(Enum):
    """The 8 symmetries of a square board (the dihedral group D4)."""

    IDENTITY = "identity"
    ROTATE_90 = "rotate_90"  # clockwise
    ROTATE_180 = "rotate_180"
    ROTATE_270 = "rotate_270"
    REFLECT_HORIZONTAL = "reflect_horizontal"  # mirror columns (x)
    REFLECT_VERTICAL = "reflect_vertical"  # mirror rows (y)
    TRANSPOSE = "transpose"  # swap x and y
    ANTI_TRANSPOSE = "anti_transpose"

    @property
    def inverse(self) -> Symmetry:
        if self is Symmetry.ROTATE_90:
            return Symmetry.ROTATE_270
        if self is Symmetry.ROTATE_270:
            return Symmetry.ROTATE_90
        return self

    def apply(self, grid: np.ndarray) -> np.ndarray:
        """
        Transform an [x][y] grid.

        Returns a new contiguous array; the input is left untouched.
        """
        if self is Symmetry.IDENTITY:
            out = grid
        elif self is Symmetry.ROTATE_90:
            # transpose, then reflect rows
            out = grid.T[:, ::-1]
        elif self is Symmetry.ROTATE_180:
            out = grid[::-1, ::-1]
        elif self is Symmetry.ROTATE_270:
            # transpose, then reflect columns
            out = grid.T[::-1, :]
        elif self is Symmetry.REFLECT_HORIZONTAL:
            out = grid[::-1, :]
        elif self is Symmetry.REFLECT_VERTICAL:
            out = grid[:, ::-1]
        elif self is Symmetry.TRANSPOSE:
            out = grid.T
        else:
            out = grid[::-1, ::-1].T
        return np.ascontiguousarray(out)


@dataclass(frozen=True)
class BoardGeometry:
    """
    Immutable board configuration.

    Attributes:
        size: Edge length of the square board
        hollow: Flat indices of hollow (non-playable) cells
    """

    size: int = 9
    hollow: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        if not 1 <= self.size <= len(COLUMN_LABELS):
            raise ValueError(f"Board size must be 1-{len(COLUMN_LABELS)}, got {self.size}")
        if not isinstance(self.hollow, frozenset):
            object.__setattr__(self, "hollow", frozenset(self.hollow))
        for i in self.hollow:
            if not 0 <= i < self.size * self.size:
                raise ValueError(f"Hollow cell {i} is outside a {self.size}x{self.size} board")

    @classmethod
    def standard(cls, size: int = 9) -> BoardGeometry:
        """Plain board without hollow cells."""
        return cls(size=size)

    @classmethod
    def hollow_nogo(cls) -> BoardGeometry:
        """
        The 9x9 Hollow NoGo layout.

          A B C D E F G H J
        9 + + + + + + + + + 9
        8 + + + +   + + + + 8
        7 + + + +   + + + + 7
        6 + + + + + + + + + 6
        5 +     + + +     + 5
        4 + + + + + + + + + 4
        3 + + + +   + + + + 3
        2 + + + +   + + + + 2
        1 + + + + + + + + + 1
          A B C D E F G H J
        """
        size = 9
        cells = [(4, 1), (4, 2), (4, 6), (4, 7), (1, 4), (2, 4), (6, 4), (7, 4)]
        return cls(size=size, hollow=frozenset(x * size + y for x, y in cells))

    # ------------------------------------------------------------------
    # Index helpers

    @property
    def num_cells(self) -> int:
        return self.size * self.size

    def index(self, x: int, y: int) -> int:
        return x * self.size + y

    def coords(self, i: int) -> Tuple[int, int]:
        return divmod(i, self.size)

    def on_grid(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_hollow(self, i: int) -> bool:
        return i in self.hollow

    def name(self, i: Optional[int]) -> str:
        """Text name of a position, e.g. 'A1', or 'PASS' for None."""
        if i is None:
            return PASS_TOKEN
        if not 0 <= i < self.num_cells:
            return "??"
        x, y = self.coords(i)
        return f"{COLUMN_LABELS[x]}{y + 1}"

    def parse(self, text: str) -> Optional[int]:
        """
        Parse a position name.

        Returns:
            Flat index, or None for 'PASS'

        Raises:
            ValueError: If the text is not a position on this board
        """
        token = text.strip().upper()
        if token == PASS_TOKEN:
            return None
        if len(token) < 2 or token[0] not in COLUMN_LABELS or not token[1:].isdigit():
            raise ValueError(f"Invalid position '{text}'")
        x = COLUMN_LABELS.index(token[0])
        y = int(token[1:]) - 1
        if not self.on_grid(x, y):
            raise ValueError(f"Position '{text}' is off a {self.size}x{self.size} board")
        return self.index(x, y)

    # ------------------------------------------------------------------
    # Precomputed tables

    @cached_property
    def positions(self) -> Tuple[int, ...]:
        """Every flat index on the board, hollow or not."""
        return tuple(range(self.num_cells))

    @cached_property
    def playable(self) -> Tuple[int, ...]:
        """Flat indices that can ever hold a stone, ascending."""
        return tuple(i for i in self.positions if i not in self.hollow)

    @cached_property
    def neighbors(self) -> Tuple[Tuple[int, ...], ...]:
        """On-grid orthogonal neighbours of every cell (left, right, down, up)."""
        table = []
        for i in self.positions:
            x, y = self.coords(i)
            near = []
            for nx, ny in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
                if self.on_grid(nx, ny):
                    near.append(self.index(nx, ny))
            table.append(tuple(near))
        return tuple(table)

    @cached_property
    def symmetry_tables(self) -> dict:
        """
        Index permutation for each symmetry.

        For a flat cell array `flat`, `flat[table]` is the transformed array.
        """
        grid = np.arange(self.num_cells).reshape(self.size, self.size)
        return {sym: sym.apply(grid).reshape(-1) for sym in Symmetry}

    def transformed(self, sym: Symmetry) -> BoardGeometry:
        """Geometry whose hollow layout has been moved by a symmetry."""
        table = self.symmetry_tables[sym]
        hollow = frozenset(int(new) for new, old in enumerate(table) if int(old) in self.hollow)
        if hollow == self.hollow:
            return self
        return BoardGeometry(size=self.size, hollow=hollow)


HOLLOW_9X9 = BoardGeometry.hollow_nogo()
STANDARD_9X9 = BoardGeometry.standard(9)
