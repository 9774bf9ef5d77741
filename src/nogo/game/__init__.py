"""Game module - NoGo rules, geometry and moves."""

from .geometry import (
    COLUMN_LABELS,
    PASS_TOKEN,
    HOLLOW_9X9,
    STANDARD_9X9,
    BoardGeometry,
    Symmetry,
)

from .board import (
    Board,
    MoveResult,
    PieceType,
    initial_cells,
    opponent,
)

from .move import (
    COLOR_TAGS,
    Move,
    candidate_moves,
    color_from_tag,
)

__all__ = [
    "COLUMN_LABELS",
    "PASS_TOKEN",
    "HOLLOW_9X9",
    "STANDARD_9X9",
    "BoardGeometry",
    "Symmetry",
    "Board",
    "MoveResult",
    "PieceType",
    "initial_cells",
    "opponent",
    "COLOR_TAGS",
    "Move",
    "candidate_moves",
    "color_from_tag",
]
