"""Evaluation module."""

from .episode import Episode, MoveRecord
from .statistics import Statistics, BlockSummary
from .arena import Arena, ArenaResult

__all__ = [
    "Episode",
    "MoveRecord",
    "Statistics",
    "BlockSummary",
    "Arena",
    "ArenaResult",
]
