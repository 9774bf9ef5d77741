"""
Statistics over many episodes.

A summary line covers the last `block` episodes:

    1000   win = 53.5%|46.5%, op = 74.451 (37.493|36.958), ops = 125762 (132018|135377)

- win: black|white win rate
- op: average moves per episode, overall (black|white)
- ops: moves per second, overall (black|white)
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional

from ..game import BoardGeometry, HOLLOW_9X9, PieceType
from .episode import Episode


def _rate(count: float, millis: float) -> float:
    return count * 1000.0 / millis if millis > 0 else 0.0


@dataclass
class BlockSummary:
    """Aggregates over a block of finished episodes."""

    index: int  # Episodes opened so far
    episodes: int
    black_wins: int
    white_wins: int
    avg_moves: float
    avg_black_moves: float
    avg_white_moves: float
    ops: float
    black_ops: float
    white_ops: float

    @property
    def black_win_rate(self) -> float:
        return self.black_wins / self.episodes if self.episodes else 0.0

    @property
    def white_win_rate(self) -> float:
        return self.white_wins / self.episodes if self.episodes else 0.0

    def __str__(self) -> str:
        return (
            f"{self.index}\t"
            f"win = {self.black_win_rate * 100:g}%|{self.white_win_rate * 100:g}%, "
            f"op = {self.avg_moves:g} ({self.avg_black_moves:g}|{self.avg_white_moves:g}), "
            f"ops = {self.ops:.0f} ({self.black_ops:.0f}|{self.white_ops:.0f})"
        )


class Statistics:
    """
    Episode bookkeeping for a run.

    Args:
        total: Episodes to run
        block: Summary block size (0 = total)
        limit: Episodes kept in memory (0 = total); total >= limit >= block
    """

    def __init__(self, total: int, block: int = 0, limit: int = 0):
        if total < 1:
            raise ValueError("total must be at least 1")
        self.total = total
        self.block = block or total
        self.limit = limit or total
        if self.block > self.limit:
            raise ValueError("block must not exceed limit")
        self.count = 0
        self.data: Deque[Episode] = deque()

    def __len__(self) -> int:
        return len(self.data)

    def is_finished(self) -> bool:
        return self.count >= self.total

    def is_episode_ongoing(self) -> bool:
        return bool(self.data) and self.data[-1].is_open

    def open_episode(self, tag: str = "", geometry: BoardGeometry = HOLLOW_9X9) -> Episode:
        if len(self.data) >= self.limit:
            self.data.popleft()
        self.count += 1
        episode = Episode(geometry)
        episode.open_episode(tag)
        self.data.append(episode)
        return episode

    def close_episode(self, tag: str = "") -> Optional[BlockSummary]:
        """Close the current episode; returns a summary at each block boundary."""
        self.data[-1].close_episode(tag)
        if self.count % self.block == 0:
            return self.summary(self.block)
        return None

    def back(self) -> Episode:
        return self.data[-1]

    def step(self) -> int:
        return self.count

    def summary(self, block: Optional[int] = None) -> BlockSummary:
        """Aggregate the last `block` episodes (all kept episodes by default)."""
        num = min(len(self.data), block or len(self.data))
        recent = list(self.data)[len(self.data) - num:]

        black_wins = sum(1 for ep in recent if ep.winner_color == PieceType.BLACK)
        moves = sum(ep.step() for ep in recent)
        black_moves = sum(ep.step(PieceType.BLACK) for ep in recent)
        white_moves = sum(ep.step(PieceType.WHITE) for ep in recent)
        duration = sum(ep.time() for ep in recent)
        black_time = sum(ep.time(PieceType.BLACK) for ep in recent)
        white_time = sum(ep.time(PieceType.WHITE) for ep in recent)

        div = num or 1
        return BlockSummary(
            index=self.count,
            episodes=num,
            black_wins=black_wins,
            white_wins=num - black_wins,
            avg_moves=moves / div,
            avg_black_moves=black_moves / div,
            avg_white_moves=white_moves / div,
            ops=_rate(moves, duration),
            black_ops=_rate(black_moves, black_time),
            white_ops=_rate(white_moves, white_time),
        )
