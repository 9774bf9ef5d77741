"""
Arena for self-play episodes between two agents.

Used to measure one agent against another over many games, e.g. MCTS with
RAVE against plain UCT, or MCTS against the random player.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from ..agents import Agent
from ..game import BoardGeometry, HOLLOW_9X9, PieceType
from ..utils.logging import EpisodeMetrics, Logger
from .episode import Episode
from .statistics import Statistics


@dataclass
class ArenaResult:
    """Results from an arena run, from black's perspective."""

    black_wins: int
    white_wins: int
    total_games: int

    @property
    def black_win_rate(self) -> float:
        return self.black_wins / self.total_games if self.total_games > 0 else 0.0

    @property
    def white_win_rate(self) -> float:
        return self.white_wins / self.total_games if self.total_games > 0 else 0.0


class Arena:
    """
    Plays episodes between a black and a white agent.

    Args:
        black: Agent playing black
        white: Agent playing white
        geometry: Board geometry for every episode
        logger: Optional episode logger
    """

    def __init__(
        self,
        black: Agent,
        white: Agent,
        geometry: BoardGeometry = HOLLOW_9X9,
        logger: Optional[Logger] = None,
    ):
        self.black = black
        self.white = white
        self.geometry = geometry
        self.logger = logger

    def play_episode(self, stats: Statistics) -> Episode:
        """Play one full game and record it in `stats`."""
        black, white = self.black, self.white
        black.open_episode(f"~:{white.name}")
        white.open_episode(f"{black.name}:~")

        game = stats.open_episode(f"{black.name}:{white.name}", self.geometry)
        while True:
            who = game.take_turns(black, white)
            move = who.take_action(game.state())
            if not game.apply_action(move):
                break

        win = game.last_turns(black, white)
        summary = stats.close_episode(win.name)
        black.close_episode(win.name)
        white.close_episode(win.name)

        if self.logger is not None:
            self.logger.log_episode(self._metrics(stats.step(), game))
            if summary is not None:
                self.logger.log_block(summary)
        return game

    def run(
        self,
        stats: Statistics,
        progress_callback: Callable[[int, Episode], None] = None,
    ) -> ArenaResult:
        """
        Play until `stats` has seen its total number of episodes.

        Args:
            stats: Statistics to record into
            progress_callback: Optional callback(episodes_completed, episode)

        Returns:
            ArenaResult over the episodes played by this call
        """
        black_wins = 0
        white_wins = 0
        while not stats.is_finished():
            game = self.play_episode(stats)
            if game.winner_color == PieceType.BLACK:
                black_wins += 1
            else:
                white_wins += 1
            if progress_callback:
                progress_callback(stats.step(), game)

        return ArenaResult(
            black_wins=black_wins,
            white_wins=white_wins,
            total_games=black_wins + white_wins,
        )

    def _metrics(self, index: int, game: Episode) -> EpisodeMetrics:
        return EpisodeMetrics(
            episode=index,
            black=self.black.name,
            white=self.white.name,
            winner=game.winner_color.name.lower(),
            moves=game.step(),
            duration_ms=game.time(),
            black_ms=game.time(PieceType.BLACK),
            white_ms=game.time(PieceType.WHITE),
            last_reason=game.last_result.reason if game.last_result is not None else None,
        )
