"""
NoGo players.

- RandomPlayer: uniformly random legal move
- MCTSPlayer: UCT/RAVE tree search under a per-move time budget

Both return the pass sentinel when no legal move exists; the episode treats
that as the end of the game.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from ..game import Board, BoardGeometry, HOLLOW_9X9, Move, MoveResult, candidate_moves
from ..mcts import (
    DEFAULT_EXPLORATION,
    DEFAULT_RAVE_BIAS,
    MCTS,
    BudgetPolicy,
    SearchStats,
)
from .base import Agent, Player, parse_args

DEFAULT_BUDGET = 0.8


class RandomPlayer(Player):
    """Put a legal stone at random."""

    def __init__(self, args: str = "", geometry: BoardGeometry = HOLLOW_9X9):
        super().__init__("name=random role=unknown " + args, geometry)

    def take_action(self, board: Board) -> Move:
        moves = candidate_moves(board.geometry, self.who)
        self.rng.shuffle(moves)
        for move in moves:
            if move.apply(board.copy()) == MoveResult.LEGAL:
                return move
        return Move.pass_move(self.who, board.geometry)


class MCTSPlayer(Player):
    """
    Monte Carlo Tree Search player.

    Properties (constructor string or notify()):
        budget: Seconds per move; overrides budget_policy
        iterations: Iteration cap per move; without `budget` it replaces the
            clock and the budget_policy
        c: UCT exploration constant
        rave: 1 to blend RAVE statistics into selection
        rave_bias: RAVE bias constant
        seed: Random seed

    Args:
        args: key=value configuration string
        geometry: Board geometry
        budget_policy: Seconds per move as a function of the move index
        clock: Clock handed to the search (tests pass a fake one)
    """

    def __init__(
        self,
        args: str = "",
        geometry: BoardGeometry = HOLLOW_9X9,
        budget_policy: Optional[BudgetPolicy] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        super().__init__("name=mcts role=unknown " + args, geometry)
        self.budget_policy = budget_policy
        self.mcts = MCTS(rng=self.rng, clock=clock)

    def reseed(self, seed: Optional[int]) -> None:
        super().reseed(seed)
        # the search shares the agent's generator
        if hasattr(self, "mcts"):
            self.mcts.rng = self.rng

    @property
    def last_stats(self) -> SearchStats:
        return self.mcts.last_stats

    def budget_for(self, board: Board) -> Optional[float]:
        """Seconds to spend on this move, or None when only the iteration cap applies."""
        if "budget" in self.meta:
            budget = self.get_float("budget")
            if budget <= 0:
                raise ValueError(f"budget must be positive, got {budget}")
            return budget
        if "iterations" in self.meta:
            return None
        if self.budget_policy is not None:
            return self.budget_policy(board.stone_count())
        return DEFAULT_BUDGET

    def take_action(self, board: Board) -> Move:
        if board.to_move != self.who:
            return Move.pass_move(self.who, board.geometry)

        self.mcts.exploration = self.get_float("c", DEFAULT_EXPLORATION)
        self.mcts.rave_bias = self.get_float("rave_bias", DEFAULT_RAVE_BIAS)
        self.mcts.use_rave = bool(self.get_int("rave", 0))

        return self.mcts.take_action(
            board,
            budget=self.budget_for(board),
            max_iterations=self.get_int("iterations"),
        )


def create_agent(
    args: str,
    geometry: BoardGeometry = HOLLOW_9X9,
    budget_policy: Optional[BudgetPolicy] = None,
) -> Agent:
    """Build a player from its configuration string; name=mcts selects MCTS."""
    if parse_args(args).get("name") == "mcts":
        return MCTSPlayer(args, geometry=geometry, budget_policy=budget_policy)
    return RandomPlayer(args, geometry=geometry)
