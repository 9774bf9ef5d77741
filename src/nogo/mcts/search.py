"""
MCTS search implementation with UCT (optionally RAVE-blended) and random rollouts.

The search:
1. Select: descend from the root by UCT score until reaching a leaf
2. Expand: create one child per legal move of the leaf's side to move
3. Simulate: random playout from the leaf's position
4. Backup: credit the playout winner along the selection path

After the budget runs out the most visited root child is the recommended
move. The tree is discarded after every decision; nothing is carried over
to the next call.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

import numpy as np

from ..game import Board, Move, MoveResult, candidate_moves
from .node import Node
from .policy import (
    DEFAULT_EXPLORATION,
    DEFAULT_RAVE_BIAS,
    backpropagate,
    rollout,
    select_child,
)


class SearchState(Enum):
    """Lifecycle of one take_action() call."""

    IDLE = "idle"
    ROOT_INITIALIZED = "root_initialized"
    ITERATING = "iterating"
    FINISHED = "finished"


@dataclass
class SearchStats:
    """Summary of the last search, kept after the tree is gone."""

    iterations: int = 0
    elapsed: float = 0.0
    tree_size: int = 0
    root_visits: int = 0
    best_visits: int = 0

    @property
    def iterations_per_second(self) -> float:
        return self.iterations / self.elapsed if self.elapsed > 0 else 0.0


class MCTS:
    """
    Monte Carlo Tree Search for NoGo.

    Args:
        rng: Random source for shuffles, tie-breaks and playouts. It belongs
            to the caller (one agent) and is never shared between searches
            running at the same time.
        exploration: UCT exploration constant C (default 1.414)
        use_rave: Blend RAVE statistics into the selection score
        rave_bias: RAVE bias constant b (default 0.025)
        clock: Monotonic clock in seconds; injectable for tests
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        exploration: float = DEFAULT_EXPLORATION,
        use_rave: bool = False,
        rave_bias: float = DEFAULT_RAVE_BIAS,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.exploration = exploration
        self.use_rave = use_rave
        self.rave_bias = rave_bias
        self.clock = clock

        self.state = SearchState.IDLE
        self.root: Optional[Node] = None
        self.last_stats = SearchStats()

    def search(
        self,
        board: Board,
        budget: Optional[float] = None,
        max_iterations: Optional[int] = None,
    ) -> Node:
        """
        Run MCTS from the given board.

        Args:
            board: Position to search; it is copied, never mutated
            budget: Wall-clock seconds to spend
            max_iterations: Stop after this many iterations

        Returns:
            Root node with updated statistics (owned by this searcher until
            teardown())
        """
        if budget is None and max_iterations is None:
            raise ValueError("Search needs a time budget or an iteration limit")
        if self.root is not None:
            self.teardown()

        self.root = Node(board=board.copy())
        # a root with children always yields a move, however short the budget
        self.root.expand(self.rng)
        self.state = SearchState.ROOT_INITIALIZED

        start = self.clock()
        deadline = start + budget if budget is not None else None
        iterations = 0

        self.state = SearchState.ITERATING
        while True:
            if max_iterations is not None and iterations >= max_iterations:
                break
            if deadline is not None and self.clock() >= deadline:
                break
            self._simulate(self.root)
            iterations += 1

        self.state = SearchState.FINISHED
        self.last_stats = SearchStats(
            iterations=iterations,
            elapsed=self.clock() - start,
            tree_size=self.root.count_nodes(),
            root_visits=self.root.visits,
        )
        return self.root

    def _simulate(self, root: Node) -> None:
        """Run one iteration: select -> expand -> rollout -> backup."""
        node = root
        path: List[Node] = [node]

        # Selection: descend until a leaf or a terminal node
        while node.expanded and node.children:
            node = select_child(
                node,
                self.rng,
                exploration=self.exploration,
                rave_bias=self.rave_bias,
                use_rave=self.use_rave,
            )
            path.append(node)

        # Expansion on first visit
        if node.is_leaf():
            node.expand(self.rng)

        # Simulation from the leaf's own position
        result = rollout(node.board, self.rng)

        backpropagate(path, result, use_rave=self.use_rave)

    def best_move(self, root: Node) -> Move:
        """
        Most visited root child, translated back to the move that makes it.

        Candidate moves are re-enumerated in canonical order and matched to
        children by resulting board, so ties go to the lowest position.
        Returns the pass sentinel when the root has no legal move.
        """
        board = root.board
        if not root.children:
            return Move.pass_move(board.to_move, board.geometry)

        best_move: Optional[Move] = None
        best_visits = -1
        for move in candidate_moves(board.geometry, board.to_move):
            after = board.copy()
            if move.apply(after) != MoveResult.LEGAL:
                continue
            child = next((c for c in root.children if c.board == after), None)
            if child is not None and child.visits > best_visits:
                best_visits = child.visits
                best_move = move

        if best_move is None:
            return Move.pass_move(board.to_move, board.geometry)
        self.last_stats.best_visits = best_visits
        return best_move

    def teardown(self) -> None:
        """Discard the whole tree."""
        if self.root is not None:
            self.root.teardown()
        self.root = None
        self.state = SearchState.IDLE

    def take_action(
        self,
        board: Board,
        budget: Optional[float] = None,
        max_iterations: Optional[int] = None,
    ) -> Move:
        """Search, pick the recommended move and tear the tree down."""
        try:
            root = self.search(board, budget=budget, max_iterations=max_iterations)
            return self.best_move(root)
        finally:
            self.teardown()
