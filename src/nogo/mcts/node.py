"""
MCTS Node data structure.

Each node represents one board position and stores:
- visits: simulations that passed through this node
- wins: how many of those were won by the player to move at this node
- rave_visits / rave_wins: all-moves-as-first statistics for the move that
  leads here, from the same perspective as `wins`
- children: one node per legal move, created lazily on first visit

A node owns its children exclusively. The whole tree is torn down once the
search controller has read its recommendation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from ..game import Board, Move, MoveResult, candidate_moves


@dataclass(eq=False)
class Node:
    """
    MCTS tree node.

    The board is a private snapshot; callers hand in a board they will not
    mutate afterwards (expand() always passes fresh copies).
    """

    board: Board
    move: Optional[Move] = None  # Move that led to this node

    visits: int = 0
    wins: int = 0
    rave_visits: int = 0
    rave_wins: int = 0

    children: List[Node] = field(default_factory=list)
    expanded: bool = False

    @property
    def win_rate(self) -> float:
        """Smoothed win rate for the player to move here."""
        return self.wins / (self.visits + 1)

    def is_leaf(self) -> bool:
        """Check if this node has not been expanded yet."""
        return not self.expanded

    def is_terminal(self) -> bool:
        """An expanded node without children: the player to move has lost."""
        return self.expanded and not self.children

    def expand(self, rng: np.random.Generator) -> None:
        """
        Create one child per legal move of the player to move.

        Candidate moves are shuffled first so that children with equal
        statistics are not ordered by board position.
        """
        if self.expanded:
            return

        moves = candidate_moves(self.board.geometry, self.board.to_move)
        rng.shuffle(moves)
        for move in moves:
            after = self.board.copy()
            if move.apply(after) == MoveResult.LEGAL:
                self.children.append(Node(board=after, move=move))

        self.expanded = True

    def update(self, won: bool) -> None:
        self.visits += 1
        self.wins += int(won)

    def update_rave(self, won: bool) -> None:
        self.rave_visits += 1
        self.rave_wins += int(won)

    def count_nodes(self) -> int:
        """Size of the subtree rooted here."""
        total = 0
        stack = [self]
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(node.children)
        return total

    def teardown(self) -> None:
        """
        Destroy the subtree rooted here, children before parents.

        Uses an explicit stack so deep trees do not hit the recursion limit.
        """
        stack = [(self, False)]
        while stack:
            node, visited = stack.pop()
            if visited or not node.children:
                node.children.clear()
                node.expanded = False
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in node.children)
