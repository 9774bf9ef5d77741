"""
Tree and default policies for MCTS.

Selection (UCT, optionally blended with RAVE):

    win_rate      = W / (N + 1)
    rave_win_rate = W_rave / (N_rave + 1)
    beta          = N_rave / (N + N_rave + 4 * N * N_rave * b^2)
    score         = (1 - beta) * win_rate + beta * rave_win_rate
                    + C * sqrt(ln(N_parent) / (N + 1))

Unvisited children score +inf, so every child is tried once before any is
tried twice. Plain UCT is beta = 0.

Child statistics are stored from the child's side-to-move perspective, which
is the parent's opponent. The parent therefore scores with the opponent's
rate: (N - W) / (N + 1).

Rollout: both sides play uniformly random legal moves until the side to move
has none. That side loses. The result names the winning color.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from ..game import Board, Move, MoveResult, PieceType, candidate_moves, opponent
from .node import Node

DEFAULT_EXPLORATION = 1.414
DEFAULT_RAVE_BIAS = 0.025


def uct_score(
    visits: int,
    wins: int,
    parent_visits: int,
    rave_visits: int = 0,
    rave_wins: int = 0,
    exploration: float = DEFAULT_EXPLORATION,
    rave_bias: float = DEFAULT_RAVE_BIAS,
    use_rave: bool = False,
    opponent_view: bool = True,
) -> float:
    """
    Priority of one child.

    Args:
        visits, wins: Child statistics
        parent_visits: Visits of the node choosing among its children
        rave_visits, rave_wins: Child RAVE statistics
        exploration: UCT constant C
        rave_bias: RAVE bias constant b
        use_rave: Blend in RAVE statistics
        opponent_view: Statistics count wins of the child's side to move,
            so score from the other side (the parent's mover)
    """
    if visits == 0:
        return math.inf

    if opponent_view:
        win_rate = (visits - wins) / (visits + 1)
    else:
        win_rate = wins / (visits + 1)

    exploitation = win_rate
    if use_rave and rave_visits > 0:
        if opponent_view:
            rave_win_rate = (rave_visits - rave_wins) / (rave_visits + 1)
        else:
            rave_win_rate = rave_wins / (rave_visits + 1)
        beta = rave_visits / (visits + rave_visits + 4 * visits * rave_visits * rave_bias * rave_bias)
        exploitation = (1 - beta) * win_rate + beta * rave_win_rate

    exploration_term = exploration * math.sqrt(math.log(max(parent_visits, 1)) / (visits + 1))
    return exploitation + exploration_term


def select_child(
    node: Node,
    rng: np.random.Generator,
    exploration: float = DEFAULT_EXPLORATION,
    rave_bias: float = DEFAULT_RAVE_BIAS,
    use_rave: bool = False,
) -> Node:
    """Pick the child with the highest score, breaking ties uniformly at random."""
    if not node.children:
        raise ValueError("Cannot select from a node without children")

    best_score = -math.inf
    best: List[Node] = []
    for child in node.children:
        score = uct_score(
            child.visits,
            child.wins,
            node.visits,
            child.rave_visits,
            child.rave_wins,
            exploration=exploration,
            rave_bias=rave_bias,
            use_rave=use_rave,
        )
        if score > best_score:
            best_score = score
            best = [child]
        elif score == best_score:
            best.append(child)

    if len(best) == 1:
        return best[0]
    return best[int(rng.integers(len(best)))]


@dataclass
class RolloutResult:
    """Outcome of one random playout."""

    winner: PieceType
    moves: List[Move] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.moves)

    def won_by(self, color: PieceType) -> bool:
        return self.winner == color


def random_legal_move(board: Board, rng: np.random.Generator) -> Optional[Move]:
    """
    Play a uniformly random legal move for the side to move, in place.

    Returns:
        The move played, or None if the side to move has no legal move
    """
    moves = candidate_moves(board.geometry, board.to_move)
    rng.shuffle(moves)
    for move in moves:
        if move.apply(board) == MoveResult.LEGAL:
            return move
    return None


def rollout(board: Board, rng: np.random.Generator) -> RolloutResult:
    """
    Play random moves from a copy of `board` until someone cannot move.

    Board.place() leaves the board untouched on an illegal move, so moves
    are tried directly on the playout board.
    """
    playout = board.copy()
    played: List[Move] = []
    while True:
        move = random_legal_move(playout, rng)
        if move is None:
            return RolloutResult(winner=opponent(playout.to_move), moves=played)
        played.append(move)


def first_play_record(path: Sequence[Node], playout: Sequence[Move]) -> dict:
    """
    Map each position to the ply at which it was first played.

    Ply 0 is the move out of the root. Tree moves come from the nodes on the
    selection path (the root has no move), followed by the playout moves.
    """
    record = {}
    ply = 0
    for node in path[1:]:
        if node.move is not None and node.move.position not in record:
            record[node.move.position] = ply
        ply += 1
    for move in playout:
        if move.position not in record:
            record[move.position] = ply
        ply += 1
    return record


def backpropagate(
    path: Sequence[Node],
    result: RolloutResult,
    use_rave: bool = False,
) -> None:
    """
    Credit a playout to every node on the selection path.

    Each node counts a win when the winner is its side to move. With RAVE,
    every child of a path node at depth d whose position was first played at
    ply p >= d by the same color (p - d even) is credited too.
    """
    for node in path:
        node.update(result.won_by(node.board.to_move))

    if not use_rave:
        return

    record = first_play_record(path, result.moves)
    for depth, node in enumerate(path):
        for child in node.children:
            ply = record.get(child.move.position)
            if ply is None or ply < depth or (ply - depth) % 2:
                continue
            child.update_rave(result.won_by(child.board.to_move))
