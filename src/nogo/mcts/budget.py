"""
Per-move thinking time.

A budget policy maps the move index (stones already on the board) to the
number of seconds the search may run for that move.
"""

from __future__ import annotations

from typing import Callable, Sequence, Tuple

BudgetPolicy = Callable[[int], float]


def constant_budget(seconds: float) -> BudgetPolicy:
    """Same budget for every move."""
    if seconds <= 0:
        raise ValueError("Budget must be positive")

    def policy(move_index: int) -> float:
        return seconds

    return policy


def staged_budget(stages: Sequence[Tuple[int, float]], default: float) -> BudgetPolicy:
    """
    Budget that depends on the phase of the game.

    Args:
        stages: (until_move, seconds) pairs; the first pair with
            move_index < until_move applies
        default: Budget once every stage has passed

    Example:
        staged_budget([(4, 0.3), (30, 1.2)], default=0.5) spends little on
        the opening, most in the midgame and little again in the endgame.
    """
    ordered = [(int(until), float(seconds)) for until, seconds in stages]
    for _, seconds in ordered:
        if seconds <= 0:
            raise ValueError("Budget must be positive")
    if default <= 0:
        raise ValueError("Budget must be positive")

    def policy(move_index: int) -> float:
        for until, seconds in ordered:
            if move_index < until:
                return seconds
        return default

    return policy
