"""MCTS module."""

from .node import Node
from .policy import (
    DEFAULT_EXPLORATION,
    DEFAULT_RAVE_BIAS,
    RolloutResult,
    backpropagate,
    rollout,
    select_child,
    uct_score,
)
from .budget import BudgetPolicy, constant_budget, staged_budget
from .search import MCTS, SearchState, SearchStats

__all__ = [
    "Node",
    "DEFAULT_EXPLORATION",
    "DEFAULT_RAVE_BIAS",
    "RolloutResult",
    "backpropagate",
    "rollout",
    "select_child",
    "uct_score",
    "BudgetPolicy",
    "constant_budget",
    "staged_budget",
    "MCTS",
    "SearchState",
    "SearchStats",
]
