"""
NoGo MCTS - Monte Carlo Tree Search agents for (Hollow) NoGo.

NoGo is played like Go on a 9x9 board, but capturing is forbidden: a move
that leaves its own group or any adjacent opponent group without liberties
is illegal, and passing is not allowed. The player who cannot move loses.

Usage:
    from nogo.game import Board, Move
    from nogo.mcts import MCTS
    from nogo.utils import make_rng

    board = Board()
    mcts = MCTS(rng=make_rng(7), use_rave=True)
    move = mcts.take_action(board, budget=1.0)
    move.apply(board)
"""

__version__ = "0.1.0"

from . import game
from . import mcts
from . import utils
from . import agents
from . import eval

__all__ = [
    "game",
    "mcts",
    "utils",
    "agents",
    "eval",
    "__version__",
]
