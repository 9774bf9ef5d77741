"""
Agent contract shared by every player.

Agents are configured with a whitespace-separated list of key=value pairs,
e.g. "name=mcts role=black budget=0.5 seed=7". The same pairs can be changed
later through notify("key=value").
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..game import Board, Move, PieceType, HOLLOW_9X9, BoardGeometry
from ..utils.seed import make_rng

INVALID_NAME_CHARS = "[]():; "


def parse_args(args: str) -> dict[str, str]:
    """Parse 'k1=v1 k2=v2' into a dict; later keys win."""
    meta = {}
    for pair in args.split():
        key, sep, value = pair.partition("=")
        meta[key] = value if sep else pair
    return meta


class Agent:
    """
    Base agent.

    Args:
        args: key=value configuration string
    """

    def __init__(self, args: str = ""):
        self.meta = parse_args("name=unknown role=unknown " + args)

    def open_episode(self, flag: str = "") -> None:
        pass

    def close_episode(self, flag: str = "") -> None:
        pass

    def take_action(self, board: Board) -> Move:
        return Move.pass_move(board.to_move, board.geometry)

    def notify(self, message: str) -> None:
        """Set one property from a 'key=value' message."""
        key, sep, value = message.partition("=")
        self.meta[key] = value if sep else message

    def get_float(self, key: str, default: Optional[float] = None) -> Optional[float]:
        if key not in self.meta:
            return default
        return float(self.meta[key])

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        if key not in self.meta:
            return default
        return int(float(self.meta[key]))

    @property
    def name(self) -> str:
        return self.property("name")

    @property
    def role(self) -> str:
        return self.property("role")

    # keep below name/role: shadows the builtin property in this class body
    def property(self, key: str) -> str:
        return self.meta[key]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, role={self.role!r})"


class RandomAgent(Agent):
    """Base agent for agents with randomness; `seed=` makes it reproducible."""

    def __init__(self, args: str = ""):
        super().__init__(args)
        self.rng: np.random.Generator = make_rng(self.get_int("seed"))

    def notify(self, message: str) -> None:
        super().notify(message)
        if message.partition("=")[0] == "seed":
            self.reseed(self.get_int("seed"))

    def reseed(self, seed: Optional[int]) -> None:
        self.rng = make_rng(seed)


class Player(RandomAgent):
    """
    Agent that plays one color.

    Raises:
        ValueError: If the name contains any of '[]():; ' or the role is
            not 'black' or 'white'
    """

    def __init__(self, args: str = "", geometry: BoardGeometry = HOLLOW_9X9):
        super().__init__(args)
        if any(ch in self.name for ch in INVALID_NAME_CHARS):
            raise ValueError(f"invalid name: {self.name}")
        if self.role == "black":
            self.who = PieceType.BLACK
        elif self.role == "white":
            self.who = PieceType.WHITE
        else:
            raise ValueError(f"invalid role: {self.role}")
        self.geometry = geometry

    def pass_move(self) -> Move:
        return Move.pass_move(self.who, self.geometry)
