"""Agents module."""

from .base import Agent, RandomAgent, Player, parse_args
from .players import RandomPlayer, MCTSPlayer, create_agent

__all__ = [
    "Agent",
    "RandomAgent",
    "Player",
    "parse_args",
    "RandomPlayer",
    "MCTSPlayer",
    "create_agent",
]
