"""Utilities module."""

from .config import (
    Config,
    BoardConfig,
    SearchConfig,
    ArenaConfig,
    get_default_config,
)
from .seed import set_seed, make_rng
from .logging import (
    Logger,
    EpisodeMetrics,
    console,
    create_progress,
    print_config,
    print_board,
    print_summary,
)

__all__ = [
    "Config",
    "BoardConfig",
    "SearchConfig",
    "ArenaConfig",
    "get_default_config",
    "set_seed",
    "make_rng",
    "Logger",
    "EpisodeMetrics",
    "console",
    "create_progress",
    "print_config",
    "print_board",
    "print_summary",
]
