"""
Configuration management for NoGo MCTS.

Uses dataclasses for clean configuration with sensible defaults.
Supports loading from YAML files.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Optional
import yaml

from ..game import BoardGeometry
from ..mcts import BudgetPolicy, constant_budget, staged_budget


@dataclass
class BoardConfig:
    """Board configuration."""

    size: int = 9
    hollow: bool = True  # Use the 9x9 Hollow NoGo layout

    def geometry(self) -> BoardGeometry:
        if self.hollow:
            if self.size != 9:
                raise ValueError("The hollow layout is only defined for 9x9 boards")
            return BoardGeometry.hollow_nogo()
        return BoardGeometry.standard(self.size)


@dataclass
class SearchConfig:
    """MCTS configuration."""

    budget: float = 0.8  # Seconds per move
    max_iterations: Optional[int] = None
    exploration: float = 1.414
    rave: bool = False
    rave_bias: float = 0.025
    # [[until_move, seconds], ...] overriding `budget` for early moves
    budget_schedule: list = field(default_factory=list)

    def budget_policy(self) -> BudgetPolicy:
        if self.budget_schedule:
            stages = [(until, seconds) for until, seconds in self.budget_schedule]
            return staged_budget(stages, default=self.budget)
        return constant_budget(self.budget)


@dataclass
class ArenaConfig:
    """Self-play arena configuration."""

    total: int = 100  # Episodes to play
    block: int = 0  # Report every `block` episodes (0 = total)
    limit: int = 0  # Episodes kept in memory (0 = total)
    black: str = "name=mcts"
    white: str = "name=random"


@dataclass
class Config:
    """Full configuration."""

    board: BoardConfig = field(default_factory=BoardConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    arena: ArenaConfig = field(default_factory=ArenaConfig)

    log_dir: str = "runs"

    # Random seed
    seed: int = 42

    def save(self, path: str) -> None:
        """Save config to YAML file."""
        with open(path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False)

    @classmethod
    def load(cls, path: str) -> Config:
        """Load config from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        unknown = set(data) - {item.name for item in fields(cls)}
        if unknown:
            raise TypeError(f"Unknown config keys: {sorted(unknown)}")

        # Parse nested configs
        return cls(
            board=BoardConfig(**data.get("board", {})),
            search=SearchConfig(**data.get("search", {})),
            arena=ArenaConfig(**data.get("arena", {})),
            log_dir=data.get("log_dir", "runs"),
            seed=data.get("seed", 42),
        )

    def ensure_dirs(self) -> None:
        """Create output directories if they don't exist."""
        Path(self.log_dir).mkdir(parents=True, exist_ok=True)


def get_default_config() -> Config:
    """Get default configuration."""
    return Config()
