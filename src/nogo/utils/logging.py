"""
Logging utilities with rich formatting.

Arena runs write one JSON line per finished episode and one per summary
block, so long runs can be inspected without re-playing them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Any

from rich.console import Console
from rich.table import Table
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    MofNCompleteColumn,
)
from rich.panel import Panel


console = Console()


@dataclass
class EpisodeMetrics:
    """Metrics for one finished episode."""

    episode: int
    black: str
    white: str
    winner: str
    moves: int
    duration_ms: int
    black_ms: int
    white_ms: int
    last_reason: Optional[str] = None  # Result code that ended the game
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()


class Logger:
    """
    Arena logger with rich output and JSON logging.

    Args:
        log_dir: Directory for the JSONL file (None keeps records in memory only)
        verbose: Whether to print to console
    """

    def __init__(self, log_dir: Optional[str] = "runs", verbose: bool = True):
        self.verbose = verbose
        self.log_file: Optional[Path] = None

        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.log_file = log_path / f"arena_{stamp}.jsonl"

        self.metrics_history: list[EpisodeMetrics] = []

    def _write(self, record: dict) -> None:
        if self.log_file is None:
            return
        with open(self.log_file, "a") as f:
            f.write(json.dumps(record) + "\n")

    def log_episode(self, metrics: EpisodeMetrics) -> None:
        """Record one finished episode."""
        self.metrics_history.append(metrics)
        self._write(asdict(metrics))

        if self.verbose:
            mark = "●" if metrics.winner == "black" else "○"
            console.print(
                f"[dim]#{metrics.episode}[/] {metrics.black} vs {metrics.white}: "
                f"{mark} {metrics.winner} after {metrics.moves} moves "
                f"({metrics.duration_ms} ms)"
            )

    def log_block(self, summary: Any) -> None:
        """Record a statistics block (see eval.statistics.BlockSummary)."""
        record = {"block": summary.index, "episodes": summary.episodes}
        record.update(
            black_win_rate=summary.black_win_rate,
            white_win_rate=summary.white_win_rate,
            avg_moves=summary.avg_moves,
            ops=summary.ops,
        )
        self._write(record)
        self.log_message(str(summary), "cyan")

    def log_message(self, message: str, style: str = "white") -> None:
        """Log a message."""
        if self.verbose:
            console.print(f"[{style}]{message}[/]")


def create_progress() -> Progress:
    """Progress bar for episode runs."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TextColumn("eta"),
        TimeRemainingColumn(),
        console=console,
        transient=False,
    )


def print_config(config: Any) -> None:
    """Print a config dataclass as a flat parameter table."""
    table = Table(title="Configuration", show_header=True)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    def add_dict(d: dict, prefix: str = "") -> None:
        for k, v in d.items():
            key = f"{prefix}{k}" if prefix else k
            if isinstance(v, dict):
                add_dict(v, f"{key}.")
            else:
                table.add_row(key, str(v))

    add_dict(asdict(config))
    console.print(table)


def print_board(board_str: str, title: str = "Board") -> None:
    """Print a NoGo board in a panel."""
    console.print(Panel(board_str, title=title, border_style="blue"))


def print_summary(summary: Any, title: Optional[str] = None) -> None:
    """Print a statistics block as a black/white table."""
    table = Table(title=title or f"Episodes {summary.index}", show_header=True)
    table.add_column("", style="cyan")
    table.add_column("All", style="white")
    table.add_column("Black", style="white")
    table.add_column("White", style="white")

    table.add_row(
        "Win %",
        f"{summary.episodes}",
        f"{summary.black_win_rate * 100:.1f}%",
        f"{summary.white_win_rate * 100:.1f}%",
    )
    table.add_row(
        "Moves",
        f"{summary.avg_moves:.3f}",
        f"{summary.avg_black_moves:.3f}",
        f"{summary.avg_white_moves:.3f}",
    )
    table.add_row(
        "Moves/s",
        f"{summary.ops:.0f}",
        f"{summary.black_ops:.0f}",
        f"{summary.white_ops:.0f}",
    )
    console.print(table)
