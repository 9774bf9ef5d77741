"""
Command-line interface for Hollow NoGo MCTS.

Commands:
- arena: Run self-play episodes between two agents
- play: Play against the MCTS player
- genmove: Run one MCTS decision and show search statistics
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import typer
from rich.console import Console

app = typer.Typer(
    name="nogo",
    help="Hollow NoGo - Monte Carlo Tree Search agents",
    no_args_is_help=True,
)

console = Console()


def _load_config(config_path: Optional[Path]):
    from .utils import Config

    if config_path and config_path.exists():
        return Config.load(str(config_path))
    return Config()


@app.command()
def arena(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML file"
    ),
    total: Optional[int] = typer.Option(None, "--total", "-n", help="Number of episodes"),
    block: Optional[int] = typer.Option(None, "--block", "-b", help="Summary block size"),
    black: Optional[str] = typer.Option(None, "--black", help="Black player args"),
    white: Optional[str] = typer.Option(None, "--white", help="White player args"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    log: bool = typer.Option(False, "--log/--no-log", help="Write a JSONL episode log"),
) -> None:
    """Run self-play episodes and print block statistics."""
    from .utils import Logger, set_seed, create_progress, print_config, print_summary
    from .game import PieceType
    from .agents import create_agent
    from .eval import Arena, Statistics

    config = _load_config(config_path)
    if total is not None:
        config.arena.total = total
    if block is not None:
        config.arena.block = block
    if black is not None:
        config.arena.black = black
    if white is not None:
        config.arena.white = white
    if seed is not None:
        config.seed = seed

    set_seed(config.seed)
    print_config(config)

    geometry = config.board.geometry()
    policy = config.search.budget_policy()
    try:
        black_agent = create_agent(
            f"seed={config.seed} {_search_args(config)} {config.arena.black} role=black",
            geometry,
            policy,
        )
        white_agent = create_agent(
            f"seed={config.seed + 1} {_search_args(config)} {config.arena.white} role=white",
            geometry,
            policy,
        )
        stats = Statistics(config.arena.total, config.arena.block, config.arena.limit)
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(code=1)

    if log:
        config.ensure_dirs()
    logger = Logger(log_dir=config.log_dir if log else None, verbose=False)
    runner = Arena(black_agent, white_agent, geometry=geometry, logger=logger)

    console.print(f"[cyan]{black_agent.name} (black) vs {white_agent.name} (white)[/]")
    with create_progress() as progress:
        task = progress.add_task("Arena [B:0 W:0]", total=config.arena.total)
        black_wins, white_wins = 0, 0

        def callback(n, game):
            nonlocal black_wins, white_wins
            if game.winner_color == PieceType.BLACK:
                black_wins += 1
            else:
                white_wins += 1
            progress.update(
                task,
                advance=1,
                description=f"Arena [B:{black_wins} W:{white_wins}]",
            )
            if n % stats.block == 0:
                print_summary(stats.summary(stats.block))

        result = runner.run(stats, progress_callback=callback)

    console.print(f"\n[bold]Results ({result.total_games} episodes):[/]")
    console.print(f"  Black wins: {result.black_wins} ({result.black_win_rate*100:.1f}%)")
    console.print(f"  White wins: {result.white_wins} ({result.white_win_rate*100:.1f}%)")
    if logger.log_file is not None:
        console.print(f"[green]Episode log: {logger.log_file}[/]")


def _search_args(config) -> str:
    """Default MCTS properties from the config; player args override them."""
    search = config.search
    parts = [f"c={search.exploration}", f"rave={int(search.rave)}", f"rave_bias={search.rave_bias}"]
    if search.max_iterations is not None:
        parts.append(f"iterations={search.max_iterations}")
    return " ".join(parts)


@app.command()
def play(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML file"
    ),
    budget: Optional[float] = typer.Option(None, "--budget", help="AI seconds per move"),
    rave: bool = typer.Option(False, "--rave/--no-rave", help="Use RAVE in the AI search"),
    human_first: bool = typer.Option(True, "--first/--second", help="Human plays black"),
) -> None:
    """Play against the MCTS player in the terminal."""
    from .game import Board, Move, MoveResult, PieceType
    from .agents import MCTSPlayer
    from .utils import print_board

    config = _load_config(config_path)
    geometry = config.board.geometry()

    human = PieceType.BLACK if human_first else PieceType.WHITE
    ai_role = "white" if human_first else "black"
    args = f"seed={config.seed} role={ai_role} rave={int(rave or config.search.rave)}"
    if budget is not None:
        args += f" budget={budget}"
    ai = MCTSPlayer(args, geometry=geometry, budget_policy=config.search.budget_policy())

    board = Board(geometry)
    console.print("\n[bold]Hollow NoGo[/]")
    console.print(f"You are {'●' if human == PieceType.BLACK else '○'}; the side that cannot move loses")
    console.print("Enter a position like 'C3'\n")

    while True:
        print_board(board.render(), title=f"Move {board.stone_count() + 1}")

        if not board.legal_moves():
            if board.to_move == human:
                console.print("[red]No legal move left. AI wins![/]")
            else:
                console.print("[green]AI has no legal move. You win![/]")
            break

        if board.to_move == human:
            while True:
                text = typer.prompt("Your move")
                try:
                    move = Move.parse(text, human, geometry)
                except ValueError:
                    console.print("[red]Enter a position like 'C3'[/]")
                    continue
                result = move.apply(board)
                if result == MoveResult.LEGAL:
                    break
                console.print(f"[red]Illegal move ({result.reason}), try again[/]")
            console.print(f"You played {move.encode()}\n")
        else:
            console.print("[cyan]AI thinking...[/]")
            move = ai.take_action(board)
            move.apply(board)
            stats = ai.last_stats
            console.print(
                f"AI played {move.encode()} "
                f"({stats.iterations} iterations, {stats.elapsed:.2f}s)\n"
            )


@app.command()
def genmove(
    moves: Optional[List[str]] = typer.Argument(None, help="Moves to play first, e.g. E5 D4"),
    budget: Optional[float] = typer.Option(None, "--budget", help="Seconds to search"),
    iterations: Optional[int] = typer.Option(None, "--iterations", "-n", help="Iteration cap"),
    rave: bool = typer.Option(False, "--rave/--no-rave", help="Blend RAVE statistics"),
    standard: bool = typer.Option(False, "--standard", help="Use a board without hollow cells"),
    size: int = typer.Option(9, "--size", help="Board size (with --standard)"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
) -> None:
    """Pick one move with MCTS and show the search statistics."""
    from rich.table import Table
    from .game import Board, BoardGeometry, Move, MoveResult
    from .mcts import MCTS
    from .utils import make_rng, print_board

    geometry = BoardGeometry.standard(size) if standard else BoardGeometry.hollow_nogo()
    board = Board(geometry)
    for text in moves or []:
        try:
            move = Move.parse(text, board.to_move, geometry)
        except ValueError as e:
            console.print(f"[red]{e}[/]")
            raise typer.Exit(code=1)
        result = move.apply(board)
        if result != MoveResult.LEGAL:
            console.print(f"[red]{move}: {result.reason}[/]")
            raise typer.Exit(code=1)

    if budget is None and iterations is None:
        budget = 1.0

    print_board(board.render(), title=f"Move {board.stone_count() + 1}")
    mcts = MCTS(rng=make_rng(seed), use_rave=rave)
    move = mcts.take_action(board, budget=budget, max_iterations=iterations)
    stats = mcts.last_stats

    table = Table(title="Search", show_header=True)
    table.add_column("Stat", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Move", str(move))
    table.add_row("Iterations", str(stats.iterations))
    table.add_row("Elapsed", f"{stats.elapsed:.3f}s")
    table.add_row("Iterations/s", f"{stats.iterations_per_second:.0f}")
    table.add_row("Tree size", str(stats.tree_size))
    table.add_row("Root visits", str(stats.root_visits))
    table.add_row("Best visits", str(stats.best_visits))
    console.print(table)


if __name__ == "__main__":
    app()
