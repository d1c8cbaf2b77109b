#!/usr/bin/env python3
"""
Minefield - Main entry point.

Usage:
    python main.py play [--width W] [--height H] [--hazards N] [--safe-opening]
    python main.py simulate [--games N] [--seed S]
"""
import argparse
import asyncio
import logging

import numpy as np

from src.minefield import (
    ConfigurationError,
    ExclusionPolicy,
    GameConfig,
    Minesweeper,
    MinesweeperEnv,
    render_ascii,
    render_status,
)

HELP = "commands: r X Y (reveal), f X Y (flag/unflag), n (new game), q (quit)"


def build_config(args: argparse.Namespace) -> GameConfig:
    """Create a game configuration from command line arguments."""
    policy = ExclusionPolicy.NEIGHBORHOOD if args.safe_opening else ExclusionPolicy.CELL
    return GameConfig(
        width=args.width,
        height=args.height,
        hazard_count=args.hazards,
        policy=policy,
    )


async def play_async(config: GameConfig) -> None:
    """Run an interactive game; the clock ticks while waiting for input."""
    with Minesweeper.from_config(config) as game:
        progress = game.query_progress()
        print(HELP)

        while True:
            print()
            print(render_ascii(progress))
            print(render_status(game.query_progress(), config.hazard_count))

            line = await asyncio.to_thread(input, "> ")
            parts = line.split()
            if not parts:
                continue
            command = parts[0].lower()

            if command == "q":
                break
            if command == "n":
                progress = game.reset()
                continue
            if command in ("r", "f") and len(parts) == 3:
                try:
                    x, y = int(parts[1]), int(parts[2])
                except ValueError:
                    print(HELP)
                    continue
                if command == "r":
                    progress = game.reveal(x, y)
                else:
                    progress = game.toggle_flag(x, y)
                if progress.status.is_terminal:
                    print(render_ascii(progress))
                    print(f"*** {progress.status.name}! *** (n for a new game)")
                continue
            print(HELP)


def play(args: argparse.Namespace) -> None:
    """Play a game in the terminal."""
    config = build_config(args)
    asyncio.run(play_async(config))


def simulate(args: argparse.Namespace) -> None:
    """Play games with random legal reveals and report the win rate."""
    config = build_config(args)
    env = MinesweeperEnv(config=config)
    rng = np.random.default_rng(args.seed)

    print(
        f"Simulating {args.games} games on {config.width}x{config.height} "
        f"with {config.hazard_count} hazards..."
    )

    wins = 0
    total_steps = 0
    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        env.reset(seed=seed)
        done = False
        while not done:
            valid = np.flatnonzero(env.get_action_mask())
            action = int(rng.choice(valid))
            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated
        total_steps += info["steps"]
        if info["game_state"] == "WON":
            wins += 1

    env.close()
    print(f"Win rate: {wins / args.games:.1%} ({wins}/{args.games})")
    print(f"Avg steps: {total_steps / args.games:.1f}")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minefield - a mine-clearing grid puzzle"
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    for name, help_text in (
        ("play", "Play in the terminal"),
        ("simulate", "Play random games and report the win rate"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--width", type=int, default=9, help="Number of columns")
        sub.add_argument("--height", type=int, default=9, help="Number of rows")
        sub.add_argument("--hazards", type=int, default=10, help="Number of hazards")
        sub.add_argument(
            "--safe-opening",
            action="store_true",
            help="Keep the neighbours of the first reveal hazard-free",
        )
        if name == "simulate":
            sub.add_argument("--games", type=int, default=100, help="Number of games")
            sub.add_argument("--seed", type=int, default=None, help="Base RNG seed")

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        if args.command == "play":
            play(args)
        elif args.command == "simulate":
            simulate(args)
        else:
            parser.print_help()
    except ConfigurationError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
