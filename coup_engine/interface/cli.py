"""
Command-line interface for coup-engine.

    coup-engine simulate [--players N] [--seed S] [--config PATH] [--characters ...]
    coup-engine rules [--characters ...]
    coup-engine init-config PATH
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from ..errors import EngineError
from ..simulation import run_match
from .config import DEFAULT_CONFIG, build_game_config, load_config, resolve_characters, save_config
from .renderer import console, show_catalog, show_error, show_log, show_result, show_state, THEME

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coup-engine",
        description="Rules engine for Coup-style bluffing card games",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Log engine activity (-v info, -vv debug)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    simulate = commands.add_parser("simulate", help="Play a match between random players")
    simulate.add_argument("--config", "-c", type=Path, help="YAML or JSON match config")
    simulate.add_argument("--players", "-p", type=int, help="Number of players (2-6)")
    simulate.add_argument("--seed", "-s", type=int, help="Seed for a reproducible match")
    simulate.add_argument(
        "--characters",
        nargs="+",
        metavar="NAME",
        help="Characters or sets (base, extension, promo, all) to enable",
    )
    simulate.add_argument("--max-moves", type=int, default=5000, help="Give up after this many moves")
    simulate.add_argument(
        "--pass-bias",
        type=float,
        default=0.5,
        help="Chance a random player passes when it could respond (0-1)",
    )
    simulate.add_argument("--quiet", "-q", action="store_true", help="Only print the result")
    simulate.add_argument("--save", type=Path, metavar="DIR", help="Write a markdown transcript to DIR")

    rules = commands.add_parser("rules", help="Show the character catalog")
    rules.add_argument("--characters", nargs="+", metavar="NAME", help="Limit to these characters or sets")

    init = commands.add_parser("init-config", help="Write a default match config")
    init.add_argument("path", type=Path, help="Destination (.yaml/.yml or .json)")

    return parser


def cmd_simulate(args) -> int:
    config = load_config(args.config)
    if args.players is not None:
        config["player_count"] = args.players
    if args.characters:
        config["enabled_characters"] = args.characters
    seed = args.seed if args.seed is not None else config.get("seed")

    game_config = build_game_config(config)
    transcript = run_match(
        game_config,
        seed=seed,
        max_moves=args.max_moves,
        pass_bias=args.pass_bias,
    )

    state = transcript.final_state
    if not args.quiet:
        console.print(f"[{THEME['dim']}]Seed {transcript.seed}[/{THEME['dim']}]")
        show_log(state.log)
        console.print()
        show_state(state, reveal_all=True)
    show_result(state, len(transcript.moves))

    if args.save:
        path = transcript.save(args.save)
        console.print(f"[{THEME['dim']}]Transcript saved to {path}[/{THEME['dim']}]")
    return 0 if transcript.completed else 2


def cmd_rules(args) -> int:
    enabled = resolve_characters(args.characters) if args.characters else None
    show_catalog(enabled)
    return 0


def cmd_init_config(args) -> int:
    if not save_config(DEFAULT_CONFIG.copy(), args.path):
        show_error(f"Could not write {args.path}")
        return 1
    console.print(f"Wrote {args.path}")
    return 0


COMMANDS = {
    "simulate": cmd_simulate,
    "rules": cmd_rules,
    "init-config": cmd_init_config,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    try:
        return COMMANDS[args.command](args)
    except (EngineError, ValidationError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        show_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
