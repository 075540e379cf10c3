"""
Pebbled hash-chain CLI entry point.

Publish a commitment, release chain elements in reverse order, and inspect
persisted traversal state.

Usage::

    python -m pebble_spec commitment --passphrase "correct horse" --length 1024
    python -m pebble_spec walk --passphrase "correct horse" --length 1024 --rounds 3 \
        --state traversal.ssz
    python -m pebble_spec walk --resume --state traversal.ssz --rounds 1
    python -m pebble_spec inspect --state traversal.ssz

Commands:
    commitment    Print the public commitment `xn` of a chain
    walk          Release the next elements, persisting state before each one
    inspect       Print a persisted traversal state as JSON

Options:
    --config      Parameter preset, "prod" or "test" (default: PEBBLE_ENV)
    -v/--verbose  Enable debug logging
    --no-color    Disable colored logging output
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from pebble_spec.config import PEBBLE_ENV
from pebble_spec.subspecs.hashchain import (
    PROD_SCHEME,
    TEST_SCHEME,
    ChainValue,
    HashChainError,
    HashChainScheme,
    HashChainTraversal,
)

logger = logging.getLogger(__name__)

SCHEMES: dict[str, HashChainScheme] = {"prod": PROD_SCHEME, "test": TEST_SCHEME}
"""Selectable presets by name."""


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        timestamp = f"{self.CYAN}{self.formatTime(record, self.datefmt)}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"
        return f"{timestamp} {levelname} {name}: {record.getMessage()}"


LOG_HANDLER_NAME = "pebble_spec.cli"
"""Name of the root handler installed by `setup_logging`."""


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the CLI with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.set_name(LOG_HANDLER_NAME)
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    # Replace the handler of an earlier call instead of stacking a second one.
    for existing in [h for h in root.handlers if h.get_name() == LOG_HANDLER_NAME]:
        root.removeHandler(existing)
    root.setLevel(level)
    root.addHandler(handler)


def resolve_seed(scheme: HashChainScheme, args: argparse.Namespace) -> ChainValue:
    """
    Turn the seed options into a chain value.

    A hex seed is used as-is; a passphrase goes through seed derivation.

    Raises:
        ValueError: If neither option is given or the hex seed is malformed.
    """
    if args.seed is not None:
        return ChainValue(args.seed)
    if args.passphrase is not None:
        return scheme.chain.derive_seed(args.passphrase.encode())
    raise ValueError("either --seed or --passphrase is required")


def run_commitment(scheme: HashChainScheme, args: argparse.Namespace) -> None:
    """Print the commitment of the chain described by the arguments."""
    seed = resolve_seed(scheme, args)
    print(scheme.commitment(seed, args.length).hex())


def run_walk(scheme: HashChainScheme, args: argparse.Namespace) -> None:
    """
    Release up to `--rounds` elements.

    With `--state`, the state is written before each value is printed, so an
    interrupted walk resumes without replaying or skipping an element.
    """
    traversal: HashChainTraversal
    if args.resume:
        if args.state is None:
            raise ValueError("--resume requires --state")
        traversal = scheme.load(args.state.read_bytes())
    else:
        traversal = scheme.initialize(resolve_seed(scheme, args), args.length)

    rounds = traversal.remaining if args.rounds is None else args.rounds
    for _ in range(rounds):
        value = scheme.next_output(traversal)
        if args.state is not None:
            args.state.write_bytes(scheme.dump(traversal))
        print(f"{traversal.round} {value.hex()}")


def run_inspect(scheme: HashChainScheme, args: argparse.Namespace) -> None:
    """Print a persisted state as JSON after checking it is consistent."""
    traversal = scheme.load(args.state.read_bytes())
    summary = traversal.state.model_dump(mode="json", by_alias=True)
    summary["remaining"] = traversal.remaining
    print(json.dumps(summary, indent=2))


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="pebble_spec",
        description="Pebbled hash-chain traversal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        choices=sorted(SCHEMES),
        default=PEBBLE_ENV,
        help=f"Parameter preset (default: {PEBBLE_ENV})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    seed_options = argparse.ArgumentParser(add_help=False)
    seed_options.add_argument("--seed", help="Hex-encoded 32-byte seed")
    seed_options.add_argument("--passphrase", help="Secret material to derive the seed from")
    seed_options.add_argument(
        "--length",
        type=int,
        default=1024,
        help="Chain length, a power of two (default: 1024)",
    )

    commitment = commands.add_parser(
        "commitment", parents=[seed_options], help="Print the chain commitment"
    )
    commitment.set_defaults(handler=run_commitment)

    walk = commands.add_parser(
        "walk", parents=[seed_options], help="Release chain elements in reverse order"
    )
    walk.add_argument("--rounds", type=int, default=None, help="Elements to release (default: all)")
    walk.add_argument("--state", type=Path, default=None, help="Path of the persisted state")
    walk.add_argument("--resume", action="store_true", help="Continue from --state")
    walk.set_defaults(handler=run_walk)

    inspect = commands.add_parser("inspect", help="Print a persisted traversal state")
    inspect.add_argument("--state", type=Path, required=True, help="Path of the persisted state")
    inspect.set_defaults(handler=run_inspect)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        args.handler(SCHEMES[args.config], args)
    except (HashChainError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
