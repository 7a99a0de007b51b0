"""Command-line configuration for the dice server."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional, Sequence

from . import __version__

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ServerConfig:
    log_level: str = "INFO"
    seed: Optional[int] = None


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="dice-roll-mcp",
        description="MCP server that rolls dice and serves the roll history over stdio",
    )
    ap.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="stderr log level (default: INFO)",
    )
    ap.add_argument("--seed", type=int, default=None, help="seed for reproducible rolls")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def parse_config(argv: Optional[Sequence[str]] = None) -> ServerConfig:
    args = build_parser().parse_args(argv)
    return ServerConfig(log_level=args.log_level, seed=args.seed)
