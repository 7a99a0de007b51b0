"""
server.py — Dice roll MCP server entrypoint.

Exposes one tool, one prompt, and a resource per recorded roll:

  roll_dice     (tool)     — Roll a die (``sides`` defaults to 6) and record it.
  dice:///{n}   (resource) — The n-th recorded roll as JSON, oldest first.
  dice_history  (prompt)   — Ask the model to summarize every recorded roll.

The handlers below are thin async shims over ``DiceRouter``; all request
semantics live in ``router.py``.  The roll history is kept in memory only
and is lost when the process exits.

Usage:
    python -m dice_roll_mcp                   # stdio transport
    dice-roll-mcp --seed 42 --log-level DEBUG # via installed entry-point
"""

from __future__ import annotations

import asyncio
import locale
import sys
from typing import Any, Dict, List, Optional, Sequence

import mcp.types as types
import structlog
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from . import __version__
from .config import ServerConfig, parse_config
from .dice import DiceRoller
from .logging import setup_logging
from .router import DiceRouter

log = structlog.get_logger(__name__)

SERVER_NAME = "dice-roll-mcp"

# ---------------------------------------------------------------------------
# MCP server instance
# ---------------------------------------------------------------------------
server = Server(SERVER_NAME, version=__version__)

# Router shared by every request for the lifetime of the process.
# Replaced by ``configure()`` at startup.
_router = DiceRouter()


def configure(config: ServerConfig) -> DiceRouter:
    """Install a fresh router built from *config* and return it."""
    global _router
    _router = DiceRouter(roller=DiceRoller(seed=config.seed))
    return _router


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------
@server.list_resources()
async def list_resources() -> List[types.Resource]:
    """List every recorded roll as a ``dice:///{index}`` resource."""
    return _router.list_resources()


@server.read_resource()
async def read_resource(uri: AnyUrl) -> List[ReadResourceContents]:
    """Read one recorded roll as pretty-printed JSON."""
    contents = _router.read_resource(uri)
    return [ReadResourceContents(content=contents.text, mime_type=contents.mimeType)]


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------
@server.list_tools()
async def list_tools() -> List[types.Tool]:
    return _router.list_tools()


# Schema validation is off: ``sides`` is coerced, never rejected.
@server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
    """Run a tool; only ``roll_dice`` exists."""
    return _router.call_tool(name, arguments)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------
@server.list_prompts()
async def list_prompts() -> List[types.Prompt]:
    return _router.list_prompts()


@server.get_prompt()
async def get_prompt(
    name: str, arguments: Optional[Dict[str, str]]
) -> types.GetPromptResult:
    """Render a prompt; only ``dice_history`` exists."""
    return _router.get_prompt(name, arguments)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
async def serve() -> None:
    """Serve requests over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        log.info("server.start", name=SERVER_NAME, version=__version__)
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
    log.info("server.stop", rolls=len(_router.roll_log))


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the MCP server over stdio."""
    config = parse_config(argv)
    setup_logging(config.log_level)
    # Resource descriptions render timestamps in the user's locale.
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as exc:
        log.warning("server.locale.unsupported", error=str(exc))
    configure(config)
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as exc:
        log.error("server.error", exc_info=True)
        print(f"{SERVER_NAME}: server error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
