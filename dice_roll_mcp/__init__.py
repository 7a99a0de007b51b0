"""
dice_roll_mcp — Dice roll MCP server package.

Provides a Model Context Protocol (MCP) server that rolls dice on request,
keeps every outcome in an append-only in-memory log, and serves that log
back as ``dice:///{index}`` resources and a ``dice_history`` prompt.
"""

__version__ = "0.1.0"

from .dice import DiceRoller, coerce_sides
from .errors import DiceServerError, RollNotFoundError, UnknownPromptError, UnknownToolError
from .roll_log import RollLog, RollRecord
from .router import DiceRouter

__all__ = [
    "DiceRoller",
    "DiceRouter",
    "DiceServerError",
    "RollLog",
    "RollNotFoundError",
    "RollRecord",
    "UnknownPromptError",
    "UnknownToolError",
    "coerce_sides",
    "__version__",
]
