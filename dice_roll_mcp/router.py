"""
router.py — Request handlers for the dice server.

``DiceRouter`` owns the ``RollLog`` and answers the six MCP request kinds
the server supports:

  list_resources — one ``dice:///{index}`` descriptor per recorded roll.
  read_resource  — the JSON body of one recorded roll.
  list_tools     — the ``roll_dice`` tool catalog.
  call_tool      — roll a die and append the outcome to the log.
  list_prompts   — the ``dice_history`` prompt catalog.
  get_prompt     — a conversation embedding every recorded roll.

Handlers are plain synchronous functions returning ``mcp.types`` models;
the transport wiring lives in ``server.py``.  Errors are raised as the
exceptions in ``errors.py``.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

import mcp.types as types
import structlog
from pydantic import AnyUrl

from .dice import DEFAULT_SIDES, DiceRoller, coerce_sides
from .errors import RollNotFoundError, UnknownPromptError, UnknownToolError
from .roll_log import RollLog, RollRecord

log = structlog.get_logger(__name__)

URI_SCHEME = "dice"
MIME_TYPE = "application/json"

_INDEX_RE = re.compile(r"[0-9]+")


class ToolName(str, Enum):
    ROLL_DICE = "roll_dice"


class PromptName(str, Enum):
    DICE_HISTORY = "dice_history"


def roll_uri(index: int) -> str:
    return f"{URI_SCHEME}:///{index}"


def parse_roll_uri(uri: Union[str, AnyUrl]) -> Optional[int]:
    """Extract the log position from a ``dice:///{index}`` URI.

    Returns None for other schemes and for indices that are not plain
    non-negative base-10 integers.
    """
    text = str(uri)
    prefix = roll_uri("")
    if not text.startswith(prefix):
        return None
    segment = text[len(prefix):]
    if not _INDEX_RE.fullmatch(segment):
        return None
    return int(segment)


def format_timestamp(timestamp_ms: int) -> str:
    """Render an epoch-millisecond timestamp in the local time and locale."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%c")


class DiceRouter:
    """Dispatches dice server requests against a single ``RollLog``."""

    def __init__(
        self,
        roll_log: Optional[RollLog] = None,
        roller: Optional[DiceRoller] = None,
    ) -> None:
        self.roll_log = roll_log if roll_log is not None else RollLog()
        self.roller = roller if roller is not None else DiceRoller()

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def list_resources(self) -> List[types.Resource]:
        return [
            types.Resource(
                uri=roll_uri(index),
                mimeType=MIME_TYPE,
                name=f"Dice roll {index + 1}",
                description=(
                    f"Timestamp: {format_timestamp(record.timestamp)}, "
                    f"Result: {record.result}"
                ),
            )
            for index, record in enumerate(self.roll_log)
        ]

    def read_resource(self, uri: Union[str, AnyUrl]) -> types.TextResourceContents:
        """Return the serialized roll addressed by *uri*.

        Raises:
            RollNotFoundError: no roll exists at the requested position.
        """
        index = parse_roll_uri(uri)
        record = self.roll_log.get(index) if index is not None else None
        if record is None:
            requested = urlparse(str(uri)).path.lstrip("/")
            log.warning("router.read_resource.not_found", uri=str(uri))
            raise RollNotFoundError(requested)
        return _record_contents(str(uri), record)

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def list_tools(self) -> List[types.Tool]:
        return [
            types.Tool(
                name=ToolName.ROLL_DICE.value,
                description="Roll a die",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "sides": {
                            "type": "number",
                            "description": "Number of sides on the die (default 6)",
                            "default": DEFAULT_SIDES,
                        }
                    },
                },
            )
        ]

    def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> List[types.TextContent]:
        """Invoke the tool called *name*.

        Raises:
            UnknownToolError: *name* is not a tool this server offers.
        """
        try:
            tool = ToolName(name)
        except ValueError:
            log.warning("router.call_tool.unknown", name=name)
            raise UnknownToolError(name) from None

        if tool is ToolName.ROLL_DICE:
            return self.roll_dice((arguments or {}).get("sides"))
        raise UnknownToolError(name)

    def roll_dice(self, sides: Any = None) -> List[types.TextContent]:
        """Roll a die with *sides* faces and record the outcome.

        *sides* goes through ``coerce_sides``, so a missing, zero or
        non-numeric value rolls a six-sided die.
        """
        result = self.roller.roll(coerce_sides(sides))
        self.roll_log.append(result)
        return [types.TextContent(type="text", text=f"Rolled the die. Result: {result}")]

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def list_prompts(self) -> List[types.Prompt]:
        return [
            types.Prompt(
                name=PromptName.DICE_HISTORY.value,
                description="Show the dice roll history",
            )
        ]

    def get_prompt(
        self, name: str, arguments: Optional[Dict[str, str]] = None
    ) -> types.GetPromptResult:
        """Build the prompt called *name* from the current roll log.

        Raises:
            UnknownPromptError: *name* is not a prompt this server offers.
        """
        try:
            prompt = PromptName(name)
        except ValueError:
            log.warning("router.get_prompt.unknown", name=name)
            raise UnknownPromptError(name) from None

        if prompt is PromptName.DICE_HISTORY:
            return self.dice_history()
        raise UnknownPromptError(name)

    def dice_history(self) -> types.GetPromptResult:
        embedded = [
            types.PromptMessage(
                role="user",
                content=types.EmbeddedResource(
                    type="resource",
                    resource=_record_contents(roll_uri(index), record),
                ),
            )
            for index, record in enumerate(self.roll_log)
        ]
        return types.GetPromptResult(
            description="Dice roll history",
            messages=[
                _user_text("Summarize the following dice roll history:"),
                *embedded,
                _user_text("Provide a concise summary of the dice roll history above."),
            ],
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _record_contents(uri: str, record: RollRecord) -> types.TextResourceContents:
    return types.TextResourceContents(uri=uri, mimeType=MIME_TYPE, text=record.to_json())


def _user_text(text: str) -> types.PromptMessage:
    return types.PromptMessage(role="user", content=types.TextContent(type="text", text=text))
