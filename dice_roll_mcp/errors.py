"""Errors raised by the dice router.

Each one is terminal for the request that triggered it; the MCP layer
turns it into an error reply and the server keeps running.
"""

from __future__ import annotations


class DiceServerError(Exception):
    """Base exception for dice server request errors."""


class RollNotFoundError(DiceServerError, LookupError):
    """Raised when a resource URI points at a position with no roll."""

    def __init__(self, index: str) -> None:
        self.index = index
        super().__init__(f"Dice roll {index} not found")


class UnknownToolError(DiceServerError, ValueError):
    """Raised when a tool call names a tool the server does not offer."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class UnknownPromptError(DiceServerError, ValueError):
    """Raised when a prompt request names a prompt the server does not offer."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown prompt: {name}")
