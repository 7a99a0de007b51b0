"""
roll_log.py — Append-only in-process log of dice roll records.

Every successful ``roll_dice`` call produces one ``RollRecord``; the
``RollLog`` keeps them in creation order for the lifetime of the process.
Index 0 is the first roll.  Records are never edited, removed, or
reordered, so a position handed out as ``dice:///{index}`` keeps pointing
at the same record until the process exits.

Nothing is persisted: the log disappears with the process.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

import structlog

log = structlog.get_logger(__name__)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class RollRecord:
    """One die-roll outcome.

    Fields:
      - timestamp → epoch milliseconds at creation
      - result    → the drawn face, ``1 <= result <= sides``
    """

    timestamp: int
    result: int

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "result": self.result}

    def to_json(self) -> str:
        """Pretty-printed JSON body served for the record's resource."""
        return json.dumps(self.to_dict(), indent=2)


class RollLog:
    """Ordered, append-only container of ``RollRecord`` entries.

    The only writer is ``append()``; entries cannot be removed or
    replaced.  ``get()`` is a bounds-checked lookup that
    never wraps around for negative positions.
    """

    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        self._records: List[RollRecord] = []
        self._clock = clock

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def append(self, result: int) -> RollRecord:
        """Record *result* with the current timestamp.

        Timestamps never go backwards in log order: if the clock steps
        back, the new record reuses the previous record's timestamp.

        Returns:
            The newly created record.
        """
        timestamp = self._clock()
        if self._records and timestamp < self._records[-1].timestamp:
            timestamp = self._records[-1].timestamp
        record = RollRecord(timestamp=timestamp, result=result)
        self._records.append(record)
        log.debug("roll_log.append", index=len(self._records) - 1, result=result)
        return record

    def get(self, index: int) -> Optional[RollRecord]:
        """Return the record at *index*, or None when there is none."""
        if 0 <= index < len(self._records):
            return self._records[index]
        return None

    def snapshot(self) -> List[RollRecord]:
        """A copy of the current entries, oldest first."""
        return list(self._records)

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RollRecord]:
        return iter(self.snapshot())
