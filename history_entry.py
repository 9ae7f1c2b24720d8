"""
history_entry.py - Shared data model for shell history conversion

A `HistoryEntry` is one recorded command plus its optional start time. The
readers produce them, the writers consume them, and nothing mutates them in
between. The error classes below are the only exceptions the conversion
pipeline raises; `histconvert.main()` is the one place that catches them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


# ============================================================================
# DATA STRUCTURES
# ============================================================================


@dataclass(frozen=True)
class HistoryEntry:
    """A single history entry. `timestamp` is None when the source had none."""

    command: str
    timestamp: int | None = None

    def __post_init__(self):
        if not self.command:
            raise ValueError("history entry command must not be empty")

    @property
    def is_multiline(self) -> bool:
        return "\n" in self.command


# ============================================================================
# ERRORS
# ============================================================================


class HistoryError(Exception):
    """Base exception with context.

    Attributes:
        msg: The error message
        ctx: Extra details (path, line number, ...) appended to the message
    """

    def __init__(self, msg: str, ctx: dict[str, Any] | None = None):
        super().__init__(msg)
        self.msg = msg
        self.ctx = ctx or {}

    def __str__(self) -> str:
        if self.ctx:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.ctx.items())
            return f"{self.msg} [{ctx_str}]"
        return self.msg


class HistoryIOError(HistoryError):
    """Raised when the history file cannot be read or the output cannot be written."""


class MalformedRecord(HistoryError):
    """Raised when a record violates the history file grammar."""

    def __init__(self, msg: str, lineno: int, offset: int, line: str = ""):
        super().__init__(msg, {"line": lineno, "offset": offset})
        self.lineno = lineno
        self.offset = offset
        self.line = line
