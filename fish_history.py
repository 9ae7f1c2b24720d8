"""
fish_history.py - Writer for fish's on-disk history format

Fish (2.0 and later) keeps its history as a YAML-like list of records:

    - cmd: git commit -m 'wip'
      when: 1700000000

`cmd` is escaped the same way fish's own writer does it: backslashes are
doubled and newlines become a literal `\\n`, so a multi-line command stays on
one physical line and fish's reader turns it back into the original text.
`when` is left out when the entry has no timestamp.
"""

from __future__ import annotations

from typing import Iterable

from history_entry import HistoryEntry


def escape_command(command: str) -> str:
    return command.replace("\\", "\\\\").replace("\n", "\\n")


def format_fish_record(entry: HistoryEntry) -> str:
    """→ Renders one entry as a fish history record, trailing newline included"""
    record = f"- cmd: {escape_command(entry.command)}\n"
    if entry.timestamp is not None:
        record += f"  when: {entry.timestamp}\n"
    return record


def render_fish_history(entries: Iterable[HistoryEntry]) -> str:
    """→ Renders entries in order; no entries gives an empty string"""
    return "".join(format_fish_record(entry) for entry in entries)
