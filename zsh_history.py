"""
zsh_history.py - Reader for zsh's on-disk history format

Format
------
zsh writes one record per command. With EXTENDED_HISTORY the record starts
with a ": <start>:<elapsed>;" header, otherwise the record is the bare
command. Embedded newlines are written as a backslash followed by a newline,
so a physical line ending in a backslash continues onto the next one.

On top of that zsh "metafies" the raw bytes: 0x00 and 0x83-0xA2 are stored as
the meta byte 0x83 followed by the original byte XOR 0x20. This has to be
undone on the raw bytes before they are decoded as UTF-8, otherwise any
multibyte character touching that range comes out garbled.

Usage
-----
    entries = parse_zsh_history(Path("~/.zsh_history").expanduser().read_bytes())
"""

from __future__ import annotations

import re
from typing import Iterator

from history_entry import HistoryEntry, MalformedRecord

# ============================================================================
# CONFIGURATION & CONSTANTS
# ============================================================================

META = 0x83
META_XOR = 0x20
CONTINUATION = b"\\"

HISTORY_ENTRY_RE = re.compile(r"^: +(\d+):(\d+);(.*)$", re.DOTALL)

# (line number, byte offset, raw bytes) of one physical line
PhysicalLine = tuple[int, int, bytes]


# ============================================================================
# METAFICATION
# ============================================================================


def _is_meta_char(byte: int) -> bool:
    return byte == 0 or META <= byte <= 0xA2


def metafy(raw: bytes) -> bytes:
    """→ Escapes bytes the way zsh does before writing them to the history file"""
    out = bytearray()
    for byte in raw:
        if _is_meta_char(byte):
            out.append(META)
            out.append(byte ^ META_XOR)
        else:
            out.append(byte)
    return bytes(out)


def unmetafy(raw: bytes) -> bytes:
    """→ Reverses `metafy`. Raises ValueError if the last byte is a lone meta byte"""
    if META not in raw:
        return raw

    out = bytearray()
    marked = False
    for byte in raw:
        if marked:
            out.append(byte ^ META_XOR)
            marked = False
        elif byte == META:
            marked = True
        else:
            out.append(byte)

    if marked:
        raise ValueError("meta byte is not followed by an escaped byte")
    return bytes(out)


# ============================================================================
# PARSING
# ============================================================================


def _lossy(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def iter_physical_records(data: bytes) -> Iterator[list[PhysicalLine]]:
    """→ Groups physical lines into records by following continuation backslashes"""
    lines = data.split(b"\n")
    if lines[-1] == b"":
        # Terminating newline, not an empty final record
        lines.pop()

    i = 0
    offset = 0
    num_lines = len(lines)
    while i < num_lines:
        block = [(i + 1, offset, lines[i])]
        offset += len(lines[i]) + 1
        while block[-1][2].endswith(CONTINUATION):
            i += 1
            if i >= num_lines:
                lineno, line_offset, raw_line = block[-1]
                raise MalformedRecord(
                    "continuation line at end of file has no following line",
                    lineno=lineno,
                    offset=line_offset,
                    line=_lossy(raw_line),
                )
            block.append((i + 1, offset, lines[i]))
            offset += len(lines[i]) + 1
        yield block
        i += 1


def decode_record(block: list[PhysicalLine]) -> HistoryEntry | None:
    """→ Turns one record's physical lines into an entry, None for a blank record"""
    parts = []
    last = len(block) - 1
    for k, (lineno, line_offset, raw_line) in enumerate(block):
        if k < last:
            raw_line = raw_line[: -len(CONTINUATION)]
        try:
            parts.append(unmetafy(raw_line))
        except ValueError as e:
            raise MalformedRecord(
                f"invalid escape sequence: {e}",
                lineno=lineno,
                offset=line_offset + len(raw_line) - 1,
                line=_lossy(raw_line),
            ) from e

    text = _lossy(b"\n".join(parts))

    m = HISTORY_ENTRY_RE.match(text)
    if m:
        command = m.group(3)
        if not command.strip():
            lineno, line_offset, raw_line = block[0]
            raise MalformedRecord(
                "timestamp header is not followed by a command",
                lineno=lineno,
                offset=line_offset,
                line=_lossy(raw_line),
            )
        return HistoryEntry(command=command, timestamp=int(m.group(1)))

    if not text.strip():
        return None
    return HistoryEntry(command=text)


def iter_zsh_history(data: bytes) -> Iterator[HistoryEntry]:
    """Lazily parse raw zsh history bytes into entries, in file order.

    Blank records are skipped. Raises `MalformedRecord` on a dangling
    continuation, a lone meta byte, or a timestamp header without a command.
    """
    for block in iter_physical_records(data):
        entry = decode_record(block)
        if entry is not None:
            yield entry


def parse_zsh_history(data: bytes) -> list[HistoryEntry]:
    return list(iter_zsh_history(data))


# ============================================================================
# ENCODING
# ============================================================================


def format_zsh_record(entry: HistoryEntry) -> bytes:
    """→ Encodes an entry exactly as zsh's history writer would"""
    raw = metafy(entry.command.encode("utf-8"))
    raw = raw.replace(b"\n", CONTINUATION + b"\n")
    if entry.timestamp is not None:
        raw = b": %d:0;" % entry.timestamp + raw
    return raw + b"\n"
