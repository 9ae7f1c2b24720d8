#!/usr/bin/env uv run
# /// script
# requires-python = ">=3.11"
# dependencies = ["rich", "pygments"]
# ///
"""
histconvert.py - Convert a zsh history file to fish history.

Reads a zsh history file (plain or EXTENDED_HISTORY), converts every entry to
a fish history record and writes the result to stdout. Diagnostics go to
stderr, so the output can be redirected straight into fish's history file.

Behavior
- Entry order is preserved; nothing is deduplicated or filtered.
- Timestamps from ": <start>:<elapsed>;" headers become `when:` fields.
  Entries without one get no `when:` line.
- Multi-line commands (backslash continuations) are kept as one entry.
- The whole file is parsed and rendered before anything is written, so a
  malformed record never leaves a truncated history on stdout.

Usage
-----
    uv run histconvert.py ~/.zsh_history >> ~/.local/share/fish/fish_history
    uv run histconvert.py -v ~/.zsh_history > fish_history
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

from pygments.lexers import BashLexer
from rich import box
from rich.console import Console, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.theme import Theme

from fish_history import render_fish_history
from history_entry import HistoryEntry, HistoryError, HistoryIOError, MalformedRecord
from zsh_history import parse_zsh_history

__version__ = "0.1.0"

# ============================================================================
# CONFIGURATION & CONSTANTS
# ============================================================================

CUSTOM_THEME = Theme({
    "title": "bold #C678DD",
    "context": "#5C6370",
    "border": "#4B5263",
    "info": "#61AFEF",
    "success": "#98C379",
    "warning": "#E5C07B",
    "error": "#E06C75",
})

# Source lines shown above and below a malformed record in verbose mode
CONTEXT_RADIUS = 2

console = Console(stderr=True, theme=CUSTOM_THEME)


def _console_print(string: RenderableType = "", **kwargs) -> None:
    """→ Safe console printing with fallback"""
    try:
        console.print(string, **kwargs)
    except Exception:
        print(string, file=sys.stderr)


# ============================================================================
# FILE I/O
# ============================================================================


def read_history_file(file_path: Path) -> bytes:
    """→ File I/O: Reads the raw history bytes; metafied bytes must survive untouched"""
    try:
        return file_path.read_bytes()
    except FileNotFoundError as e:
        raise HistoryIOError("history file not found", {"path": file_path}) from e
    except OSError as e:
        raise HistoryIOError(
            f"cannot read history file: {e.strerror or e}", {"path": file_path}
        ) from e


def write_output(text: str) -> None:
    """→ File I/O: Writes the rendered history to stdout as UTF-8, whatever the locale"""
    data = text.encode("utf-8")
    try:
        sys.stdout.flush()
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    except BrokenPipeError:
        raise
    except OSError as e:
        raise HistoryIOError(f"cannot write to stdout: {e.strerror or e}") from e


# ============================================================================
# CONVERSION
# ============================================================================


def convert(data: bytes) -> tuple[list[HistoryEntry], str]:
    """Parse zsh history bytes and render them as fish history text."""
    entries = parse_zsh_history(data)
    return entries, render_fish_history(entries)


# ============================================================================
# TERMINAL OUTPUT
# ============================================================================


def format_ts(ts: int | None) -> str:
    """Format timestamp as readable date."""
    if ts is None:
        return "—"
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M")


def render_summary(history_path: Path, entries: list[HistoryEntry]) -> Table:
    """Render conversion statistics as a Rich table."""
    timestamps = [e.timestamp for e in entries if e.timestamp is not None]

    table = Table(title="Converted History", box=box.ROUNDED, show_header=False)
    table.add_column(style="bold")
    table.add_column(justify="right")

    table.add_row("Source", escape(str(history_path)))
    table.add_row("Entries", str(len(entries)))
    table.add_row("With timestamp", str(len(timestamps)))
    table.add_row("Multi-line", str(sum(1 for e in entries if e.is_multiline)))
    table.add_row("First", format_ts(min(timestamps) if timestamps else None))
    table.add_row("Last", format_ts(max(timestamps) if timestamps else None))
    return table


def render_record_context(data: bytes, error: MalformedRecord) -> Panel:
    """Show the source lines around a malformed record, the bad line highlighted."""
    lines = data.decode("utf-8", errors="replace").split("\n")
    first = max(1, error.lineno - CONTEXT_RADIUS)
    last = min(len(lines), error.lineno + CONTEXT_RADIUS)
    syntax = Syntax(
        "\n".join(lines[first - 1 : last]),
        BashLexer(),
        theme="monokai",
        line_numbers=True,
        start_line=first,
        highlight_lines={error.lineno},
    )
    return Panel(
        syntax,
        title=f"[title]{escape(error.msg)}[/title]",
        border_style="border",
        box=box.ROUNDED,
    )


# ============================================================================
# MAIN
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="histconvert",
        description="Convert a zsh history file to fish history; fish history on stdout, diagnostics on stderr",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    ap.add_argument(
        "history_file",
        metavar="SOURCE_HISTORY_FILE",
        type=Path,
        help="zsh history file to convert (e.g. ~/.zsh_history)",
    )
    ap.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print a conversion summary, or the offending lines on a parse error, to stderr",
    )
    args = ap.parse_args(argv)

    history_path = args.history_file.expanduser()
    data = b""
    try:
        data = read_history_file(history_path)
        entries, text = convert(data)
        write_output(text)
    except BrokenPipeError:
        # Downstream consumer closed early (e.g., piped to `head`). Exit cleanly.
        try:
            sys.stdout.flush()
        except OSError:
            pass
        return 0
    except MalformedRecord as e:
        _console_print(f"[error]Error: {escape(str(history_path))}: {escape(str(e))}[/error]", soft_wrap=True)
        if args.verbose:
            _console_print(render_record_context(data, e))
        return 1
    except HistoryError as e:
        _console_print(f"[error]Error: {escape(str(e))}[/error]", soft_wrap=True)
        return 1

    if args.verbose:
        _console_print(render_summary(history_path, entries))
    return 0


if __name__ == "__main__":
    sys.exit(main())
