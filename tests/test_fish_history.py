"""Tests for the fish history writer."""

import pytest

from fish_history import escape_command, format_fish_record, render_fish_history
from history_entry import HistoryEntry
from tests.helpers import parse_fish_history


class TestEscapeCommand:
    def test_plain_text_is_unchanged(self):
        assert escape_command("git log --oneline\t-5") == "git log --oneline\t-5"

    def test_newline(self):
        assert escape_command("echo a\nb") == "echo a\\nb"

    def test_backslash(self):
        assert escape_command("echo \\n") == "echo \\\\n"

    def test_backslash_before_newline(self):
        assert escape_command("a\\\nb") == "a\\\\\\nb"


class TestFormatRecord:
    def test_without_timestamp_has_no_when(self):
        assert format_fish_record(HistoryEntry("ls -la")) == "- cmd: ls -la\n"

    def test_with_timestamp(self):
        record = format_fish_record(HistoryEntry("pwd", 1700000000))
        assert record == "- cmd: pwd\n  when: 1700000000\n"

    def test_zero_timestamp_is_written(self):
        record = format_fish_record(HistoryEntry("pwd", 0))
        assert record == "- cmd: pwd\n  when: 0\n"

    def test_multiline_command_stays_on_one_line(self):
        record = format_fish_record(HistoryEntry("for x in 1 2\ndo echo $x\ndone", 5))
        assert record.count("\n") == 2
        assert record.startswith("- cmd: for x in 1 2\\ndo echo $x\\ndone\n")


class TestRenderHistory:
    def test_empty(self):
        assert render_fish_history([]) == ""

    def test_accepts_any_iterable(self):
        text = render_fish_history(HistoryEntry(c) for c in ("a", "b"))
        assert text == "- cmd: a\n- cmd: b\n"

    def test_order_and_timestamps_are_preserved(self):
        entries = [
            HistoryEntry("third", 30),
            HistoryEntry("first"),
            HistoryEntry("second", 10),
        ]
        decoded = parse_fish_history(render_fish_history(entries))
        assert decoded == [("third", 30), ("first", None), ("second", 10)]

    @pytest.mark.parametrize(
        "command",
        ["echo a\nb", "printf '%s\\n' x", "a\\\\\nb\\", "tab\there", " leading space"],
    )
    def test_command_decodes_back(self, command):
        decoded = parse_fish_history(render_fish_history([HistoryEntry(command, 1)]))
        assert decoded == [(command, 1)]


class TestHistoryEntry:
    def test_empty_command_is_rejected(self):
        with pytest.raises(ValueError):
            HistoryEntry("")

    def test_entries_are_immutable(self):
        entry = HistoryEntry("ls")
        with pytest.raises(AttributeError):
            entry.command = "pwd"
