"""Minimal fish history decoder used to check what the writer produced."""


def unescape_command(value: str) -> str:
    out = []
    i = 0
    while i < len(value):
        c = value[i]
        if c == "\\" and i + 1 < len(value) and value[i + 1] in "\\n":
            out.append("\\" if value[i + 1] == "\\" else "\n")
            i += 2
            continue
        out.append(c)
        i += 1
    return "".join(out)


def parse_fish_history(text: str) -> list[tuple[str, int | None]]:
    """Return (command, when) pairs; `when` is None when the record has no field."""
    records: list[list] = []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line in lines:
        if line.startswith("- cmd: "):
            records.append([unescape_command(line[len("- cmd: "):]), None])
        elif line.startswith("  when: "):
            assert records, "when: before any cmd:"
            records[-1][1] = int(line[len("  when: "):])
        else:
            raise AssertionError(f"unexpected line in fish history: {line!r}")
    return [(cmd, when) for cmd, when in records]
