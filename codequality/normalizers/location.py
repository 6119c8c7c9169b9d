from __future__ import annotations

CR = 0x0D
LF = 0x0A


def resolve_lines(source: str | bytes, start: int | None, end: int | None) -> tuple[int, int | None]:
    """
    Convert a byte-offset span into 1-based (start_line, end_line).

    CRLF counts as one line terminator, as do a lone CR and a lone LF.
    Columns are not derived. Without both offsets the result is line 1
    with an unknown end.
    """
    if start is None or end is None:
        return 1, None

    data = source.encode("utf-8") if isinstance(source, str) else source
    stop = min(end, len(data))

    line = 1
    start_line: int | None = None
    for i in range(stop):
        if i == start:
            start_line = line
        ch = data[i]
        if ch == LF:
            line += 1
        elif ch == CR and (i + 1 >= len(data) or data[i + 1] != LF):
            line += 1

    if start_line is None:
        start_line = line
    return start_line, line
