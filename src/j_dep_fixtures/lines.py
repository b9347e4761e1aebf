"""Line handling shared by the fixture readers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


COMMENT_CHAR = "#"

NumberedLine = tuple[int, str]


def strip_comment(line: str) -> str:
    """Cut everything from the first `#` and trailing whitespace."""
    idx = line.find(COMMENT_CHAR)
    if idx != -1:
        line = line[:idx]
    return line.rstrip()


def numbered_lines(lines: Iterable[str]) -> Iterator[NumberedLine]:
    """Yield `(line_number, comment-stripped line)` pairs, blank lines included."""
    for number, line in enumerate(lines, start=1):
        yield number, strip_comment(line.rstrip("\r\n"))
