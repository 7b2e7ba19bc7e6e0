"""Parsing and formatting of the counter's persisted / wire representation."""

from __future__ import annotations

from pingpong.domain.errors import MalformedState


def parse_counter_value(raw: str) -> int:
    """Parse stored counter content into a non-negative integer.

    Surrounding whitespace is ignored. An empty string is treated as a
    counter that was never written and yields 0.

    Raises:
        MalformedState: if the content is not a non-negative decimal integer.
    """
    text = raw.strip()
    if not text:
        return 0
    if not (text.isascii() and text.isdigit()):
        raise MalformedState(f"Counter content is not a non-negative integer: {text[:32]!r}")
    return int(text)


def format_pong(value: int) -> str:
    return f"pong {value}"
