"""Log source interface."""

from __future__ import annotations

from typing import Protocol

from .errors import LogDecodeError


class LogSource(Protocol):
    """Anything that can hand back the raw lines of an auth log."""

    async def read(self) -> list[str]:
        """Return every line of the log, in order, without terminators."""
        ...


def decode_lines(data: bytes, *, origin: str) -> list[str]:
    """Decode UTF-8 output and split it into lines (``\\n`` or ``\\r\\n``)."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise LogDecodeError(f"Output of {origin} is not valid UTF-8 text") from e
    return split_lines(text)


def split_lines(text: str) -> list[str]:
    # str.splitlines() would also break on form feeds, \x1c and unicode separators.
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]
