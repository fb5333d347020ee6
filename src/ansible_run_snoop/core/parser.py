"""Auth log line parser.

Lines look like::

    Mar 15 23:22:13 web-01 sudo: alice : TTY=pts/0 ; PWD=/root ; USER=root ; COMMAND=/bin/sh

The syslog timestamp carries no year. The current local year is injected at
parse time, so a log spanning New Year attributes December lines to the wrong
year. This is a known limitation, not something the parser tries to guess.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime
from enum import Enum

from .models import LogEntry, Service

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^(?P<time>[A-Za-z][a-z]{2} \d{2} \d{2}:\d{2}:\d{2})")
_HOST_RE = re.compile(r"\s+(?P<host>[A-Za-z0-9-]+)")
_SERVICE_RE = re.compile(r"\s+(?P<service>[A-Za-z0-9-]+)")
_MESSAGE_RE = re.compile(r"(?:\[[0-9]+\])?:\s+(?P<message>.*)$")

_TIME_FORMAT = "%Y %b %d %H:%M:%S"


class ParseFailure(str, Enum):
    """Why a line could not be parsed."""

    INVALID_TIME = "Could not parse time"
    INVALID_HOST = "Could not parse host"
    INVALID_SERVICE = "Could not parse service"
    REGEX_ERROR = "Regex did not capture results"


class LogParseError(ValueError):
    """A single line did not match the auth log grammar."""

    def __init__(self, reason: ParseFailure, line: str) -> None:
        super().__init__(reason.value)
        self.reason = reason
        self.line = line


def _parse_time(timestamp: str, *, year: int) -> datetime:
    return datetime.strptime(f"{year} {timestamp}", _TIME_FORMAT)


def parse_line(line: str, *, year: int | None = None) -> LogEntry:
    """Parse one auth log line into a LogEntry.

    Fields are matched one after another so that the raised LogParseError
    names the first field that failed.
    """
    if year is None:
        year = datetime.now().year

    m = _TIME_RE.match(line)
    if not m:
        raise LogParseError(ParseFailure.INVALID_TIME, line)
    try:
        time = _parse_time(m.group("time"), year=year)
    except ValueError as e:
        # e.g. "Foo 01 ..." or Feb 29 outside a leap year
        raise LogParseError(ParseFailure.INVALID_TIME, line) from e
    pos = m.end()

    m = _HOST_RE.match(line, pos)
    if not m:
        raise LogParseError(ParseFailure.INVALID_HOST, line)
    host = m.group("host")
    pos = m.end()

    m = _SERVICE_RE.match(line, pos)
    if not m:
        raise LogParseError(ParseFailure.INVALID_SERVICE, line)
    try:
        service = Service.from_token(m.group("service"))
    except ValueError as e:
        raise LogParseError(ParseFailure.INVALID_SERVICE, line) from e
    pos = m.end()

    m = _MESSAGE_RE.match(line, pos)
    if not m:
        raise LogParseError(ParseFailure.REGEX_ERROR, line)

    return LogEntry(
        time=time,
        host=host,
        service=service,
        message=m.group("message"),
    )


def parse_lines(lines: Iterable[str], *, year: int | None = None) -> list[LogEntry]:
    """Parse many lines, silently dropping the ones that fail."""
    if year is None:
        year = datetime.now().year

    entries: list[LogEntry] = []
    dropped = 0
    for line in lines:
        try:
            entries.append(parse_line(line, year=year))
        except LogParseError:
            dropped += 1

    if dropped:
        logger.debug("Dropped %d unparseable lines", dropped)
    return entries
