from __future__ import annotations

from datetime import datetime

import pytest

from ansible_run_snoop.core.models import Service
from ansible_run_snoop.core.parser import LogParseError, ParseFailure, parse_line, parse_lines

SUDO_LINE = (
    "Jan 01 00:00:00 host sudo: user : TTY=pts/0 ; PWD=/home/user ; USER=root ; COMMAND=/bin/bash"
)


def test_parse_line_injects_current_year() -> None:
    current_year = datetime.now().year

    entry = parse_line(SUDO_LINE)
    assert entry.time == datetime(current_year, 1, 1, 0, 0, 0)

    entry = parse_line(
        "Mar 15 23:22:13 host sudo: user : TTY=pts/0 ; PWD=/home/user ; USER=root ; COMMAND=/bin/bash"
    )
    assert entry.time == datetime(current_year, 3, 15, 23, 22, 13)


def test_parse_line_explicit_year() -> None:
    entry = parse_line("Feb 29 12:00:00 host sudo: x", year=2024)
    assert entry.time == datetime(2024, 2, 29, 12, 0, 0)


def test_parse_line_fields() -> None:
    entry = parse_line(SUDO_LINE, year=2025)
    assert entry.host == "host"
    assert entry.service is Service.SUDO
    assert entry.message == "user : TTY=pts/0 ; PWD=/home/user ; USER=root ; COMMAND=/bin/bash"


def test_parse_line_discards_pid() -> None:
    entry = parse_line("Jan 01 00:00:00 web-01 sshd[1234]: Accepted publickey for alice", year=2025)
    assert entry.host == "web-01"
    assert entry.service is Service.SSHD
    assert entry.message == "Accepted publickey for alice"


@pytest.mark.parametrize("token", ["SSHD", "sshd", "Sshd", "cron", "CRON", "Sudo"])
def test_parse_line_service_case_insensitive(token: str) -> None:
    entry = parse_line(f"Jan 01 00:00:00 host {token}: msg", year=2025)
    assert entry.service is Service.from_token(token)


@pytest.mark.parametrize(
    "line",
    [
        "Jan 01 00:00:00 host unsupported: user : TTY=pts/0",
        "Jan 01 00:00:00 host telnetd[7]: connect from 1.2.3.4",
        "Jan 01 00:00:00 host systemd-logind[400]: New session",
    ],
)
def test_parse_line_rejects_unknown_service(line: str) -> None:
    with pytest.raises(LogParseError) as exc:
        parse_line(line, year=2025)
    assert exc.value.reason is ParseFailure.INVALID_SERVICE


@pytest.mark.parametrize(
    ("line", "reason"),
    [
        ("garbage line", ParseFailure.INVALID_TIME),
        ("2025-01-01T00:00:00Z host sudo: x", ParseFailure.INVALID_TIME),
        ("Jan 1 00:00:00 host sudo: x", ParseFailure.INVALID_TIME),
        ("Foo 01 00:00:00 host sudo: x", ParseFailure.INVALID_TIME),
        ("Jan 01 00:00:00 ", ParseFailure.INVALID_HOST),
        ("Jan 01 00:00:00 host_1 sudo: x", ParseFailure.INVALID_SERVICE),
        ("Jan 01 00:00:00 host ", ParseFailure.INVALID_SERVICE),
        ("Jan 01 00:00:00 host sudo no colon", ParseFailure.REGEX_ERROR),
        ("Jan 01 00:00:00 host sudo:", ParseFailure.REGEX_ERROR),
        ("Jan 01 00:00:00 host sudo[abc]: x", ParseFailure.REGEX_ERROR),
    ],
)
def test_parse_line_failure_reasons(line: str, reason: ParseFailure) -> None:
    with pytest.raises(LogParseError) as exc:
        parse_line(line, year=2025)
    assert exc.value.reason is reason


def test_parse_line_feb_29_outside_leap_year() -> None:
    with pytest.raises(LogParseError) as exc:
        parse_line("Feb 29 12:00:00 host sudo: x", year=2025)
    assert exc.value.reason is ParseFailure.INVALID_TIME


def test_parse_line_empty_message() -> None:
    entry = parse_line("Jan 01 00:00:00 host sudo: ", year=2025)
    assert entry.message == ""


def test_parse_line_is_idempotent() -> None:
    assert parse_line(SUDO_LINE) == parse_line(SUDO_LINE)


def test_parse_lines_drops_invalid_and_keeps_order() -> None:
    lines = [
        "Jan 01 00:00:01 a sudo: one",
        "not a log line",
        "Jan 01 00:00:02 b sshd[1]: two",
        "Jan 01 00:00:03 c telnetd: nope",
        "Jan 01 00:00:04 d CRON[2]: three",
    ]

    entries = parse_lines(lines, year=2025)

    assert [e.message for e in entries] == ["one", "two", "three"]
    assert [e.host for e in entries] == ["a", "b", "d"]


def test_parse_lines_empty() -> None:
    assert parse_lines([]) == []
