"""Acquire, parse and classify in one call.

This module is the main integration point: callers hand over a source
descriptor and get back the detected Ansible runs with line counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .classifier import get_ansible_runs
from .models import AnsibleRun
from .parser import parse_lines
from .sources import LogSource, RemoteConfig, resolve_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SnoopResult:
    """Counts for each pipeline stage plus the runs found."""

    lines_read: int
    entries_parsed: int
    runs: list[AnsibleRun]

    @property
    def runs_found(self) -> int:
        return len(self.runs)


async def snoop_source(source: LogSource, *, year: int | None = None) -> SnoopResult:
    """Read a source and extract the Ansible runs in it."""
    lines = await source.read()
    entries = parse_lines(lines, year=year)
    runs = get_ansible_runs(entries)
    logger.info(
        "Read %d lines, parsed %d entries, found %d ansible runs",
        len(lines),
        len(entries),
        len(runs),
    )
    return SnoopResult(lines_read=len(lines), entries_parsed=len(entries), runs=runs)


async def snoop(
    descriptor: str,
    *,
    password: str | None = None,
    config: RemoteConfig | None = None,
) -> SnoopResult:
    """Resolve a file path or host name and snoop it."""
    source = resolve_source(descriptor, password=password, config=config)
    return await snoop_source(source)
