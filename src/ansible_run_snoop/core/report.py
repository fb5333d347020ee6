"""JSON report schema for CLI and MCP output."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .models import AnsibleRun, Strategy
from .snoop import SnoopResult


class AnsibleRunOut(BaseModel):
    time: datetime = Field(description="Local time of the sudo entry (current year assumed).")
    host: str = Field(description="Host name as written in the log line.")
    user: str = Field(description="Account that invoked sudo.")
    strategy: Strategy = Field(description="Native or Mitogen.")

    @classmethod
    def from_run(cls, run: AnsibleRun) -> AnsibleRunOut:
        return cls(time=run.time, host=run.host, user=run.user, strategy=run.strategy)


class RunReport(BaseModel):
    lines_read: int = Field(ge=0, description="Raw lines returned by the source.")
    entries_parsed: int = Field(ge=0, description="Lines that matched the auth log grammar.")
    runs_found: int = Field(ge=0, description="Ansible runs detected in total.")
    runs: list[AnsibleRunOut] = Field(default_factory=list)


def build_report(result: SnoopResult, *, limit: int | None = None) -> RunReport:
    """Convert a SnoopResult; limit caps the listed runs, not runs_found."""
    runs = result.runs if limit is None else result.runs[:limit]
    return RunReport(
        lines_read=result.lines_read,
        entries_parsed=result.entries_parsed,
        runs_found=result.runs_found,
        runs=[AnsibleRunOut.from_run(r) for r in runs],
    )
