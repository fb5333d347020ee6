"""MCP tool implementations.

Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from typing import Any

from ansible_run_snoop.core.report import build_report
from ansible_run_snoop.core.snoop import snoop

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000


async def find_ansible_runs_impl(
    *,
    source: str,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `find_ansible_runs` MCP tool.

    Notes
    -----
    - No sudo password is accepted here; remote logs that need one fail with
      LogNotReadableError unless sudo is passwordless.
    - limit caps the listed runs; runs_found always has the full count.
    """
    source = source.strip()
    if not source:
        raise ValueError("source must be a file path or host name")
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    if limit > HARD_LIMIT:
        limit = HARD_LIMIT

    result = await snoop(source)
    return build_report(result, limit=limit).model_dump(mode="json")
