"""MCP server entrypoint (stdio transport).

Run locally (stdio):
    python -m ansible_run_snoop.server.snoop_server
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from ansible_run_snoop.log_config import configure_logging
from ansible_run_snoop.tools.runs import find_ansible_runs_impl

LOGGER = logging.getLogger(__name__)

mcp = FastMCP("ansible-snoop", json_response=True)


@mcp.tool()
async def find_ansible_runs(source: str, limit: int | None = None) -> dict[str, Any]:
    """Find Ansible runs in an auth log.

    Parameters
    ----------
    source:
        Path to a local auth log, or a host name reachable with `ssh <host>`
        (key-based auth). Debian/Ubuntu and CentOS/RHEL hosts are supported.
    limit:
        Maximum number of runs listed (hard-capped in the implementation).

    Returns
    -------
    dict:
        {"lines_read": int, "entries_parsed": int, "runs_found": int,
         "runs": [{"time", "host", "user", "strategy"}]}
    """
    return await find_ansible_runs_impl(source=source, limit=limit)


def main() -> None:
    """Start the MCP server over stdio."""
    # stdout carries the protocol; logs go to stderr.
    configure_logging("INFO")
    LOGGER.debug("Starting MCP server (transport=stdio)")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
