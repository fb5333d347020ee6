from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from collections.abc import Sequence

from ansible_run_snoop import __version__
from ansible_run_snoop.core.report import build_report
from ansible_run_snoop.core.snoop import SnoopResult, snoop
from ansible_run_snoop.core.sources import AcquisitionError
from ansible_run_snoop.log_config import configure_logging


def _prompt_password() -> str:
    # getpass reads from the tty, so the password never echoes or hits stdout.
    return getpass.getpass("Enter sudo password: ")


def _print_text(result: SnoopResult) -> None:
    print(f"Read {result.lines_read} lines")
    print(f"Parsed {result.entries_parsed} entries")
    print(f"Found {result.runs_found} ansible runs")
    for run in result.runs:
        print(f"{run.time.isoformat()} {run.host} {run.user} {run.strategy.value}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ansible-snoop",
        description="Snoop who ran ansible: find Ansible runs in a local or remote auth log.",
    )
    p.add_argument("source", help="Path to a local auth log, or an SSH host name")
    p.add_argument(
        "-p",
        "--ask-sudo",
        action="store_true",
        help="Prompt for a sudo password used when the log is not readable otherwise",
    )
    p.add_argument("--json", dest="as_json", action="store_true", help="Print a JSON report")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging()

    password = _prompt_password() if args.ask_sudo else None

    try:
        result = asyncio.run(snoop(args.source, password=password))
    except AcquisitionError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    except ValueError as e:
        # invalid ANSIBLE_SNOOP_* settings
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    if args.as_json:
        print(build_report(result).model_dump_json(indent=2))
    else:
        _print_text(result)


if __name__ == "__main__":
    main()
