"""Module entrypoint.

Allows:
    python -m ansible_run_snoop <source>
"""

from __future__ import annotations

from ansible_run_snoop.cli import main

if __name__ == "__main__":
    main()
