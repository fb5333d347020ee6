"""Choose between a local file and a remote host."""

from __future__ import annotations

from pathlib import Path

from .base import LogSource
from .config import RemoteConfig
from .local import LocalSource
from .remote import RemoteSource


def resolve_source(
    descriptor: str,
    *,
    password: str | None = None,
    config: RemoteConfig | None = None,
) -> LogSource:
    """Existing regular files are read locally; anything else is a host name.

    Host reachability is not checked here.
    """
    path = Path(descriptor)
    if path.is_file():
        return LocalSource(path)
    return RemoteSource(descriptor, password, config=config)
