"""Log sources: local files and remote hosts reached over SSH."""

from __future__ import annotations

from .base import LogSource
from .config import RemoteConfig, resolve_remote_config
from .errors import (
    AcquisitionError,
    LocalReadError,
    LogDecodeError,
    LogNotReadableError,
    RemoteConnectionError,
    SudoStdinError,
    UnsupportedDistroError,
)
from .local import LocalSource
from .remote import ReadPlan, RemoteSource, choose_read_plan
from .resolve import resolve_source
from .ssh import CommandResult, RemoteSession, SSHSession, open_ssh_session

__all__ = [
    "AcquisitionError",
    "CommandResult",
    "LocalReadError",
    "LocalSource",
    "LogDecodeError",
    "LogNotReadableError",
    "LogSource",
    "ReadPlan",
    "RemoteConfig",
    "RemoteConnectionError",
    "RemoteSession",
    "RemoteSource",
    "SSHSession",
    "SudoStdinError",
    "UnsupportedDistroError",
    "choose_read_plan",
    "open_ssh_session",
    "resolve_remote_config",
    "resolve_source",
]
