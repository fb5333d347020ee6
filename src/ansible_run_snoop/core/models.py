"""Core data models for auth log entries and detected Ansible runs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Service(str, Enum):
    """Services whose auth log lines are recognized by the parser."""

    CRON = "CRON"
    SUDO = "SUDO"
    SSHD = "SSHD"

    @classmethod
    def from_token(cls, token: str) -> Service:
        """Match a service token case-insensitively (``sshd``, ``Sshd``, ``SSHD``)."""
        try:
            return cls(token.upper())
        except ValueError as e:
            raise ValueError(f"Unsupported service '{token}'") from e


class Strategy(str, Enum):
    """Transport used by Ansible to run modules on the host."""

    NATIVE = "Native"
    MITOGEN = "Mitogen"


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One parsed auth log line."""

    time: datetime  # naive local time, year injected at parse time
    host: str
    service: Service
    message: str


@dataclass(frozen=True, slots=True)
class AnsibleRun:
    """One Ansible execution detected from a sudo log entry."""

    time: datetime
    host: str
    user: str
    strategy: Strategy
