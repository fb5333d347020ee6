"""Detect Ansible runs among parsed sudo entries."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import AnsibleRun, LogEntry, Service, Strategy

# Module payloads shipped by the stock ssh connection plugin.
NATIVE_FINGERPRINT = "AnsiballZ"
# Bootstrap one-liner used by the Mitogen strategy plugin.
MITOGEN_FINGERPRINT = "_=codecs.decode"

_FIELD_SEP_RE = re.compile(r"[:;]")


def is_ansible_entry(entry: LogEntry) -> bool:
    """True for sudo entries carrying one of the Ansible fingerprints."""
    if entry.service is not Service.SUDO:
        return False
    return NATIVE_FINGERPRINT in entry.message or MITOGEN_FINGERPRINT in entry.message


def extract_user(message: str) -> str:
    """Return the invoking user from a sudo message.

    Assumes the standard sudo layout ``user : TTY=... ; PWD=... ; ...``.
    Custom sudo log formats may put something else in the first field.
    """
    return _FIELD_SEP_RE.split(message)[0].strip()


def classify_strategy(message: str) -> Strategy:
    # Mitogen is checked first and wins when both fingerprints are present.
    if MITOGEN_FINGERPRINT in message:
        return Strategy.MITOGEN
    return Strategy.NATIVE


def get_ansible_runs(entries: Iterable[LogEntry]) -> list[AnsibleRun]:
    """Filter entries down to Ansible runs, preserving order."""
    return [
        AnsibleRun(
            time=entry.time,
            host=entry.host,
            user=extract_user(entry.message),
            strategy=classify_strategy(entry.message),
        )
        for entry in entries
        if is_ansible_entry(entry)
    ]
