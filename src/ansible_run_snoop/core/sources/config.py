"""Remote acquisition configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

SSH_TIMEOUT_ENV = "ANSIBLE_SNOOP_SSH_TIMEOUT"
SSH_BINARY_ENV = "ANSIBLE_SNOOP_SSH_BINARY"


@dataclass(frozen=True, slots=True)
class RemoteConfig:
    ssh_binary: str = "ssh"
    # Deadline per remote round-trip, in seconds (master start included).
    command_timeout: float = 30.0
    # Passed as StrictHostKeyChecking; unknown hosts are added, changed keys rejected.
    host_key_policy: str = "accept-new"


def resolve_remote_config(cfg: RemoteConfig | None = None) -> RemoteConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = RemoteConfig()

    binary = os.getenv(SSH_BINARY_ENV)
    if binary:
        cfg = replace(cfg, ssh_binary=binary)

    env = os.getenv(SSH_TIMEOUT_ENV)
    if env is None or env == "":
        return cfg

    try:
        value = float(env)
    except ValueError as exc:
        raise ValueError(f"{SSH_TIMEOUT_ENV} must be a number") from exc
    if value <= 0:
        raise ValueError(f"{SSH_TIMEOUT_ENV} must be > 0")

    return replace(cfg, command_timeout=value)
