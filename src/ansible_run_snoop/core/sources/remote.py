"""Remote auth log acquisition over SSH.

Reading the log takes a fixed sequence of steps, each depending on the one
before:

1. read ``/etc/os-release`` and pick the distribution ``ID``;
2. map it to the auth log path;
3. check whether the connecting user can read that path;
4. check whether sudo works without a password;
5. read the log directly, through passwordless sudo, or through ``sudo -S``
   with the supplied password piped on stdin.

All steps share one SSH session that is closed whatever happens.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from contextlib import AbstractAsyncContextManager
from enum import Enum

from .base import decode_lines
from .config import RemoteConfig, resolve_remote_config
from .errors import LogNotReadableError, UnsupportedDistroError
from .ssh import RemoteSession, open_ssh_session

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"
DEBIAN_AUTH_LOG_PATH = "/var/log/auth.log"
REDHAT_AUTH_LOG_PATH = "/var/log/secure"

AUTH_LOG_PATHS: dict[str, str] = {
    "debian": DEBIAN_AUTH_LOG_PATH,
    "ubuntu": DEBIAN_AUTH_LOG_PATH,
    "centos": REDHAT_AUTH_LOG_PATH,
    "rhel": REDHAT_AUTH_LOG_PATH,
}

SessionFactory = Callable[[str, RemoteConfig], AbstractAsyncContextManager[RemoteSession]]


class ReadPlan(str, Enum):
    """How the log file will be read."""

    DIRECT = "direct"
    SUDO = "sudo"
    SUDO_WITH_PASSWORD = "sudo-with-password"


def parse_os_release(lines: Iterable[str]) -> str:
    """Return the bare ``ID`` value from os-release lines."""
    for line in lines:
        if line.startswith("ID="):
            return line.replace("ID=", "").replace('"', "").replace("'", "")
    raise UnsupportedDistroError(f"No ID= line found in {OS_RELEASE_PATH}")


def resolve_log_path(distro: str) -> str:
    try:
        return AUTH_LOG_PATHS[distro]
    except KeyError:
        supported = ", ".join(sorted(AUTH_LOG_PATHS))
        raise UnsupportedDistroError(
            f"Unsupported distribution '{distro}'. Supported: {supported}"
        ) from None


def choose_read_plan(*, readable: bool, sudo_passwordless: bool, has_password: bool) -> ReadPlan:
    """Pick the read strategy; guards are checked in priority order."""
    if readable:
        return ReadPlan.DIRECT
    if sudo_passwordless:
        return ReadPlan.SUDO
    if has_password:
        return ReadPlan.SUDO_WITH_PASSWORD
    raise LogNotReadableError(
        "Log file is not readable by user and sudo is not available "
        "(sudo requires a password and none was supplied)"
    )


class RemoteSource:
    """Auth log on a remote host reachable with ``ssh <host>``."""

    def __init__(
        self,
        host: str,
        password: str | None = None,
        *,
        config: RemoteConfig | None = None,
        session_factory: SessionFactory = open_ssh_session,
    ) -> None:
        self.host = host
        self._password = password
        self.config = resolve_remote_config(config)
        self._session_factory = session_factory

    def __repr__(self) -> str:
        has_password = self._password is not None
        return f"RemoteSource(host={self.host!r}, has_password={has_password})"

    async def detect_distribution(self, session: RemoteSession) -> str:
        result = await session.run(["cat", OS_RELEASE_PATH])
        lines = decode_lines(result.stdout, origin=OS_RELEASE_PATH)
        distro = parse_os_release(lines)
        logger.debug("%s runs %s", self.host, distro)
        return distro

    async def get_log_path(self, session: RemoteSession) -> str:
        return resolve_log_path(await self.detect_distribution(session))

    async def probe_readable(self, session: RemoteSession, log_path: str) -> bool:
        """True when the connecting user can read log_path."""
        result = await session.run(["test", "-r", log_path])
        return result.ok

    async def probe_sudo(self, session: RemoteSession) -> bool:
        """True when sudo runs without asking for a password."""
        result = await session.run(["sudo", "-n", "true"])
        return result.ok

    async def fetch(self, session: RemoteSession, log_path: str, plan: ReadPlan) -> list[str]:
        if plan is ReadPlan.DIRECT:
            result = await session.run(["cat", log_path])
        elif plan is ReadPlan.SUDO:
            result = await session.run(["sudo", "-n", "cat", log_path])
        elif plan is ReadPlan.SUDO_WITH_PASSWORD:
            if self._password is None:
                raise LogNotReadableError("sudo requires a password and none was supplied")
            result = await session.run(
                ["sudo", "-S", "cat", log_path],
                stdin=(self._password + "\n").encode("utf-8"),
            )
        else:
            raise ValueError(f"Unknown read plan: {plan!r}")

        if not result.ok:
            raise LogNotReadableError(
                f"Reading {log_path} on {self.host} failed "
                f"({plan.value}, exit status {result.returncode})"
            )
        return decode_lines(result.stdout, origin=f"{self.host}:{log_path}")

    async def read(self) -> list[str]:
        async with self._session_factory(self.host, self.config) as session:
            log_path = await self.get_log_path(session)
            readable = await self.probe_readable(session, log_path)
            sudo_passwordless = await self.probe_sudo(session)

            plan = choose_read_plan(
                readable=readable,
                sudo_passwordless=sudo_passwordless,
                has_password=self._password is not None,
            )
            logger.info("Reading %s on %s (%s)", log_path, self.host, plan.value)
            return await self.fetch(session, log_path, plan)
