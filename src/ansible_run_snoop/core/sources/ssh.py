"""Multiplexed SSH sessions on top of the OpenSSH client.

One control master is started per session and every command reuses its
socket, so a whole acquisition costs a single authentication. Commands are
request/response only: optional stdin bytes in, exit status and output back.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import shlex
import tempfile
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config import RemoteConfig
from .errors import RemoteConnectionError, SudoStdinError

logger = logging.getLogger(__name__)

# ssh reserves this exit status for its own failures.
SSH_ERROR_STATUS = 255


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Exit status and captured output of one remote command."""

    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class RemoteSession(Protocol):
    """Session interface used by the acquisition protocol."""

    async def run(self, argv: Sequence[str], *, stdin: bytes | None = None) -> CommandResult:
        """Run argv on the remote host, optionally feeding stdin, and wait for it."""
        ...


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()


class SSHSession:
    """Commands executed through an OpenSSH control master."""

    def __init__(self, host: str, *, workdir: Path, config: RemoteConfig) -> None:
        self.host = host
        self.config = config
        self.control_path = workdir / "ctl"
        self.master_log = workdir / "master.log"

    def _client_args(self) -> list[str]:
        return [
            self.config.ssh_binary,
            "-S",
            str(self.control_path),
            "-o",
            "BatchMode=yes",
        ]

    async def _spawn(self, args: Sequence[str], **kwargs) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(*args, **kwargs)
        except OSError as e:
            raise RemoteConnectionError(
                f"Could not run {self.config.ssh_binary!r}: {e}"
            ) from e

    async def start(self) -> None:
        """Start the control master and wait until it is authenticated."""
        args = [
            *self._client_args(),
            "-M",
            "-N",
            "-f",
            "-E",
            str(self.master_log),
            "-o",
            f"StrictHostKeyChecking={self.config.host_key_policy}",
            "-o",
            f"ConnectTimeout={max(1, int(self.config.command_timeout))}",
            "--",
            self.host,
        ]
        logger.debug("Opening SSH master connection to %s", self.host)
        # -f backgrounds the master once authenticated; output goes to the -E log.
        proc = await self._spawn(
            args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        try:
            returncode = await asyncio.wait_for(proc.wait(), self.config.command_timeout)
        except TimeoutError as e:
            await _kill(proc)
            raise RemoteConnectionError(f"Timed out connecting to {self.host}") from e
        except BaseException:
            await _kill(proc)
            raise

        if returncode != 0:
            detail = self._master_error() or f"ssh exited with status {returncode}"
            raise RemoteConnectionError(f"Could not connect to {self.host}: {detail}")

    def _master_error(self) -> str:
        try:
            return self.master_log.read_text(encoding="utf-8", errors="replace").strip()
        except OSError:
            return ""

    async def run(self, argv: Sequence[str], *, stdin: bytes | None = None) -> CommandResult:
        """Run one command through the master.

        stdin, when given, is written in full and the pipe is closed right
        away. Its content is never logged.
        """
        remote_cmd = shlex.join(argv)
        logger.debug("ssh %s: %s", self.host, remote_cmd)
        proc = await self._spawn(
            [*self._client_args(), "--", self.host, remote_cmd],
            stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                self._collect(proc, stdin), self.config.command_timeout
            )
        except TimeoutError as e:
            await _kill(proc)
            raise RemoteConnectionError(
                f"Timed out waiting for '{argv[0]}' on {self.host}"
            ) from e
        except BaseException:
            await _kill(proc)
            raise

        if proc.returncode == SSH_ERROR_STATUS:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise RemoteConnectionError(f"SSH command on {self.host} failed: {detail}")

        return CommandResult(returncode=proc.returncode, stdout=stdout, stderr=stderr)

    async def _collect(
        self, proc: asyncio.subprocess.Process, stdin: bytes | None
    ) -> tuple[bytes, bytes]:
        if stdin is not None:
            if proc.stdin is None:
                raise SudoStdinError("Failed to open stdin for sudo")
            try:
                proc.stdin.write(stdin)
                await proc.stdin.drain()
            except (BrokenPipeError, ConnectionResetError) as e:
                # ssh itself dying also closes the pipe early.
                stderr, _ = await asyncio.gather(proc.stderr.read(), proc.wait())
                if proc.returncode == SSH_ERROR_STATUS:
                    detail = stderr.decode("utf-8", errors="replace").strip()
                    raise RemoteConnectionError(
                        f"SSH command on {self.host} failed: {detail}"
                    ) from e
                raise SudoStdinError("Failed to write to stdin for sudo") from e
            finally:
                proc.stdin.close()

        stdout, stderr, _ = await asyncio.gather(
            proc.stdout.read(), proc.stderr.read(), proc.wait()
        )
        return stdout, stderr

    async def close(self) -> None:
        """Stop the control master. Failures are logged, not raised."""
        logger.debug("Closing SSH master connection to %s", self.host)
        try:
            proc = await self._spawn(
                [*self._client_args(), "-O", "exit", "--", self.host],
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except RemoteConnectionError as e:
            logger.warning("Could not stop SSH master for %s: %s", self.host, e)
            return
        try:
            await asyncio.wait_for(proc.wait(), self.config.command_timeout)
        except TimeoutError:
            logger.warning("Timed out stopping SSH master for %s", self.host)
            await _kill(proc)


@asynccontextmanager
async def open_ssh_session(host: str, config: RemoteConfig) -> AsyncIterator[SSHSession]:
    """Open a multiplexed session; the master is stopped on every exit path."""
    with tempfile.TemporaryDirectory(prefix="ansible-snoop-") as tmp:
        session = SSHSession(host, workdir=Path(tmp), config=config)
        await session.start()
        try:
            yield session
        finally:
            await session.close()
