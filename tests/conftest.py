from __future__ import annotations

import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from ansible_run_snoop.core.sources import RemoteConfig

AUTH_LOG_LINES = [
    "Mar 15 23:22:13 web-01 sshd[812]: Accepted publickey for alice from 10.0.0.5 port 52341 ssh2",
    "Mar 15 23:22:14 web-01 sudo: alice : TTY=pts/0 ; PWD=/home/alice ; USER=root ; "
    "COMMAND=/bin/sh -c echo BECOME-SUCCESS-abc ; /usr/bin/python3 "
    "/home/alice/.ansible/tmp/ansible-tmp-1/AnsiballZ_setup.py",
    "Mar 15 23:23:01 web-01 CRON[901]: pam_unix(cron:session): session opened for user root",
    "Mar 15 23:24:00 web-01 systemd-logind[400]: New session 12 of user alice.",
    "Mar 15 23:25:42 web-01 sudo: bob : TTY=unknown ; PWD=/home/bob ; USER=root ; "
    "COMMAND=/usr/bin/python3 -c import codecs,os,sys;_=codecs.decode;exec(_(_(\"eNqF\")))",
    "garbage line",
]


@pytest.fixture
def write_auth_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text("\n".join(AUTH_LOG_LINES) + "\n", encoding="utf-8")

    return _write


# Stands in for the OpenSSH client; behaviour is driven by FAKE_SSH_* env vars.
_FAKE_SSH = r'''
import os
import sys
import time

args = sys.argv[1:]
with open(os.environ["FAKE_SSH_CALLS"], "a", encoding="utf-8") as f:
    f.write(" ".join(args) + "\n")

if "-M" in args:
    if os.environ.get("FAKE_SSH_FAIL_MASTER"):
        with open(args[args.index("-E") + 1], "w", encoding="utf-8") as f:
            f.write("ssh: connect to host nowhere port 22: Connection refused\n")
        sys.exit(255)
    sys.exit(0)
if "-O" in args:
    sys.exit(0)

cmd = args[-1].split()
log_path = os.environ.get("FAKE_SSH_LOG_PATH", "/var/log/auth.log")

if cmd == ["cat", "/etc/os-release"]:
    sys.stdout.write('NAME="Some Linux"\nID=%s\n' % os.environ.get("FAKE_SSH_DISTRO", "ubuntu"))
elif cmd == ["test", "-r", log_path]:
    sys.exit(0 if os.environ.get("FAKE_SSH_READABLE") else 1)
elif cmd == ["sudo", "-n", "true"]:
    sys.exit(0 if os.environ.get("FAKE_SSH_NOPASSWD") else 1)
elif cmd in (["cat", log_path], ["sudo", "-n", "cat", log_path]):
    with open(os.environ["FAKE_SSH_LOG"], "rb") as f:
        sys.stdout.buffer.write(f.read())
elif cmd == ["sudo", "-S", "cat", log_path]:
    if sys.stdin.readline().rstrip("\n") != os.environ.get("FAKE_SSH_PASSWORD"):
        sys.stderr.write("Sorry, try again.\n")
        sys.exit(1)
    with open(os.environ["FAKE_SSH_LOG"], "rb") as f:
        sys.stdout.buffer.write(f.read())
elif cmd == ["sleep"]:
    time.sleep(30)
elif cmd == ["refuse"]:
    sys.stderr.write("sudo: a terminal is required\n")
    sys.exit(1)
elif cmd == ["drop"]:
    sys.stderr.write("Connection to host closed by remote host.\n")
    sys.exit(255)
else:
    sys.exit(127)
'''


@pytest.fixture
def fake_ssh(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[RemoteConfig, Path]:
    """Install a fake ssh binary; returns its config and the file logging its argv."""
    script = tmp_path / "fake-ssh"
    script.write_text(f"#!{sys.executable}\n{_FAKE_SSH}", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    calls = tmp_path / "ssh-calls.txt"
    calls.touch()
    monkeypatch.setenv("FAKE_SSH_CALLS", str(calls))
    monkeypatch.delenv("ANSIBLE_SNOOP_SSH_TIMEOUT", raising=False)
    monkeypatch.delenv("ANSIBLE_SNOOP_SSH_BINARY", raising=False)

    return RemoteConfig(ssh_binary=str(script), command_timeout=10.0), calls
