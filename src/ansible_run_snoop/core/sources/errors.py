"""Acquisition errors.

Each failure kind has its own class so callers can tell "no sudo and no
password" apart from "unsupported distribution" and render a useful message.
Messages never contain the sudo password.
"""

from __future__ import annotations


class AcquisitionError(RuntimeError):
    """Reading the raw log lines failed; no partial result is returned."""


class LocalReadError(AcquisitionError):
    """The local log file could not be read."""


class RemoteConnectionError(AcquisitionError):
    """SSH could not connect, authenticate, or finish a command in time."""


class UnsupportedDistroError(AcquisitionError):
    """The remote distribution is unknown, so the auth log path is unknown."""


class LogNotReadableError(AcquisitionError):
    """The log is not readable by the user and sudo cannot be used."""


class LogDecodeError(AcquisitionError):
    """Command or file output is not valid UTF-8 text."""


class SudoStdinError(AcquisitionError):
    """The password could not be delivered on sudo's stdin."""
