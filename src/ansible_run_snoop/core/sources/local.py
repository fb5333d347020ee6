"""Local file source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import aiofiles

from .base import split_lines
from .errors import LocalReadError, LogDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocalSource:
    """Auth log stored on the local filesystem."""

    path: Path

    async def read(self) -> list[str]:
        logger.debug("Reading local log %s", self.path)
        try:
            async with aiofiles.open(self.path, encoding="utf-8", newline="") as f:
                contents = await f.read()
        except UnicodeDecodeError as e:
            raise LogDecodeError(f"{self.path} is not valid UTF-8 text") from e
        except OSError as e:
            raise LocalReadError(f"Could not read {self.path}: {e}") from e
        return split_lines(contents)
