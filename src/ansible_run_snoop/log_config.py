"""Logging setup shared by the entry points."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "ANSIBLE_SNOOP_LOG_LEVEL"


def configure_logging(default_level: str = "WARNING") -> None:
    """Configure stderr logging; the level comes from ANSIBLE_SNOOP_LOG_LEVEL."""
    level_name = os.getenv(LOG_LEVEL_ENV, default_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
