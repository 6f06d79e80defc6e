"""Console logging setup for scripts that drive the rhyme analysis."""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

LOG_LEVEL_ENV = "RHYME_SCHEME_LOG_LEVEL"
PROJECT_LOGGER = "rhyme_scheme"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_installed = False


def resolve_level(level: Union[str, int, None]) -> int:
    """Map ``"debug"``, ``"10"`` or ``10`` to a level; anything else is INFO."""

    if isinstance(level, int):
        return level
    text = (level or "").strip()
    if text.lstrip("-").isdigit():
        return int(text)
    named = logging.getLevelName(text.upper())
    return named if isinstance(named, int) else logging.INFO


def configure_logging(
    level: Union[str, int, None] = None, *, force: bool = False
) -> logging.Logger:
    """Attach a console handler and set the level of the project loggers.

    ``level`` wins over ``RHYME_SCHEME_LOG_LEVEL``. Only the first call
    installs the handler unless ``force`` is given.
    """

    global _installed

    project_logger = logging.getLogger(PROJECT_LOGGER)
    if _installed and not force:
        return project_logger

    resolved = resolve_level(level if level is not None else os.environ.get(LOG_LEVEL_ENV))
    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=force)
    project_logger.setLevel(resolved)
    _installed = True
    return project_logger


__all__ = ["LOG_FORMAT", "LOG_LEVEL_ENV", "configure_logging", "resolve_level"]
