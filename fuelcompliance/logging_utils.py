"""Mini README: Application-wide logging helpers for the compliance dashboard.

Structure:
    * resolve_level - translate level names such as ``"debug"`` to integers.
    * configure_root_logger - one-off root logger configuration.
    * get_logger - factory returning module loggers with baseline setup.

Usage:
    Modules declare ``LOGGER = get_logger(__name__)`` at import time. Ledger
    commits are logged at INFO, rejected operations at WARNING so operators
    can trace why a bank or pool request was refused. Configuration happens
    exactly once per process, so reloading modules in development does not
    stack duplicate handlers.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def resolve_level(level: Union[int, str]) -> int:
    """Return a numeric logging level for names or integers."""

    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(str(level).strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown logging level: {level}")
    return numeric


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Attach a single formatted stream handler to the root logger."""

    global _LOGGER_INITIALISED
    if _LOGGER_INITIALISED:
        logging.getLogger().setLevel(resolve_level(level))
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(resolve_level(level))
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    if not _LOGGER_INITIALISED:
        configure_root_logger()
    return logging.getLogger(name)
