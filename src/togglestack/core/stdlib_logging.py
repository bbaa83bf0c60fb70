from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from togglestack.core.config.manager import ConfigManager

LOGGER_NAME = "togglestack"

_CONFIGURED_TARGET: str | None = None
_TOGGLESTACK_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_stdlib_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> logging.Logger:
    """Attach one handler to the ``togglestack`` logger.

    Logs go to ``log_path`` when given, else stderr. Idempotent per-process:
    calling again with the same target only adjusts the level.
    """
    global _CONFIGURED_TARGET, _TOGGLESTACK_HANDLER

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_name(level))

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    if _CONFIGURED_TARGET == target and _TOGGLESTACK_HANDLER is not None:
        _TOGGLESTACK_HANDLER.setLevel(_level_from_name(level))
        return logger

    # Replace the handler we installed when switching targets.
    if _TOGGLESTACK_HANDLER is not None:
        logger.removeHandler(_TOGGLESTACK_HANDLER)
        _TOGGLESTACK_HANDLER.close()
        _TOGGLESTACK_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)

    _TOGGLESTACK_HANDLER = handler
    _CONFIGURED_TARGET = target
    return logger


def configure_from_settings(manager: Optional["ConfigManager"] = None) -> logging.Logger:
    """Configure logging from the ``logging`` settings section."""
    # Lazy import to avoid circular dependencies
    from togglestack.core.config.domains import LoggingConfig

    cfg = LoggingConfig(manager)
    return configure_stdlib_logging(level=cfg.level, log_path=cfg.path)


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the handler installed by this module."""
    global _CONFIGURED_TARGET, _TOGGLESTACK_HANDLER
    if _TOGGLESTACK_HANDLER is not None:
        logging.getLogger(LOGGER_NAME).removeHandler(_TOGGLESTACK_HANDLER)
        _TOGGLESTACK_HANDLER.close()
    _CONFIGURED_TARGET = None
    _TOGGLESTACK_HANDLER = None


__all__ = ["configure_stdlib_logging", "configure_from_settings", "reset_stdlib_logging_for_tests"]
