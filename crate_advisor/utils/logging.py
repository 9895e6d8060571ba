"""Logging utilities for crate-advisor.

Named loggers write through a rich handler on stderr so that log lines never
mix with report output on stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "critical": "red bold",
    "debug": "dim",
})

_LOGGERS: Dict[str, "AdvisorLogger"] = {}


class AdvisorLogger:
    """Named logger with a rich stderr handler."""

    def __init__(self, name: str, level: Optional[int] = None) -> None:
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)

        handler = RichHandler(
            console=Console(theme=_THEME, stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%X]"))

        # A logger may be rebuilt for the same name; keep exactly one handler.
        self.logger.handlers.clear()
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def setLevel(self, level: int) -> None:
        self.logger.setLevel(level)

    def isEnabledFor(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def _log(self, level: int, msg: str, extra: Dict[str, Any]) -> None:
        self.logger.log(level, msg, extra=extra or None)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, msg, kwargs)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Configure the root logger and every crate-advisor logger.

    Args:
        level: Logging level
        log_file: Optional file that also receives root log records
        verbose: Shortcut for ``level=logging.DEBUG``
    """
    if verbose:
        level = logging.DEBUG

    handlers: list = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    # Named loggers do not propagate, so the level is pushed to each of them.
    for advisor_logger in _LOGGERS.values():
        advisor_logger.setLevel(level)


def get_logger(name: str) -> AdvisorLogger:
    """Get the crate-advisor logger called ``name``, creating it once."""
    if name not in _LOGGERS:
        _LOGGERS[name] = AdvisorLogger(name)
    return _LOGGERS[name]
