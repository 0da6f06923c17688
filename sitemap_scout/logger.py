# === FILE: sitemap_scout/logger.py ===
"""Logging setup shared by every SitemapScout module.

Highlights
----------
* One named logger, ``"SitemapScout"``, that never propagates to the root
  logger, so embedding applications keep their own handlers untouched.
* Console output goes to **stderr**: the CLI prints the JSON report on stdout
  and the two must not interleave.
* An optional rotating log file, enabled from the CLI with ``--log-file``.
* Import the ready instance and use it::

      from sitemap_scout.logger import logger
      logger.info("Discovery started for %s", base_url)
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

# --------------------------------------------------------------------------- #
# Constants & basic types                                                     #
# --------------------------------------------------------------------------- #

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "SitemapScout"
_LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]
_PathT = Union[str, Path]


# --------------------------------------------------------------------------- #
# Handler construction                                                        #
# --------------------------------------------------------------------------- #


def _build_handlers(fmt: str, log_file: Optional[_PathT]) -> List[logging.Handler]:
    """Console handler on the current ``sys.stderr`` plus an optional rotating file."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=_LOG_FILE_MAX_BYTES,
                backupCount=_LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _drop_handlers(lg: logging.Logger) -> None:
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: Optional[_PathT] = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set level, format and destinations of the SitemapScout logger.

    Parameters
    ----------
    level
        ``"DEBUG"``, ``"INFO"``... or the matching ``logging`` constant.
    log_file
        Also write to this file, rotated at 5 MiB with 3 backups.
        *None* keeps output on stderr only.
    log_format
        :class:`logging.Formatter` format string for every handler.
    replace_handlers
        Close the handlers installed by a previous call before adding new
        ones. With *False* the new handlers are added next to the old.
    """
    lg = logging.getLogger(_LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        _drop_handlers(lg)
    for handler in _build_handlers(log_format, log_file):
        lg.addHandler(handler)
    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: Optional[_PathT] = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """Entry point of the CLI's ``--log-*`` options; always starts from scratch."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


# --------------------------------------------------------------------------- #
# Ready‑to‑use instance                                                       #
# --------------------------------------------------------------------------- #

logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging"]
