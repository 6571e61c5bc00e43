"""Logging setup for applications using ad_directory.

Library modules only create loggers (``logging.getLogger(__name__)``);
handlers are attached here, under the ``ad_directory`` logger.

- Console handler always.
- Optional daily rotated file (TimedRotatingFileHandler, midnight UTC)
  when ``log_dir`` is given, keeping ``retention_days`` files.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

from .env_settings import get_config

LOGGER_NAME = "ad_directory"
_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers we installed, removed again on reconfiguration.
_file_handler: logging.Handler | None = None
_console_handler: logging.Handler | None = None


def _parse_level(level: str) -> int:
    level_str = (level or "INFO").strip().upper()
    if level_str not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level_str = "INFO"
    return getattr(logging, level_str, logging.INFO)


def setup_logging(
    level: str | None = None,
    log_dir: str | None = None,
    retention_days: int = 30,
) -> logging.Logger:
    """Configure the ``ad_directory`` logger and return it.

    Without ``level`` the configured ``AD_LOG_LEVEL`` is used.
    """
    global _file_handler, _console_handler

    if level is None:
        level = get_config().log_level
    log_level = _parse_level(level)
    retention_days = max(1, min(365, int(retention_days or 30)))

    logger = logging.getLogger(LOGGER_NAME)

    if _file_handler and _file_handler in logger.handlers:
        logger.removeHandler(_file_handler)
        _file_handler.close()
    _file_handler = None
    if _console_handler and _console_handler in logger.handlers:
        logger.removeHandler(_console_handler)

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    _console_handler = ch
    logger.addHandler(ch)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(
            os.path.join(log_dir, "ad_directory.log"),
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
            utc=True,
        )
        fh.suffix = "%Y-%m-%d"
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        _file_handler = fh
        logger.addHandler(fh)

    logger.setLevel(log_level)

    # ldap3 logs through its own logger; keep it quiet unless debugging.
    logging.getLogger("ldap3").setLevel(max(log_level, logging.WARNING))

    logger.debug(
        "Logging configured: level=%s, log_dir=%s, retention=%d days",
        logging.getLevelName(log_level), log_dir or "-", retention_days,
    )
    return logger
