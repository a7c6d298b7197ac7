"""
File-based operational logging for the intent gate.

CRITICAL: hook processes talk to the agent runtime over stdout.
Anything written there corrupts the JSON decision stream.

This module provides file-based logging that:
- Never writes to stdout/stderr
- Rotates logs to prevent disk bloat
- Falls back to a NullHandler if the log directory is unusable
- Includes timestamps and levels
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_DIR_ENV = "INTENT_GATE_LOG_DIR"
DEBUG_ENV = "INTENT_GATE_DEBUG"

DEFAULT_LOG_DIR = Path.home() / ".intent_gate" / "logs"
LOG_FILE_NAME = "intent_gate.log"

LOGGER_NAME = "intent_gate"

# Module-level logger
_logger: Optional[logging.Logger] = None
_initialized = False


def get_log_dir() -> Path:
    """Log directory, from INTENT_GATE_LOG_DIR or the default."""
    env_dir = os.environ.get(LOG_DIR_ENV, "").strip()
    if env_dir:
        return Path(env_dir).expanduser()
    return DEFAULT_LOG_DIR


def _debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV, "").lower() in ("1", "true", "yes")


def get_logger() -> logging.Logger:
    """
    Get the gate's file logger.

    Lazy-initializes on first call.
    """
    global _logger, _initialized

    if _initialized and _logger is not None:
        return _logger

    _logger = logging.getLogger(LOGGER_NAME)
    _logger.setLevel(logging.DEBUG if _debug_enabled() else logging.INFO)
    _logger.propagate = False

    # Remove any existing handlers (prevents duplicates on reset)
    for handler in list(_logger.handlers):
        _logger.removeHandler(handler)
        handler.close()

    try:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)

        # File handler with rotation (5MB max, keep 3 backups)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        _logger.addHandler(file_handler)
    except OSError:
        # Unwritable log location must not take the gate down with it
        _logger.addHandler(logging.NullHandler())

    _initialized = True
    return _logger


def reset_logger():
    """Drop the cached logger so the next call re-reads the environment."""
    global _logger, _initialized
    if _logger is not None:
        for handler in list(_logger.handlers):
            _logger.removeHandler(handler)
            handler.close()
    _logger = None
    _initialized = False


def log_info(msg: str):
    """Log info message to file."""
    get_logger().info(msg)


def log_warn(msg: str):
    """Log warning message to file."""
    get_logger().warning(msg)


def log_error(msg: str):
    """Log error message to file."""
    get_logger().error(msg)


def log_debug(msg: str):
    """Log debug message to file."""
    get_logger().debug(msg)
