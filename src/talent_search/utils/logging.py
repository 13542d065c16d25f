"""
Logging configuration for the talent search engine.

The package logs under a single parent logger. ``setup_logging()`` attaches
handlers to that logger only, so an application's own root configuration is
left alone.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

# Add project root to path
sys.path.insert(0, str(Path(__file__).parents[3]))
from config.settings import settings

PACKAGE_LOGGER_NAME = __name__.rpartition(".utils")[0]

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(level: Optional[str] = None, log_dir: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Configure the package logger. Safe to call more than once.

    A console handler is added only when the root logger has no handlers,
    i.e. when the host application has not configured logging itself.
    ``talent_search.log`` and ``errors.log`` are written when a log
    directory is given or configured via ``APP_LOG_DIR``.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if getattr(package_logger, "_talent_search_configured", False):
        return package_logger

    level_name = (level or settings.app.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    package_logger.setLevel(log_level)

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    if not logging.getLogger().handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        package_logger.addHandler(console_handler)

    log_dir = log_dir or settings.app.log_dir
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Per-candidate DEBUG scoring traces land here when the level allows
        file_handler = logging.FileHandler(log_path / "talent_search.log", encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

        error_handler = logging.FileHandler(log_path / "errors.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        package_logger.addHandler(error_handler)

    # Silence some noisy third-party loggers
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    package_logger._talent_search_configured = True
    package_logger.info(f"Logging configured with level: {level_name}")
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module."""
    return logging.getLogger(name)
