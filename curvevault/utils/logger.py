"""
Centralized logging configuration for curvevault.

Colored console output plus an optional log file, with one child logger
per subsystem (vault, twav, fees, protocol, chain, cli). The file lands
in ProtocolConfig.log_dir unless a directory is given.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog

ROOT_LOGGER = "curvevault"
LOG_FILE = "curvevault.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s",
            datefmt=DATE_FORMAT,
            log_colors=LOG_COLORS,
        )
    )
    return handler


def _file_handler(log_dir: Path, level: int) -> logging.Handler:
    log_dir.mkdir(exist_ok=True, parents=True)
    handler = logging.FileHandler(log_dir / LOG_FILE)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(name)s] %(levelname)-8s %(message)s", datefmt=DATE_FORMAT)
    )
    return handler


class CurveVaultLogger:
    """Centralized logger for curvevault components"""

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
        force: bool = False,
    ):
        """
        Setup logging configuration.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_dir: Directory for the log file, default ProtocolConfig.log_dir
            log_to_file: Whether to also write curvevault.log
            force: Reconfigure even if logging was already set up
        """
        if cls._initialized and not force:
            return

        root_logger = logging.getLogger(ROOT_LOGGER)
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()
        root_logger.addHandler(_console_handler(level))

        cls._log_dir = None
        if log_to_file:
            from curvevault.core.config import config

            cls._log_dir = Path(log_dir) if log_dir else config.log_dir
            root_logger.addHandler(_file_handler(cls._log_dir, level))

        cls._initialized = True

    @classmethod
    def log_file(cls) -> Optional[Path]:
        """Path of the active log file, None when logging to console only."""
        return cls._log_dir / LOG_FILE if cls._log_dir else None

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific subsystem.

        Args:
            name: Subsystem name (e.g., 'vault', 'twav', 'fees')

        Returns:
            Logger instance
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific subsystem"""
    return CurveVaultLogger.get_logger(name)


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Setup logging configuration, replacing any earlier setup"""
    CurveVaultLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file, force=True)
