"""
Centralized logging module for vCloud API Client.
Provides structured logging with file rotation and console output,
plus a separate wire logger for HTTP traffic.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


LOGGER_NAME = 'vcloud-client'
WIRE_LOGGER_NAME = LOGGER_NAME + '.wire'


class Logger:
    """Process-wide logger: rotating file, stdout console and an optional wire log."""

    _instance: Optional['Logger'] = None
    _logger: Optional[logging.Logger] = None

    def __init__(self, log_file: Path, log_level: str = 'INFO',
                 max_size_mb: int = 10, backup_count: int = 5,
                 wire: bool = False):
        """
        Initialize the logger.

        Args:
            log_file: Path to log file
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            max_size_mb: Maximum log file size in MB before rotation
            backup_count: Number of backup files to keep
            wire: Log HTTP requests and responses to the file
        """
        if Logger._instance is not None and Logger._logger is not None:
            return

        Logger._instance = self

        Logger._logger = logging.getLogger(LOGGER_NAME)
        Logger._logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        Logger._logger.handlers.clear()

        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        log_file.parent.mkdir(parents=True, exist_ok=True)

        # File handler with rotation
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)  # Log everything to file
        file_handler.setFormatter(file_formatter)
        Logger._logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        console_handler.setFormatter(console_formatter)
        Logger._logger.addHandler(console_handler)

        # Wire traffic only goes to the file, never to the console
        wire_logger = logging.getLogger(WIRE_LOGGER_NAME)
        wire_logger.handlers.clear()
        wire_logger.propagate = False
        if wire:
            wire_logger.setLevel(logging.DEBUG)
            wire_logger.addHandler(file_handler)
        else:
            wire_logger.setLevel(logging.WARNING)

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get the logger instance.

        Falls back to the bare named logger when the application did not
        initialize logging, so the engine can be used as a library.
        """
        if cls._instance is None or cls._logger is None:
            return logging.getLogger(LOGGER_NAME)
        return cls._logger

    @classmethod
    def initialize(cls, log_file: Path, log_level: str = 'INFO',
                   max_size_mb: int = 10, backup_count: int = 5,
                   wire: bool = False):
        """Configure logging once; later calls return the existing instance."""
        if cls._instance is not None:
            return cls._instance

        instance = cls(log_file, log_level, max_size_mb, backup_count, wire)
        cls._instance = instance
        return instance


def get_logger() -> logging.Logger:
    """Module-level shortcut for Logger.get_logger()."""
    return Logger.get_logger()


def get_wire_logger() -> logging.Logger:
    """Get the logger that records raw HTTP traffic."""
    return logging.getLogger(WIRE_LOGGER_NAME)
