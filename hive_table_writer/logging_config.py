"""
Logging configuration for hive-table-writer.

This module provides logging setup for the CLI with optional file rotation
and structured (JSON) output.
"""

import logging
import logging.handlers
import sys
import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field, ConfigDict


class LoggingConfig(BaseModel):
    """Logging configuration model."""
    model_config = ConfigDict(extra='forbid')

    # Basic settings
    level: str = Field(default="INFO", description="Root logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format"
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date format for log messages"
    )

    # File logging
    enable_file_logging: bool = Field(default=False)
    log_file_path: str = Field(default="logs/hive_table_writer.log")
    max_file_size_mb: int = Field(default=100, ge=1, le=1000)
    backup_count: int = Field(default=5, ge=1, le=50)

    # Console logging
    enable_console_logging: bool = Field(default=True)
    console_level: str = Field(default="INFO")

    # Structured logging
    enable_json_logging: bool = Field(default=False)

    # Component-specific logging levels
    component_levels: Dict[str, str] = Field(default_factory=dict)

    # Filtering
    suppress_noisy_loggers: bool = Field(default=True)
    noisy_loggers: list[str] = Field(
        default_factory=lambda: [
            'sqlalchemy.engine',
            'sqlalchemy.pool',
            'pyarrow',
        ]
    )


class StructuredFormatter(logging.Formatter):
    """Formatter emitting one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # Extra fields passed via ``extra=``, e.g. the offending column
        for key in ('column', 'table'):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        return json.dumps(log_entry, default=str)


def setup_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Setup logging for a CLI run.

    Args:
        config: Optional logging configuration, defaults to console-only INFO.

    Returns:
        Root logger instance
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger()

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    if config.enable_file_logging:
        _setup_file_logging(root_logger, config)

    if config.enable_console_logging:
        _setup_console_logging(root_logger, config)

    for logger_name, level in config.component_levels.items():
        logging.getLogger(logger_name).setLevel(getattr(logging, level.upper()))

    if config.suppress_noisy_loggers:
        _suppress_noisy_loggers(config.noisy_loggers)

    return root_logger


def _formatter(config: LoggingConfig) -> logging.Formatter:
    if config.enable_json_logging:
        return StructuredFormatter()
    return logging.Formatter(fmt=config.format, datefmt=config.date_format)


def _setup_file_logging(logger: logging.Logger, config: LoggingConfig) -> None:
    """Setup file logging with rotation."""
    log_path = Path(config.log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=config.log_file_path,
        maxBytes=config.max_file_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    file_handler.setFormatter(_formatter(config))
    file_handler.setLevel(getattr(logging, config.level.upper()))

    logger.addHandler(file_handler)


def _setup_console_logging(logger: logging.Logger, config: LoggingConfig) -> None:
    """Setup console logging on stderr so stdout stays free for statements."""
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_formatter(config))
    console_handler.setLevel(getattr(logging, config.console_level.upper()))

    logger.addHandler(console_handler)


def _suppress_noisy_loggers(noisy_loggers: list[str]) -> None:
    """Suppress noisy third-party loggers."""
    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Configures console logging with the defaults if nothing set it up yet.
    """
    if not logging.getLogger().handlers:
        setup_logging()

    return logging.getLogger(name)
