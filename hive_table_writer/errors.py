"""Exceptions raised while generating Hive statements."""

from __future__ import annotations
from typing import Optional


class HiveTableWriterError(Exception):
    """Base class for statement generation errors."""

    def __init__(self, message: str, column: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.column = column


class ConfigurationError(HiveTableWriterError):
    """Caller-supplied options are inconsistent."""


class TranslationError(HiveTableWriterError):
    """No Hive type could be determined for a source column."""
