"""Translate source column types into Hive column types."""

from __future__ import annotations
import logging
from typing import Mapping, Optional

from .errors import TranslationError
from .hive_types import AvroType, LogicalType, avro_to_hive_type
from .metadata import SourceMetadataProvider

logger = logging.getLogger(__name__)


def translate_column_type(
    column: str,
    source_type: Optional[int],
    overrides: Mapping[str, str],
    source: SourceMetadataProvider,
    table: Optional[str] = None,
) -> str:
    """Hive type of a text-layout column. User overrides always win."""
    if column in overrides:
        return overrides[column]

    hive_type = source.type_token(table, column, source_type)
    if hive_type is None:
        raise TranslationError(f"Hive does not support the SQL type for column {column}", column=column)

    if source.is_lossy_type(source_type):
        logger.warning(
            f"Column {column} had to be cast to a less precise type in Hive",
            extra={'column': column},
        )
    return hive_type


def non_null_type(logical_type: Optional[LogicalType]) -> Optional[AvroType]:
    """First non-null branch of a union, or the type itself."""
    if not isinstance(logical_type, tuple):
        return logical_type
    for branch in logical_type:
        if branch != AvroType.NULL:
            return branch
    return None


def translate_logical_type(column: str, logical_type: Optional[LogicalType]) -> str:
    """Hive type of a columnar-layout column."""
    hive_type = avro_to_hive_type(non_null_type(logical_type))
    if hive_type is None:
        raise TranslationError(f"Hive does not support the columnar type of column {column}", column=column)
    return hive_type
