"""DDL generation utilities for Hive."""

from __future__ import annotations
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError
from .metadata import SourceMetadataProvider
from .models import DelimiterSet, FileLayout, PartitionSpec, SchemaDescriptor, TableTarget
from .type_translator import translate_column_type, translate_logical_type

logger = logging.getLogger(__name__)

LZOP_CODEC_NAMES = frozenset({"lzop", "com.hadoop.compression.lzo.LzopCodec"})
LZO_INPUT_FORMAT = "com.hadoop.mapred.DeprecatedLzoTextInputFormat"
LZO_OUTPUT_FORMAT = "org.apache.hadoop.hive.ql.io.HiveIgnoreKeyTextOutputFormat"
COMMENT_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def encode_delimiter(char_num: int) -> str:
    """
    Return the Hive escape for a delimiter character, in octal.

    Hive accepts delimiters as '\\ooo' where ooo is a three-digit octal
    number between 000 and 177. Values may not be truncated ('\\12' is
    wrong, '\\012' is ok) nor zero-prefixed ('\\0177' is wrong).

    Raises:
        ValueError: if ``char_num`` is outside [0, 0177].
    """
    if char_num > 0o177 or char_num < 0:
        raise ValueError(f"Character {char_num} is an out-of-range delimiter")
    return "\\%03o" % char_num


def _create_verb(external: bool, fail_if_exists: bool) -> str:
    verb = "CREATE EXTERNAL TABLE" if external else "CREATE TABLE"
    if not fail_if_exists:
        verb += " IF NOT EXISTS"
    return verb


def check_overrides(schema: SchemaDescriptor, overrides: Mapping[str, str]) -> None:
    """Every overridden column must be part of the import."""
    names = set(schema.column_names)
    for column in overrides:
        if column not in names:
            raise ConfigurationError(f"Unknown column in mapping: {column}", column=column)


def column_definitions(
    schema: SchemaDescriptor,
    overrides: Optional[Mapping[str, str]] = None,
    source: Optional[SourceMetadataProvider] = None,
    partition_key: Optional[str] = None,
    input_table: Optional[str] = None,
) -> List[Tuple[str, str]]:
    """Resolve ``(name, hive_type)`` for every column, in schema order."""
    overrides = overrides or {}
    check_overrides(schema, overrides)

    definitions = []
    for col in schema.columns:
        if col.name == partition_key:
            raise ConfigurationError(f"Partition key collides with column {col.name}", column=col.name)

        if schema.layout == FileLayout.TEXT:
            if source is None:
                raise ConfigurationError("Text layout needs a source metadata provider")
            hive_type = translate_column_type(col.name, col.source_type_code, overrides, source, table=input_table)
        else:
            hive_type = translate_logical_type(col.name, col.logical_type)
        definitions.append((col.name, hive_type))
    return definitions


def _storage_clause(layout: FileLayout, delimiters: DelimiterSet, compression_codec: Optional[str]) -> str:
    if layout == FileLayout.COLUMNAR:
        return "STORED AS PARQUET"

    clause = (
        f"ROW FORMAT DELIMITED FIELDS TERMINATED BY '{encode_delimiter(delimiters.field)}'"
        f" LINES TERMINATED BY '{encode_delimiter(delimiters.record)}'"
    )
    if compression_codec in LZOP_CODEC_NAMES:
        return f"{clause} STORED AS INPUTFORMAT '{LZO_INPUT_FORMAT}' OUTPUTFORMAT '{LZO_OUTPUT_FORMAT}'"
    return f"{clause} STORED AS TEXTFILE"


def create_table_sql(
    schema: SchemaDescriptor,
    target: TableTarget,
    partition: Optional[PartitionSpec] = None,
    delimiters: Optional[DelimiterSet] = None,
    overrides: Optional[Mapping[str, str]] = None,
    source: Optional[SourceMetadataProvider] = None,
    comments_enabled: bool = False,
    compression_codec: Optional[str] = None,
    fail_if_exists: bool = False,
    input_table: Optional[str] = None,
    definitions: Optional[List[Tuple[str, str]]] = None,
) -> str:
    """
    Generate the Hive CREATE TABLE statement for an import.

    ``definitions`` are the already resolved column types; they are resolved
    from ``schema`` when omitted.
    """
    partition = partition or PartitionSpec()
    delimiters = delimiters or DelimiterSet()

    if definitions is None:
        definitions = column_definitions(schema, overrides, source, partition.key, input_table)
    cols = ", ".join(f"`{name}` {hive_type}" for name, hive_type in definitions)

    sql = f"{_create_verb(target.external, fail_if_exists)} {target.qualified_name} ( {cols}) "
    if comments_enabled:
        sql += f"COMMENT 'Imported by hive-table-writer on {datetime.now().strftime(COMMENT_DATE_FORMAT)}' "
    if partition.key is not None:
        sql += f"PARTITIONED BY ({partition.key} STRING) "
    sql += _storage_clause(schema.layout, delimiters, compression_codec)
    if target.external:
        sql += f" LOCATION '{target.external_location}'"

    logger.debug(f"Create statement: {sql}")
    return sql


def export_schema_yaml(table_name: str, columns: List[Tuple[str, str]], output_dir: str) -> Path:
    """Write the resolved Hive column definitions to a YAML file."""
    path = Path(output_dir) / f"{table_name.lower()}_schema.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.safe_dump([{"name": name, "type": hive_type} for name, hive_type in columns], f, sort_keys=False)
    return path
