from __future__ import annotations
"""Build the LOAD DATA statement moving imported files into the Hive table."""

import logging
from typing import Optional

from .config import ImportOptions
from .errors import ConfigurationError
from .models import PartitionSpec, TableTarget
from .paths import PathQualifier

logger = logging.getLogger(__name__)


def resolve_table_path(options: ImportOptions) -> str:
    """
    Location of the imported files before filesystem qualification.

    Warehouse dir (if any) followed by the target dir, or else the input
    table name.
    """
    warehouse_dir = options.warehouse_dir or ""
    if warehouse_dir and not warehouse_dir.endswith("/"):
        warehouse_dir += "/"

    if options.target_dir is not None:
        return warehouse_dir + options.target_dir
    if options.input_table is not None:
        return warehouse_dir + options.input_table
    raise ConfigurationError("Cannot locate imported data: no target dir and no input table")


def get_final_path(options: ImportOptions, qualifier: PathQualifier) -> str:
    return qualifier.qualify(resolve_table_path(options))


def load_data_sql(
    source_path: str,
    target: TableTarget,
    overwrite: bool = False,
    partition: Optional[PartitionSpec] = None,
) -> str:
    """Generate the Hive LOAD DATA statement for the imported files."""
    sql = f"LOAD DATA INPATH '{source_path}'"
    if overwrite:
        sql += " OVERWRITE"
    sql += f" INTO TABLE {target.qualified_name}"

    if partition is not None and partition.key is not None:
        if partition.value is None:
            raise ConfigurationError(f"Partition key {partition.key} has no value")
        sql += f" PARTITION ({partition.key}='{partition.value}')"

    logger.debug(f"Load statement: {sql}")
    return sql
