"""
Generate Hive CREATE TABLE and LOAD DATA statements for imported data.

The schema of a source table, query or columnar file is translated into the
statements that register the imported files as a Hive table.
"""

from .config import Config, ImportOptions, load_options
from .data_loader import get_final_path, load_data_sql, resolve_table_path
from .ddl_generator import create_table_sql, encode_delimiter
from .errors import ConfigurationError, HiveTableWriterError, TranslationError
from .models import ColumnSpec, DelimiterSet, FileLayout, PartitionSpec, SchemaDescriptor, TableTarget
from .pipeline_runner import HiveStatements, generate_statements
from .schema_resolver import resolve_column_names, resolve_schema

__all__ = [
    'Config',
    'ImportOptions',
    'load_options',
    'get_final_path',
    'load_data_sql',
    'resolve_table_path',
    'create_table_sql',
    'encode_delimiter',
    'ConfigurationError',
    'HiveTableWriterError',
    'TranslationError',
    'ColumnSpec',
    'DelimiterSet',
    'FileLayout',
    'PartitionSpec',
    'SchemaDescriptor',
    'TableTarget',
    'HiveStatements',
    'generate_statements',
    'resolve_column_names',
    'resolve_schema',
]

__version__ = '1.0.0'
