"""Resolve the ordered column list and column types of an import."""

from __future__ import annotations
import logging
from typing import Dict, List, Optional

from .columnar import ColumnarSchemaProvider
from .config import ImportOptions
from .errors import ConfigurationError
from .metadata import SourceMetadataProvider
from .models import ColumnSpec, FileLayout, SchemaDescriptor

logger = logging.getLogger(__name__)


def _require_columnar(columnar: Optional[ColumnarSchemaProvider]) -> ColumnarSchemaProvider:
    if columnar is None:
        raise ConfigurationError("Columnar layout needs a columnar schema")
    return columnar


def _require_query(options: ImportOptions) -> str:
    if not options.sql_query:
        raise ConfigurationError("Either an input table or a query is required")
    return options.sql_query


def resolve_column_names(
    options: ImportOptions,
    source: SourceMetadataProvider,
    columnar: Optional[ColumnarSchemaProvider] = None,
) -> List[str]:
    """
    Return the names of the columns to import, in import order.

    Precedence: explicit column list, columnar schema, input table, query.
    """
    if options.columns:
        names = list(options.columns)
    elif options.file_layout == FileLayout.COLUMNAR:
        names = [name for name, _ in _require_columnar(columnar).fields()]
    elif options.input_table is not None:
        names = source.column_names(options.input_table)
    else:
        names = source.column_names_for_query(_require_query(options))

    if not names:
        raise ConfigurationError("No columns found for import")
    return names


def _source_types(options: ImportOptions, source: SourceMetadataProvider) -> Dict[str, int]:
    # The provider's connection was opened when the import started and may be stale.
    source.discard_connection(True)
    if options.input_table is not None:
        return source.column_types(options.input_table)
    return source.column_types_for_query(_require_query(options))


def resolve_schema(
    options: ImportOptions,
    source: SourceMetadataProvider,
    columnar: Optional[ColumnarSchemaProvider] = None,
) -> SchemaDescriptor:
    """Build the schema descriptor for one statement-generation request."""
    if options.file_layout == FileLayout.COLUMNAR:
        logical_types = dict(_require_columnar(columnar).fields())
        names = resolve_column_names(options, source, columnar)
        columns = tuple(ColumnSpec(name, logical_type=logical_types.get(name)) for name in names)
    else:
        types = _source_types(options, source)
        names = resolve_column_names(options, source, columnar)
        columns = tuple(ColumnSpec(name, source_type_code=types.get(name)) for name in names)

    logger.info(f"Resolved {len(columns)} columns for {options.file_layout.value} layout")
    return SchemaDescriptor(columns=columns, layout=options.file_layout)
