from __future__ import annotations
"""Generate the Hive statements for an import and write them out."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .columnar import AvroSchemaProvider, ColumnarSchemaProvider, ParquetSchemaProvider
from .config import Config, ImportOptions
from .data_loader import get_final_path, load_data_sql
from .ddl_generator import column_definitions, create_table_sql, export_schema_yaml
from .errors import ConfigurationError, HiveTableWriterError
from .logging_config import get_logger, setup_logging
from .metadata import SourceMetadataProvider, SqlAlchemyMetadataProvider
from .models import FileLayout
from .paths import FileSystemQualifier, PathQualifier
from .schema_resolver import resolve_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HiveStatements:
    """The two statements registering imported data as a Hive table."""
    create_table: str
    load_data: str
    # Resolved (name, hive_type) of every column
    columns: Tuple[Tuple[str, str], ...] = ()

    def as_script(self) -> str:
        return f"{self.create_table};\n{self.load_data};\n"


def columnar_provider_for(options: ImportOptions) -> Optional[ColumnarSchemaProvider]:
    """Pick the columnar schema source named in the options, if any."""
    if options.avro_schema:
        return AvroSchemaProvider(options.avro_schema)
    if options.parquet_path:
        return ParquetSchemaProvider(options.parquet_path)
    return None


def generate_statements(
    options: ImportOptions,
    source: Optional[SourceMetadataProvider],
    columnar: Optional[ColumnarSchemaProvider] = None,
    qualifier: Optional[PathQualifier] = None,
) -> HiveStatements:
    """Build the CREATE TABLE and LOAD DATA statements for one import."""
    if source is None and options.file_layout == FileLayout.TEXT:
        raise ConfigurationError("Text layout imports need a source database")
    qualifier = qualifier or FileSystemQualifier()

    schema = resolve_schema(options, source, columnar)
    target = options.table_target()
    partition = options.partition_spec()
    definitions = column_definitions(
        schema, options.map_column_hive, source, partition.key, options.input_table
    )

    create_stmt = create_table_sql(
        schema,
        target,
        partition=partition,
        delimiters=options.delimiter_set(),
        overrides=options.map_column_hive,
        source=source,
        comments_enabled=options.comments_enabled,
        compression_codec=options.compression_codec,
        fail_if_exists=options.fail_if_table_exists,
        input_table=options.input_table,
        definitions=definitions,
    )
    load_stmt = load_data_sql(
        get_final_path(options, qualifier),
        target,
        overwrite=options.overwrite,
        partition=partition,
    )
    logger.info(f"Generated statements for Hive table {target.qualified_name}")
    return HiveStatements(create_table=create_stmt, load_data=load_stmt, columns=tuple(definitions))


def write_script(statements: HiveStatements, path: str) -> Path:
    """Write the statements to a Hive script file."""
    script = Path(path)
    script.parent.mkdir(parents=True, exist_ok=True)
    script.write_text(statements.as_script())
    logger.info(f"Wrote Hive script to {script}")
    return script


def run_pipeline(config_path: str = "config.yaml", env_path: str = ".env", output: Optional[str] = None) -> HiveStatements:
    """Generate the statements described by a config file."""
    config = Config(config_path, env_path)
    setup_logging(config.logging)
    options = config.import_options

    source = SqlAlchemyMetadataProvider(config.source_url) if config.source_url else None
    try:
        columnar = columnar_provider_for(options)
        qualifier = FileSystemQualifier(config.default_fs, config.working_dir)
        statements = generate_statements(options, source, columnar, qualifier)

        if config.export_schema_dir:
            export_schema_yaml(options.output_table_name, list(statements.columns), config.export_schema_dir)
    finally:
        if source is not None:
            source.close()

    output = output or config.output_script
    if output:
        write_script(statements, output)
    else:
        sys.stdout.write(statements.as_script())
    return statements


def main(argv=None) -> int:
    import argparse
    parser = argparse.ArgumentParser(description="Generate Hive CREATE TABLE and LOAD DATA statements")
    parser.add_argument("--config", default="config.yaml")
    parser.add_argument("--env", default=".env")
    parser.add_argument("--output", help="Write a Hive script here instead of printing it")
    args = parser.parse_args(argv)
    try:
        run_pipeline(args.config, args.env, args.output)
    except (HiveTableWriterError, ValueError) as e:
        # Config may have failed before setup_logging ran
        get_logger(__name__).error(f"Statement generation failed: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
