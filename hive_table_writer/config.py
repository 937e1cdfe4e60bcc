"""Configuration for a Hive statement-generation run.

``ImportOptions`` is the immutable record every builder reads from. ``Config``
loads it from a YAML file, with site defaults and secrets taken from a
``.env`` file / the environment.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError
from .logging_config import LoggingConfig
from .models import DelimiterSet, FileLayout, PartitionSpec, TableTarget


class ImportOptions(BaseModel):
    """Options describing one import, built once and never mutated."""
    model_config = ConfigDict(frozen=True, extra='forbid', str_strip_whitespace=True)

    # Where the columns come from
    columns: Optional[Tuple[str, ...]] = Field(default=None, description="Explicit column list")
    input_table: Optional[str] = Field(default=None, description="Source table name")
    sql_query: Optional[str] = Field(default=None, description="Free-form source query")
    file_layout: FileLayout = Field(default=FileLayout.TEXT)
    avro_schema: Optional[str] = Field(default=None, description="Avro record schema (JSON) of columnar data")
    parquet_path: Optional[str] = Field(default=None, description="Parquet file to read the columnar schema from")

    # Hive table
    hive_table: Optional[str] = None
    hive_database: Optional[str] = None
    map_column_hive: Dict[str, str] = Field(default_factory=dict, description="Column -> Hive type overrides")
    partition_key: Optional[str] = None
    partition_value: Optional[str] = None
    fail_if_table_exists: bool = False
    overwrite: bool = False
    external_table_dir: Optional[str] = None
    comments_enabled: bool = True

    # Data files
    warehouse_dir: Optional[str] = None
    target_dir: Optional[str] = None
    field_delimiter: int = ord(",")
    record_delimiter: int = ord("\n")
    compression_codec: Optional[str] = None

    @field_validator('columns', mode='before')
    @classmethod
    def split_columns(cls, v):
        if isinstance(v, str):
            return tuple(col.strip() for col in v.split(',') if col.strip())
        return v

    @field_validator('field_delimiter', 'record_delimiter', mode='before')
    @classmethod
    def delimiter_code(cls, v):
        if isinstance(v, str):
            if len(v) != 1:
                raise ValueError(f"delimiter must be a single character, got {v!r}")
            return ord(v)
        return v

    @property
    def output_table_name(self) -> str:
        """Hive table name; defaults to the input table name."""
        if self.hive_table:
            return self.hive_table
        if self.input_table:
            return self.input_table
        raise ConfigurationError("a Hive table name is required when importing a free-form query")

    def table_target(self) -> TableTarget:
        return TableTarget(
            table_name=self.output_table_name,
            database_name=self.hive_database,
            external_location=self.external_table_dir,
        )

    def partition_spec(self) -> PartitionSpec:
        return PartitionSpec(key=self.partition_key, value=self.partition_value)

    def delimiter_set(self) -> DelimiterSet:
        return DelimiterSet(field=self.field_delimiter, record=self.record_delimiter)


class Config:
    """Load configuration from YAML file and .env environment."""

    def __init__(self, config_path: str = "config.yaml", env_path: str = ".env"):
        env_file = Path(env_path)
        if env_file.exists():
            load_dotenv(env_file)
        self._config_path = Path(config_path)
        self.config_data: Dict = {}
        if self._config_path.exists():
            with self._config_path.open() as f:
                self.config_data = yaml.safe_load(f) or {}
        self._load_env()

    def _load_env(self) -> None:
        self.env_source_url = os.getenv("HIVE_WRITER_SOURCE_URL")
        self.env_warehouse_dir = os.getenv("HIVE_WRITER_WAREHOUSE_DIR")
        self.env_default_fs = os.getenv("HIVE_WRITER_DEFAULT_FS", "file:///")

    @property
    def source_url(self) -> Optional[str]:
        return self.config_data.get("source_url", self.env_source_url)

    @property
    def default_fs(self) -> str:
        return self.config_data.get("default_fs", self.env_default_fs)

    @property
    def working_dir(self) -> Optional[str]:
        return self.config_data.get("working_dir")

    @property
    def export_schema_dir(self) -> Optional[str]:
        return self.config_data.get("export_schema_dir")

    @property
    def output_script(self) -> Optional[str]:
        return self.config_data.get("output_script")

    @property
    def logging(self) -> LoggingConfig:
        return LoggingConfig(**(self.config_data.get("logging") or {}))

    @property
    def import_options(self) -> ImportOptions:
        data: Dict[str, Any] = dict(self.config_data.get("import") or {})
        if self.env_warehouse_dir and "warehouse_dir" not in data:
            data["warehouse_dir"] = self.env_warehouse_dir
        return ImportOptions(**data)


def load_options(config_path: str = "config.yaml", env_path: str = ".env") -> ImportOptions:
    """Shortcut returning just the import options of a config file."""
    return Config(config_path, env_path).import_options
