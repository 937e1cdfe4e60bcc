"""Immutable records describing one statement-generation request."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .hive_types import LogicalType


class FileLayout(str, Enum):
    """Storage layout of the imported data."""
    TEXT = "text"
    COLUMNAR = "columnar"


@dataclass(frozen=True)
class ColumnSpec:
    """One imported column.

    Text-layout columns carry a JDBC ``source_type_code``; columnar-layout
    columns carry the ``logical_type`` read from the columnar schema. A
    column may carry neither when its source reported no type; translating
    it then fails unless the column has a type override.
    """
    name: str
    source_type_code: Optional[int] = None
    logical_type: Optional[LogicalType] = None

    def __post_init__(self):
        if self.source_type_code is not None and self.logical_type is not None:
            raise ValueError(f"column {self.name} has both a source type code and a logical type")


@dataclass(frozen=True)
class SchemaDescriptor:
    """Ordered column list plus the layout it was resolved for."""
    columns: Tuple[ColumnSpec, ...]
    layout: FileLayout = FileLayout.TEXT

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]


@dataclass(frozen=True)
class TableTarget:
    """The Hive table being created or loaded."""
    table_name: str
    database_name: Optional[str] = None
    external_location: Optional[str] = None

    @property
    def external(self) -> bool:
        return bool(self.external_location and self.external_location.strip())

    @property
    def qualified_name(self) -> str:
        if self.database_name is not None:
            return f"`{self.database_name}`.`{self.table_name}`"
        return f"`{self.table_name}`"


@dataclass(frozen=True)
class PartitionSpec:
    """Static partition the data is loaded into."""
    key: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class DelimiterSet:
    """Field and record delimiters as byte values."""
    field: int = ord(",")
    record: int = ord("\n")

    def __post_init__(self):
        for label, value in (("field", self.field), ("record", self.record)):
            if not 0 <= value <= 0o177:
                raise ValueError(f"{label} delimiter {value} is outside [0, 127]")
