"""Field lists of self-describing columnar data (Avro schema or Parquet footer)."""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, List, Protocol, Tuple, Union

from .errors import ConfigurationError
from .hive_types import AvroType, LogicalType

logger = logging.getLogger(__name__)

ColumnarField = Tuple[str, LogicalType]


class ColumnarSchemaProvider(Protocol):
    """Protocol for anything that lists the fields of columnar data in order."""

    def fields(self) -> List[ColumnarField]:
        ...


def _avro_type(node: Any) -> AvroType:
    if isinstance(node, dict):
        node = node.get("type")
    try:
        return AvroType(node)
    except ValueError:
        raise ConfigurationError(f"Unsupported Avro type {node!r}") from None


def parse_avro_type(node: Any) -> LogicalType:
    """Turn the ``type`` of an Avro field into a logical type."""
    if isinstance(node, list):
        return tuple(_avro_type(branch) for branch in node)
    return _avro_type(node)


class AvroSchemaProvider:
    """Fields of an Avro record schema given as JSON text."""

    def __init__(self, schema_json: str):
        self.schema = json.loads(schema_json)
        if not isinstance(self.schema, dict) or self.schema.get("type") != "record":
            raise ConfigurationError("Columnar schema must be an Avro record")

    def fields(self) -> List[ColumnarField]:
        return [(field["name"], parse_avro_type(field["type"])) for field in self.schema.get("fields", [])]


def arrow_logical_type(arrow_type: Any) -> AvroType:
    """Map a pyarrow data type onto the Avro type it is imported as."""
    import pyarrow.types as pat

    if pat.is_boolean(arrow_type):
        return AvroType.BOOLEAN
    if pat.is_int8(arrow_type) or pat.is_int16(arrow_type) or pat.is_int32(arrow_type):
        return AvroType.INT
    if pat.is_uint8(arrow_type) or pat.is_uint16(arrow_type):
        return AvroType.INT
    if pat.is_integer(arrow_type) or pat.is_timestamp(arrow_type):
        return AvroType.LONG
    if pat.is_date32(arrow_type):
        return AvroType.INT
    if pat.is_float16(arrow_type) or pat.is_float32(arrow_type):
        return AvroType.FLOAT
    if pat.is_float64(arrow_type):
        return AvroType.DOUBLE
    if pat.is_string(arrow_type) or pat.is_large_string(arrow_type) or pat.is_dictionary(arrow_type):
        return AvroType.STRING
    if pat.is_fixed_size_binary(arrow_type):
        return AvroType.FIXED
    if pat.is_binary(arrow_type) or pat.is_large_binary(arrow_type) or pat.is_decimal(arrow_type):
        return AvroType.BYTES
    if pat.is_list(arrow_type) or pat.is_large_list(arrow_type):
        return AvroType.ARRAY
    if pat.is_map(arrow_type):
        return AvroType.MAP
    if pat.is_struct(arrow_type):
        return AvroType.RECORD
    raise ConfigurationError(f"Unsupported Parquet type {arrow_type}")


class ParquetSchemaProvider:
    """Fields of a Parquet file, read from its footer."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def fields(self) -> List[ColumnarField]:
        import pyarrow.parquet as pq

        schema = pq.read_schema(self.path)
        logger.debug(f"Read {len(schema)} fields from {self.path}")
        result: List[ColumnarField] = []
        for field in schema:
            logical = arrow_logical_type(field.type)
            # Nullable columns become optional unions, like Avro writes them.
            result.append((field.name, (AvroType.NULL, logical) if field.nullable else logical))
        return result
