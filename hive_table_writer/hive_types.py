"""Static type tables mapping JDBC and Avro types onto Hive column types."""

from __future__ import annotations
from enum import Enum, IntEnum
from typing import Optional, Tuple, Union

HIVE_TYPE_TINYINT = "TINYINT"
HIVE_TYPE_INT = "INT"
HIVE_TYPE_BIGINT = "BIGINT"
HIVE_TYPE_FLOAT = "FLOAT"
HIVE_TYPE_DOUBLE = "DOUBLE"
HIVE_TYPE_BOOLEAN = "BOOLEAN"
HIVE_TYPE_STRING = "STRING"
HIVE_TYPE_BINARY = "BINARY"


class SqlType(IntEnum):
    """JDBC type codes (java.sql.Types) reported by source metadata providers."""
    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    BLOB = 2004
    CLOB = 2005
    BOOLEAN = 16
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16


class AvroType(str, Enum):
    """Avro schema types as they appear in a columnar schema."""
    RECORD = "record"
    ENUM = "enum"
    ARRAY = "array"
    MAP = "map"
    UNION = "union"
    FIXED = "fixed"
    STRING = "string"
    BYTES = "bytes"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    NULL = "null"


# A field's logical type: a plain Avro type or a union of them.
LogicalType = Union[AvroType, Tuple[AvroType, ...]]


SQL_TO_HIVE = {
    SqlType.INTEGER: HIVE_TYPE_INT,
    SqlType.SMALLINT: HIVE_TYPE_INT,
    SqlType.VARCHAR: HIVE_TYPE_STRING,
    SqlType.CHAR: HIVE_TYPE_STRING,
    SqlType.LONGVARCHAR: HIVE_TYPE_STRING,
    SqlType.NVARCHAR: HIVE_TYPE_STRING,
    SqlType.NCHAR: HIVE_TYPE_STRING,
    SqlType.LONGNVARCHAR: HIVE_TYPE_STRING,
    SqlType.DATE: HIVE_TYPE_STRING,
    SqlType.TIME: HIVE_TYPE_STRING,
    SqlType.TIMESTAMP: HIVE_TYPE_STRING,
    SqlType.CLOB: HIVE_TYPE_STRING,
    SqlType.NUMERIC: HIVE_TYPE_DOUBLE,
    SqlType.DECIMAL: HIVE_TYPE_DOUBLE,
    SqlType.FLOAT: HIVE_TYPE_DOUBLE,
    SqlType.DOUBLE: HIVE_TYPE_DOUBLE,
    SqlType.REAL: HIVE_TYPE_DOUBLE,
    SqlType.BIT: HIVE_TYPE_BOOLEAN,
    SqlType.BOOLEAN: HIVE_TYPE_BOOLEAN,
    SqlType.TINYINT: HIVE_TYPE_TINYINT,
    SqlType.BIGINT: HIVE_TYPE_BIGINT,
}

# Types Hive can only hold approximately.
IMPROVISED_SQL_TYPES = frozenset({
    SqlType.DATE,
    SqlType.TIME,
    SqlType.TIMESTAMP,
    SqlType.DECIMAL,
    SqlType.NUMERIC,
})

AVRO_TO_HIVE = {
    AvroType.BOOLEAN: HIVE_TYPE_BOOLEAN,
    AvroType.INT: HIVE_TYPE_INT,
    AvroType.LONG: HIVE_TYPE_BIGINT,
    AvroType.FLOAT: HIVE_TYPE_FLOAT,
    AvroType.DOUBLE: HIVE_TYPE_DOUBLE,
    AvroType.STRING: HIVE_TYPE_STRING,
    AvroType.ENUM: HIVE_TYPE_STRING,
    AvroType.BYTES: HIVE_TYPE_BINARY,
    AvroType.FIXED: HIVE_TYPE_BINARY,
}


def to_hive_type(sql_type: Optional[int]) -> Optional[str]:
    """Return the Hive type for a JDBC type code, or None if Hive has none."""
    if sql_type is None:
        return None
    return SQL_TO_HIVE.get(sql_type)


def is_hive_type_improvised(sql_type: Optional[int]) -> bool:
    """True if the Hive type chosen for ``sql_type`` loses precision."""
    return sql_type in IMPROVISED_SQL_TYPES


def avro_to_hive_type(avro_type: Optional[AvroType]) -> Optional[str]:
    """Return the Hive type for a non-union Avro type."""
    if avro_type is None:
        return None
    return AVRO_TO_HIVE.get(avro_type)
