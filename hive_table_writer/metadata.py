from __future__ import annotations
"""Source database metadata used to describe the imported columns."""

import logging
import uuid
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from sqlalchemy import create_engine, inspect, text, types as sqltypes
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from . import hive_types
from .hive_types import SqlType

logger = logging.getLogger(__name__)

# Placeholder a free-form query uses for its split conditions.
CONDITIONS_TOKEN = "$CONDITIONS"


class SourceMetadataProvider(Protocol):
    """
    Protocol for whatever describes the source columns.

    Column types are JDBC type codes (see ``hive_types.SqlType``).
    """

    def column_names(self, table: str) -> List[str]:
        ...

    def column_names_for_query(self, query: str) -> List[str]:
        ...

    def column_types(self, table: str) -> Dict[str, int]:
        ...

    def column_types_for_query(self, query: str) -> Dict[str, int]:
        ...

    def type_token(self, table: Optional[str], column: str, sql_type: Optional[int]) -> Optional[str]:
        """Hive type for a source column, or None when there is none."""
        ...

    def is_lossy_type(self, sql_type: Optional[int]) -> bool:
        ...

    def discard_connection(self, force_reconnect: bool) -> None:
        """Drop the current connection, optionally opening a fresh one."""
        ...


# Checked in order, subclasses before their bases.
_SQLALCHEMY_TYPE_CODES = (
    (sqltypes.Boolean, SqlType.BOOLEAN),
    (sqltypes.SmallInteger, SqlType.SMALLINT),
    (sqltypes.BigInteger, SqlType.BIGINT),
    (sqltypes.Integer, SqlType.INTEGER),
    (sqltypes.REAL, SqlType.REAL),
    (sqltypes.Double, SqlType.DOUBLE),
    (sqltypes.Float, SqlType.FLOAT),
    (sqltypes.DECIMAL, SqlType.DECIMAL),
    (sqltypes.Numeric, SqlType.NUMERIC),
    (sqltypes.DateTime, SqlType.TIMESTAMP),
    (sqltypes.Date, SqlType.DATE),
    (sqltypes.Time, SqlType.TIME),
    (sqltypes.CLOB, SqlType.CLOB),
    (sqltypes.Text, SqlType.LONGVARCHAR),
    (sqltypes.NCHAR, SqlType.NCHAR),
    (sqltypes.NVARCHAR, SqlType.NVARCHAR),
    (sqltypes.CHAR, SqlType.CHAR),
    (sqltypes.String, SqlType.VARCHAR),
    (sqltypes.LargeBinary, SqlType.LONGVARBINARY),
    (sqltypes.VARBINARY, SqlType.VARBINARY),
    (sqltypes.BINARY, SqlType.BINARY),
)

# PEP 249 type objects compare equal to the cursor.description type codes.
_DBAPI_TYPE_CODES = (
    ("NUMBER", SqlType.NUMERIC),
    ("DATETIME", SqlType.TIMESTAMP),
    ("BINARY", SqlType.BINARY),
    ("STRING", SqlType.VARCHAR),
)


def sqlalchemy_type_code(sa_type: Any) -> int:
    """Map a reflected SQLAlchemy column type onto a JDBC type code."""
    for sa_class, code in _SQLALCHEMY_TYPE_CODES:
        if isinstance(sa_type, sa_class):
            return code
    return SqlType.OTHER


def bound_query(query: str) -> str:
    """Rewrite a free-form query so it returns no rows."""
    if CONDITIONS_TOKEN in query:
        return query.replace(CONDITIONS_TOKEN, "(1 = 0)")
    return f"SELECT * FROM ({query}) t WHERE 1 = 0"


class SqlAlchemyMetadataProvider:
    """Describe source tables and queries through a SQLAlchemy engine."""

    def __init__(self, engine: Union[str, Engine], schema: Optional[str] = None):
        self.engine = create_engine(engine) if isinstance(engine, str) else engine
        self.schema = schema
        self._conn: Optional[Connection] = None

    def connect(self) -> None:
        self._conn = self.engine.connect()

    def _connection(self) -> Connection:
        if self._conn is None:
            self.connect()
        return self._conn

    def _reflect(self, table: str) -> List[Dict[str, Any]]:
        return inspect(self._connection()).get_columns(table, schema=self.schema)

    def _describe(self, query: str) -> List[Tuple[str, Any]]:
        """(name, DB-API type code) of every column the query returns."""
        result = self._connection().execute(text(bound_query(query)))
        try:
            names = list(result.keys())
            description = getattr(result.cursor, "description", None) or []
            type_codes = [desc[1] for desc in description] or [None] * len(names)
            return list(zip(names, type_codes))
        finally:
            result.close()

    def _reflect_query(self, query: str) -> List[Dict[str, Any]]:
        """Reflect the columns of a query through a temporary view over it."""
        conn = self._connection()
        view = f"hive_writer_{uuid.uuid4().hex[:12]}"
        conn.execute(text(f"CREATE TEMPORARY VIEW {view} AS {bound_query(query)}"))
        try:
            return inspect(conn).get_columns(view)
        finally:
            conn.execute(text(f"DROP VIEW {view}"))

    def _dbapi_type_code(self, type_code: Any) -> int:
        dbapi = self.engine.dialect.loaded_dbapi
        for attr, code in _DBAPI_TYPE_CODES:
            type_obj = getattr(dbapi, attr, None)
            if type_obj is not None and type_code == type_obj:
                return code
        return SqlType.OTHER

    def column_names(self, table: str) -> List[str]:
        return [col["name"] for col in self._reflect(table)]

    def column_names_for_query(self, query: str) -> List[str]:
        return [desc[0] for desc in self._describe(query)]

    def column_types(self, table: str) -> Dict[str, int]:
        return {col["name"]: sqlalchemy_type_code(col["type"]) for col in self._reflect(table)}

    def column_types_for_query(self, query: str) -> Dict[str, int]:
        try:
            columns = self._reflect_query(query)
        except SQLAlchemyError as e:
            logger.warning(f"Could not reflect query columns, guessing from driver type codes: {e}")
            self._connection().rollback()
            return {desc[0]: self._dbapi_type_code(desc[1]) for desc in self._describe(query)}
        return {col["name"]: sqlalchemy_type_code(col["type"]) for col in columns}

    def type_token(self, table: Optional[str], column: str, sql_type: Optional[int]) -> Optional[str]:
        return hive_types.to_hive_type(sql_type)

    def is_lossy_type(self, sql_type: Optional[int]) -> bool:
        return hive_types.is_hive_type_improvised(sql_type)

    def discard_connection(self, force_reconnect: bool) -> None:
        logger.debug(f"Discarding source connection (reconnect={force_reconnect})")
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self.engine.dispose()
        if force_reconnect:
            self.connect()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self.engine.dispose()
