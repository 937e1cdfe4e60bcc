import logging

import pytest

from hive_table_writer import hive_types
from hive_table_writer.hive_types import SqlType


class DummyProvider:
    """In-memory source metadata provider recording every call."""

    def __init__(self, types, query_types=None):
        self.types = dict(types)
        self.query_types = dict(query_types if query_types is not None else types)
        self.calls = []

    def column_names(self, table):
        self.calls.append(('column_names', table))
        return list(self.types)

    def column_names_for_query(self, query):
        self.calls.append(('column_names_for_query', query))
        return list(self.query_types)

    def column_types(self, table):
        self.calls.append(('column_types', table))
        return dict(self.types)

    def column_types_for_query(self, query):
        self.calls.append(('column_types_for_query', query))
        return dict(self.query_types)

    def type_token(self, table, column, sql_type):
        return hive_types.to_hive_type(sql_type)

    def is_lossy_type(self, sql_type):
        return hive_types.is_hive_type_improvised(sql_type)

    def discard_connection(self, force_reconnect):
        self.calls.append(('discard_connection', force_reconnect))


@pytest.fixture
def make_provider():
    return DummyProvider


@pytest.fixture
def orders_provider():
    return DummyProvider({'id': SqlType.INTEGER, 'name': SqlType.VARCHAR})


@pytest.fixture(autouse=True)
def restore_root_logger():
    """run_pipeline reconfigures logging; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
