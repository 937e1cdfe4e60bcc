import json

import pytest
import yaml
from sqlalchemy import create_engine, text

from hive_table_writer.columnar import AvroSchemaProvider
from hive_table_writer.config import ImportOptions
from hive_table_writer.errors import ConfigurationError
from hive_table_writer.hive_types import SqlType
from hive_table_writer.metadata import SqlAlchemyMetadataProvider
from hive_table_writer.models import FileLayout
from hive_table_writer.paths import FileSystemQualifier
from hive_table_writer.pipeline_runner import (
    columnar_provider_for, generate_statements, main, run_pipeline, write_script,
)


providers = []


@pytest.fixture
def dummy_source(monkeypatch, make_provider):
    """Replace the SQLAlchemy provider with an in-memory one."""
    providers.clear()

    class Provider(make_provider):
        def __init__(self, url):
            super().__init__({'id': SqlType.INTEGER, 'amount': SqlType.DECIMAL, 'name': SqlType.VARCHAR})
            self.url = url
            self.closed = False
            providers.append(self)

        def close(self):
            self.closed = True

    monkeypatch.setattr('hive_table_writer.pipeline_runner.SqlAlchemyMetadataProvider', Provider)
    return providers


def test_generate_statements(orders_provider):
    options = ImportOptions(
        input_table='orders',
        warehouse_dir='/w',
        partition_key='ds',
        partition_value='2024-01-01',
        overwrite=True,
        comments_enabled=False,
    )
    statements = generate_statements(options, orders_provider, qualifier=FileSystemQualifier('hdfs://nn:8020'))
    assert statements.create_table == (
        "CREATE TABLE IF NOT EXISTS `orders` ( `id` INT, `name` STRING) PARTITIONED BY (ds STRING) "
        "ROW FORMAT DELIMITED FIELDS TERMINATED BY '\\054' LINES TERMINATED BY '\\012' STORED AS TEXTFILE"
    )
    assert statements.load_data == (
        "LOAD DATA INPATH 'hdfs://nn:8020/w/orders' OVERWRITE INTO TABLE `orders` PARTITION (ds='2024-01-01')"
    )
    assert orders_provider.calls[0] == ('discard_connection', True)


def test_generate_statements_columnar_without_source():
    avro = json.dumps({'type': 'record', 'name': 'r', 'fields': [{'name': 'id', 'type': ['null', 'int']}]})
    options = ImportOptions(
        input_table='orders', file_layout=FileLayout.COLUMNAR, avro_schema=avro, comments_enabled=False,
    )
    statements = generate_statements(
        options, None, columnar_provider_for(options), FileSystemQualifier(working_dir='/home/etl'),
    )
    assert statements.create_table == "CREATE TABLE IF NOT EXISTS `orders` ( `id` INT) STORED AS PARQUET"
    assert statements.load_data == "LOAD DATA INPATH 'file:///home/etl/orders' INTO TABLE `orders`"


def test_text_layout_needs_source():
    with pytest.raises(ConfigurationError):
        generate_statements(ImportOptions(input_table='orders'), None)


def test_columnar_provider_for():
    assert columnar_provider_for(ImportOptions(input_table='t')) is None
    avro = json.dumps({'type': 'record', 'name': 'r', 'fields': []})
    assert isinstance(columnar_provider_for(ImportOptions(avro_schema=avro)), AvroSchemaProvider)


def test_write_script(tmp_path, orders_provider):
    options = ImportOptions(input_table='orders', comments_enabled=False)
    statements = generate_statements(options, orders_provider, qualifier=FileSystemQualifier(working_dir='/tmp'))
    script = write_script(statements, str(tmp_path / 'out' / 'orders.q'))
    lines = script.read_text().splitlines()
    assert lines == [statements.create_table + ';', statements.load_data + ';']


def test_run_pipeline(dummy_source, tmp_path):
    config = {
        'source_url': 'sqlite:///unused.db',
        'default_fs': 'hdfs://nn:8020',
        'export_schema_dir': str(tmp_path / 'schemas'),
        'output_script': str(tmp_path / 'orders.q'),
        'logging': {'level': 'WARNING', 'console_level': 'WARNING'},
        'import': {
            'input_table': 'orders',
            'hive_table': 'orders_raw',
            'warehouse_dir': '/warehouse',
            'map_column_hive': {'amount': 'DECIMAL(12,2)'},
        },
    }
    cfg_file = tmp_path / 'config.yaml'
    cfg_file.write_text(yaml.safe_dump(config))

    statements = run_pipeline(str(cfg_file), str(tmp_path / 'missing.env'))

    assert dummy_source[0].url == 'sqlite:///unused.db'
    assert dummy_source[0].closed
    assert '`id` INT, `amount` DECIMAL(12,2), `name` STRING' in statements.create_table
    assert "COMMENT 'Imported by hive-table-writer on " in statements.create_table
    assert statements.load_data == "LOAD DATA INPATH 'hdfs://nn:8020/warehouse/orders' INTO TABLE `orders_raw`"
    assert (tmp_path / 'orders.q').read_text() == statements.as_script()
    assert yaml.safe_load((tmp_path / 'schemas' / 'orders_raw_schema.yaml').read_text()) == [
        {'name': 'id', 'type': 'INT'},
        {'name': 'amount', 'type': 'DECIMAL(12,2)'},
        {'name': 'name', 'type': 'STRING'},
    ]


def test_run_pipeline_prints_statements(dummy_source, tmp_path, capsys):
    cfg_file = tmp_path / 'config.yaml'
    cfg_file.write_text(yaml.safe_dump({
        'source_url': 'sqlite:///unused.db',
        'import': {'input_table': 'orders', 'comments_enabled': False},
    }))
    statements = run_pipeline(str(cfg_file), str(tmp_path / 'missing.env'))
    assert capsys.readouterr().out == statements.as_script()


def test_main_reports_configuration_errors(dummy_source, tmp_path):
    cfg_file = tmp_path / 'config.yaml'
    cfg_file.write_text(yaml.safe_dump({
        'source_url': 'sqlite:///unused.db',
        'import': {'input_table': 'orders', 'partition_key': 'id', 'partition_value': '1'},
    }))
    assert main(['--config', str(cfg_file), '--env', str(tmp_path / 'missing.env')]) == 2
    assert dummy_source[0].closed


def test_generate_statements_for_query_import(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'source.db'}")
    with engine.begin() as conn:
        conn.execute(text('CREATE TABLE orders (id INTEGER, name VARCHAR(20))'))
    source = SqlAlchemyMetadataProvider(engine)
    options = ImportOptions(
        sql_query='SELECT id, name FROM orders WHERE $CONDITIONS',
        hive_table='orders',
        target_dir='/staging/orders',
        comments_enabled=False,
    )
    try:
        statements = generate_statements(options, source, qualifier=FileSystemQualifier())
    finally:
        source.close()
    assert statements.create_table.startswith("CREATE TABLE IF NOT EXISTS `orders` ( `id` INT, `name` STRING) ")
    assert statements.columns == (('id', 'INT'), ('name', 'STRING'))
    assert statements.load_data == "LOAD DATA INPATH 'file:///staging/orders' INTO TABLE `orders`"


def test_schema_export_reuses_resolved_columns(dummy_source, tmp_path, caplog, monkeypatch):
    # keep pytest's capture handler on the root logger
    monkeypatch.setattr('hive_table_writer.pipeline_runner.setup_logging', lambda config: None)
    cfg_file = tmp_path / 'config.yaml'
    cfg_file.write_text(yaml.safe_dump({
        'source_url': 'sqlite:///unused.db',
        'export_schema_dir': str(tmp_path / 'schemas'),
        'import': {'input_table': 'orders', 'comments_enabled': False},
    }))
    run_pipeline(str(cfg_file), str(tmp_path / 'missing.env'), output=str(tmp_path / 'orders.q'))

    assert dummy_source[0].calls.count(('discard_connection', True)) == 1
    lossy = [r for r in caplog.records if 'less precise' in r.getMessage()]
    assert len(lossy) == 1
    assert (tmp_path / 'schemas' / 'orders_schema.yaml').exists()


@pytest.mark.parametrize('import_section', [
    {'input_table': 'orders', 'field_delimiter': 200},
    {'input_table': 'orders', 'hive_partition': 'ds'},
])
def test_main_reports_invalid_options(dummy_source, tmp_path, import_section):
    cfg_file = tmp_path / 'config.yaml'
    cfg_file.write_text(yaml.safe_dump({'source_url': 'sqlite:///unused.db', 'import': import_section}))
    assert main(['--config', str(cfg_file), '--env', str(tmp_path / 'missing.env')]) == 2
