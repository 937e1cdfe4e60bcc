import json
import logging

from hive_table_writer.logging_config import LoggingConfig, StructuredFormatter, get_logger, setup_logging


def test_structured_formatter_includes_column():
    record = logging.LogRecord('hive_table_writer.type_translator', logging.WARNING, __file__, 10,
                               'lossy cast', None, None)
    record.column = 'amount'
    entry = json.loads(StructuredFormatter().format(record))
    assert entry['level'] == 'WARNING'
    assert entry['message'] == 'lossy cast'
    assert entry['column'] == 'amount'
    assert 'table' not in entry


def test_setup_logging_file_handler(tmp_path):
    log_file = tmp_path / 'logs' / 'run.log'
    config = LoggingConfig(
        enable_file_logging=True,
        enable_console_logging=False,
        log_file_path=str(log_file),
        level='DEBUG',
    )
    root = setup_logging(config)
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], logging.handlers.RotatingFileHandler)
    logging.getLogger('hive_table_writer.test').info('hello')
    root.handlers[0].flush()
    root.handlers[0].close()
    assert 'hello' in log_file.read_text()


def test_noisy_loggers_suppressed():
    setup_logging(LoggingConfig(level='DEBUG'))
    assert logging.getLogger('sqlalchemy.engine').level == logging.WARNING


def test_get_logger_configures_logging_once():
    root = logging.getLogger()
    root.handlers.clear()
    logger = get_logger('hive_table_writer.pipeline_runner')
    assert logger.name == 'hive_table_writer.pipeline_runner'
    assert len(root.handlers) == 1
    get_logger('hive_table_writer.other')
    assert len(root.handlers) == 1
