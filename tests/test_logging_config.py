"""Tests for logging setup."""

import logging

from common.logging_config import get_logger, set_correlation_id, setup_logging


def test_setup_logging_configures_single_handler():
    logger = setup_logging('test_component_a', log_level='DEBUG')
    again = setup_logging('test_component_a', log_level='DEBUG')

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_setup_logging_reads_env(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'error')
    logger = setup_logging('test_component_b')

    assert logger.level == logging.ERROR


def test_unknown_level_falls_back_to_info():
    logger = setup_logging('test_component_c', log_level='chatty')
    assert logger.level == logging.INFO


def test_correlation_id_in_format():
    logger = setup_logging('test_component_d', log_level='INFO', correlation_id='movie.mkv')
    record = logging.LogRecord('test_component_d', logging.INFO, __file__, 1, 'hello', None, None)

    assert '[movie.mkv] - hello' in logger.handlers[0].format(record)

    set_correlation_id(logger, None)
    assert '[movie.mkv]' not in logger.handlers[0].format(record)


def test_child_logger_uses_component_handler():
    setup_logging('test_component_e', log_level='INFO')
    child = get_logger('test_component_e.split')

    assert child.parent is logging.getLogger('test_component_e')
