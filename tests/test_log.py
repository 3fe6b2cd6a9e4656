import logging

import pytest

from relalg import Table, setup_logging
from relalg._log import TraceFormatter


@pytest.fixture
def package_logger():
    logger = logging.getLogger('relalg')
    polars = logging.getLogger('polars')
    saved = (list(logger.handlers), logger.level, logger.propagate, polars.level)
    yield logger

    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
    polars.setLevel(saved[3])


def test_setup_logging(package_logger):
    root_handlers = list(logging.getLogger().handlers)

    setup_logging('debug', silence=('noisy.lib',))
    setup_logging('debug')

    handlers = [
        h for h in package_logger.handlers
        if isinstance(h.formatter, TraceFormatter)
    ]
    assert len(handlers) == 1
    assert package_logger.level == logging.DEBUG
    assert not package_logger.propagate
    assert logging.getLogger('noisy.lib').level == logging.WARNING
    assert logging.getLogger('polars').level == logging.WARNING

    # root logger of the embedding application is left alone
    assert logging.getLogger().handlers == root_handlers

    record = logging.LogRecord('relalg', logging.INFO, __file__, 1, 'hi', None, None)
    record.created = 0
    assert handlers[0].formatter.formatTime(record) == '1970-01-01T00:00:00Z'


def test_loglevel_from_env(package_logger, monkeypatch):
    monkeypatch.setenv('RELALG_LOGLEVEL', 'warning')
    setup_logging()
    assert package_logger.level == logging.WARNING

    # explicit level wins over the environment
    setup_logging('debug')
    assert package_logger.level == logging.DEBUG


def test_trace_reaches_handler(package_logger):
    seen = []

    class Collect(logging.Handler):
        def emit(self, record):
            seen.append(record.getMessage())

    setup_logging('debug')
    package_logger.addHandler(Collect())

    t = Table.from_strings('t', 'a b', 'Integer Integer', 'a')
    t.insert((1, 2))
    t.project('b')

    assert any(m.startswith('DDL> create table t') for m in seen)
    assert any(m.startswith('DML> insert into t') for m in seen)
    assert any(m.startswith('RA>') for m in seen)
