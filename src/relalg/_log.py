'''
Console logging for the algebra trace.

Operators log `RA>`, inserts `DML>` and table creation `DDL>` lines at debug
level under the `relalg` logger. `setup_logging` gives that logger its own
colored stream handler so the trace can be switched on without touching the
root logger of the embedding application.

'''
from __future__ import annotations

import logging
import time
from typing import Iterable

from colorlog import ColoredFormatter

from relalg._utils import get_loglevel


package_logger = 'relalg'


class TraceFormatter(ColoredFormatter):
    '''
    Colored level names, timestamps in UTC as ISO8601 with a trailing 'Z'.

    '''
    converter = time.gmtime

    def formatTime(self, record, datefmt=None):
        if datefmt:
            return super().formatTime(record, datefmt)

        return time.strftime('%Y-%m-%dT%H:%M:%SZ', self.converter(record.created))


def setup_logging(
    loglevel: str | None = None,
    silence: Iterable[str] = ('polars',),
) -> logging.Logger:
    '''
    Install the trace handler on the package logger, level taken from
    `loglevel` or else `RELALG_LOGLEVEL`. Loggers named in `silence` are
    capped at warning.

    '''
    loglevel = (loglevel or get_loglevel()).upper()

    for noisy in silence:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    formatter = TraceFormatter(
        '%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(name)s: %(message)s',
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'bold_red',
        },
    )

    logger = logging.getLogger(package_logger)

    # replace a handler from an earlier call, leave foreign ones alone
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, TraceFormatter):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(loglevel)
    logger.propagate = False

    logger.debug(f'trace logging enabled at {loglevel}')
    return logger
