# -*- coding: utf-8 -*-

import datetime
import logging
import sys

import pytest

from autovalidate.common import log
from autovalidate.common import path as autovalidate_path
from autovalidate.common.log import _excepthook, ColoredFormatter, Context, \
    set_debug_mode, set_logs_level

"""### TEST CASES ###
    _get_file_handler() in the log folder

    ColoredFormatter._colorize
    ColoredFormatter.formatTime
    ColoredFormatter.formatException
    ColoredFormatter.format doesn't alter the record

    Context adds and removes the handlers
    Context writes in the log file

    set_debug_mode true
    set_debug_mode false
    set_logs_level
"""

colorFormater = ColoredFormatter()


@pytest.fixture
def log_dir(tmpdir, monkeypatch):
    monkeypatch.setattr(autovalidate_path, 'get_log_dir',
                        lambda: str(tmpdir))
    return tmpdir


@pytest.fixture
def restore_levels():
    """Restore the levels of the loggers modified by the tests."""
    names = ['', 'autovalidate', 'autovalidate.promise', 'urllib3']
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


class TestLogFormating(object):

    def test_get_file_handler(self, log_dir):
        handler = log._get_file_handler('test.log')
        try:
            assert handler.baseFilename == str(log_dir.join('test.log'))
        finally:
            handler.close()

    @pytest.mark.parametrize('color', ['DEBUG', 'INFO', 'WARNING', 'ERROR',
                                       'CRITICAL', 'NAME', 'DATE'])
    def test_colorize(self, color):
        assert colorFormater._colorize("plop", color) == \
            ColoredFormatter._colors[color] + "plop" + \
            ColoredFormatter._colors['RESET']

    def test_colorize_unknown_color(self):
        assert colorFormater._colorize("plop", "PURPLE") == \
            "plop" + ColoredFormatter._colors['RESET']

    def test_formatTime(self):
        record = logging.LogRecord(
            "record", logging.INFO, "/ici/", 123, "test", None, None)
        formated_record = colorFormater.formatTime(record, "%Y.%m.%d")
        expected_output = "\033[30;1m" + \
            datetime.date.today().strftime('%Y.%m.%d') + \
            ColoredFormatter._colors['RESET']

        assert formated_record == expected_output

    def test_formatException(self):
        try:
            raise Exception()
        except Exception:
            assert ColoredFormatter._colors['EXCEPTION_NAME'] + \
                "Exception" + ColoredFormatter._colors['RESET'] + \
                ":" + ColoredFormatter._colors['EXCEPTION_STR'] + \
                ColoredFormatter._colors['RESET'] in \
                colorFormater.formatException(sys.exc_info())

    def test_format_keeps_the_record_unchanged(self):
        formatter = ColoredFormatter(
            fmt='%(levelname)s %(name)s - %(message)s')
        record = logging.LogRecord(
            "autovalidate", logging.INFO, "/ici/", 123, "test", None, None)
        output = formatter.format(record)

        assert ColoredFormatter._colors['NAME'] + 'autovalidate' in output
        assert ColoredFormatter._colors['INFO'] + 'INFO' in output
        assert record.name == 'autovalidate'
        assert record.levelname == 'INFO'

    def test_colors_do_not_leak_into_other_handlers(self):
        colored = ColoredFormatter(fmt='%(name)s - %(message)s')
        plain = logging.Formatter(fmt='%(name)s - %(message)s')
        record = logging.LogRecord(
            "autovalidate", logging.INFO, "/ici/", 123, "test", None, None)

        colored.format(record)
        assert plain.format(record) == 'autovalidate - test'


class TestLogContext(object):

    def test_context_adds_and_removes_handlers(self, log_dir,
                                               restore_levels):
        logger = logging.getLogger()
        nb_handlers = len(logger.handlers)
        excepthook = sys.excepthook

        with Context():
            assert len(logger.handlers) == nb_handlers + 2
            assert logging.getLogger().getEffectiveLevel() == logging.INFO
            autovalidate_logger = logging.getLogger("autovalidate")
            assert autovalidate_logger.getEffectiveLevel() == logging.DEBUG
            assert sys.excepthook is _excepthook

        assert len(logger.handlers) == nb_handlers
        assert sys.excepthook is excepthook

    def test_context_without_log_file(self, log_dir, restore_levels):
        logger = logging.getLogger()
        nb_handlers = len(logger.handlers)

        with Context(filename=None):
            assert len(logger.handlers) == nb_handlers + 1
        assert not log_dir.listdir()

    def test_context_writes_log_file(self, log_dir, restore_levels):
        with Context(filename='test.log'):
            logging.getLogger('autovalidate.test').info('Hello log file')

        assert 'Hello log file' in log_dir.join('test.log').read()


class TestLogLevels(object):

    def test_setDebugTrue(self, restore_levels):
        set_debug_mode(True)
        assert logging.getLogger().getEffectiveLevel() == logging.INFO
        assert logging.getLogger("autovalidate").getEffectiveLevel() == \
            logging.DEBUG

    def test_setDebugFalse(self, restore_levels):
        set_debug_mode(False)
        assert logging.getLogger().getEffectiveLevel() == logging.WARNING
        assert logging.getLogger("autovalidate").getEffectiveLevel() == \
            logging.INFO

    def test_set_logs_level(self, restore_levels):
        set_logs_level({'autovalidate.promise': 'debug', 'urllib3': '40'})
        assert logging.getLogger('autovalidate.promise').level == \
            logging.DEBUG
        assert logging.getLogger('urllib3').level == logging.ERROR

    def test_set_invalid_logs_level(self, restore_levels, caplog):
        set_logs_level({'autovalidate.promise': 'not a level'})
        assert 'Invalid log level' in caplog.text
