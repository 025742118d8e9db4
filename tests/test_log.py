""" Tests for logging handlers and filters. """
import io
import logging

from sshblog.blog.log import (
    ColoredConsoleHandler,
    SessionFilter,
    install_session_filter,
)


def make_record(msg, level=logging.WARNING):
    return logging.LogRecord('sshblog', level, __file__, 1, msg, (), None)


def test_colored_console_handler():
    stream = io.StringIO()
    handler = ColoredConsoleHandler(stream)
    handler.setFormatter(logging.Formatter('%(levelname)s %(message)s'))
    record = make_record('key mismatch')

    handler.handle(record)

    assert stream.getvalue() == 'warn  key mismatch\n'
    # the original record is not modified
    assert record.levelname == 'WARNING'


def test_session_filter_prefixes_once():
    session_filter = SessionFilter(handle='alice', addr='192.0.2.1')
    record = make_record('logged in')

    session_filter.filter(record)
    session_filter.filter(record)

    assert record.getMessage() == '[alice@192.0.2.1] logged in'


def test_session_filter_without_address():
    assert SessionFilter(handle='alice').prefix == '[alice]'
    assert SessionFilter().prefix == '[-]'


def test_install_replaces_previous_filter(isolated_logging):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    isolated_logging.addHandler(handler)

    install_session_filter(handle='alice')
    install_session_filter(handle='bob', addr='192.0.2.9')
    isolated_logging.warning('hello')

    assert stream.getvalue() == '[bob@192.0.2.9] hello\n'
    assert len([_filter for _filter in handler.filters
                if isinstance(_filter, SessionFilter)]) == 1
