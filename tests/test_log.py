import io
import logging

import pytest

from adapterremoval.log import CrashingHandler, NiceFormatter, log_level, setup_logging


def make_record(level, msg):
    return logging.LogRecord("test", level, __file__, 1, msg, None, None)


def test_nice_formatter():
    formatter = NiceFormatter()
    assert formatter.format(make_record(logging.INFO, "hello")) == "hello"
    assert formatter.format(make_record(logging.ERROR, "broken")) == "ERROR: broken"


def test_crashing_handler_writes_to_stream():
    stream = io.StringIO()
    handler = CrashingHandler(stream)
    handler.setFormatter(NiceFormatter())
    handler.emit(make_record(logging.WARNING, "careful"))
    assert stream.getvalue() == "WARNING: careful\n"


def test_crashing_handler_propagates_write_errors():
    stream = io.StringIO()
    stream.close()
    handler = CrashingHandler(stream)
    with pytest.raises(ValueError):
        handler.emit(make_record(logging.INFO, "lost"))


def test_nice_formatter_with_arguments():
    record = logging.LogRecord("test", logging.WARNING, __file__, 1, "%d reads", (3,), None)
    assert NiceFormatter().format(record) == "WARNING: 3 reads"


@pytest.mark.parametrize(
    "quiet,debug,level",
    [
        (False, 0, logging.INFO),
        (True, 0, logging.ERROR),
        (True, 2, logging.DEBUG),
        (False, 1, logging.DEBUG),
    ],
)
def test_log_level(quiet, debug, level):
    assert log_level(quiet, debug) == level


def test_setup_logging_levels():
    for kwargs, level in [
        (dict(), logging.INFO),
        (dict(quiet=True), logging.ERROR),
        (dict(quiet=True, debug=1), logging.DEBUG),
    ]:
        logger = logging.getLogger(f"adapterremoval-test-{level}")
        setup_logging(logger, **kwargs)
        assert logger.level == level
        assert isinstance(logger.handlers[-1], CrashingHandler)
        logger.handlers.clear()
