"""
Diagnostics go to stderr. The settings and statistics report is written to
the settings file and never passes through logging.
"""
import sys
import logging


class CrashingHandler(logging.StreamHandler):
    """
    Stream handler that lets errors from writing to the stream propagate
    (for example, a closed stderr pipe) instead of printing a traceback and
    continuing
    """

    def handleError(self, record):
        raise


class NiceFormatter(logging.Formatter):
    """Prefix the level name to all messages except informational ones"""

    def format(self, record):
        message = super().format(record)
        if record.levelno == logging.INFO:
            return message
        return f"{record.levelname}: {message}"


def log_level(quiet: bool = False, debug: int = 0) -> int:
    if debug > 0:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO


def setup_logging(logger, quiet=False, debug=0):
    """
    Attach a stderr handler to the given logger (usually the root logger).
    --debug takes precedence over --quiet.
    """
    level = log_level(quiet, debug)
    handler = CrashingHandler(sys.stderr)
    handler.setFormatter(NiceFormatter())
    handler.setLevel(level)
    logger.setLevel(level)
    logger.addHandler(handler)
