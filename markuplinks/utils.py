import contextvars
import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

NO_FILE = "-"

_scanned_file: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "scanned_file", default=None
)


@contextmanager
def scanning_file(filepath: str) -> Iterator[None]:
    """Attribute the log records emitted inside the block to `filepath`."""
    token = _scanned_file.set(filepath)
    try:
        yield
    finally:
        _scanned_file.reset(token)


class LogLevelFilter(logging.Filter):
    """Pass records whose level lies within ``[min_level, max_level]``."""

    def __init__(self, min_level: Optional[int] = None, max_level: Optional[int] = None):
        super().__init__()
        self.min_level = min_level
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        if self.min_level is not None and record.levelno < self.min_level:
            return False
        return self.max_level is None or record.levelno <= self.max_level


class ScannedFileFilter(logging.Filter):
    """Add ``record.filepath``: the file being scanned, or ``-`` outside of one."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.filepath = _scanned_file.get() or NO_FILE  # type: ignore
        return True


def set_console_handlers(logger: logging.Logger, verbose: bool = False, debug: bool = False):
    """Progress goes to stdout when `verbose`; warnings and errors always go to
    stderr, prefixed with the scanned file.
    """
    if verbose:
        level = logging.DEBUG if debug else logging.INFO
        logger.setLevel(level)
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setLevel(level)
        stdout_handler.addFilter(LogLevelFilter(max_level=logging.INFO))
        logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter(fmt="%(filepath)s:%(message)s"))
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.addFilter(ScannedFileFilter())
    logger.addHandler(stderr_handler)
