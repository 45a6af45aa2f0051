"""
Logging configuration.

Call ``setup_logging`` once at startup, before the first log record is emitted.
"""

import logging
import sys

_NOISY_LOGGERS = ("uvicorn.access", "redis")


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a single stderr handler.

    Pre-existing handlers are removed so repeated calls (reloads, tests)
    do not duplicate output.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(numeric_level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(fmt)
    root.addHandler(console)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

    if numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
