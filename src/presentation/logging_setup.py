"""Logging configuration for the API process."""

import logging
import os
import sys

LOG_LEVEL = os.getenv("TASKDESK_LOG_LEVEL", "INFO")


def setup_logging(level: str | int = LOG_LEVEL) -> None:
    """Configure the root logger with a single stderr handler.

    Safe to call more than once; existing handlers are replaced.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)

    # SQL echo stays off unless explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
