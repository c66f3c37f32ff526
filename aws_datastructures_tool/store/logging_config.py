"""
Logging setup for store commands.

Verbosity is counted from repeated ``-v`` flags: none shows warnings only,
``-v`` INFO, ``-vv`` DEBUG for this package, ``-vvv`` DEBUG for boto3 and
botocore as well. Logs go to stderr so stdout stays parseable.
"""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LIBRARY_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(verbosity: int = 0) -> None:
    """
    Configure the root logger from a verbosity count.

    Args:
        verbosity: Number of -v flags
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=_FORMAT, stream=sys.stderr, force=True)

    library_level = logging.DEBUG if verbosity >= 3 else logging.WARNING
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """Logger for a command module."""
    return logging.getLogger(name)
