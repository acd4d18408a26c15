"""
Logging configuration for the Notify client tools

The library itself only creates module loggers under ``notify_client`` and
emits debug records. The CLI and the stub server call setup_logging() to attach
one handler to the loggers they own; the root logger and any handlers an
embedding application installed are left alone.
"""

import logging
import logging.handlers
import os
import sys

PACKAGE_LOGGER = "notify_client"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_level=None, log_file=None, names=(PACKAGE_LOGGER,)):
    """
    Send records from the named loggers to stderr or a rotating log file.

    Calling it again replaces the handler installed by the previous call.

    Args:
        log_level: Level name; defaults to $LOG_LEVEL, then WARNING
        log_file: Path to log file; defaults to $LOG_FILE, then stderr
        names: Loggers to configure; records from their children follow

    Returns:
        The first configured logger
    """
    level = (log_level or os.environ.get('LOG_LEVEL') or 'WARNING').upper()
    log_file = log_file or os.environ.get('LOG_FILE')

    if log_file:
        handler = logging.handlers.RotatingFileHandler(log_file, maxBytes=10*1024*1024, backupCount=5)
    else:
        # stdout is reserved for command output
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    handler.notify_client_handler = True

    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level, logging.WARNING))
        for old in [h for h in logger.handlers if getattr(h, 'notify_client_handler', False)]:
            logger.removeHandler(old)
            old.close()
        logger.addHandler(handler)
        logger.propagate = False

    logger = logging.getLogger(names[0])
    logger.debug(f"Logging initialized - Level: {level}, Output: {log_file or 'stderr'}")
    return logger
