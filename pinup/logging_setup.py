"""
Request logging.

Every handled request can emit one line:

    [19/10/2026|14:03:11]    Users.login    {POST - auth,body, /users/login}    LOG +1.42ms

Console lines are colorized; when a log file is configured the same line is
appended to it with the ANSI codes stripped.
"""

import logging
from datetime import datetime
from typing import Optional

from pinup.utils.formatting import ColorCode, colorize, strip_ansi

logger = logging.getLogger(__name__)

REQUEST_LOGGER = 'pinup.request'
FILE_LOGGER = 'pinup.request.file'
DATE_FORMAT = '%d/%m/%Y|%H:%M:%S'


class StripAnsiFormatter(logging.Formatter):
    """Formatter for file handlers: no color codes in files."""

    def format(self, record):
        return strip_ansi(super().format(record))


def configure_request_logging(logger_file: Optional[str] = None) -> logging.Logger:
    """
    Prepare the loggers used for request log lines.

    The console logger propagates to the root logger, so the application's
    logging configuration decides where it ends up. The file logger only
    writes to logger_file.

    Args:
        logger_file: File to append request lines to (optional)

    Returns:
        The file logger
    """
    file_logger = logging.getLogger(FILE_LOGGER)
    file_logger.propagate = False
    file_logger.setLevel(logging.INFO)

    for handler in list(file_logger.handlers):
        file_logger.removeHandler(handler)
        handler.close()

    if logger_file:
        handler = logging.FileHandler(logger_file, encoding='utf-8')
        handler.setFormatter(StripAnsiFormatter('%(message)s'))
        file_logger.addHandler(handler)
        logger.info(f"Request log file: {logger_file}")

    return file_logger


def format_request_line(
    controller: str,
    handler: str,
    method: str,
    rule: str,
    data_sources,
    message: str,
    has_auth: bool = False,
    now: Optional[datetime] = None
) -> str:
    """Build the colorized request log line."""
    now = now or datetime.now()
    data_formats = ','.join((['auth'] if has_auth else []) + list(data_sources))

    time_string = f"[{colorize(now.strftime(DATE_FORMAT), ColorCode.YELLOW)}]\t"
    location = f"{colorize(controller, ColorCode.CYAN)}.{colorize(handler, ColorCode.MAGENTA)}\t"
    method_path = (
        f"{{{colorize(method.upper(), ColorCode.GREEN)} - {data_formats}, "
        f"{colorize(rule, ColorCode.GREEN)}}}\t"
    )
    return f"{time_string} {location} {method_path} {colorize(message, ColorCode.BLUE)}"


def write_request_line(line: str, to_file: bool = False) -> str:
    logging.getLogger(REQUEST_LOGGER).info(line)
    if to_file:
        logging.getLogger(FILE_LOGGER).info(line)
    return line
