#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama logging setup for the command line tools.

Diagnostics go to the error stream, colored by level when the stream is a
terminal. An optional ``logging.yaml`` placed in ``~/.seama`` is applied through
:func:`logging.config.dictConfig` when the module is imported.
"""

import logging
import logging.config
import logging.handlers
import os
import sys
from datetime import datetime
from typing import Optional, TextIO

import colorama

from seama import SEAMA_DEBUG_LOG_FILE, SEAMA_DEBUG_LOGGING_DISABLED, __version__
from seama.exceptions import SeamaError
from seama.utils.misc import find_file, load_configuration

colorama.just_fix_windows_console()

try:
    logging_config_file = find_file("logging.yaml", search_paths=[os.path.expanduser("~/.seama")])
    logging.config.dictConfig(load_configuration(logging_config_file))
except (SeamaError, ValueError):
    # no usable logging config file found
    pass

LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s " + LOG_FORMAT + " (%(filename)s:%(lineno)d)"

LEVEL_COLORS = {
    logging.DEBUG: colorama.Fore.BLUE,
    logging.INFO: colorama.Style.BRIGHT,
    logging.WARNING: colorama.Fore.YELLOW,
    logging.ERROR: colorama.Fore.RED,
    logging.CRITICAL: colorama.Fore.RED + colorama.Style.BRIGHT,
}


class ColoredFormatter(logging.Formatter):
    """Formatter wrapping each record in the color of its level."""

    def __init__(self, colored: bool = True, fmt: str = LOG_FORMAT) -> None:
        """Formatter constructor.

        :param colored: Wrap records in ANSI color codes.
        :param fmt: Record format string.
        """
        super().__init__(fmt)
        self.colored = colored

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, colored when enabled.

        :param record: Input logging record to print.
        :return: Formatted logging string.
        """
        text = super().format(record)
        if not self.colored:
            return text
        return LEVEL_COLORS.get(record.levelno, "") + text + colorama.Style.RESET_ALL


class ConsoleHandler(logging.StreamHandler):
    """Console handler installed by `install`, replaced on repeated installation."""


def _use_color(stream: TextIO, colored: Optional[bool]) -> bool:
    if colored is not None:
        return colored
    # https://no-color.org/
    if "NO_COLOR" in os.environ:
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def _install_debug_log(target_logger: logging.Logger) -> None:
    log_file = os.path.abspath(SEAMA_DEBUG_LOG_FILE)
    for h in target_logger.handlers:
        if isinstance(h, logging.handlers.RotatingFileHandler) and h.baseFilename == log_file:
            return
    try:
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        debug_handler = logging.handlers.RotatingFileHandler(
            log_file, mode="a", maxBytes=1_000_000, backupCount=5, encoding="utf-8"
        )
    except OSError as e:
        target_logger.warning(f"Failed to initialize debug logging: {str(e)}")
        return
    debug_handler.setFormatter(ColoredFormatter(colored=False, fmt=DEBUG_LOG_FORMAT))
    debug_handler.setLevel(logging.DEBUG)
    target_logger.addHandler(debug_handler)
    target_logger.debug(
        "Seama %s debug log started %s, command: %s",
        __version__,
        datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        sys.argv,
    )


def install(
    level: Optional[int] = None,
    stream: Optional[TextIO] = None,
    colored: Optional[bool] = None,
    logger: Optional[logging.Logger] = None,
    create_debug_logger: bool = True,
) -> None:
    """Install Seama log handler for colored output.

    :param level: logging level, defaults to logging.WARNING
    :param stream: stream to output logging, defaults to sys.stderr
    :param colored: colored output, by default only on a terminal
    :param logger: defaults to the "seama" logger
    :param create_debug_logger: append everything to the debug log file too
    """
    stream = stream or sys.stderr
    target_logger = logger or logging.getLogger("seama")
    target_logger.setLevel(logging.DEBUG)

    for h in list(target_logger.handlers):
        if isinstance(h, ConsoleHandler):
            target_logger.removeHandler(h)
    handler = ConsoleHandler(stream)
    handler.setLevel(level or logging.WARNING)
    handler.setFormatter(ColoredFormatter(_use_color(stream, colored)))
    target_logger.addHandler(handler)

    if create_debug_logger and not SEAMA_DEBUG_LOGGING_DISABLED:
        _install_debug_log(target_logger)
