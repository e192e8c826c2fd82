#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama application utilities.

This module provides the error handling decorator used by every command line
entry point and click parameter types shared by the applications.
"""

import logging
import sys
from functools import wraps
from typing import Any, Callable, Optional

import click

from seama import SEAMA_DEBUG_LOG_FILE, SEAMA_DEBUG_LOGGING_DISABLED
from seama.exceptions import SeamaError
from seama.utils.misc import strtol, value_to_int

logger = logging.getLogger(__name__)


class INT(click.ParamType):
    """Click parameter type for integers in any base (0x, 0o, 0b prefixes or decimal).

    :cvar name: Parameter type name used by Click framework.
    """

    name = "integer"

    # pylint: disable=inconsistent-return-statements
    def convert(
        self,
        value: Any,
        param: Optional[click.Parameter] = None,
        ctx: Optional[click.Context] = None,
    ) -> int:
        """Perform the conversion str -> int.

        :param value: value to convert
        :param param: Click parameter, defaults to None
        :param ctx: Click context, defaults to None
        :return: value as integer
        """
        try:
            return value_to_int(value)
        except SeamaError:
            self.fail(f"{value!r} is not a valid integer", param, ctx)


class OFFSET(click.ParamType):
    """Click parameter type for offsets written the C way.

    ``0x`` prefix is hexadecimal, a leading zero octal, anything else decimal.
    Negative values pass through, the consumer decides whether they are valid.

    :cvar name: Parameter type name used by Click framework.
    """

    name = "offset"

    # pylint: disable=inconsistent-return-statements
    def convert(
        self,
        value: Any,
        param: Optional[click.Parameter] = None,
        ctx: Optional[click.Context] = None,
    ) -> int:
        """Perform the conversion str -> int.

        :param value: value to convert
        :param param: Click parameter, defaults to None
        :param ctx: Click context, defaults to None
        :return: value as integer
        """
        if isinstance(value, int):
            return value
        try:
            return strtol(value)
        except SeamaError:
            self.fail(f"{value!r} is not a valid offset", param, ctx)


def catch_seama_error(function: Callable) -> Callable:
    """Catch and handle SeamaError and other exceptions.

    A :class:`SeamaError` is printed as one line to the error stream and the
    process exits with the negated error code of the error kind (the OS reports
    it modulo 256, e.g. 234 for EINVAL). Any other exception exits with code 3.

    :param function: The function to be decorated.
    :return: The decorated function.
    """

    @wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            retval = function(*args, **kwargs)
            return retval
        except SeamaError as seama_exc:
            click.echo(f"{seama_exc.__class__.__name__}: {seama_exc}", err=True)
            logger.debug(str(seama_exc), exc_info=True)
            sys.exit(-seama_exc.error_code)
        except (Exception, KeyboardInterrupt) as base_exc:  # pylint: disable=broad-except
            click.echo(f"GENERAL ERROR: {type(base_exc).__name__}: {base_exc}", err=True)
            logger.debug(str(base_exc), exc_info=True)
            if not SEAMA_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {SEAMA_DEBUG_LOG_FILE} for more info.", fg="yellow"
                )
            sys.exit(3)

    return wrapper
