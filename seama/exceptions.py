#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama exception classes.

Every error raised by the container codec derives from :class:`SeamaError`.
Each kind carries an ``error_code`` (errno magnitude) which the command line
tool uses as its process exit status.
"""

import errno
from typing import Optional

#######################################################################
# # Seama Exceptions
#######################################################################


class SeamaError(Exception):
    """Seama Base Exception.

    :cvar fmt: Default error message format template.
    :cvar error_code: Error code reported to the OS by the command line tool.
    """

    fmt = "{description}"
    error_code = errno.EINVAL

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base Seama Exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        return self.fmt.format(description=self.description or "Unknown Error")


class SeamaValueError(SeamaError, ValueError):
    """Seama standard value error."""


class SeamaIOError(SeamaError, IOError):
    """Read or write failure on a stream."""

    error_code = errno.EIO


class SeamaOpenError(SeamaIOError):
    """A file or standard stream could not be opened."""

    error_code = errno.EACCES


class SeamaFormatError(SeamaError):
    """Header magic does not match the Seama magic value."""


class SeamaTruncatedError(SeamaError):
    """Less data available than the header size or the declared length."""

    error_code = errno.EIO


class SeamaBufferTooSmall(SeamaError):
    """Metadata exceeds the configured inspection buffer limit."""


class SeamaInvalidIndex(SeamaError, IndexError):
    """Requested entity index is not present in the container."""


class SeamaBackwardPad(SeamaError, ValueError):
    """Padding target precedes the current write offset."""


class SeamaInvariantViolation(SeamaError):
    """Structure violates a format invariant (e.g. seal carrying an image)."""


class SeamaUnsupportedOperation(SeamaError):
    """Operation not possible on the given stream (e.g. seek on a pipe)."""

    error_code = errno.ESPIPE
