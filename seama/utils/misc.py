#!/usr/bin/env python
# -*- coding: UTF-8 -*-
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama miscellaneous utilities and helper functions.

Alignment arithmetic, integer parsing for command line values, file lookup and
configuration loading used by the logger setup.
"""

import logging
import os
import re
from typing import Optional, Union

import yaml

from seama.exceptions import SeamaError, SeamaValueError

logger = logging.getLogger(__name__)


def align(number: int, alignment: int = 4) -> int:
    """Align number to specified byte boundary.

    :param number: The number to be aligned (size or address).
    :param alignment: The boundary alignment value, typically a power of 2 (4, 8, 16).
    :return: Aligned number that is always greater than or equal to the input number.
    :raises SeamaError: When alignment is non-positive or number is negative.
    """
    if alignment <= 0 or number < 0:
        raise SeamaError("Wrong alignment")

    return (number + (alignment - 1)) // alignment * alignment


def padding_size(number: int, alignment: int = 4) -> int:
    """Get count of bytes needed to reach the next aligned boundary.

    :param number: Current size or offset.
    :param alignment: The boundary alignment value.
    :return: Number of padding bytes, zero when already aligned.
    """
    return align(number, alignment) - number


def value_to_int(value: Union[bytes, bytearray, int, str], default: Optional[int] = None) -> int:
    """Convert value from multiple formats to integer.

    Supports conversion from integers, bytes, bytearrays, and string representations
    (including binary, octal, decimal, and hexadecimal formats with optional prefixes).

    :param value: Input value to convert (int, bytes, bytearray, or str).
    :param default: Default value returned when conversion fails.
    :return: Converted integer value.
    :raises SeamaValueError: Unsupported input type or invalid conversion without default.
    """
    if isinstance(value, int):
        return value

    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, "big")

    if isinstance(value, str) and value != "":
        match = re.match(
            r"(?P<prefix>0[box])?(?P<number>[0-9a-f_]+)(?P<suffix>[ul]{0,3})$",
            value.strip().lower(),
        )
        if match:
            base = {"0b": 2, "0o": 8, "0x": 16, None: 10}[match.group("prefix")]
            try:
                return int(match.group("number"), base=base)
            except ValueError:
                pass

    if default is not None:
        return default
    raise SeamaValueError(f"Invalid input number type({type(value)}) with value ({value})")


def strtol(value: str) -> int:
    """Convert string to integer with automatic base, like C `strtol(value, NULL, 0)`.

    A `0x` prefix selects hexadecimal, any other leading zero octal, otherwise the
    number is decimal. An optional sign is accepted. Unlike C, trailing characters
    are refused instead of being ignored.

    :param value: Text to convert.
    :return: Converted integer value.
    :raises SeamaValueError: Not a valid number.
    """
    match = re.match(r"([+-]?)(0x[0-9a-f]+|0[0-7]*|[1-9][0-9]*)$", value.strip().lower())
    if not match:
        raise SeamaValueError(f"Invalid integer value: {value!r}")
    sign, number = match.groups()
    if number.startswith("0x"):
        base = 16
    elif number.startswith("0"):
        base = 8
    else:
        base = 10
    result = int(number, base)
    return -result if sign == "-" else result


def size_fmt(num: Union[float, int], use_kibibyte: bool = True) -> str:
    """Format byte size into human-readable string representation.

    :param num: The byte size value to format.
    :param use_kibibyte: If True, use binary prefixes (1024-based) with 'iB' suffix,
                         if False, use decimal prefixes (1000-based) with 'B' suffix.
    :return: Formatted size string with value and unit (e.g., "1.5 MiB", "1024 B").
    """
    base, suffix = [(1000.0, "B"), (1024.0, "iB")][use_kibibyte]
    i = "B"
    for i in ["B"] + [i + suffix for i in list("kMGTP")]:
        if num < base:
            break
        num /= base

    return f"{int(num)} {i}" if i == "B" else f"{num:3.1f} {i}"


def find_file(file_path: str, search_paths: Optional[list[str]] = None) -> str:
    """Return a full path to the file.

    The file is looked up as is first, then relative to each search path in order.

    :param file_path: File name, relative or absolute path.
    :param search_paths: List of directories where to search for the file.
    :return: Absolute path to the first existing file.
    :raises SeamaError: File could not be found.
    """
    candidates = [file_path]
    for path in search_paths or []:
        candidates.append(os.path.join(path, file_path))
    for candidate in candidates:
        if os.path.isfile(candidate):
            return os.path.abspath(candidate).replace("\\", "/")
    raise SeamaError(f"File '{file_path}' not found")


def load_configuration(path: str, search_paths: Optional[list[str]] = None) -> dict:
    """Load configuration from YAML or JSON file.

    :param path: Path to configuration file.
    :param search_paths: List of paths where to search for the file.
    :raises SeamaError: When the file can't be parsed into a dictionary.
    :return: Content of configuration as dictionary.
    """
    path = find_file(path, search_paths=search_paths)
    logger.debug(f"Loading configuration from {path}")
    with open(path, encoding="utf-8") as f:
        try:
            cfg = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise SeamaError(f"Unable to load configuration file '{path}': {exc}") from exc
    if not isinstance(cfg, dict):
        raise SeamaError(f"Configuration file '{path}' doesn't contain a dictionary")
    return cfg
