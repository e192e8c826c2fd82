#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama - toolkit for Seama firmware containers.

Seama is the container format found in firmware images of many embedded network
devices: an outer seal followed by sequentially packed entities, each carrying
metadata strings and an image protected by an MD5 digest.

The package provides the container codec (headers, meta blobs, reader, writer)
and the ``oseama`` command line tool built on top of it.
"""

import os
from typing import Optional, Union

from packaging.version import Version, parse
from platformdirs import PlatformDirs


def get_seama_version() -> Version:
    """Get Seama package version information.

    :return: Parsed version object.
    """
    from .__version__ import __version__ as seama_version

    return parse(seama_version)


def value_to_bool(value: Optional[Union[bool, int, str]]) -> bool:
    """Convert value to boolean from various input formats.

    Supports conversion from string representations like "True", "true", "T", "1"
    and standard Python truthy/falsy values for other types.

    :param value: Value to convert to boolean (string, int, bool, or None).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


version = get_seama_version()

__author__ = "Seama contributors"
__license__ = "BSD-3-Clause"
__version__ = str(version)

SEAMA_VERSION_BASE = version.base_version
SEAMA_PLATFORM_DIRS = PlatformDirs(
    appauthor="seama",
    appname="seama",
    version=SEAMA_VERSION_BASE,
    ensure_exists=False,
)

SEAMA_DEBUG_LOGGING_DISABLED = value_to_bool(os.environ.get("SEAMA_DEBUG_LOGGING_DISABLED"))
SEAMA_DEBUG_LOG_FILE = os.environ.get(
    "SEAMA_DEBUG_LOG_FILE", os.path.join(SEAMA_PLATFORM_DIRS.user_log_dir, "debug.log")
)

# Historical size of the metadata inspection buffer, 0 lifts the limit
SEAMA_META_BUFFER_LIMIT = int(os.environ.get("SEAMA_META_BUFFER_LIMIT", "1024"), 0)
