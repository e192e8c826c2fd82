#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama container codec.

This module provides the seal and entity headers, the metadata blob codec and
the sequential reader and two-pass writer of Seama containers.
"""

from seama.container.header import SEAMA_MAGIC, EntityHeader, SealHeader
from seama.container.reader import ContainerReader, EntityRecord
from seama.container.writer import (
    ContainerWriter,
    EntityOperation,
    FileOperation,
    MetaOperation,
    PaddingOperation,
    WriterState,
)

__all__ = [
    "SEAMA_MAGIC",
    "ContainerReader",
    "ContainerWriter",
    "EntityHeader",
    "EntityOperation",
    "EntityRecord",
    "FileOperation",
    "MetaOperation",
    "PaddingOperation",
    "SealHeader",
    "WriterState",
]
