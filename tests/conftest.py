#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama pytest configuration and shared test fixtures."""

import hashlib
import os
import struct
from typing import Callable, Optional

import pytest

from tests.cli_runner import CliRunner

os.environ["SEAMA_DEBUG_LOGGING_DISABLED"] = "True"

MAGIC = 0x5EA3A417


def build_seal(meta: bytes = b"", imagesize: int = 0, magic: int = MAGIC) -> bytes:
    """Build raw seal header followed by its metadata."""
    return struct.pack(">IHHI", magic, 0, len(meta), imagesize) + meta


def build_entity(
    meta: bytes = b"", image: bytes = b"", magic: int = MAGIC, digest: Optional[bytes] = None
) -> bytes:
    """Build raw entity: header, metadata and image."""
    if digest is None:
        digest = hashlib.md5(image).digest()
    return struct.pack(">IHHI16s", magic, 0, len(meta), len(image), digest) + meta + image


@pytest.fixture
def cli_runner() -> CliRunner:
    """Get CLI runner instance for testing.

    :return: CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def container() -> bytes:
    """Container with a seal and three entities.

    Entity 0: meta ["type=firmware"], image of 100 B
    Entity 1: no meta, empty image
    Entity 2: meta ["dev=/dev/mtdblock/2", "name=rootfs"], image of 3000 B
    """
    return (
        build_seal(b"signature=wrgac01\0\0\0")
        + build_entity(b"type=firmware\0\0\0", bytes(range(100)))
        + build_entity()
        + build_entity(b"dev=/dev/mtdblock/2\0name=rootfs\0", bytes(3000 * [0xA5]))
    )


@pytest.fixture
def container_file(tmpdir: str, container: bytes) -> str:
    """Path to a file holding the ``container`` fixture."""
    path = os.path.join(tmpdir, "firmware.seama")
    with open(path, "wb") as f:
        f.write(container)
    return path


@pytest.fixture
def entity_builder() -> Callable[..., bytes]:
    """Raw entity builder function."""
    return build_entity


@pytest.fixture
def seal_builder() -> Callable[..., bytes]:
    """Raw seal builder function."""
    return build_seal
