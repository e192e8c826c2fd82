#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Test module for Seama seal and entity headers."""

import hashlib

import pytest

from seama.container.header import SEAMA_MAGIC, EntityHeader, SealHeader, check_magic
from seama.exceptions import (
    SeamaFormatError,
    SeamaInvariantViolation,
    SeamaTruncatedError,
    SeamaValueError,
)


def test_seal_header_layout() -> None:
    """Test binary layout of the seal header."""
    seal = SealHeader(metasize=0x20, imagesize=0)
    data = seal.export()
    assert len(data) == SealHeader.SIZE == 12
    assert data == bytes.fromhex("5ea3a417" "0000" "0020" "00000000")


def test_seal_header_parse() -> None:
    """Test parsing of seal header followed by other data."""
    seal = SealHeader.parse(bytes.fromhex("5ea3a417" "1234" "0008" "00000000") + b"trailing")
    assert seal.magic == SEAMA_MAGIC
    assert seal.reserved == 0x1234
    assert seal.metasize == 8
    assert seal.imagesize == 0
    assert seal == SealHeader(metasize=8, reserved=0x1234)


def test_seal_header_validate() -> None:
    """Test the seal must not declare an image."""
    SealHeader(metasize=4).validate()
    seal = SealHeader.parse(SealHeader(imagesize=1).export())
    with pytest.raises(SeamaInvariantViolation, match="0x00000001"):
        seal.validate()


def test_entity_header_layout() -> None:
    """Test binary layout of the entity header."""
    digest = hashlib.md5(b"\xff" * 4).digest()
    header = EntityHeader(metasize=4, imagesize=4, digest=digest)
    data = header.export()
    assert len(data) == EntityHeader.SIZE == 28
    assert data[:12] == bytes.fromhex("5ea3a417" "0000" "0004" "00000004")
    assert data[12:] == digest
    assert header.body_size == 8
    assert header.size == 36


def test_entity_header_parse() -> None:
    """Test parse of exported entity header gives the same values."""
    header = EntityHeader(metasize=0x100, imagesize=0x12345678, digest=bytes(range(16)))
    parsed = EntityHeader.parse(header.export())
    assert parsed == header
    assert parsed.digest == bytes(range(16))
    assert "000102030405060708090a0b0c0d0e0f" in str(parsed)


def test_entity_placeholder() -> None:
    """Test placeholder header is all zeros."""
    assert EntityHeader.placeholder().export() == bytes(28)


@pytest.mark.parametrize(
    "cls,data",
    [
        (SealHeader, bytes.fromhex("5ea3a418" "0000" "0000" "00000000")),
        (EntityHeader, bytes(28)),
        (EntityHeader, bytes.fromhex("17a4a35e") + bytes(24)),
    ],
)
def test_header_invalid_magic(cls: type, data: bytes) -> None:
    """Test headers with wrong magic are refused.

    :param cls: Header class.
    :param data: Header data with invalid magic.
    """
    with pytest.raises(SeamaFormatError, match="Invalid Seama magic"):
        cls.parse(data)


@pytest.mark.parametrize("cls", [SealHeader, EntityHeader])
@pytest.mark.parametrize("length", [0, 1, 11])
def test_header_truncated(cls: type, length: int) -> None:
    """Test headers refuse short input.

    :param cls: Header class.
    :param length: Length of the available data.
    """
    data = SealHeader().export() + bytes(16)
    with pytest.raises(SeamaTruncatedError):
        cls.parse(data[:length])


@pytest.mark.parametrize(
    "header",
    [
        SealHeader(metasize=0x10000),
        SealHeader(imagesize=-1),
        EntityHeader(metasize=-1),
        EntityHeader(imagesize=0x100000000),
        EntityHeader(reserved=0x10000),
        EntityHeader(digest=bytes(15)),
    ],
)
def test_header_export_out_of_range(header: SealHeader) -> None:
    """Test export refuses values not fitting the binary fields.

    :param header: Header with an invalid field.
    """
    with pytest.raises(SeamaValueError):
        header.export()


def test_check_magic() -> None:
    """Test magic check message contains the wrong value."""
    check_magic(0x5EA3A417)
    with pytest.raises(SeamaFormatError, match="0xdeadbeef"):
        check_magic(0xDEADBEEF)
