#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama seal and entity headers.

Both headers are fixed-size, packed and big-endian::

    Seal   (12 B): magic:u32 reserved:u16 metasize:u16 imagesize:u32
    Entity (28 B): magic:u32 reserved:u16 metasize:u16 imagesize:u32 digest:16B

The seal is the outermost wrapper of a container and never carries an image.
Each entity header is followed by ``metasize`` bytes of metadata and
``imagesize`` bytes of image, the digest covers the image bytes only.
"""

from struct import calcsize, pack, unpack_from

from typing_extensions import Self

from seama.exceptions import (
    SeamaFormatError,
    SeamaInvariantViolation,
    SeamaTruncatedError,
    SeamaValueError,
)
from seama.utils.abstract import BaseClass

SEAMA_MAGIC = 0x5EA3A417
DIGEST_SIZE = 16


def check_magic(magic: int) -> None:
    """Check the header magic value.

    :param magic: Magic value read from a header.
    :raises SeamaFormatError: Magic does not match.
    """
    if magic != SEAMA_MAGIC:
        raise SeamaFormatError(f"Invalid Seama magic: 0x{magic:08x}")


class SealHeader(BaseClass):
    """Seama seal (container) header.

    :cvar FORMAT: Binary format string for header serialization.
    :cvar SIZE: Total size of the header structure in bytes.
    """

    FORMAT = ">IHHI"
    SIZE = calcsize(FORMAT)

    def __init__(self, metasize: int = 0, imagesize: int = 0, reserved: int = 0) -> None:
        """Initialize the seal header.

        :param metasize: Length of the seal metadata blob in bytes.
        :param imagesize: Length of the image, must stay 0 for a valid seal.
        :param reserved: Content of the reserved field.
        """
        self.magic = SEAMA_MAGIC
        self.reserved = reserved
        self.metasize = metasize
        self.imagesize = imagesize

    def __repr__(self) -> str:
        return f"SealHeader(metasize={self.metasize}, imagesize={self.imagesize})"

    def __str__(self) -> str:
        nfo = str()
        nfo += f" Magic:      0x{self.magic:08X}\n"
        nfo += f" Meta size:  {self.metasize}\n"
        nfo += f" Image size: {self.imagesize}\n"
        return nfo

    def validate(self) -> None:
        """Validate the seal invariants.

        :raises SeamaInvariantViolation: Seal declares an image.
        """
        if self.imagesize:
            raise SeamaInvariantViolation(
                f"Invalid Seama image size: 0x{self.imagesize:08x} (should be 0)"
            )

    def export(self) -> bytes:
        """Export the seal header into binary form.

        :raises SeamaValueError: A field doesn't fit its binary width.
        :return: 12 bytes of the header.
        """
        _check_range("metasize", self.metasize, 0xFFFF)
        _check_range("reserved", self.reserved, 0xFFFF)
        _check_range("imagesize", self.imagesize, 0xFFFFFFFF)
        return pack(self.FORMAT, self.magic, self.reserved, self.metasize, self.imagesize)

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse the seal header.

        The image size invariant is not checked here, see :meth:`validate`.

        :param data: Binary data starting with the header.
        :raises SeamaTruncatedError: Not enough data for the header.
        :raises SeamaFormatError: Invalid magic.
        :return: Parsed header.
        """
        if len(data) < cls.SIZE:
            raise SeamaTruncatedError(
                f"Couldn't read Seama seal header ({len(data)} of {cls.SIZE} B)"
            )
        magic, reserved, metasize, imagesize = unpack_from(cls.FORMAT, data)
        check_magic(magic)
        return cls(metasize=metasize, imagesize=imagesize, reserved=reserved)


class EntityHeader(BaseClass):
    """Seama entity header.

    :cvar FORMAT: Binary format string for header serialization.
    :cvar SIZE: Total size of the header structure in bytes.
    """

    FORMAT = f">IHHI{DIGEST_SIZE}s"
    SIZE = calcsize(FORMAT)

    def __init__(
        self,
        metasize: int = 0,
        imagesize: int = 0,
        digest: bytes = bytes(DIGEST_SIZE),
        reserved: int = 0,
        magic: int = SEAMA_MAGIC,
    ) -> None:
        """Initialize the entity header.

        :param metasize: Length of the entity metadata blob in bytes.
        :param imagesize: Length of the entity image in bytes.
        :param digest: MD5 digest of the image bytes.
        :param reserved: Content of the reserved field.
        :param magic: Magic value, zero only for the writer's placeholder.
        """
        self.magic = magic
        self.reserved = reserved
        self.metasize = metasize
        self.imagesize = imagesize
        self.digest = digest

    @classmethod
    def placeholder(cls) -> Self:
        """Create all-zero header reserving space until the entity is finalized."""
        return cls(magic=0)

    @property
    def body_size(self) -> int:
        """Size of metadata and image following the header."""
        return self.metasize + self.imagesize

    @property
    def size(self) -> int:
        """Total size of the entity including the header."""
        return self.SIZE + self.body_size

    def __repr__(self) -> str:
        return f"EntityHeader(metasize={self.metasize}, imagesize={self.imagesize})"

    def __str__(self) -> str:
        nfo = str()
        nfo += f" Magic:      0x{self.magic:08X}\n"
        nfo += f" Meta size:  {self.metasize}\n"
        nfo += f" Image size: {self.imagesize}\n"
        nfo += f" Image MD5:  {self.digest.hex()}\n"
        return nfo

    def export(self) -> bytes:
        """Export the entity header into binary form.

        :raises SeamaValueError: A field doesn't fit its binary width.
        :return: 28 bytes of the header.
        """
        _check_range("metasize", self.metasize, 0xFFFF)
        _check_range("reserved", self.reserved, 0xFFFF)
        _check_range("imagesize", self.imagesize, 0xFFFFFFFF)
        if len(self.digest) != DIGEST_SIZE:
            raise SeamaValueError(
                f"Invalid digest length {len(self.digest)} B, expected {DIGEST_SIZE} B"
            )
        return pack(
            self.FORMAT, self.magic, self.reserved, self.metasize, self.imagesize, self.digest
        )

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse the entity header.

        :param data: Binary data starting with the header.
        :raises SeamaTruncatedError: Not enough data for the header.
        :raises SeamaFormatError: Invalid magic.
        :return: Parsed header.
        """
        if len(data) < cls.SIZE:
            raise SeamaTruncatedError(
                f"Couldn't read Seama entity header ({len(data)} of {cls.SIZE} B)"
            )
        magic, reserved, metasize, imagesize, digest = unpack_from(cls.FORMAT, data)
        check_magic(magic)
        return cls(metasize=metasize, imagesize=imagesize, digest=digest, reserved=reserved)


def _check_range(name: str, value: int, maximum: int) -> None:
    if not 0 <= value <= maximum:
        raise SeamaValueError(f"Header field {name}={value} out of range <0, 0x{maximum:X}>")
