#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Hash algorithms used for Seama image digests.

Seama protects entity images with an MD5 digest. MD5 serves here as an
integrity checksum only.
"""

from enum import Enum

from cryptography.hazmat.primitives import hashes

from seama.exceptions import SeamaError, SeamaTruncatedError
from seama.utils.stream import ByteStream

DIGEST_CHUNK_SIZE = 128


class EnumHashAlgorithm(str, Enum):
    """Hash algorithm enumeration."""

    MD5 = "md5"


def get_hash_algorithm(algorithm: EnumHashAlgorithm) -> hashes.HashAlgorithm:
    """Get hash algorithm instance for specified algorithm type.

    :param algorithm: Hash algorithm type enumeration value.
    :raises SeamaError: If the specified algorithm is not supported.
    :return: Instance of the corresponding hash algorithm class.
    """
    algo_cls = getattr(hashes, algorithm.name, None)  # get class object by name
    if algo_cls is None:
        raise SeamaError(f"Unsupported algorithm: hashes.{algorithm.name}")
    return algo_cls()  # pylint: disable=not-callable


class Hash:
    """Streaming hash computation.

    Data can be added by any number of :meth:`update` calls, the order matters.
    """

    def __init__(self, algorithm: EnumHashAlgorithm = EnumHashAlgorithm.MD5) -> None:
        """Initialize hash object.

        :param algorithm: Algorithm type enum, defaults to EnumHashAlgorithm.MD5
        """
        self.algorithm = algorithm
        self.hash_obj = hashes.Hash(get_hash_algorithm(algorithm))

    def update(self, data: bytes) -> None:
        """Update the hash object with new data.

        :param data: Binary data to be added to the hash calculation.
        """
        self.hash_obj.update(data)

    def finalize(self) -> bytes:
        """Finalize the hash computation and return the digest.

        After calling this method, the hash object cannot be used for further updates.

        :return: The computed hash digest as bytes.
        """
        return self.hash_obj.finalize()


def digest_stream(
    stream: ByteStream,
    length: int,
    algorithm: EnumHashAlgorithm = EnumHashAlgorithm.MD5,
    chunk_size: int = DIGEST_CHUNK_SIZE,
) -> bytes:
    """Compute digest of the next ``length`` bytes of a stream.

    :param stream: Stream positioned at the first byte to digest.
    :param length: Number of bytes to digest.
    :param algorithm: Hash algorithm to use for computation.
    :param chunk_size: Size of the read buffer.
    :raises SeamaTruncatedError: Stream ends before ``length`` bytes were read.
    :return: Hash digest as bytes.
    """
    hash_obj = Hash(algorithm)
    remaining = length
    while remaining:
        data = stream.read(min(chunk_size, remaining))
        if not data:
            raise SeamaTruncatedError(
                f"Couldn't digest {length} B from {stream.name} ({remaining} B missing)"
            )
        hash_obj.update(data)
        remaining -= len(data)
    return hash_obj.finalize()
