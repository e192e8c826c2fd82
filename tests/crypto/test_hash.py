#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Test module for hash algorithms."""

import hashlib
import io

import pytest

from seama.crypto.hash import EnumHashAlgorithm, Hash, digest_stream
from seama.exceptions import SeamaTruncatedError
from seama.utils.stream import ForwardOnlyStream, RandomAccessStream


def test_md5_length() -> None:
    """Test MD5 digest size."""
    assert len(Hash(EnumHashAlgorithm.MD5).finalize()) == 16


def test_md5() -> None:
    """Test MD5 against known values."""
    assert Hash().finalize().hex() == "d41d8cd98f00b204e9800998ecf8427e"
    hash_obj = Hash()
    hash_obj.update(b"abc")
    assert hash_obj.finalize().hex() == "900150983cd24fb0d6963f7d28e17f72"


def test_hash_updates() -> None:
    """Test incremental hashing gives the same digest as hashing at once."""
    hash_obj = Hash()
    for chunk in (b"Seama ", b"firmware ", b"image"):
        hash_obj.update(chunk)
    assert hash_obj.finalize() == hashlib.md5(b"Seama firmware image").digest()


@pytest.mark.parametrize("stream_cls", [RandomAccessStream, ForwardOnlyStream])
@pytest.mark.parametrize("length", [0, 1, 128, 129, 1000])
def test_digest_stream(stream_cls: type, length: int) -> None:
    """Test digest of a stream part.

    :param stream_cls: Stream variant.
    :param length: Number of bytes to digest.
    """
    data = bytes(range(256)) * 4
    stream = stream_cls(io.BytesIO(data))
    assert digest_stream(stream, length) == hashlib.md5(data[:length]).digest()
    assert stream.position == length


def test_digest_stream_truncated() -> None:
    """Test digest of more data than available."""
    with pytest.raises(SeamaTruncatedError):
        digest_stream(ForwardOnlyStream(io.BytesIO(b"abc")), 4)
