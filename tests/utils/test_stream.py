#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Test module for byte streams."""

import io
import os
import sys
from typing import Any

import pytest

from seama.exceptions import (
    SeamaIOError,
    SeamaOpenError,
    SeamaTruncatedError,
    SeamaUnsupportedOperation,
)
from seama.utils.stream import (
    ForwardOnlyStream,
    RandomAccessStream,
    as_byte_stream,
    open_stream,
)


class ChunkedReader(io.RawIOBase):
    """Sequential reader returning at most a few bytes per read, like a pipe."""

    def __init__(self, data: bytes, chunk: int = 3) -> None:
        super().__init__()
        self.data = data
        self.chunk = chunk

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        size = self.chunk if size < 0 else min(size, self.chunk)
        data, self.data = self.data[:size], self.data[size:]
        return data


class FakeStdin:
    """Standard input replacement."""

    def __init__(self, data: bytes, tty: bool = False) -> None:
        self.buffer = io.BytesIO(data)
        self.tty = tty

    def isatty(self) -> bool:
        return self.tty


def test_as_byte_stream() -> None:
    """Test stream variant selection."""
    assert isinstance(as_byte_stream(io.BytesIO()), RandomAccessStream)
    assert isinstance(as_byte_stream(io.BytesIO(), forward_only=True), ForwardOnlyStream)
    assert isinstance(as_byte_stream(ChunkedReader(b"")), ForwardOnlyStream)


def test_read_short_chunks() -> None:
    """Test read collects data from multiple short reads."""
    stream = ForwardOnlyStream(ChunkedReader(bytes(range(10))), "pipe")
    assert stream.read(8) == bytes(range(8))
    assert stream.position == 8
    assert stream.read(8) == bytes([8, 9])
    assert stream.read(8) == b""
    assert stream.position == 10


def test_read_exact() -> None:
    """Test read of exact size."""
    stream = RandomAccessStream(io.BytesIO(b"abcdef"), "file")
    assert stream.read_exact(4, "meta") == b"abcd"
    with pytest.raises(SeamaTruncatedError, match="Couldn't read 4 B of meta from file"):
        stream.read_exact(4, "meta")


@pytest.mark.parametrize("skip_buffer_size", [1, 7, 1024])
def test_forward_only_skip(skip_buffer_size: int) -> None:
    """Test skipping by read-and-discard.

    :param skip_buffer_size: Size of the skip buffer.
    """
    stream = ForwardOnlyStream(
        ChunkedReader(bytes(range(100))), "pipe", skip_buffer_size=skip_buffer_size
    )
    stream.skip(50)
    assert stream.position == 50
    assert stream.read(1) == bytes([50])
    with pytest.raises(SeamaTruncatedError):
        stream.skip(50)
    assert stream.position == 100


def test_forward_only_seek() -> None:
    """Test sequential stream refuses seeking."""
    stream = ForwardOnlyStream(io.BytesIO(b"abc"))
    assert not stream.seekable
    with pytest.raises(SeamaUnsupportedOperation):
        stream.seek(0)


def test_random_access_skip() -> None:
    """Test skipping in a seekable stream."""
    stream = RandomAccessStream(io.BytesIO(bytes(100)))
    assert stream.size == 100
    stream.skip(60)
    assert stream.position == 60
    with pytest.raises(SeamaTruncatedError, match="1 B missing"):
        stream.skip(41)
    assert stream.position == 100


def test_open_stream_file(tmpdir: str) -> None:
    """Test file is closed when the context exits."""
    path = os.path.join(tmpdir, "file.bin")
    with open_stream(path, "wb") as stream:
        stream.write(b"data")
    assert stream.fp.closed
    with open_stream(path) as stream:
        assert isinstance(stream, RandomAccessStream)
        assert stream.read(10) == b"data"
    with open_stream(path, forward_only=True) as stream:
        assert isinstance(stream, ForwardOnlyStream)


def test_open_stream_missing(tmpdir: str) -> None:
    """Test opening of a non-existing file."""
    with pytest.raises(SeamaOpenError):
        with open_stream(os.path.join(tmpdir, "missing.bin")):
            pass


def test_open_stream_stdin(monkeypatch: Any) -> None:
    """Test '-' reads the standard input which stays open."""
    stdin = FakeStdin(b"input")
    monkeypatch.setattr(sys, "stdin", stdin)
    with open_stream("-") as stream:
        assert stream.name == "<stdin>"
        assert stream.read(5) == b"input"
    assert not stdin.buffer.closed


def test_open_stream_tty(monkeypatch: Any) -> None:
    """Test interactive standard input is refused."""
    monkeypatch.setattr(sys, "stdin", FakeStdin(b"", tty=True))
    with pytest.raises(SeamaIOError, match="TTY"):
        with open_stream("-"):
            pass


def test_open_stream_stdout(monkeypatch: Any) -> None:
    """Test '-' in write mode writes the standard output."""
    stdout = io.TextIOWrapper(io.BytesIO())
    monkeypatch.setattr(sys, "stdout", stdout)
    with open_stream("-", "wb") as stream:
        assert stream.name == "<stdout>"
        stream.write(b"output")
    assert stdout.buffer.getvalue() == b"output"
