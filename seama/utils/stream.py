#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Byte stream capability used by the Seama container codec.

The codec never touches files directly. It works with a :class:`ByteStream`
which comes in two variants:

* :class:`RandomAccessStream` - regular files and in-memory buffers, supports
  seeking (needed by the writer to back-patch the entity header).
* :class:`ForwardOnlyStream` - pipes and standard streams, skipping is done by
  a bounded read-and-discard loop.

:func:`open_stream` opens a path (``-`` stands for stdin/stdout) and guarantees
the stream is released on every exit path.
"""

import contextlib
import io
import logging
import sys
from abc import ABC, abstractmethod
from types import TracebackType
from typing import BinaryIO, Iterator, Optional, Type

from typing_extensions import Self

from seama.exceptions import (
    SeamaIOError,
    SeamaOpenError,
    SeamaTruncatedError,
    SeamaUnsupportedOperation,
)

logger = logging.getLogger(__name__)

SKIP_BUFFER_SIZE = 1024


class ByteStream(ABC):
    """Binary stream with position tracking.

    :param fp: Underlying binary file object.
    :param name: Name used in diagnostics, defaults to the file object name.
    :param close_fp: Close the underlying file object on :meth:`close`.
    """

    def __init__(self, fp: BinaryIO, name: Optional[str] = None, close_fp: bool = True) -> None:
        self.fp = fp
        self.name = name or str(getattr(fp, "name", "<stream>"))
        self.close_fp = close_fp

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r}, position={self.position})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    @property
    @abstractmethod
    def position(self) -> int:
        """Current absolute offset in the stream."""

    @property
    @abstractmethod
    def seekable(self) -> bool:
        """True when the stream supports random access."""

    @abstractmethod
    def seek(self, offset: int) -> None:
        """Move to an absolute offset.

        :param offset: Absolute offset from the beginning of the stream.
        """

    @abstractmethod
    def skip(self, length: int) -> None:
        """Advance the stream by given number of bytes without returning them.

        :param length: Number of bytes to skip.
        :raises SeamaTruncatedError: The stream ends before all bytes were skipped.
        """

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes, less only at the end of the stream.

        :param size: Number of bytes requested.
        :raises SeamaIOError: Read failure.
        :return: Data read, empty at the end of the stream.
        """
        chunks = []
        remaining = size
        while remaining > 0:
            try:
                chunk = self.fp.read(remaining)
            except OSError as exc:
                raise SeamaIOError(f"Couldn't read {size} B from {self.name}: {exc}") from exc
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        self._advance(len(data))
        return data

    def read_exact(self, size: int, what: str = "data") -> bytes:
        """Read exactly ``size`` bytes.

        :param size: Number of bytes requested.
        :param what: Description of the data used in the error message.
        :raises SeamaTruncatedError: Fewer bytes available.
        :return: Data read.
        """
        data = self.read(size)
        if len(data) != size:
            raise SeamaTruncatedError(
                f"Couldn't read {size} B of {what} from {self.name} ({len(data)} B available)"
            )
        return data

    def write(self, data: bytes) -> int:
        """Write all given bytes.

        :param data: Data to write.
        :raises SeamaIOError: Write failure.
        :return: Number of bytes written.
        """
        try:
            self.fp.write(data)
        except OSError as exc:
            raise SeamaIOError(f"Couldn't write {len(data)} B to {self.name}: {exc}") from exc
        self._advance(len(data))
        return len(data)

    def flush(self) -> None:
        """Flush buffered data of the underlying file object."""
        try:
            self.fp.flush()
        except OSError as exc:
            raise SeamaIOError(f"Couldn't flush {self.name}: {exc}") from exc

    def close(self) -> None:
        """Release the underlying file object; process standard streams stay open."""
        if self.close_fp:
            self.fp.close()
        else:
            with contextlib.suppress(OSError, ValueError):
                self.fp.flush()

    def _advance(self, length: int) -> None:
        """Hook called after ``length`` bytes were read or written."""


class RandomAccessStream(ByteStream):
    """Stream over a seekable file object."""

    @property
    def position(self) -> int:
        return self.fp.tell()

    @property
    def seekable(self) -> bool:
        return True

    @property
    def size(self) -> int:
        """Total size of the stream in bytes."""
        current = self.fp.tell()
        try:
            return self.fp.seek(0, io.SEEK_END)
        finally:
            self.fp.seek(current)

    def seek(self, offset: int) -> None:
        if offset < 0:
            raise SeamaIOError(f"Invalid offset {offset} in {self.name}")
        try:
            self.fp.seek(offset)
        except OSError as exc:
            raise SeamaIOError(f"Couldn't seek to {offset} in {self.name}: {exc}") from exc

    def skip(self, length: int) -> None:
        target = self.position + length
        size = self.size
        if target > size:
            self.seek(size)
            raise SeamaTruncatedError(
                f"Couldn't skip {length} B in {self.name} ({target - size} B missing)"
            )
        self.seek(target)


class ForwardOnlyStream(ByteStream):
    """Stream over a sequential-only file object such as a pipe.

    :param fp: Underlying binary file object.
    :param name: Name used in diagnostics.
    :param close_fp: Close the underlying file object on :meth:`close`.
    :param skip_buffer_size: Size of the buffer used for read-and-discard skipping.
    """

    def __init__(
        self,
        fp: BinaryIO,
        name: Optional[str] = None,
        close_fp: bool = True,
        skip_buffer_size: int = SKIP_BUFFER_SIZE,
    ) -> None:
        super().__init__(fp, name, close_fp)
        self.skip_buffer_size = skip_buffer_size
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def seekable(self) -> bool:
        return False

    def seek(self, offset: int) -> None:
        raise SeamaUnsupportedOperation(f"Stream {self.name} doesn't support random access")

    def skip(self, length: int) -> None:
        while length:
            data = self.read(min(self.skip_buffer_size, length))
            if not data:
                raise SeamaTruncatedError(f"Couldn't skip in {self.name} ({length} B missing)")
            length -= len(data)

    def _advance(self, length: int) -> None:
        self._position += length


def as_byte_stream(
    fp: BinaryIO, name: Optional[str] = None, close_fp: bool = True, forward_only: bool = False
) -> ByteStream:
    """Wrap a binary file object into the matching stream variant.

    :param fp: Binary file object.
    :param name: Name used in diagnostics.
    :param close_fp: Close the file object together with the stream.
    :param forward_only: Force the sequential variant even for seekable files.
    :return: Byte stream instance.
    """
    try:
        seekable = fp.seekable()
    except (AttributeError, OSError, ValueError):
        seekable = False
    if seekable and not forward_only:
        return RandomAccessStream(fp, name, close_fp)
    return ForwardOnlyStream(fp, name, close_fp)


@contextlib.contextmanager
def open_stream(path: str, mode: str = "rb", forward_only: bool = False) -> Iterator[ByteStream]:
    """Open a file (or stdin/stdout for ``-``) as a byte stream.

    :param path: File path, ``-`` for standard input (read modes) or output (write modes).
    :param mode: Binary open mode.
    :param forward_only: Use the sequential stream variant even for seekable files.
    :raises SeamaIOError: Standard input is an interactive terminal.
    :raises SeamaOpenError: The file can't be opened.
    :yield: Opened byte stream, closed when the context exits.
    """
    if "b" not in mode:
        mode += "b"
    if path == "-":
        if "r" in mode and "+" not in mode:
            if sys.stdin.isatty():
                raise SeamaIOError("Reading from TTY stdin is unsupported")
            fp = sys.stdin.buffer
            name = "<stdin>"
        else:
            fp = sys.stdout.buffer
            name = "<stdout>"
        stream = as_byte_stream(fp, name, close_fp=False, forward_only=forward_only)
    else:
        try:
            fp = open(path, mode)  # pylint: disable=consider-using-with
        except OSError as exc:
            raise SeamaOpenError(f"Couldn't open {path}: {exc.strerror}") from exc
        stream = as_byte_stream(fp, path, forward_only=forward_only)
    logger.debug(f"Opened {stream!r} in mode {mode}")
    with stream:
        yield stream
