#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama entity writer.

An entity is built in two passes over a random-access stream:

1. A zeroed placeholder header is written to reserve its space.
2. Metadata entries are appended, each one zero-padded to a 4-byte boundary.
3. Image data (file contents and zero padding up to absolute offsets) is appended.
4. The image is digested and the final header overwrites the placeholder.

All metadata operations always precede all image operations, independently of
the order in which they were requested.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Iterable, Optional, Sequence, Union

from seama.container import meta
from seama.container.header import EntityHeader
from seama.crypto.hash import digest_stream
from seama.exceptions import (
    SeamaBackwardPad,
    SeamaError,
    SeamaIOError,
    SeamaOpenError,
    SeamaUnsupportedOperation,
)
from seama.utils.misc import padding_size, size_fmt
from seama.utils.stream import ByteStream

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 128


class WriterState(str, Enum):
    """Phases of the entity construction."""

    EMPTY = "empty"
    META = "meta"
    BODY = "body"
    FINALIZED = "finalized"


@dataclass(frozen=True)
class MetaOperation:
    """Append a metadata string."""

    text: str


@dataclass(frozen=True)
class FileOperation:
    """Append content of a file to the image."""

    path: str


@dataclass(frozen=True)
class PaddingOperation:
    """Append zeros to the image up to an absolute offset."""

    offset: int


EntityOperation = Union[MetaOperation, FileOperation, PaddingOperation]


def partition_operations(
    operations: Iterable[EntityOperation],
) -> tuple[list[MetaOperation], list[EntityOperation]]:
    """Split operations into metadata and image operations, keeping their order.

    :param operations: Operations in the order they were requested.
    :return: Metadata operations and image operations.
    """
    meta_ops: list[MetaOperation] = []
    body_ops: list[EntityOperation] = []
    for operation in operations:
        if isinstance(operation, MetaOperation):
            meta_ops.append(operation)
        else:
            body_ops.append(operation)
    return meta_ops, body_ops


class ContainerWriter:
    """Writer of a single Seama entity.

    :param stream: Random-access stream the entity is written to, starting at offset 0.
    :param best_effort: Log failed operations and continue instead of aborting.
    """

    ALIGNMENT = 4

    def __init__(self, stream: ByteStream, best_effort: bool = False) -> None:
        if not stream.seekable:
            raise SeamaUnsupportedOperation(
                f"Seama entity can't be written to {stream.name}, random access is required"
            )
        self.stream = stream
        self.best_effort = best_effort
        self.state = WriterState.EMPTY
        self.offset = 0
        self.metasize = 0
        self.imagesize = 0
        self.failed: list[EntityOperation] = []

    def __repr__(self) -> str:
        return (
            f"ContainerWriter(state={self.state.value}, offset={self.offset}, "
            f"metasize={self.metasize}, imagesize={self.imagesize})"
        )

    def begin(self) -> None:
        """Write the placeholder header and position the stream right after it."""
        self._check_state(WriterState.EMPTY)
        self.stream.seek(0)
        self.stream.write(EntityHeader.placeholder().export())
        self.offset = EntityHeader.SIZE
        self.state = WriterState.META

    def append_meta(self, text: str) -> int:
        """Append metadata string followed by zero padding to the next aligned offset.

        :param text: Metadata string.
        :raises SeamaError: Image data were already appended.
        :return: Number of bytes added to the metadata.
        """
        self._check_state(WriterState.META)
        length = self._write(meta.encode_entry(text))
        length += self._write(bytes(padding_size(self.offset, self.ALIGNMENT)))
        self.metasize += length
        logger.debug(f"Meta entry {text!r} added ({length} B)")
        return length

    def append_file(self, source: BinaryIO, name: Optional[str] = None) -> int:
        """Append all data from a binary source to the image.

        :param source: Opened binary file object.
        :param name: Name of the source used in messages.
        :raises SeamaIOError: Failure to read the source or write the stream.
        :return: Number of bytes added to the image.
        """
        self._enter_body()
        name = name or str(getattr(source, "name", "<source>"))
        length = 0
        while True:
            try:
                data = source.read(COPY_BUFFER_SIZE)
            except OSError as exc:
                raise SeamaIOError(f"Couldn't read {name}: {exc}") from exc
            if not data:
                break
            length += self._write(data)
            self.imagesize += len(data)
        logger.debug(f"File {name} appended ({length} B)")
        return length

    def append_file_path(self, path: str) -> int:
        """Open a file and append its content to the image.

        :param path: Path to the file.
        :raises SeamaOpenError: The file can't be opened.
        :return: Number of bytes added to the image.
        """
        self._enter_body()
        try:
            source = open(path, "rb")  # pylint: disable=consider-using-with
        except OSError as exc:
            raise SeamaOpenError(f"Couldn't open {path}: {exc.strerror}") from exc
        with source:
            return self.append_file(source, path)

    def append_padding_to(self, offset: int) -> int:
        """Append zeros to the image up to an absolute offset.

        :param offset: Absolute offset in the entity to reach.
        :raises SeamaBackwardPad: Offset precedes the current write offset.
        :return: Number of bytes added to the image.
        """
        self._enter_body()
        if offset < self.offset:
            raise SeamaBackwardPad(
                f"Current Seama entity length is {hex(self.offset)}, "
                f"can't pad it with zeros to {hex(offset)}"
            )
        length = self._write(bytes(offset - self.offset))
        self.imagesize += length
        logger.debug(f"Padded with {length} B of zeros up to 0x{offset:x}")
        return length

    def finalize(self) -> EntityHeader:
        """Compute the image digest and write the final header at offset 0.

        The stream is left at the end of the entity.

        :return: The final entity header.
        """
        if self.state == WriterState.EMPTY:
            self.begin()
        self._check_state(WriterState.META, WriterState.BODY)
        self.stream.flush()
        self.stream.seek(EntityHeader.SIZE + self.metasize)
        digest = digest_stream(self.stream, self.imagesize)
        header = EntityHeader(metasize=self.metasize, imagesize=self.imagesize, digest=digest)
        data = header.export()
        self.stream.seek(0)
        self.stream.write(data)
        self.stream.seek(self.offset)
        self.stream.flush()
        self.state = WriterState.FINALIZED
        logger.info(
            f"Seama entity finalized: meta {self.metasize} B, image {self.imagesize} B "
            f"({size_fmt(header.size)} total)"
        )
        return header

    def apply(self, operation: EntityOperation) -> int:
        """Execute single operation.

        :param operation: Operation to execute.
        :return: Number of bytes written.
        """
        if isinstance(operation, MetaOperation):
            return self.append_meta(operation.text)
        if isinstance(operation, FileOperation):
            return self.append_file_path(operation.path)
        if isinstance(operation, PaddingOperation):
            return self.append_padding_to(operation.offset)
        raise SeamaError(f"Unknown entity operation: {operation!r}")

    def build(self, operations: Sequence[EntityOperation]) -> EntityHeader:
        """Build the whole entity from a list of operations.

        All metadata operations are executed first, in the given order, then all
        image operations in the given order.

        :param operations: Operations in the order they were requested.
        :return: The final entity header.
        """
        meta_ops, body_ops = partition_operations(operations)
        self.begin()
        for operation in [*meta_ops, *body_ops]:
            try:
                self.apply(operation)
            except SeamaError as exc:
                if not self.best_effort:
                    raise
                logger.error(f"Operation {operation!r} failed: {exc}")
                self.failed.append(operation)
        return self.finalize()

    def _enter_body(self) -> None:
        self._check_state(WriterState.META, WriterState.BODY)
        self.state = WriterState.BODY

    def _check_state(self, *allowed: WriterState) -> None:
        if self.state not in allowed:
            raise SeamaError(
                f"Operation not allowed in '{self.state.value}' state of the entity writer"
            )

    def _write(self, data: bytes) -> int:
        length = self.stream.write(data)
        self.offset += length
        return length
