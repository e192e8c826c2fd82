#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Sequential reader of Seama containers.

A container has no table of contents. Entities are discovered by reading one
header, skipping its body and reading the next header until the stream ends.
The seal header (and its metadata) must always be consumed first to position
the stream at the first entity.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from seama import SEAMA_META_BUFFER_LIMIT
from seama.container import meta
from seama.container.header import EntityHeader, SealHeader
from seama.crypto.hash import digest_stream
from seama.exceptions import SeamaBufferTooSmall, SeamaInvalidIndex, SeamaTruncatedError
from seama.utils.stream import ByteStream

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 1024


@dataclass(frozen=True)
class EntityRecord:
    """Entity discovered by the reader."""

    index: int
    offset: int
    header: EntityHeader


class ContainerReader:
    """Forward-only reader of a Seama container.

    The reader owns the stream cursor for the whole of its lifetime; nothing
    else may read from or seek in the stream in the meantime.
    """

    def __init__(self, stream: ByteStream, meta_limit: Optional[int] = SEAMA_META_BUFFER_LIMIT):
        """Initialize the reader.

        :param stream: Stream positioned at the seal header.
        :param meta_limit: Size of the metadata inspection buffer, None or 0 to lift the limit.
        """
        self.stream = stream
        self.meta_limit = meta_limit or None
        self.index = 0
        self._pending = 0

    @property
    def position(self) -> int:
        """Current offset in the stream."""
        return self.stream.position

    def open_seal(self) -> SealHeader:
        """Read and validate the seal header.

        The stream is left at the beginning of the seal metadata.

        :raises SeamaTruncatedError: Stream too short for the seal header.
        :raises SeamaFormatError: Invalid magic.
        :raises SeamaInvariantViolation: Seal declares an image.
        :return: Seal header.
        """
        data = self.stream.read(SealHeader.SIZE)
        if len(data) != SealHeader.SIZE:
            raise SeamaTruncatedError(f"Couldn't read {self.stream.name} header")
        seal = SealHeader.parse(data)
        seal.validate()
        logger.debug(f"Seal header: {seal!r}")
        return seal

    def read_seal_meta(self, seal: SealHeader) -> list[str]:
        """Read the seal metadata following the seal header."""
        return self.read_meta(seal.metasize)

    def skip_seal_meta(self, seal: SealHeader) -> None:
        """Skip the seal metadata to reach the first entity."""
        self.skip_body(seal.metasize)

    def next_entity(self) -> Optional[tuple[EntityHeader, int]]:
        """Read the next entity header.

        The body of a previously returned entity that was not consumed by the
        caller is skipped first. The body of the returned entity is not consumed.

        :raises SeamaTruncatedError: Partial header at the end of the stream.
        :raises SeamaFormatError: Invalid magic.
        :return: Entity header with its offset, None at the clean end of the stream.
        """
        self._skip_pending()
        offset = self.stream.position
        data = self.stream.read(EntityHeader.SIZE)
        if not data:
            logger.debug(f"End of entities at offset {offset}")
            return None
        header = EntityHeader.parse(data)
        logger.debug(f"Entity {self.index} at offset {offset}: {header!r}")
        self.index += 1
        self._pending = header.body_size
        return header, offset

    def iter_entities(self) -> Iterator[EntityRecord]:
        """Iterate over the remaining entities.

        Unless the caller consumes the body of the yielded entity, it's skipped
        before the next header is read.

        :return: Iterator of discovered entities.
        """
        while True:
            index = self.index
            entity = self.next_entity()
            if entity is None:
                return
            header, offset = entity
            yield EntityRecord(index=index, offset=offset, header=header)

    def skip_body(self, length: int) -> None:
        """Advance the stream without buffering the skipped data.

        :param length: Number of bytes to skip.
        :raises SeamaTruncatedError: Stream ends too early.
        """
        self._consume(length)
        self.stream.skip(length)

    def read_meta(self, metasize: int) -> list[str]:
        """Read and decode metadata blob.

        :param metasize: Length of the metadata blob.
        :raises SeamaBufferTooSmall: Metadata doesn't fit the inspection buffer.
        :raises SeamaTruncatedError: Stream ends too early.
        :return: Metadata strings.
        """
        if self.meta_limit is not None and metasize >= self.meta_limit:
            raise SeamaBufferTooSmall(
                f"Too small buffer ({self.meta_limit} B) to read all meta info ({metasize} B)"
            )
        self._consume(metasize)
        data = self.stream.read_exact(metasize, "meta")
        return meta.decode(data)

    def read_image(self, imagesize: int) -> bytes:
        """Read the image of the current entity into memory."""
        self._consume(imagesize)
        return self.stream.read_exact(imagesize, "image")

    def verify_image(self, header: EntityHeader) -> bool:
        """Check the image following the current position against the header digest.

        The stream has to be positioned at the beginning of the image, i.e.
        right after the entity metadata.

        :param header: Header of the entity being checked.
        :raises SeamaTruncatedError: Stream ends too early.
        :return: True when the digest matches.
        """
        self._consume(header.imagesize)
        digest = digest_stream(self.stream, header.imagesize)
        if digest != header.digest:
            logger.warning(
                f"Image digest mismatch: computed {digest.hex()}, stored {header.digest.hex()}"
            )
            return False
        return True

    def select_entity(self, index: int) -> EntityHeader:
        """Locate entity by its index.

        The stream is left at the beginning of the entity metadata.

        :param index: Zero-based index of the entity, counted from the current position.
        :raises SeamaInvalidIndex: Container has fewer entities.
        :return: Header of the selected entity.
        """
        if index < 0:
            raise SeamaInvalidIndex(f"Invalid entity index {index}")
        for record in self.iter_entities():
            if record.index == index:
                return record.header
        raise SeamaInvalidIndex(f"Entity {index} not found in {self.stream.name}")

    def extract_entity(self, index: int, out: ByteStream) -> int:
        """Copy raw bytes of an entity to another stream.

        :param index: Zero-based index of the entity.
        :param out: Output stream.
        :raises SeamaInvalidIndex: Container has fewer entities.
        :raises SeamaTruncatedError: Entity body is shorter than declared.
        :return: Number of bytes written.
        """
        header = self.select_entity(index)
        written = out.write(header.export())
        length = header.body_size
        self._consume(length)
        while length:
            data = self.stream.read(min(COPY_BUFFER_SIZE, length))
            if not data:
                break
            written += out.write(data)
            length -= len(data)
        if length:
            raise SeamaTruncatedError(
                f"Couldn't extract whole entity {index} from {self.stream.name} ({length} B left)"
            )
        logger.info(f"Extracted entity {index}: {written} B")
        return written

    def _consume(self, length: int) -> None:
        """Account bytes of the current entity body consumed by the caller."""
        self._pending = max(self._pending - length, 0)

    def _skip_pending(self) -> None:
        if self._pending:
            length, self._pending = self._pending, 0
            self.stream.skip(length)
