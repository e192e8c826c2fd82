#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""High level Seama operations behind the ``oseama`` commands.

Each operation takes an immutable options value describing one invocation.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from seama import SEAMA_META_BUFFER_LIMIT
from seama.container.header import EntityHeader
from seama.container.reader import ContainerReader
from seama.container.writer import ContainerWriter, EntityOperation
from seama.exceptions import SeamaInvalidIndex, SeamaUnsupportedOperation
from seama.utils.stream import ByteStream, open_stream

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InfoOptions:
    """Options of the container inspection.

    :param path: Container path, ``-`` for stdin.
    :param entity: Index of the only entity to describe, None for all.
    :param meta_limit: Metadata inspection buffer size, 0 for unlimited.
    :param verify: Recompute image digests and report the result.
    """

    path: str
    entity: Optional[int] = None
    meta_limit: int = SEAMA_META_BUFFER_LIMIT
    verify: bool = False


@dataclass(frozen=True)
class EntityOptions:
    """Options of the entity creation.

    :param path: Output entity file path.
    :param operations: Requested operations in command line order.
    :param best_effort: Continue when an operation fails.
    """

    path: str
    operations: tuple[EntityOperation, ...] = field(default_factory=tuple)
    best_effort: bool = False


@dataclass(frozen=True)
class ExtractOptions:
    """Options of the entity extraction.

    :param path: Container path, ``-`` for stdin.
    :param entity: Index of the entity to extract.
    :param output: Output file path, None or ``-`` for stdout.
    """

    path: str
    entity: int
    output: Optional[str] = None


def _meta_lines(entries: list[str]) -> Iterator[str]:
    for entry in entries:
        yield f"Meta entry:\t{entry}"


def info(options: InfoOptions) -> Iterator[str]:
    """Describe the seal and entities of a container.

    Lines are produced while the container is read, so a failure in a later
    entity is reported after the preceding entities were described.

    :param options: Inspection options.
    :raises SeamaInvalidIndex: Requested entity is not present.
    :return: Iterator of output lines.
    """
    with open_stream(options.path, "rb") as stream:
        reader = ContainerReader(stream, meta_limit=options.meta_limit)
        seal = reader.open_seal()
        seal_meta = reader.read_seal_meta(seal)
        if options.entity is None:
            yield f"Meta size:\t{seal.metasize}"
            yield f"Image size:\t{seal.imagesize}"
            yield from _meta_lines(seal_meta)

        found = False
        for record in reader.iter_entities():
            if options.entity is not None and record.index != options.entity:
                continue
            found = True
            header = record.header
            entries = reader.read_meta(header.metasize)
            if options.entity is None:
                yield ""
            yield f"Entity offset:\t{record.offset}"
            yield f"Entity size:\t{header.size}"
            yield f"Meta size:\t{header.metasize}"
            yield f"Image size:\t{header.imagesize}"
            yield f"Image MD5:\t{header.digest.hex()}"
            yield from _meta_lines(entries)
            if options.verify:
                yield f"Image check:\t{'OK' if reader.verify_image(header) else 'FAILED'}"
            if options.entity is not None:
                break

        if options.entity is not None and not found:
            raise SeamaInvalidIndex(f"Entity {options.entity} not found in {options.path}")


def entity(options: EntityOptions) -> EntityHeader:
    """Create a file with a single Seama entity.

    An existing file is truncated.

    :param options: Entity creation options.
    :raises SeamaUnsupportedOperation: Output is the standard output.
    :return: Header of the created entity.
    """
    if options.path == "-":
        raise SeamaUnsupportedOperation("Seama entity can't be written to stdout")
    with open_stream(options.path, "w+b") as stream:
        writer = ContainerWriter(stream, best_effort=options.best_effort)
        header = writer.build(options.operations)
    if writer.failed:
        logger.warning(f"{len(writer.failed)} operation(s) failed while creating {options.path}")
    return header


def extract(options: ExtractOptions) -> int:
    """Copy raw bytes of one entity out of a container.

    :param options: Extraction options.
    :raises SeamaInvalidIndex: Requested entity is not present.
    :return: Number of bytes extracted.
    """
    with open_stream(options.path, "rb") as stream:
        with open_stream(options.output or "-", "wb") as out:
            return extract_to(stream, options.entity, out)


def extract_to(stream: ByteStream, index: int, out: ByteStream) -> int:
    """Extract entity from a container stream into an already opened stream.

    :param stream: Container stream positioned at the seal header.
    :param index: Index of the entity.
    :param out: Output stream.
    :return: Number of bytes extracted.
    """
    reader = ContainerReader(stream, meta_limit=None)
    seal = reader.open_seal()
    reader.skip_seal_meta(seal)
    return reader.extract_entity(index, out)
