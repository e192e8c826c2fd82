#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Seama metadata blob codec.

The metadata blob is a sequence of NUL-terminated strings packed back to back,
for example ``dev=/dev/mtdblock/2\\0type=firmware\\0``. Blobs produced by the
entity writer additionally zero-pad every entry to a 4-byte boundary.
"""

import logging
from typing import Iterable

from seama.exceptions import SeamaValueError
from seama.utils.misc import padding_size

logger = logging.getLogger(__name__)

META_ALIGNMENT = 4
META_ENCODING = "utf-8"
# bytes that are not valid UTF-8 map to lone surrogates and back
META_ERRORS = "surrogateescape"


def encode_entry(text: str) -> bytes:
    """Encode one metadata string including its NUL terminator.

    :param text: Metadata string, must not contain NUL characters.
    :raises SeamaValueError: The string contains a NUL character or can't be encoded.
    :return: Encoded bytes.
    """
    if "\0" in text:
        raise SeamaValueError(f"Meta entry {text!r} contains NUL character")
    try:
        return text.encode(META_ENCODING, META_ERRORS) + b"\0"
    except UnicodeEncodeError as exc:
        raise SeamaValueError(f"Meta entry {text!r} can't be encoded: {exc.reason}") from exc


def encode(entries: Iterable[str]) -> bytes:
    """Encode metadata strings into a blob, no alignment padding is added.

    :param entries: Metadata strings in the order they should be stored.
    :return: Encoded blob.
    """
    return b"".join(encode_entry(entry) for entry in entries)


def decode(data: bytes, alignment: int = META_ALIGNMENT) -> list[str]:
    """Decode metadata blob into list of strings.

    The last byte of the blob is treated as a terminator, so a truncated last
    string is still returned. Scanning ends at the first empty string or at the
    last byte of the blob. Zero bytes following a terminator up to the next
    ``alignment`` boundary are padding and don't end the scanning.

    :param data: Metadata blob.
    :param alignment: Entry alignment, 0 or 1 for unpadded blobs.
    :return: Metadata strings.
    """
    if not data:
        return []
    end = len(data) - 1
    buf = data[:end] + b"\0"
    entries: list[str] = []
    pos = 0
    while pos < end:
        term = buf.index(b"\0", pos)
        if term == pos:
            break
        entries.append(buf[pos:term].decode(META_ENCODING, META_ERRORS))
        pos = term + 1
        if alignment > 1:
            gap = padding_size(pos, alignment)
            if buf[pos : pos + gap].strip(b"\0") == b"":
                pos += gap
    logger.debug(f"Decoded {len(entries)} meta entries from {len(data)} B")
    return entries
