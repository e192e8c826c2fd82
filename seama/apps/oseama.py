#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Console script for inspecting, creating and extracting Seama containers."""

import logging
import sys
from typing import Optional

import click

from seama import SEAMA_META_BUFFER_LIMIT
from seama.apps.utils import seama_logger
from seama.apps.utils.common_cli_options import (
    OrderedOptionsCommand,
    ordered_values,
    seama_apps_common_options,
    seama_entity_index_option,
)
from seama.apps.utils.utils import INT, OFFSET, catch_seama_error
from seama.container import tool
from seama.container.meta import META_ENCODING, META_ERRORS
from seama.container.writer import EntityOperation, FileOperation, MetaOperation, PaddingOperation

logger = logging.getLogger(__name__)


@click.group(name="oseama", no_args_is_help=True)
@seama_apps_common_options
def main(log_level: int) -> None:
    """Seama firmware container tool.

    Inspect Seama seals (containers), create Seama entities and extract
    entities from seals.
    """
    seama_logger.install(level=log_level)


@main.command(name="info", no_args_is_help=True)
@click.argument("file", metavar="FILE")
@seama_entity_index_option(help="Print info about specified entity only.")
@click.option(
    "--meta-limit",
    type=INT(),
    default=SEAMA_META_BUFFER_LIMIT,
    show_default=True,
    help="Largest metadata blob accepted for inspection (exclusive), 0 for unlimited.",
)
@click.option("--verify", is_flag=True, default=False, help="Check image digests.")
def info(file: str, entity: Optional[int], meta_limit: int, verify: bool) -> None:
    """Print info about Seama seal (container) FILE, '-' reads stdin."""
    options = tool.InfoOptions(path=file, entity=entity, meta_limit=meta_limit, verify=verify)
    for line in tool.info(options):
        click.echo(line.encode(META_ENCODING, META_ERRORS))


@main.command(name="entity", cls=OrderedOptionsCommand, no_args_is_help=True)
@click.argument("file", metavar="FILE")
@click.option("-m", "--meta", multiple=True, help="Meta info to put in header.")
@click.option(
    "-f",
    "--file",
    "files",
    multiple=True,
    type=click.Path(dir_okay=False),
    help="Append content from file.",
)
@click.option(
    "-b",
    "--pad",
    multiple=True,
    type=OFFSET(),
    help="Append zeros till reaching absolute offset (0x hexadecimal, leading 0 octal).",
)
@click.option(
    "--best-effort",
    is_flag=True,
    default=False,
    help="Report failed -m/-f/-b operations and continue instead of aborting.",
)
@click.pass_context
def entity(
    ctx: click.Context,
    file: str,
    meta: tuple[str, ...],
    files: tuple[str, ...],
    pad: tuple[int, ...],
    best_effort: bool,
) -> None:
    """Create Seama entity FILE.

    All meta entries are written first, then the image is assembled from files
    and zero paddings in the order they were given.
    """
    operations: list[EntityOperation] = []
    for name, value in ordered_values(ctx, {"meta": meta, "files": files, "pad": pad}):
        if name == "meta":
            operations.append(MetaOperation(value))
        elif name == "files":
            operations.append(FileOperation(value))
        else:
            operations.append(PaddingOperation(value))
    options = tool.EntityOptions(path=file, operations=tuple(operations), best_effort=best_effort)
    header = tool.entity(options)
    logger.info(f"Created {file}: meta size {header.metasize} B, image size {header.imagesize} B")


@main.command(name="extract", no_args_is_help=True)
@click.argument("file", metavar="FILE")
@seama_entity_index_option(required=True, help="Index of entity to extract.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    help="Output file, standard output if omitted.",
)
def extract(file: str, entity: int, output: Optional[str]) -> None:
    """Extract entity from Seama seal (container) FILE, '-' reads stdin."""
    written = tool.extract(tool.ExtractOptions(path=file, entity=entity, output=output))
    logger.info(f"Extracted {written} B of entity {entity}")


@catch_seama_error
def safe_main() -> None:
    """Call the main function."""
    sys.exit(main())  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    safe_main()
