#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Common click options and command classes of Seama applications."""

import logging
from itertools import islice
from typing import Any, Callable, Iterator, Optional, TypeVar, Union

import click

from seama import __version__ as seama_version

FC = TypeVar("FC", bound=Union[Callable[..., Any], click.Command])

OPTION_ORDER_KEY = "seama.option_order"


def seama_apps_common_options(options: FC) -> FC:
    """Common click options.

    Sets --help, --version; provides: `log_level: int` for logging.

    :return: click decorator
    """
    options = click.help_option("--help")(options)
    options = click.version_option(seama_version, "--version")(options)
    options = click.option(
        "-vv",
        "--debug",
        "log_level",
        flag_value=logging.DEBUG,
        help="Display more debugging information.",
    )(options)
    options = click.option(
        "-v",
        "--verbose",
        "log_level",
        flag_value=logging.INFO,
        help="Print more detailed information",
    )(options)
    return options


def seama_entity_index_option(required: bool = False, help: Optional[str] = None) -> Callable:
    """Entity index option.

    Provides: `entity: Optional[int]` zero-based index of the entity.

    :param required: Option is required, defaults to False
    :param help: Customized help message, defaults to None
    :return: Click decorator
    """
    return click.option(
        "-e",
        "--entity",
        type=click.IntRange(min=0),
        required=required,
        help=help or "Index of the entity.",
    )


class OrderedOptionsCommand(click.Command):
    """Click command remembering the order in which options were given.

    Click collects values of a ``multiple`` option together, which loses the
    relative order of different options. The order of option names as they
    appear on the command line is stored in ``ctx.meta[OPTION_ORDER_KEY]``.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        """Record option order and parse the arguments."""
        ctx.meta[OPTION_ORDER_KEY] = list(self._scan_option_order(args))
        return super().parse_args(ctx, args)

    def _scan_option_order(self, args: list[str]) -> Iterator[str]:
        options: dict[str, click.Option] = {}
        for param in self.params:
            if isinstance(param, click.Option):
                for opt in param.opts + param.secondary_opts:
                    options[opt] = param

        tokens = iter(args)
        for token in tokens:
            if token == "--":
                return
            if token.startswith("--"):
                name, sep, _ = token.partition("=")
                option = options.get(name)
                attached = bool(sep)
            elif token.startswith("-") and len(token) > 1:
                option = options.get(token) or options.get(token[:2])
                attached = token not in options
            else:
                continue
            if option is None or option.name is None:
                continue
            yield option.name
            if not (option.is_flag or option.count or attached):
                next(tokens, None)


def ordered_values(ctx: click.Context, values: dict[str, tuple]) -> Iterator[tuple[str, Any]]:
    """Merge values of several multiple-options back into command line order.

    :param ctx: Click context of a command using :class:`OrderedOptionsCommand`.
    :param values: Option name to tuple of its values.
    :return: Iterator of option name and value pairs in command line order.
    """
    iterators = {name: iter(value) for name, value in values.items()}
    for name in ctx.meta.get(OPTION_ORDER_KEY, []):
        if name in iterators:
            for value in islice(iterators[name], 1):
                yield name, value
    # values the scan didn't account for keep their per-option order
    for name, iterator in iterators.items():
        for value in iterator:
            yield name, value
