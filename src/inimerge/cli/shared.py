# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (input/output, logging, errors)."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Final

import click
import typer

from ..logging import fail

STDIO_PATH: Final[str] = "-"
LINE_TERMINATOR: Final[str] = "\n"
PACKAGE_LOGGER: Final[str] = "inimerge"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


def configure_logging(*, verbose: bool) -> None:
    """Route library diagnostics to stderr; DEBUG when ``verbose`` is set."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in [handler for handler in logger.handlers if getattr(handler, "_inimerge_cli", False)]:
        logger.removeHandler(existing)
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    setattr(handler, "_inimerge_cli", True)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def read_input(path: Path) -> bytes:
    """Return the bytes of ``path``, or of stdin when ``path`` is ``-``.

    Raises:
        typer.BadParameter: If the file cannot be read.
    """

    if str(path) == STDIO_PATH:
        return click.get_binary_stream("stdin").read()
    try:
        return path.expanduser().read_bytes()
    except OSError as exc:
        raise typer.BadParameter(f"Cannot read {path}: {exc.strerror or exc}") from exc


def render_lines(lines: Sequence[str]) -> str:
    """Join output lines, terminating the last one."""

    if not lines:
        return ""
    return LINE_TERMINATOR.join(lines) + LINE_TERMINATOR


def write_output(lines: Sequence[str], output: Path | None) -> None:
    """Write ``lines`` to ``output`` or to stdout when ``output`` is ``None`` or ``-``."""

    text = render_lines(lines)
    if output is None or str(output) == STDIO_PATH:
        typer.echo(text, nl=False)
        return
    try:
        output.expanduser().write_text(text, encoding="utf-8", newline="")
    except OSError as exc:
        raise CLIError(f"Cannot write {output}: {exc.strerror or exc}") from exc


def exit_with_error(error: Exception, *, exit_code: int = 1) -> typer.Exit:
    """Report ``error`` on the console and return the matching :class:`typer.Exit`."""

    fail(str(error))
    return typer.Exit(code=exit_code)


__all__ = [
    "CLIError",
    "configure_logging",
    "exit_with_error",
    "read_input",
    "render_lines",
    "write_output",
]
