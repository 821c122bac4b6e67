# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the inimerge commands."""

from __future__ import annotations

from .check import check_rules_command
from .filter import filter_command
from .merge import merge_command
from .typer_ext import create_typer

app = create_typer(help="Merge INI files while preserving formatting.", no_args_is_help=True)
app.command("merge")(merge_command)
app.command("filter")(filter_command)
app.command("check-rules")(check_rules_command)


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "main"]
