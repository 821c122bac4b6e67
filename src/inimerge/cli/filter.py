# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command removing or redacting entries of a single INI file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import load_rule_file
from ..errors import InimergeError
from ..filtering import filter_ini
from ..rules import FilterRules
from .shared import CLIError, configure_logging, exit_with_error, read_input, write_output


def _load_filter_rules(rules: Path | None) -> FilterRules | None:
    if rules is None:
        return None
    return load_rule_file(rules.expanduser()).filter_rules()


def filter_command(
    input_path: Annotated[Path, typer.Argument(metavar="INPUT", help="File to filter ('-' reads stdin).")],
    rules: Annotated[Path | None, typer.Option("--rules", "-r", help="TOML rule file.")] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the result here instead of stdout.")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug diagnostics to stderr.")] = False,
) -> None:
    """Filter INPUT, removing or replacing entries matched by the rules."""

    configure_logging(verbose=verbose)
    data = read_input(input_path)
    try:
        filtered = filter_ini(data, _load_filter_rules(rules))
        write_output(filtered, output)
    except CLIError as exc:
        raise exit_with_error(exc, exit_code=exc.exit_code) from exc
    except InimergeError as exc:
        raise exit_with_error(exc) from exc


__all__ = ["filter_command"]
