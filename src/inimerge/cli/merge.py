# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command merging a target INI file with its source template."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import load_rule_file
from ..errors import InimergeError
from ..merge import merge_ini
from ..rules import RuleSet
from .shared import STDIO_PATH, CLIError, configure_logging, exit_with_error, read_input, write_output


def _load_merge_rules(rules: Path | None, *, warn_overlap: bool) -> RuleSet:
    if rules is None:
        return RuleSet.empty()
    rule_file = load_rule_file(rules.expanduser())
    if not warn_overlap:
        rule_file = rule_file.model_copy(update={"warn_on_multiple_matches": False})
    return rule_file.merge_rules()


def merge_command(
    target: Annotated[Path, typer.Argument(help="Live file to update ('-' reads stdin).")],
    source: Annotated[Path, typer.Argument(help="Template whose values win unless a rule says otherwise.")],
    rules: Annotated[Path | None, typer.Option("--rules", "-r", help="TOML rule file.")] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the result here instead of stdout.")
    ] = None,
    no_warn_overlap: Annotated[
        bool, typer.Option("--no-warn-overlap", help="Silence warnings about overlapping regex rules.")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug diagnostics to stderr.")] = False,
) -> None:
    """Merge TARGET with SOURCE, preserving TARGET's formatting."""

    configure_logging(verbose=verbose)
    if str(target) == STDIO_PATH and str(source) == STDIO_PATH:
        raise typer.BadParameter("Only one of TARGET and SOURCE may be read from stdin.")
    target_data = read_input(target)
    source_data = read_input(source)
    try:
        rule_set = _load_merge_rules(rules, warn_overlap=not no_warn_overlap)
        merged = merge_ini(target_data, source_data, rule_set)
        write_output(merged, output)
    except CLIError as exc:
        raise exit_with_error(exc, exit_code=exc.exit_code) from exc
    except InimergeError as exc:
        raise exit_with_error(exc) from exc


__all__ = ["merge_command"]
