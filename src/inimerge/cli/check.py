# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command validating a rule file without touching any INI file."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer

from ..config import load_rule_file
from ..errors import InimergeError
from ..logging import ok
from .shared import configure_logging, exit_with_error


class RuleMode(StrEnum):
    """Engine a rule file is checked against."""

    MERGE = "merge"
    FILTER = "filter"


def check_rules_command(
    rules: Annotated[Path, typer.Argument(help="TOML rule file to validate.")],
    mode: Annotated[RuleMode, typer.Option("--mode", "-m", help="Engine the rules are meant for.")] = RuleMode.MERGE,
) -> None:
    """Compile RULES and report whether they are usable."""

    configure_logging(verbose=False)
    try:
        rule_file = load_rule_file(rules.expanduser())
        match mode:
            case RuleMode.MERGE:
                rule_file.merge_rules()
            case RuleMode.FILTER:
                rule_file.filter_rules()
    except InimergeError as exc:
        raise exit_with_error(exc) from exc
    counts = f"{len(rule_file.sections)} section, {len(rule_file.keys)} key, {len(rule_file.setters)} set"
    ok(f"{rules}: {counts} rule(s) valid for {mode.value}")


__all__ = ["RuleMode", "check_rules_command"]
