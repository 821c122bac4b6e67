# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load rule files from TOML documents."""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import ValidationError

from ..errors import ConfigError
from .models import RuleFile


def parse_rule_document(text: str, *, origin: str = "<string>") -> RuleFile:
    """Parse and validate a TOML rule document.

    Args:
        text: TOML document.
        origin: Label used in error messages.

    Returns:
        RuleFile: Validated rule file model.

    Raises:
        ConfigError: If the document is not valid TOML or fails validation.
    """

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {origin}: {exc}") from exc
    try:
        return RuleFile.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid rule file {origin}: {exc}") from exc


def load_rule_file(path: Path) -> RuleFile:
    """Read and validate the rule file at ``path``.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read rule file {path}: {exc}") from exc
    return parse_rule_document(text, origin=str(path))


__all__ = ["load_rule_file", "parse_rule_document"]
