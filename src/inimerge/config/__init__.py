# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rule file configuration (TOML documents validated with pydantic)."""

from __future__ import annotations

from ..errors import ConfigError
from .loader import load_rule_file, parse_rule_document
from .models import KeyRule, RuleFile, SectionRule, Setter

__all__ = [
    "ConfigError",
    "KeyRule",
    "RuleFile",
    "SectionRule",
    "Setter",
    "load_rule_file",
    "parse_rule_document",
]
