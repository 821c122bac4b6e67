# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Merge INI files subject to rules while preserving formatting.

The merge is asymmetric: the source (template) wins unless a rule for the
section or key says otherwise, and every line that is not rewritten is
copied verbatim from the target.
"""

from __future__ import annotations

from importlib import metadata

from .actions import Action, ActionKind, FilterAction, FilterActionKind, SectionAction
from .errors import (
    ConfigError,
    InimergeError,
    InputLoadError,
    InvalidTransformInput,
    RuleCompileError,
    SecretLookupError,
    TokenizeError,
    TransformConstructionError,
    TransformInvocationError,
)
from .filtering import filter_ini
from .merge import merge_ini
from .records import OUTSIDE_SECTION, PropertyView
from .rules import FilterRules, RuleSet, RuleSetBuilder, filter_rules_builder

__all__ = [
    "OUTSIDE_SECTION",
    "Action",
    "ActionKind",
    "ConfigError",
    "FilterAction",
    "FilterActionKind",
    "FilterRules",
    "InimergeError",
    "InputLoadError",
    "InvalidTransformInput",
    "PropertyView",
    "RuleCompileError",
    "RuleSet",
    "RuleSetBuilder",
    "SecretLookupError",
    "SectionAction",
    "TokenizeError",
    "TransformConstructionError",
    "TransformInvocationError",
    "__version__",
    "filter_ini",
    "filter_rules_builder",
    "merge_ini",
]

try:
    __version__ = metadata.version("inimerge")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
