# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while building rules, loading inputs and merging."""

from __future__ import annotations

from typing import Literal

InputSide = Literal["target", "source", "input"]


class InimergeError(RuntimeError):
    """Base class for all errors raised by :mod:`inimerge`."""


class RuleCompileError(InimergeError):
    """Raised when a regular expression in a rule set fails to compile."""

    def __init__(self, pattern: str, cause: Exception) -> None:
        """Record the offending pattern alongside the regex engine diagnostic.

        Args:
            pattern: Pattern text exactly as it was handed to :func:`re.compile`.
            cause: Error reported by the regex engine.
        """

        printable = pattern.replace("\0", "/")
        super().__init__(f"Failed to compile a regular expression {printable!r}: {cause}")
        self.pattern = pattern
        self.cause = cause


class TokenizeError(InimergeError):
    """Raised when raw input cannot be read or decoded into line records."""


class InputLoadError(InimergeError):
    """Raised when the target, source or filter input fails to load."""

    def __init__(self, side: InputSide, cause: Exception) -> None:
        """Initialise the error with the failing side and underlying cause.

        Args:
            side: Which input failed (``target``, ``source`` or ``input``).
            cause: Exception raised while loading that input.
        """

        super().__init__(f"Failed to load {side} INI due to {cause}")
        self.side = side
        self.cause = cause


class TransformConstructionError(InimergeError):
    """Raised when a transform cannot be built from user supplied arguments."""


class InvalidTransformInput(InimergeError):
    """Raised by a transform that received a property it cannot process."""


class TransformInvocationError(InimergeError):
    """Raised when a transform fails while merging a specific section/key."""

    def __init__(self, transformer: str, section: str, key: str, reason: str) -> None:
        """Capture the transform name and location of the failure.

        Args:
            transformer: Registry name of the transform being applied.
            section: Section containing the failing key.
            key: Key the transform was applied to.
            reason: Human-readable description of the failure.
        """

        super().__init__(f"Failed to apply transform {transformer} on {section}->{key} due to {reason}")
        self.transformer = transformer
        self.section = section
        self.key = key
        self.reason = reason


class SecretLookupError(InimergeError):
    """Raised by a secret store when an entry cannot be retrieved."""


class ConfigError(InimergeError):
    """Raised when a rule file is missing, malformed or fails validation."""


__all__ = [
    "ConfigError",
    "InimergeError",
    "InputLoadError",
    "InputSide",
    "InvalidTransformInput",
    "RuleCompileError",
    "SecretLookupError",
    "TokenizeError",
    "TransformConstructionError",
    "TransformInvocationError",
]
