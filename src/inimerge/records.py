# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typed line records produced by the tokenizer and consumed by the engines.

Every record keeps the verbatim text of the physical line it was produced
from. Engines re-emit that text unchanged unless a rule says otherwise,
which is what keeps untouched lines byte-for-byte identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, TypeAlias

OUTSIDE_SECTION: Final[str] = "<NO_SECTION>"
"""Section name used for properties that appear before the first header."""


@dataclass(frozen=True, slots=True)
class SectionLine:
    """Section header such as ``[General]``."""

    name: str
    raw: str


@dataclass(frozen=True, slots=True)
class SectionEnd:
    """Marker emitted when a section is closed; carries no text."""


@dataclass(frozen=True, slots=True)
class PropertyLine:
    """Key/value line; ``value`` is ``None`` when the line has no ``=``."""

    key: str
    value: str | None
    raw: str


@dataclass(frozen=True, slots=True)
class CommentLine:
    raw: str


@dataclass(frozen=True, slots=True)
class BlankLine:
    raw: str


@dataclass(frozen=True, slots=True)
class ErrorLine:
    """Line the tokenizer could not classify (for example ``[broken``)."""

    raw: str


LineRecord: TypeAlias = SectionLine | SectionEnd | PropertyLine | CommentLine | BlankLine | ErrorLine


@dataclass(frozen=True, slots=True)
class PropertyView:
    """Read-only projection of a property handed to transforms.

    Attributes:
        section: Name of the enclosing section (``OUTSIDE_SECTION`` before any header).
        key: Trimmed key.
        value: Trimmed value, ``None`` when the line carries no ``=``.
        raw: Verbatim line text.
    """

    section: str
    key: str
    value: str | None
    raw: str

    @classmethod
    def from_record(cls, section: str, record: PropertyLine) -> PropertyView:
        """Build a view over a target-side property record.

        Args:
            section: Section the record belongs to.
            record: Property record produced by the tokenizer.

        Returns:
            PropertyView: View exposing the record's key, value and raw text.
        """

        return cls(section=section, key=record.key, value=record.value, raw=record.raw)


__all__ = [
    "OUTSIDE_SECTION",
    "BlankLine",
    "CommentLine",
    "ErrorLine",
    "LineRecord",
    "PropertyLine",
    "PropertyView",
    "SectionEnd",
    "SectionLine",
]
