# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Single-file filter: remove or redact entries matched by rules."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Final

from .actions import FilterAction, FilterActionKind
from .buffers import LineBuffer
from .errors import InputLoadError, TokenizeError
from .records import (
    OUTSIDE_SECTION,
    BlankLine,
    CommentLine,
    ErrorLine,
    LineRecord,
    PropertyLine,
    SectionEnd,
    SectionLine,
)
from .rules import FilterRules, filter_rules_builder
from .tokenizer import RawInput, load_lines

LOGGER = logging.getLogger(__name__)

DEFAULT_SEPARATOR: Final[str] = "="


def recover_separator(record: PropertyLine) -> str:
    """Return the text between key and value in ``record.raw``.

    Indentation and trailing whitespace are skipped. Falls back to ``=``
    when the key or the value cannot be located in the raw line.
    """

    value = record.value
    body = record.raw.rstrip()
    start = body.find(record.key)
    if value is None or start == -1 or not body.endswith(value):
        return DEFAULT_SEPARATOR
    key_end = start + len(record.key)
    value_start = len(body) - len(value)
    if key_end > value_start:
        return DEFAULT_SEPARATOR
    return body[key_end:value_start]


def redacted_line(record: PropertyLine, replacement: str) -> str:
    """Rebuild ``record`` with ``replacement`` as its value, keeping indentation and separator."""

    indent = record.raw[: len(record.raw) - len(record.raw.lstrip())]
    return f"{indent}{record.key}{recover_separator(record)}{replacement}"


@dataclass(slots=True)
class FilterState:
    """Mutable bookkeeping for a single filter run."""

    rules: FilterRules
    buffer: LineBuffer = field(default_factory=LineBuffer)
    current_section: str = OUTSIDE_SECTION

    def section_removed(self) -> bool:
        action = self.rules.resolve_section(self.current_section)
        return action is not None and action.kind is FilterActionKind.REMOVE

    def visit_section(self, record: SectionLine) -> None:
        self.current_section = record.name
        self.buffer.discard_pending()
        if not self.section_removed():
            # Replace rules redact the values in a section, not the header.
            self.buffer.push_raw(record.raw)

    def visit_property(self, record: PropertyLine) -> None:
        match self.rules.resolve(self.current_section, record.key):
            case None:
                self.buffer.commit(record.raw)
            case FilterAction(kind=FilterActionKind.REPLACE, replacement=str() as replacement):
                if record.value is None:
                    # Nothing to redact.
                    self.buffer.commit(record.raw)
                else:
                    self.buffer.commit(redacted_line(record, replacement))
            case _:
                pass

    def visit(self, record: LineRecord) -> None:
        match record:
            case ErrorLine(raw=raw):
                LOGGER.warning("Keeping malformed line in section %s: %r", self.current_section, raw)
                if not self.section_removed():
                    self.buffer.push_raw(raw)
            case CommentLine(raw=raw) | BlankLine(raw=raw):
                if not self.section_removed():
                    self.buffer.push_raw(raw)
            case SectionLine():
                self.visit_section(record)
            case PropertyLine():
                self.visit_property(record)
            case SectionEnd():
                pass


def filter_records(records: Sequence[LineRecord], rules: FilterRules) -> list[str]:
    """Apply ``rules`` to already tokenized records.

    Args:
        records: Line records of the input file.
        rules: Compiled filter rules.

    Returns:
        list[str]: Filtered lines without terminators.
    """

    state = FilterState(rules=rules)
    for record in records:
        state.visit(record)
    state.buffer.flush()
    return state.buffer.lines()


def filter_ini(data: RawInput, rules: FilterRules | None = None) -> list[str]:
    """Filter one INI file.

    Args:
        data: File contents (bytes, text or a readable stream).
        rules: Compiled filter rules; ``None`` returns the input unchanged.

    Returns:
        list[str]: Filtered output, one entry per line.

    Raises:
        InputLoadError: If the input cannot be read.
    """

    try:
        records = load_lines(data)
    except TokenizeError as exc:
        raise InputLoadError("input", exc) from exc
    return filter_records(records, rules if rules is not None else filter_rules_builder().build())


__all__ = ["FilterState", "filter_ini", "filter_records", "recover_separator", "redacted_line"]
