# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Two-file merge: keep the target's formatting, take values from the source.

The target is walked once, line by line. Values of keys shared with the
source come from the source unless a rule says otherwise, keys that only
exist in the target are dropped, and source-only keys are appended at the
end of their section in key order. Sections that only exist in the source
(or only in setters) are appended after the target, sorted by name.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .actions import Action, ActionKind, SectionAction
from .buffers import LineBuffer
from .errors import InputLoadError, InvalidTransformInput, TokenizeError, TransformInvocationError
from .records import (
    OUTSIDE_SECTION,
    BlankLine,
    CommentLine,
    ErrorLine,
    LineRecord,
    PropertyLine,
    PropertyView,
    SectionEnd,
    SectionLine,
)
from .rules import RuleSet
from .source_index import SourceIndex, SourceValue
from .tokenizer import RawInput, load_lines
from .transforms import Line

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class MergeState:
    """Mutable bookkeeping for a single merge run."""

    source: SourceIndex
    rules: RuleSet
    buffer: LineBuffer = field(default_factory=LineBuffer)
    seen_sections: set[str] = field(default_factory=set)
    seen_keys: set[str] = field(default_factory=set)
    current_section: str = OUTSIDE_SECTION

    def enter_section(self, name: str) -> None:
        self.current_section = name
        self.seen_sections.add(name)
        self.seen_keys.clear()
        self.buffer.discard_pending()

    def emit_kv(
        self,
        action: Action | None,
        key: str,
        source: SourceValue | None,
        target: PropertyLine | None,
    ) -> None:
        """Write the line for ``key`` according to ``action``.

        Args:
            action: Resolved action; ``None`` means the source line wins.
            key: Property key.
            source: Source entry for the key, if any.
            target: Target record for the key, if any.

        Raises:
            TransformInvocationError: If a transform rejects its input.
        """

        match action:
            case None:
                if source is None:
                    raise AssertionError(f"no source line for {self.current_section}->{key} without a rule")
                self.buffer.commit(source.raw)
                return
            case Action(kind=ActionKind.TRANSFORM, transformer=transformer) if transformer is not None:
                pass
            case _:
                return
        section = self.current_section
        source_view = source.view(section, key) if source is not None else None
        target_view = PropertyView.from_record(section, target) if target is not None else None
        try:
            outcome = transformer(source_view, target_view)
        except InvalidTransformInput as exc:
            raise TransformInvocationError(transformer.name, section, key, str(exc)) from exc
        if isinstance(outcome, Line):
            self.buffer.commit(outcome.text)

    def emit_non_target_lines(self) -> None:
        """Emit source-only and forced keys of the section being left."""

        section = self.current_section
        if self.source.has_section(section) and self.rules.resolve_section(section) is None:
            for key, value in self.source.section_entries(section):
                if key in self.seen_keys:
                    continue
                self.seen_keys.add(key)
                self.emit_kv(self.rules.resolve(section, key), key, value, None)
        self.emit_forced_keys()
        self.seen_keys.clear()

    def emit_forced_keys(self) -> None:
        section = self.current_section
        forced = self.rules.forced_keys.get(section)
        if not forced:
            return
        self.buffer.flush()
        for key in sorted(forced - self.seen_keys):
            self.seen_keys.add(key)
            self.emit_kv(self.rules.resolve(section, key), key, None, None)

    def visit_section(self, record: SectionLine) -> None:
        # Source-only keys are flushed here rather than on SectionEnd because
        # keys may precede the first header.
        self.emit_non_target_lines()
        self.enter_section(record.name)
        match self.rules.resolve_section(record.name):
            case SectionAction.IGNORE:
                self.buffer.push_raw(record.raw)
            case SectionAction.DELETE:
                pass
            case None if self.source.has_section(record.name):
                self.buffer.push_raw(record.raw)
            case None:
                # An ignored key may still keep this section alive.
                self.buffer.hold(record.raw)

    def visit_property(self, record: PropertyLine) -> None:
        section = self.current_section
        action = self.rules.resolve(section, record.key)
        source_value = self.source.property(section, record.key)
        if action is None:
            if source_value is None:
                LOGGER.debug("Dropping target-only key %s->%s", section, record.key)
                return
            self.seen_keys.add(record.key)
            self.buffer.flush()
            self.emit_kv(None, record.key, source_value, record)
            return
        match action.kind:
            case ActionKind.IGNORE:
                self.seen_keys.add(record.key)
                self.buffer.commit(record.raw)
            case ActionKind.DELETE:
                pass
            case ActionKind.TRANSFORM:
                self.seen_keys.add(record.key)
                self.buffer.flush()
                self.emit_kv(action, record.key, source_value, record)

    def section_deleted(self) -> bool:
        return self.rules.resolve_section(self.current_section) is SectionAction.DELETE

    def visit(self, record: LineRecord) -> None:
        match record:
            case ErrorLine(raw=raw):
                LOGGER.warning("Keeping malformed target line in section %s: %r", self.current_section, raw)
                if not self.section_deleted():
                    self.buffer.push_raw(raw)
            case CommentLine(raw=raw) | BlankLine(raw=raw):
                if not self.section_deleted():
                    self.buffer.push_raw(raw)
            case SectionLine():
                self.visit_section(record)
            case PropertyLine():
                self.visit_property(record)
            case SectionEnd():
                pass

    def emit_source_only_sections(self) -> None:
        """Append sections present only in the source or only in setters, sorted by name."""

        unseen: dict[str, str] = {
            section: f"[{section}]" for section in self.rules.forced_keys if section not in self.seen_sections
        }
        unseen.update(
            (section, raw) for section, raw in self.source.sections() if section not in self.seen_sections
        )
        for section in sorted(unseen):
            if section == OUTSIDE_SECTION:
                continue
            if self.rules.resolve_section(section) is not None:
                continue
            self.enter_section(section)
            self.buffer.commit(unseen[section])
            for key, value in self.source.section_entries(section):
                self.seen_keys.add(key)
                self.emit_kv(self.rules.resolve(section, key), key, value, None)
            self.emit_forced_keys()


def merge_records(target: Sequence[LineRecord], source: SourceIndex, rules: RuleSet) -> list[str]:
    """Merge already tokenized target records with a source index.

    Args:
        target: Line records of the target file.
        source: Index built from the source file.
        rules: Compiled merge rules.

    Returns:
        list[str]: Output lines without terminators.

    Raises:
        TransformInvocationError: If a transform rejects its input.
    """

    state = MergeState(source=source, rules=rules)
    for record in target:
        state.visit(record)
    state.emit_non_target_lines()
    state.emit_source_only_sections()
    return state.buffer.lines()


def load_source(data: RawInput) -> SourceIndex:
    """Tokenize and index a source file.

    Raises:
        InputLoadError: If the source cannot be read or contains malformed lines.
    """

    try:
        return SourceIndex.from_records(load_lines(data))
    except TokenizeError as exc:
        raise InputLoadError("source", exc) from exc


def merge_ini(target: RawInput, source: RawInput, rules: RuleSet | None = None) -> list[str]:
    """Merge ``target`` with ``source`` under ``rules``.

    Args:
        target: Live file contents (bytes, text or a readable stream).
        source: Template file contents.
        rules: Compiled rules; ``None`` merges without any rules.

    Returns:
        list[str]: Merged output, one entry per line, without terminators.

    Raises:
        InputLoadError: If either input fails to load.
        TransformInvocationError: If a transform rejects its input.
    """

    try:
        target_records = load_lines(target)
    except TokenizeError as exc:
        raise InputLoadError("target", exc) from exc
    source_index = load_source(source)
    return merge_records(target_records, source_index, rules if rules is not None else RuleSet.empty())


__all__ = ["MergeState", "load_source", "merge_ini", "merge_records"]
