# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Literal and regex rule matching for sections and section/key pairs.

Key rules are matched against a compound subject made of the section name,
a NUL separator and the key. NUL cannot occur in a section or key name, so
a single regular expression can constrain both halves at once.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from typing import Final, Generic, NamedTuple, TypeVar

from .errors import RuleCompileError

LOGGER = logging.getLogger(__name__)

COMPOUND_SEPARATOR: Final[str] = "\0"
OVERLAP_HINT: Final[str] = (
    "If this is intentional disable warnings on multiple matches for this rule set"
)

ActionT = TypeVar("ActionT")
KeyActionT = TypeVar("KeyActionT")
SectionActionT = TypeVar("SectionActionT")

LEADING_INLINE_FLAGS: Final[re.Pattern[str]] = re.compile(r"\(\?([aiLmsux]+)\)")

OverlapCallback = Callable[[str], None]


class SectionKey(NamedTuple):
    """Structural compound key used for literal key rules."""

    section: str
    key: str

    def joined(self) -> str:
        """Return the ``section\\0key`` subject used for regex matching."""

        return f"{self.section}{COMPOUND_SEPARATOR}{self.key}"


def scoped_group(pattern: str) -> str:
    """Wrap ``pattern`` in a group, turning leading ``(?flags)`` into ``(?flags:...)``.

    Python only accepts global inline flags at the very start of an
    expression, so they become scoped flags once the pattern is embedded.
    """

    match = LEADING_INLINE_FLAGS.match(pattern)
    if match is None:
        return f"(?:{pattern})"
    return f"(?{match.group(1)}:{pattern[match.end():]})"


def printable_subject(subject: str) -> str:
    """Render a compound subject for diagnostics (``section/key``)."""

    return subject.replace(COMPOUND_SEPARATOR, "/")


def _warn_overlap(subject: str) -> None:
    LOGGER.warning(
        "Overlapping regex matches for %s, first action taken. %s",
        printable_subject(subject),
        OVERLAP_HINT,
    )


@dataclass(frozen=True, slots=True)
class ActionMatcher(Generic[ActionT]):
    """Immutable lookup table of literal entries followed by regex entries."""

    literal_actions: Mapping[Hashable, ActionT]
    patterns: tuple[re.Pattern[str], ...]
    regex_actions: tuple[ActionT, ...]

    def find(
        self,
        literal: Hashable,
        subject: str,
        *,
        on_overlap: OverlapCallback | None = None,
    ) -> ActionT | None:
        """Return the action registered for ``literal`` or the first matching regex.

        Args:
            literal: Key looked up among the literal entries.
            subject: String searched by the regex entries.
            on_overlap: Callback invoked with ``subject`` when more than one
                regex matches. ``None`` disables the overlap check.

        Returns:
            ActionT | None: Resolved action, or ``None`` when nothing matches.
        """

        if literal in self.literal_actions:
            return self.literal_actions[literal]
        matches = (index for index, pattern in enumerate(self.patterns) if pattern.search(subject))
        first = next(matches, None)
        if first is None:
            return None
        if on_overlap is not None and next(matches, None) is not None:
            on_overlap(subject)
        return self.regex_actions[first]


@dataclass(slots=True)
class ActionMatcherBuilder(Generic[ActionT]):
    """Accumulate literal and regex entries before compiling an :class:`ActionMatcher`."""

    literal_actions: dict[Hashable, ActionT] = field(default_factory=dict)
    regex_sources: list[str] = field(default_factory=list)
    regex_actions: list[ActionT] = field(default_factory=list)

    def add_literal(self, entry: Hashable, action: ActionT) -> None:
        self.literal_actions[entry] = action

    def add_regex(self, pattern: str, action: ActionT) -> None:
        self.regex_sources.append(pattern)
        self.regex_actions.append(action)

    def build(self) -> ActionMatcher[ActionT]:
        """Compile every regex entry.

        Returns:
            ActionMatcher[ActionT]: Immutable matcher.

        Raises:
            RuleCompileError: If any pattern fails to compile.
        """

        compiled: list[re.Pattern[str]] = []
        for source in self.regex_sources:
            try:
                compiled.append(re.compile(source))
            except re.error as exc:
                raise RuleCompileError(source, exc) from exc
        return ActionMatcher(
            literal_actions=dict(self.literal_actions),
            patterns=tuple(compiled),
            regex_actions=tuple(self.regex_actions),
        )


@dataclass(frozen=True, slots=True)
class RuleMatcher(Generic[KeyActionT, SectionActionT]):
    """Two-level matcher: section actions outrank every key rule.

    Attributes:
        section_actions: Matcher keyed by section name.
        key_actions: Matcher keyed by :class:`SectionKey`.
        promote: Converts a section action into the equivalent key action.
        warn_on_multiple_matches: Emit a warning when several regexes match.
        on_overlap: Callback receiving the overlapping subject.
    """

    section_actions: ActionMatcher[SectionActionT]
    key_actions: ActionMatcher[KeyActionT]
    promote: Callable[[SectionActionT], KeyActionT]
    warn_on_multiple_matches: bool = True
    on_overlap: OverlapCallback = _warn_overlap

    def _overlap_callback(self) -> OverlapCallback | None:
        return self.on_overlap if self.warn_on_multiple_matches else None

    def resolve_section(self, section: str) -> SectionActionT | None:
        """Return the action configured for the whole of ``section``, if any."""

        return self.section_actions.find(section, section, on_overlap=self._overlap_callback())

    def resolve(self, section: str, key: str) -> KeyActionT | None:
        """Return the action for ``key`` within ``section``.

        Precedence: a section action, then a literal section/key rule, then
        the first registered regex that matches ``section\\0key``.

        Args:
            section: Current section name.
            key: Property key.

        Returns:
            KeyActionT | None: Resolved action, ``None`` when no rule applies.
        """

        section_action = self.resolve_section(section)
        if section_action is not None:
            return self.promote(section_action)
        compound = SectionKey(section, key)
        return self.key_actions.find(compound, compound.joined(), on_overlap=self._overlap_callback())


class RuleMatcherBuilder(Generic[KeyActionT, SectionActionT]):
    """Builder for :class:`RuleMatcher`; registration order decides regex ties."""

    def __init__(self, promote: Callable[[SectionActionT], KeyActionT]) -> None:
        """Initialise an empty builder.

        Args:
            promote: Converts section actions into key actions during lookup.
        """

        self._promote = promote
        self._sections: ActionMatcherBuilder[SectionActionT] = ActionMatcherBuilder()
        self._keys: ActionMatcherBuilder[KeyActionT] = ActionMatcherBuilder()
        self._warn_on_multiple_matches = True
        self._on_overlap: OverlapCallback = _warn_overlap

    def add_section_literal_action(
        self, section: str, action: SectionActionT
    ) -> RuleMatcherBuilder[KeyActionT, SectionActionT]:
        self._sections.add_literal(section, action)
        return self

    def add_section_regex_action(
        self, pattern: str, action: SectionActionT
    ) -> RuleMatcherBuilder[KeyActionT, SectionActionT]:
        self._sections.add_regex(pattern, action)
        return self

    def add_literal_action(
        self, section: str, key: str, action: KeyActionT
    ) -> RuleMatcherBuilder[KeyActionT, SectionActionT]:
        self._keys.add_literal(SectionKey(section, key), action)
        return self

    def add_regex_action(
        self, section: str, key: str, action: KeyActionT
    ) -> RuleMatcherBuilder[KeyActionT, SectionActionT]:
        """Register a regex rule matched against ``section\\0key``.

        Args:
            section: Regex constraining the section name.
            key: Regex constraining the key.
            action: Action returned on a match.

        Returns:
            RuleMatcherBuilder: ``self`` for chaining.
        """

        self._keys.add_regex(f"{scoped_group(section)}{COMPOUND_SEPARATOR}{scoped_group(key)}", action)
        return self

    def warn_on_multiple_matches(self, warn: bool) -> RuleMatcherBuilder[KeyActionT, SectionActionT]:
        self._warn_on_multiple_matches = warn
        return self

    def on_overlap(self, callback: OverlapCallback) -> RuleMatcherBuilder[KeyActionT, SectionActionT]:
        self._on_overlap = callback
        return self

    def build(self) -> RuleMatcher[KeyActionT, SectionActionT]:
        """Compile the collected rules into an immutable matcher.

        Raises:
            RuleCompileError: If any regex fails to compile.
        """

        return RuleMatcher(
            section_actions=self._sections.build(),
            key_actions=self._keys.build(),
            promote=self._promote,
            warn_on_multiple_matches=self._warn_on_multiple_matches,
            on_overlap=self._on_overlap,
        )


__all__ = [
    "COMPOUND_SEPARATOR",
    "ActionMatcher",
    "ActionMatcherBuilder",
    "OverlapCallback",
    "RuleMatcher",
    "RuleMatcherBuilder",
    "SectionKey",
    "printable_subject",
    "scoped_group",
]
