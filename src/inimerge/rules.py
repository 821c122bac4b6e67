# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rule sets consumed by the merge and filter engines."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TypeAlias

from .actions import Action, FilterAction, SectionAction
from .matcher import OverlapCallback, RuleMatcher, RuleMatcherBuilder
from .transforms import SetValueTransform

FilterRules: TypeAlias = RuleMatcher[FilterAction, FilterAction]
FilterRulesBuilder: TypeAlias = RuleMatcherBuilder[FilterAction, FilterAction]


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Compiled merge rules plus the keys setters force into the output.

    Every key in :attr:`forced_keys` has a literal ``set`` transform rule;
    :class:`RuleSetBuilder` is the only way to populate it.
    """

    matcher: RuleMatcher[Action, SectionAction]
    forced_keys: Mapping[str, frozenset[str]] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def builder(cls) -> RuleSetBuilder:
        return RuleSetBuilder()

    @classmethod
    def empty(cls) -> RuleSet:
        return RuleSetBuilder().build()

    def resolve_section(self, section: str) -> SectionAction | None:
        return self.matcher.resolve_section(section)

    def resolve(self, section: str, key: str) -> Action | None:
        return self.matcher.resolve(section, key)


class RuleSetBuilder:
    """Collect merge rules in any order, then :meth:`build` them once."""

    def __init__(self) -> None:
        self._matcher: RuleMatcherBuilder[Action, SectionAction] = RuleMatcherBuilder(Action.from_section)
        self._forced_keys: dict[str, set[str]] = {}

    def add_section_literal_action(self, section: str, action: SectionAction) -> RuleSetBuilder:
        self._matcher.add_section_literal_action(section, action)
        return self

    def add_section_regex_action(self, pattern: str, action: SectionAction) -> RuleSetBuilder:
        self._matcher.add_section_regex_action(pattern, action)
        return self

    def add_literal_action(self, section: str, key: str, action: Action) -> RuleSetBuilder:
        self._matcher.add_literal_action(section, key, action)
        return self

    def add_regex_action(self, section: str, key: str, action: Action) -> RuleSetBuilder:
        self._matcher.add_regex_action(section, key, action)
        return self

    def add_setter(self, section: str, key: str, value: str, separator: str = "=") -> RuleSetBuilder:
        """Force ``key<separator>value`` to appear in ``section``.

        The line is written even when neither input contains the section.

        Args:
            section: Section that must contain the key.
            key: Key to force.
            value: Value to write.
            separator: Text placed between key and value, for example ``" = "``.

        Returns:
            RuleSetBuilder: ``self`` for chaining.
        """

        transform = SetValueTransform(raw=f"{key}{separator}{value}")
        self._matcher.add_literal_action(section, key, Action.transform(transform))
        self._forced_keys.setdefault(section, set()).add(key)
        return self

    def warn_on_multiple_matches(self, warn: bool) -> RuleSetBuilder:
        self._matcher.warn_on_multiple_matches(warn)
        return self

    def on_overlap(self, callback: OverlapCallback) -> RuleSetBuilder:
        self._matcher.on_overlap(callback)
        return self

    def build(self) -> RuleSet:
        """Compile the rules.

        Raises:
            RuleCompileError: If any regex fails to compile.
        """

        forced = {section: frozenset(keys) for section, keys in self._forced_keys.items()}
        return RuleSet(matcher=self._matcher.build(), forced_keys=MappingProxyType(forced))


def filter_rules_builder() -> FilterRulesBuilder:
    """Return an empty builder for filter rules."""

    return RuleMatcherBuilder(FilterAction.from_section)


__all__ = [
    "FilterRules",
    "FilterRulesBuilder",
    "RuleSet",
    "RuleSetBuilder",
    "filter_rules_builder",
]
