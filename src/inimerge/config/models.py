# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pydantic models describing TOML rule files."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..actions import Action, FilterAction, SectionAction
from ..errors import ConfigError
from ..rules import FilterRules, RuleSet, RuleSetBuilder, filter_rules_builder
from ..secrets import SecretStore
from ..transforms import KeyringTransform, Transformer, transform_from_name

SectionActionName = Literal["ignore", "delete", "remove", "replace"]
KeyActionName = Literal["ignore", "delete", "transform", "remove", "replace"]

MERGE_ONLY_ACTIONS: Final[frozenset[str]] = frozenset({"ignore", "transform"})
FILTER_ONLY_ACTIONS: Final[frozenset[str]] = frozenset({"remove", "replace"})


def _check_replacement(action: str, replacement: str | None, where: str) -> None:
    if action == "replace" and replacement is None:
        raise ValueError(f"{where}: 'replace' requires a 'replacement'")
    if action != "replace" and replacement is not None:
        raise ValueError(f"{where}: 'replacement' is only valid with the 'replace' action")


def _filter_action(action: str, replacement: str | None) -> FilterAction:
    match action, replacement:
        case "replace", str() as text:
            return FilterAction.replace(text)
        case "replace", None:
            raise ConfigError("'replace' requires a 'replacement'")
        case _:
            return FilterAction.remove()


class SectionRule(BaseModel):
    """Rule applying to every key of the matching section(s)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    regex: bool = False
    action: SectionActionName
    replacement: str | None = None

    @model_validator(mode="after")
    def _validate_replacement(self) -> SectionRule:
        _check_replacement(self.action, self.replacement, f"section rule {self.name!r}")
        return self


class KeyRule(BaseModel):
    """Rule applying to keys matching ``key`` inside sections matching ``section``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    section: str
    key: str
    regex: bool = False
    action: KeyActionName
    transform: str | None = None
    args: dict[str, str] = Field(default_factory=dict)
    replacement: str | None = None

    @model_validator(mode="after")
    def _validate_action_fields(self) -> KeyRule:
        where = f"key rule {self.section!r}/{self.key!r}"
        if self.action == "transform" and self.transform is None:
            raise ValueError(f"{where}: 'transform' action requires a 'transform' name")
        if self.action != "transform" and (self.transform is not None or self.args):
            raise ValueError(f"{where}: 'transform' and 'args' are only valid with the 'transform' action")
        _check_replacement(self.action, self.replacement, where)
        return self

    def build_transformer(self, store: SecretStore | None = None) -> Transformer:
        match self.transform:
            case None:
                raise ConfigError(f"key rule {self.section!r}/{self.key!r} names no transform")
            case KeyringTransform.name if store is not None:
                return KeyringTransform.from_args(self.args, store=store)
            case name:
                return transform_from_name(name, self.args)


class Setter(BaseModel):
    """Forced ``key<separator>value`` line in ``section``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    section: str
    key: str
    value: str
    separator: str = "="


class RuleFile(BaseModel):
    """Top-level rule file document.

    Attributes:
        warn_on_multiple_matches: Warn when several regex rules match one key.
        sections: ``[[section]]`` tables.
        keys: ``[[key]]`` tables.
        setters: ``[[set]]`` tables (merge only).
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    warn_on_multiple_matches: bool = True
    sections: list[SectionRule] = Field(default_factory=list, alias="section")
    keys: list[KeyRule] = Field(default_factory=list, alias="key")
    setters: list[Setter] = Field(default_factory=list, alias="set")

    def _reject(self, actions: Iterable[str], forbidden: frozenset[str], mode: str) -> None:
        invalid = sorted(set(actions) & forbidden)
        if invalid:
            raise ConfigError(f"action(s) {', '.join(invalid)} cannot be used when running {mode}")

    def merge_rules(self, *, store: SecretStore | None = None) -> RuleSet:
        """Compile the document into merge rules.

        Args:
            store: Secret store override for ``keyring`` transforms.

        Returns:
            RuleSet: Compiled rule set.

        Raises:
            ConfigError: If a filter-only action is present.
            RuleCompileError: If a regex fails to compile.
            TransformConstructionError: If a transform cannot be built.
        """

        self._reject(
            [rule.action for rule in self.sections] + [rule.action for rule in self.keys],
            FILTER_ONLY_ACTIONS,
            "merge",
        )
        builder = RuleSetBuilder().warn_on_multiple_matches(self.warn_on_multiple_matches)
        for section_rule in self.sections:
            section_action = SectionAction(section_rule.action)
            if section_rule.regex:
                builder.add_section_regex_action(section_rule.name, section_action)
            else:
                builder.add_section_literal_action(section_rule.name, section_action)
        for key_rule in self.keys:
            action = (
                Action.transform(key_rule.build_transformer(store))
                if key_rule.action == "transform"
                else Action.from_section(SectionAction(key_rule.action))
            )
            if key_rule.regex:
                builder.add_regex_action(key_rule.section, key_rule.key, action)
            else:
                builder.add_literal_action(key_rule.section, key_rule.key, action)
        for setter in self.setters:
            builder.add_setter(setter.section, setter.key, setter.value, setter.separator)
        return builder.build()

    def filter_rules(self) -> FilterRules:
        """Compile the document into filter rules; ``delete`` is read as ``remove``.

        Raises:
            ConfigError: If a merge-only action or a setter is present.
            RuleCompileError: If a regex fails to compile.
        """

        self._reject(
            [rule.action for rule in self.sections] + [rule.action for rule in self.keys],
            MERGE_ONLY_ACTIONS,
            "filter",
        )
        if self.setters:
            raise ConfigError("'set' entries cannot be used when running filter")
        builder = filter_rules_builder().warn_on_multiple_matches(self.warn_on_multiple_matches)
        for section_rule in self.sections:
            filter_action = _filter_action(section_rule.action, section_rule.replacement)
            if section_rule.regex:
                builder.add_section_regex_action(section_rule.name, filter_action)
            else:
                builder.add_section_literal_action(section_rule.name, filter_action)
        for key_rule in self.keys:
            filter_action = _filter_action(key_rule.action, key_rule.replacement)
            if key_rule.regex:
                builder.add_regex_action(key_rule.section, key_rule.key, filter_action)
            else:
                builder.add_literal_action(key_rule.section, key_rule.key, filter_action)
        return builder.build()


__all__ = ["KeyRule", "RuleFile", "SectionRule", "Setter"]
