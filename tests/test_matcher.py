# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for literal/regex rule resolution."""

from __future__ import annotations

import logging

import pytest

from inimerge.actions import DELETE, IGNORE, Action, SectionAction
from inimerge.errors import RuleCompileError
from inimerge.matcher import RuleMatcherBuilder, SectionKey, printable_subject, scoped_group
from inimerge.rules import RuleSetBuilder
from inimerge.transforms import KdeShortcutTransform


def _builder() -> RuleMatcherBuilder[Action, SectionAction]:
    return RuleMatcherBuilder(Action.from_section)


def test_no_rule_resolves_to_none() -> None:
    matcher = _builder().build()

    assert matcher.resolve("s", "k") is None
    assert matcher.resolve_section("s") is None


def test_section_action_outranks_literal_key_rule() -> None:
    matcher = (
        _builder()
        .add_section_literal_action("s", SectionAction.DELETE)
        .add_literal_action("s", "k", IGNORE)
        .build()
    )

    assert matcher.resolve("s", "k") == DELETE
    assert matcher.resolve_section("s") is SectionAction.DELETE


def test_regex_section_action_applies_to_keys() -> None:
    matcher = _builder().add_section_regex_action("^Colors", SectionAction.IGNORE).build()

    assert matcher.resolve("Colors:View", "Background") == IGNORE
    assert matcher.resolve("General", "Background") is None


def test_literal_section_action_wins_over_regex() -> None:
    matcher = (
        _builder()
        .add_section_regex_action(".*", SectionAction.DELETE)
        .add_section_literal_action("keep", SectionAction.IGNORE)
        .build()
    )

    assert matcher.resolve_section("keep") is SectionAction.IGNORE
    assert matcher.resolve_section("other") is SectionAction.DELETE


def test_literal_key_rule_wins_over_regex() -> None:
    transform = Action.transform(KdeShortcutTransform())
    matcher = (
        _builder()
        .add_regex_action("s", ".*", DELETE)
        .add_literal_action("s", "k", transform)
        .build()
    )

    assert matcher.resolve("s", "k") == transform
    assert matcher.resolve("s", "other") == DELETE


def test_regex_key_rule_constrains_section_and_key_together() -> None:
    matcher = _builder().add_regex_action("^s5", ".*_ign$", IGNORE).build()

    assert matcher.resolve("s5", "a_ign") == IGNORE
    assert matcher.resolve("xs5", "a_ign") is None
    assert matcher.resolve("s55", "a_ign") is None
    assert matcher.resolve("s5", "a_ign_not") is None


def test_end_anchor_in_section_pattern_never_matches() -> None:
    # "$" only matches at the end of the compound subject, never before the separator.
    matcher = _builder().add_regex_action("^s5$", ".*_ign$", IGNORE).build()

    assert matcher.resolve("s5", "a_ign") is None


def test_leading_inline_flags_apply_to_their_half_only() -> None:
    matcher = _builder().add_regex_action("(?i)general", "key$", DELETE).build()

    assert matcher.resolve("General", "key") == DELETE
    assert matcher.resolve("GENERAL", "key") == DELETE
    assert matcher.resolve("General", "KEY") is None


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("abc", "(?:abc)"),
        ("(?i)abc", "(?i:abc)"),
        ("(?ms)a.b", "(?ms:a.b)"),
        ("a(?i)b", "(?:a(?i)b)"),
    ],
)
def test_scoped_group(pattern: str, expected: str) -> None:
    assert scoped_group(pattern) == expected


def test_regex_search_is_unanchored() -> None:
    matcher = _builder().add_regex_action("s", "key", IGNORE).build()

    assert matcher.resolve("class", "keychain") == IGNORE
    assert matcher.resolve("class", "monkeys") is None


def test_overlapping_regexes_take_first_registered_and_warn(caplog: pytest.LogCaptureFixture) -> None:
    matcher = _builder().add_regex_action(".*", "a.*", DELETE).add_regex_action(".*", ".*b", IGNORE).build()

    with caplog.at_level(logging.WARNING, logger="inimerge.matcher"):
        results = {matcher.resolve("s", "ab") for _ in range(5)}

    assert results == {DELETE}
    assert "Overlapping regex matches for s/ab" in caplog.text


def test_overlap_warning_can_be_suppressed(caplog: pytest.LogCaptureFixture) -> None:
    matcher = (
        _builder()
        .add_regex_action(".*", "a.*", DELETE)
        .add_regex_action(".*", ".*b", IGNORE)
        .warn_on_multiple_matches(False)
        .build()
    )

    with caplog.at_level(logging.WARNING, logger="inimerge.matcher"):
        assert matcher.resolve("s", "ab") == DELETE

    assert "Overlapping" not in caplog.text


def test_overlap_callback_receives_compound_subject() -> None:
    seen: list[str] = []
    matcher = (
        _builder()
        .add_regex_action(".*", "x", DELETE)
        .add_regex_action(".*", "x", IGNORE)
        .on_overlap(seen.append)
        .build()
    )

    matcher.resolve("s", "x")

    assert [printable_subject(subject) for subject in seen] == ["s/x"]


def test_single_regex_match_does_not_warn() -> None:
    seen: list[str] = []
    matcher = _builder().add_regex_action(".*", "x", DELETE).on_overlap(seen.append).build()

    matcher.resolve("s", "x")

    assert seen == []


def test_invalid_regex_fails_build_with_pattern_context() -> None:
    builder = _builder().add_regex_action("s", "(unclosed", IGNORE)

    with pytest.raises(RuleCompileError) as excinfo:
        builder.build()

    assert "(unclosed" in str(excinfo.value)
    assert excinfo.value.pattern == "(?:s)\0(?:(unclosed)"


def test_section_key_joins_with_nul_separator() -> None:
    assert SectionKey("s", "k").joined() == "s\0k"


def test_setter_registers_forced_key_and_transform() -> None:
    rules = RuleSetBuilder().add_setter("s", "k", "v", " = ").build()

    assert rules.forced_keys == {"s": frozenset({"k"})}
    action = rules.resolve("s", "k")
    assert action is not None and action.transformer is not None
    assert action.transformer(None, None).text == "k = v"
