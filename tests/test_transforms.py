# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the built-in value transforms."""

from __future__ import annotations

import logging

import pytest

from inimerge.errors import InvalidTransformInput, TransformConstructionError
from inimerge.records import PropertyView
from inimerge.secrets import SecretStore
from inimerge.transforms import (
    NOTHING,
    KdeShortcutTransform,
    KeyringTransform,
    Line,
    SetValueTransform,
    UnsortedListsTransform,
    transform_from_name,
)


def _prop(raw: str, section: str = "a") -> PropertyView:
    key, sep, value = raw.partition("=")
    return PropertyView(section=section, key=key.strip(), value=value.strip() if sep else None, raw=raw)


def test_unsorted_lists_equal_sets_keep_target_line() -> None:
    transform = UnsortedListsTransform(separator=",")

    assert transform(_prop("b=a,b,c"), _prop("b=c,a,b")) == Line("b=c,a,b")


def test_unsorted_lists_different_sets_take_source_line() -> None:
    transform = UnsortedListsTransform(separator=",")

    assert transform(_prop("b=1,2,3,5"), _prop("b=3,2,1")) == Line("b=1,2,3,5")


def test_unsorted_lists_empty_values_are_equal() -> None:
    transform = UnsortedListsTransform(separator=",")

    assert transform(_prop("b="), _prop("b=")) == Line("b=")


def test_unsorted_lists_missing_value_is_invalid_input() -> None:
    transform = UnsortedListsTransform(separator=",")

    with pytest.raises(InvalidTransformInput, match="missing value in source"):
        transform(_prop("b"), _prop("b"))
    with pytest.raises(InvalidTransformInput, match="missing value in target"):
        transform(_prop("b=1"), _prop("b"))


def test_unsorted_lists_one_sided_inputs() -> None:
    transform = UnsortedListsTransform(separator=";")

    assert transform(_prop("b=1;2"), None) == Line("b=1;2")
    assert transform(None, _prop("b=1;2")) is NOTHING


def test_unsorted_lists_from_args_requires_single_character() -> None:
    assert UnsortedListsTransform.from_args({"separator": ","}) == UnsortedListsTransform(separator=",")
    with pytest.raises(TransformConstructionError, match="separator"):
        UnsortedListsTransform.from_args({})
    with pytest.raises(TransformConstructionError, match="exactly one character"):
        UnsortedListsTransform.from_args({"separator": ",;"})


def test_kde_shortcut_accepts_empty_and_none_middle_field() -> None:
    transform = KdeShortcutTransform()

    result = transform(
        _prop("b=none,,Media volume down"),
        _prop("b=none,none,Media volume down"),
    )

    assert result == Line("b=none,none,Media volume down")


def test_kde_shortcut_prefers_source_when_outer_fields_differ() -> None:
    transform = KdeShortcutTransform()

    result = transform(_prop("b=Meta+A,,Launch"), _prop("b=Meta+B,none,Launch"))

    assert result == Line("b=Meta+A,,Launch")


def test_kde_shortcut_prefers_source_for_other_middle_values() -> None:
    transform = KdeShortcutTransform()

    assert transform(_prop("b=x,y,z"), _prop("b=x,none,z")) == Line("b=x,y,z")


def test_kde_shortcut_rejects_arguments() -> None:
    with pytest.raises(TransformConstructionError):
        KdeShortcutTransform.from_args({"unexpected": "1"})


def test_set_value_ignores_inputs() -> None:
    transform = SetValueTransform(raw="a = q")

    assert transform(_prop("b=c"), _prop("b=d")) == Line("a = q")
    assert transform(None, None) == Line("a = q")


def test_keyring_success_builds_line_with_separator(fake_store: SecretStore) -> None:
    transform = KeyringTransform.from_args({"service": "irc", "user": "alice", "separator": " = "}, store=fake_store)

    assert transform(_prop("password=old"), _prop("password=stale")) == Line("password = hunter2")


def test_keyring_failure_keeps_target_line(fake_store: SecretStore, caplog: pytest.LogCaptureFixture) -> None:
    transform = KeyringTransform.from_args({"service": "irc", "user": "bob"}, store=fake_store)

    with caplog.at_level(logging.ERROR, logger="inimerge.transforms"):
        result = transform(_prop("password=template"), _prop("password=cached"))

    assert result == Line("password=cached")
    assert "Keyring lookup error" in caplog.text


def test_keyring_failure_without_target_emits_placeholder(fake_store: SecretStore) -> None:
    transform = KeyringTransform.from_args({"service": "irc", "user": "bob"}, store=fake_store)

    assert transform(_prop("password=template"), None) == Line("password=<KEYRING ERROR>")


def test_keyring_requires_service_and_user() -> None:
    with pytest.raises(TransformConstructionError, match="service"):
        KeyringTransform.from_args({"user": "alice"})
    with pytest.raises(TransformConstructionError, match="user"):
        KeyringTransform.from_args({"service": "irc"})


def test_transform_from_name_resolves_registry() -> None:
    assert transform_from_name("kde-shortcut") == KdeShortcutTransform()
    assert transform_from_name("set", {"raw": "k=v"}) == SetValueTransform(raw="k=v")
    with pytest.raises(TransformConstructionError, match="unknown transform"):
        transform_from_name("rot13")
