# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the inimerge command line interface."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from textwrap import dedent

import pytest
from typer.testing import CliRunner

from inimerge.cli.app import app
from inimerge.cli.shared import PACKAGE_LOGGER, render_lines

OVERLAPPING_RULES = dedent(
    """\
    [[key]]
    section = "s"
    key = "k.*"
    regex = true
    action = "ignore"

    [[key]]
    section = ".*"
    key = "key"
    regex = true
    action = "ignore"
    """
)


@pytest.fixture(autouse=True)
def _reset_cli_logging() -> Iterator[None]:
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_merge_writes_to_stdout(tmp_path: Path) -> None:
    target = _write(tmp_path / "target.ini", "a=1\n[s]\nb=2\n")
    source = _write(tmp_path / "source.ini", "a=9\n[s]\nb=9\nc=9\n")

    result = CliRunner().invoke(app, ["merge", str(target), str(source)])

    assert result.exit_code == 0
    assert result.stdout == "a=9\n[s]\nb=9\nc=9\n"


def test_merge_writes_to_output_file(tmp_path: Path) -> None:
    target = _write(tmp_path / "target.ini", "[s]\nk=1\n")
    source = _write(tmp_path / "source.ini", "[s]\nk=2\n")
    output = tmp_path / "merged.ini"

    result = CliRunner().invoke(app, ["merge", str(target), str(source), "--output", str(output)])

    assert result.exit_code == 0
    assert output.read_text(encoding="utf-8") == "[s]\nk=2\n"


def test_merge_reads_target_from_stdin(tmp_path: Path) -> None:
    source = _write(tmp_path / "source.ini", "[s]\nk=2\n")

    result = CliRunner().invoke(app, ["merge", "-", str(source)], input="[s]\nk=1\n")

    assert result.exit_code == 0
    assert result.stdout == "[s]\nk=2\n"


def test_merge_rejects_two_stdin_inputs() -> None:
    result = CliRunner().invoke(app, ["merge", "-", "-"])

    assert result.exit_code == 2


def test_merge_reports_missing_input(tmp_path: Path) -> None:
    source = _write(tmp_path / "source.ini", "")

    result = CliRunner().invoke(app, ["merge", str(tmp_path / "missing.ini"), str(source)])

    assert result.exit_code == 2
    assert "Cannot read" in result.output


def test_merge_reports_malformed_source(tmp_path: Path) -> None:
    target = _write(tmp_path / "target.ini", "[s]\n")
    source = _write(tmp_path / "source.ini", "[broken\n")

    result = CliRunner().invoke(app, ["merge", str(target), str(source)])

    assert result.exit_code == 1
    assert "Failed to load source INI" in result.output


def test_merge_applies_rule_file(tmp_path: Path) -> None:
    target = _write(tmp_path / "target.ini", "[s]\nkey=mine\n")
    source = _write(tmp_path / "source.ini", "[s]\nkey=theirs\n")
    rules = _write(tmp_path / "rules.toml", OVERLAPPING_RULES)

    result = CliRunner().invoke(app, ["merge", str(target), str(source), "--rules", str(rules)])

    assert result.exit_code == 0
    assert "key=mine" in result.output
    assert "Overlapping regex matches for s/key" in result.output


def test_merge_can_silence_overlap_warnings(tmp_path: Path) -> None:
    target = _write(tmp_path / "target.ini", "[s]\nkey=mine\n")
    source = _write(tmp_path / "source.ini", "[s]\nkey=theirs\n")
    rules = _write(tmp_path / "rules.toml", OVERLAPPING_RULES)

    result = CliRunner().invoke(
        app, ["merge", str(target), str(source), "--rules", str(rules), "--no-warn-overlap"]
    )

    assert result.exit_code == 0
    assert "Overlapping" not in result.output


def test_merge_rejects_filter_rules(tmp_path: Path) -> None:
    target = _write(tmp_path / "target.ini", "")
    source = _write(tmp_path / "source.ini", "")
    rules = _write(tmp_path / "rules.toml", '[[key]]\nsection = "s"\nkey = "k"\naction = "remove"\n')

    result = CliRunner().invoke(app, ["merge", str(target), str(source), "-r", str(rules)])

    assert result.exit_code == 1
    assert "cannot be used when running merge" in result.output


def test_filter_redacts_values(tmp_path: Path) -> None:
    data = _write(tmp_path / "app.ini", "[db]\nuser = app\npassword = s3cret\n")
    rules = _write(
        tmp_path / "rules.toml",
        '[[key]]\nsection = "db"\nkey = "password"\naction = "replace"\nreplacement = "<redacted>"\n',
    )

    result = CliRunner().invoke(app, ["filter", str(data), "--rules", str(rules)])

    assert result.exit_code == 0
    assert result.stdout == "[db]\nuser = app\npassword = <redacted>\n"


def test_filter_without_rules_copies_input(tmp_path: Path) -> None:
    text = "; top\n[s]\nk = v\n\n"

    result = CliRunner().invoke(app, ["filter", "-"], input=text)

    assert result.exit_code == 0
    assert result.stdout == text


def test_check_rules_accepts_valid_file(tmp_path: Path) -> None:
    rules = _write(tmp_path / "rules.toml", OVERLAPPING_RULES)

    result = CliRunner().invoke(app, ["check-rules", str(rules)])

    assert result.exit_code == 0
    assert "0 section, 2 key, 0 set rule(s) valid for merge" in result.output


def test_check_rules_rejects_wrong_mode(tmp_path: Path) -> None:
    rules = _write(tmp_path / "rules.toml", OVERLAPPING_RULES)

    result = CliRunner().invoke(app, ["check-rules", str(rules), "--mode", "filter"])

    assert result.exit_code == 1
    assert "cannot be used when running filter" in result.output


def test_check_rules_reports_bad_regex(tmp_path: Path) -> None:
    rules = _write(tmp_path / "rules.toml", '[[section]]\nname = "["\nregex = true\naction = "delete"\n')

    result = CliRunner().invoke(app, ["check-rules", str(rules)])

    assert result.exit_code == 1
    assert "Failed to compile a regular expression" in result.output


def test_render_lines_terminates_last_line() -> None:
    assert render_lines([]) == ""
    assert render_lines(["a", "b"]) == "a\nb\n"
