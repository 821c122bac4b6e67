# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Round-trip INI tokenizer producing :mod:`inimerge.records` line records."""

from __future__ import annotations

from collections.abc import Iterator
from typing import IO, Final, TypeAlias

from .errors import TokenizeError
from .records import (
    BlankLine,
    CommentLine,
    ErrorLine,
    LineRecord,
    PropertyLine,
    SectionEnd,
    SectionLine,
)

COMMENT_PREFIXES: Final[tuple[str, ...]] = (";", "#")
SECTION_OPEN: Final[str] = "["
SECTION_CLOSE: Final[str] = "]"
KEY_VALUE_SEPARATOR: Final[str] = "="

RawInput: TypeAlias = bytes | str | IO[bytes] | IO[str]


def _split_physical_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` dropping a trailing ``\\r`` from each line.

    Only ``\\n`` counts as a terminator; :meth:`str.splitlines` would also
    split on form feeds and other characters that belong to the line.
    """

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def classify_line(raw: str) -> LineRecord:
    """Return the record describing a single physical line.

    Args:
        raw: Line text without its terminator.

    Returns:
        LineRecord: Record carrying ``raw`` verbatim.
    """

    stripped = raw.strip()
    if not stripped:
        return BlankLine(raw=raw)
    if stripped.startswith(COMMENT_PREFIXES):
        return CommentLine(raw=raw)
    if stripped.startswith(SECTION_OPEN):
        close = stripped.rfind(SECTION_CLOSE)
        if close == -1:
            return ErrorLine(raw=raw)
        return SectionLine(name=stripped[1:close].strip(), raw=raw)
    key, sep, value = raw.partition(KEY_VALUE_SEPARATOR)
    if not sep:
        return PropertyLine(key=stripped, value=None, raw=raw)
    return PropertyLine(key=key.strip(), value=value.strip(), raw=raw)


def tokenize(text: str) -> Iterator[LineRecord]:
    """Yield line records for every physical line in ``text``.

    A :class:`SectionEnd` precedes each section header after the first one and
    closes the final section at end of input.

    Args:
        text: Complete INI document.

    Yields:
        LineRecord: Records in input order.
    """

    in_section = False
    for raw in _split_physical_lines(text):
        record = classify_line(raw)
        if isinstance(record, SectionLine):
            if in_section:
                yield SectionEnd()
            in_section = True
        yield record
    if in_section:
        yield SectionEnd()


def _read_text(data: RawInput) -> str:
    if isinstance(data, str):
        return data
    if isinstance(data, (bytes, bytearray)):
        payload: bytes | str = bytes(data)
    else:
        try:
            payload = data.read()
        except OSError as exc:
            raise TokenizeError(f"failed to read input: {exc}") from exc
    if isinstance(payload, str):
        return payload
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise TokenizeError(f"input is not valid UTF-8: {exc}") from exc


def load_lines(data: RawInput) -> list[LineRecord]:
    """Materialise every line record of ``data``.

    Args:
        data: Raw bytes, text, or a readable binary/text stream.

    Returns:
        list[LineRecord]: Fully buffered record list.

    Raises:
        TokenizeError: If the input cannot be read or decoded.
    """

    return list(tokenize(_read_text(data)))


__all__ = ["RawInput", "classify_line", "load_lines", "tokenize"]
