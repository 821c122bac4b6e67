# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Random-access index over the source (template) file.

The target is walked line by line, but the merge needs to look up source
values and section headers at arbitrary points, so the source is loaded
into this index first.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .errors import TokenizeError
from .matcher import SectionKey
from .records import OUTSIDE_SECTION, ErrorLine, LineRecord, PropertyLine, PropertyView, SectionLine


@dataclass(frozen=True, slots=True)
class SourceValue:
    """Raw line and parsed value of one source property."""

    raw: str
    value: str | None

    def view(self, section: str, key: str) -> PropertyView:
        return PropertyView(section=section, key=key, value=self.value, raw=self.raw)


class SourceIndex:
    """Section headers and properties of the source, keyed for lookup.

    Later duplicates of a section header or of a key within a section
    overwrite earlier ones. Content before the first header lives in the
    :data:`~inimerge.records.OUTSIDE_SECTION` pseudo-section, which is always
    present.
    """

    __slots__ = ("_entries", "_headers", "_values")

    def __init__(
        self,
        headers: Mapping[str, str],
        values: Mapping[SectionKey, SourceValue],
    ) -> None:
        self._headers: Mapping[str, str] = MappingProxyType(dict(headers))
        self._values: Mapping[SectionKey, SourceValue] = MappingProxyType(dict(values))
        grouped: dict[str, dict[str, SourceValue]] = {}
        for (section, key), value in values.items():
            grouped.setdefault(section, {})[key] = value
        self._entries: Mapping[str, tuple[tuple[str, SourceValue], ...]] = MappingProxyType(
            {section: tuple(sorted(keys.items())) for section, keys in grouped.items()},
        )

    @classmethod
    def from_records(cls, records: Iterable[LineRecord]) -> SourceIndex:
        """Build the index in one pass over ``records``.

        Args:
            records: Line records of the source file.

        Returns:
            SourceIndex: Immutable index.

        Raises:
            TokenizeError: If the source contains a malformed line.
        """

        headers: dict[str, str] = {OUTSIDE_SECTION: OUTSIDE_SECTION}
        values: dict[SectionKey, SourceValue] = {}
        section = OUTSIDE_SECTION
        for record in records:
            match record:
                case ErrorLine(raw=raw):
                    raise TokenizeError(f"Parse error {raw}")
                case SectionLine(name=name, raw=raw):
                    headers[name] = raw
                    section = name
                case PropertyLine(key=key, value=value, raw=raw):
                    values[SectionKey(section, key)] = SourceValue(raw=raw, value=value)
                case _:
                    pass
        return cls(headers, values)

    def has_section(self, name: str) -> bool:
        return name in self._headers

    def sections(self) -> Iterator[tuple[str, str]]:
        """Yield ``(name, raw header line)`` pairs, including the outside-section sentinel."""

        yield from self._headers.items()

    def section_entries(self, name: str) -> tuple[tuple[str, SourceValue], ...]:
        """Return the properties of ``name`` sorted by key."""

        return self._entries.get(name, ())

    def property(self, section: str, key: str) -> SourceValue | None:
        return self._values.get(SectionKey(section, key))


__all__ = ["SourceIndex", "SourceValue"]
