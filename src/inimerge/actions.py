# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Action value types resolved by the rule matcher."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .transforms import Transformer


class SectionAction(StrEnum):
    """Actions that apply to a whole section while merging."""

    IGNORE = "ignore"
    DELETE = "delete"


class ActionKind(StrEnum):
    """Per-key merge actions."""

    IGNORE = "ignore"
    DELETE = "delete"
    TRANSFORM = "transform"


@dataclass(frozen=True, slots=True)
class Action:
    """Merge action for a single key.

    ``IGNORE`` keeps the target line, ``DELETE`` drops the key and
    ``TRANSFORM`` hands both sides to :attr:`transformer`.
    """

    kind: ActionKind
    transformer: Transformer | None = None

    def __post_init__(self) -> None:
        if (self.kind is ActionKind.TRANSFORM) != (self.transformer is not None):
            raise ValueError("a transformer is required for, and only for, transform actions")

    @classmethod
    def ignore(cls) -> Action:
        return IGNORE

    @classmethod
    def delete(cls) -> Action:
        return DELETE

    @classmethod
    def transform(cls, transformer: Transformer) -> Action:
        return cls(kind=ActionKind.TRANSFORM, transformer=transformer)

    @classmethod
    def from_section(cls, action: SectionAction) -> Action:
        """Return the key-level equivalent of a section-level action."""

        match action:
            case SectionAction.IGNORE:
                return IGNORE
            case SectionAction.DELETE:
                return DELETE


IGNORE = Action(kind=ActionKind.IGNORE)
DELETE = Action(kind=ActionKind.DELETE)


class FilterActionKind(StrEnum):
    """Actions available to the single-file filter."""

    REMOVE = "remove"
    REPLACE = "replace"


@dataclass(frozen=True, slots=True)
class FilterAction:
    """Filter action; ``replacement`` is only set for ``REPLACE``."""

    kind: FilterActionKind
    replacement: str | None = None

    def __post_init__(self) -> None:
        if (self.kind is FilterActionKind.REPLACE) != (self.replacement is not None):
            raise ValueError("a replacement is required for, and only for, replace actions")

    @classmethod
    def remove(cls) -> FilterAction:
        return cls(kind=FilterActionKind.REMOVE)

    @classmethod
    def replace(cls, replacement: str) -> FilterAction:
        return cls(kind=FilterActionKind.REPLACE, replacement=replacement)

    @classmethod
    def from_section(cls, action: FilterAction) -> FilterAction:
        return action


__all__ = [
    "DELETE",
    "IGNORE",
    "Action",
    "ActionKind",
    "FilterAction",
    "FilterActionKind",
    "SectionAction",
]
