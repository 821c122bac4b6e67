# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in value transforms invoked by ``transform`` merge actions.

The set of transforms is closed: :data:`Transformer` is a union of the
concrete classes below and :data:`TRANSFORMS` maps rule-file names to them.
Each transform is called with the source and target views of one property
(either may be ``None``) and returns a :data:`TransformOutcome`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar, Final, TypeAlias

from .errors import InvalidTransformInput, SecretLookupError, TransformConstructionError
from .records import PropertyView
from .secrets import KeyringSecretStore, SecretStore

LOGGER = logging.getLogger(__name__)

KDE_FIELD_COUNT: Final[int] = 3
KDE_EQUIVALENT_MIDDLE: Final[frozenset[str]] = frozenset({"", "none"})
KEYRING_DEFAULT_SEPARATOR: Final[str] = "="
KEYRING_ERROR_PLACEHOLDER: Final[str] = "<KEYRING ERROR>"


@dataclass(frozen=True, slots=True)
class Nothing:
    """Suppress the line."""


@dataclass(frozen=True, slots=True)
class Line:
    """Emit ``text`` verbatim."""

    text: str


TransformOutcome: TypeAlias = Nothing | Line
NOTHING: Final[Nothing] = Nothing()


def _require_value(prop: PropertyView, side: str) -> str:
    if prop.value is None:
        raise InvalidTransformInput(f"Key is missing value in {side}")
    return prop.value


def _same_shortcut(source_value: str, target_value: str) -> bool:
    source_fields = source_value.split(",")
    target_fields = target_value.split(",")
    return (
        len(source_fields) == len(target_fields) == KDE_FIELD_COUNT
        and source_fields[0] == target_fields[0]
        and source_fields[2] == target_fields[2]
        and source_fields[1] in KDE_EQUIVALENT_MIDDLE
        and target_fields[1] in KDE_EQUIVALENT_MIDDLE
    )


def _reject_unknown(args: Mapping[str, str], allowed: frozenset[str], name: str) -> None:
    unknown = sorted(set(args) - allowed)
    if unknown:
        raise TransformConstructionError(f"{name}: unexpected argument(s): {', '.join(unknown)}")


@dataclass(frozen=True, slots=True)
class UnsortedListsTransform:
    """Compare values as unordered lists split on :attr:`separator`.

    Equal element sets keep the target line to avoid needless diffs;
    anything else takes the source line.
    """

    name: ClassVar[str] = "unsorted-lists"

    separator: str

    def __post_init__(self) -> None:
        if len(self.separator) != 1:
            raise TransformConstructionError(f"{self.name}: separator must be exactly one character")

    def __call__(self, source: PropertyView | None, target: PropertyView | None) -> TransformOutcome:
        match source, target:
            case None, None:
                raise InvalidTransformInput("neither source nor target property given")
            case None, _:
                return NOTHING
            case PropertyView() as only_source, None:
                return Line(only_source.raw)
            case PropertyView() as src, PropertyView() as tgt:
                source_items = set(_require_value(src, "source").split(self.separator))
                target_items = set(_require_value(tgt, "target").split(self.separator))
                return Line(tgt.raw if source_items == target_items else src.raw)
        raise InvalidTransformInput("unexpected property combination")

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> UnsortedListsTransform:
        """Build from ``{"separator": ","}``.

        Raises:
            TransformConstructionError: If ``separator`` is missing or not a single character.
        """

        _reject_unknown(args, frozenset({"separator"}), cls.name)
        separator = args.get("separator")
        if separator is None:
            raise TransformConstructionError(f"{cls.name}: failed to get separator")
        return cls(separator=separator)


@dataclass(frozen=True, slots=True)
class KdeShortcutTransform:
    """Treat ``a,,c`` and ``a,none,c`` as the same three-field shortcut value.

    KDE flips some global shortcuts between the two spellings on its own.
    When both sides agree apart from that, the target line is kept.
    """

    name: ClassVar[str] = "kde-shortcut"

    def __call__(self, source: PropertyView | None, target: PropertyView | None) -> TransformOutcome:
        match source, target:
            case None, None:
                raise InvalidTransformInput("neither source nor target property given")
            case None, _:
                return NOTHING
            case PropertyView() as only_source, None:
                return Line(only_source.raw)
            case PropertyView() as src, PropertyView() as tgt:
                same = _same_shortcut(_require_value(src, "source"), _require_value(tgt, "target"))
                return Line(tgt.raw if same else src.raw)
        raise InvalidTransformInput("unexpected property combination")

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> KdeShortcutTransform:
        if args:
            raise TransformConstructionError(f"{cls.name}: unexpected arguments")
        return cls()


@dataclass(frozen=True, slots=True)
class SetValueTransform:
    """Always emit :attr:`raw`; backs forced keys created by setters."""

    name: ClassVar[str] = "set"

    raw: str

    def __call__(self, source: PropertyView | None, target: PropertyView | None) -> TransformOutcome:
        return Line(self.raw)

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> SetValueTransform:
        _reject_unknown(args, frozenset({"raw"}), cls.name)
        raw = args.get("raw")
        if raw is None:
            raise TransformConstructionError(f"{cls.name}: failed to get raw entry")
        return cls(raw=raw)


@dataclass(frozen=True, slots=True)
class KeyringTransform:
    """Fill the value from a secret store instead of either file.

    A failed lookup never aborts the merge: the target line is kept when
    there is one, otherwise a placeholder line is written.
    """

    name: ClassVar[str] = "keyring"

    service: str
    user: str
    separator: str = KEYRING_DEFAULT_SEPARATOR
    store: SecretStore = field(default_factory=KeyringSecretStore, compare=False, repr=False)

    def __call__(self, source: PropertyView | None, target: PropertyView | None) -> TransformOutcome:
        present = source or target
        if present is None:
            raise InvalidTransformInput("neither source nor target property given")
        try:
            secret = self.store.lookup(self.service, self.user)
        except SecretLookupError as exc:
            LOGGER.error("Keyring lookup error: %s", exc)
            LOGGER.error("Keyring query: service=%s user=%s", self.service, self.user)
            if target is not None:
                return Line(target.raw)
            return Line(f"{present.key}{self.separator}{KEYRING_ERROR_PLACEHOLDER}")
        return Line(f"{present.key}{self.separator}{secret}")

    @classmethod
    def from_args(cls, args: Mapping[str, str], *, store: SecretStore | None = None) -> KeyringTransform:
        """Build from ``service``, ``user`` and an optional ``separator``.

        Args:
            args: User supplied arguments.
            store: Secret store override; defaults to the platform keyring.

        Raises:
            TransformConstructionError: If ``service`` or ``user`` is missing.
        """

        _reject_unknown(args, frozenset({"service", "user", "separator"}), cls.name)
        for required in ("service", "user"):
            if required not in args:
                raise TransformConstructionError(f"{cls.name}: failed to get {required}")
        separator = args.get("separator", KEYRING_DEFAULT_SEPARATOR)
        if store is None:
            return cls(service=args["service"], user=args["user"], separator=separator)
        return cls(service=args["service"], user=args["user"], separator=separator, store=store)


Transformer: TypeAlias = UnsortedListsTransform | KdeShortcutTransform | SetValueTransform | KeyringTransform

TRANSFORMS: Final[Mapping[str, type[Transformer]]] = {
    UnsortedListsTransform.name: UnsortedListsTransform,
    KdeShortcutTransform.name: KdeShortcutTransform,
    SetValueTransform.name: SetValueTransform,
    KeyringTransform.name: KeyringTransform,
}


def transform_from_name(name: str, args: Mapping[str, str] | None = None) -> Transformer:
    """Construct the transform registered as ``name``.

    Args:
        name: Registry name such as ``unsorted-lists``.
        args: Argument bag forwarded to ``from_args``.

    Returns:
        Transformer: Configured transform instance.

    Raises:
        TransformConstructionError: If the name is unknown or the arguments are invalid.
    """

    transform_cls = TRANSFORMS.get(name)
    if transform_cls is None:
        known = ", ".join(sorted(TRANSFORMS))
        raise TransformConstructionError(f"unknown transform {name!r} (expected one of: {known})")
    return transform_cls.from_args(args or {})


__all__ = [
    "NOTHING",
    "TRANSFORMS",
    "KdeShortcutTransform",
    "KeyringTransform",
    "Line",
    "Nothing",
    "SetValueTransform",
    "TransformOutcome",
    "Transformer",
    "UnsortedListsTransform",
    "transform_from_name",
]
