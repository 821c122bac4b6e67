# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Secret store abstraction used by the keyring transform."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import keyring
from keyring.errors import KeyringError

from .errors import SecretLookupError


@runtime_checkable
class SecretStore(Protocol):
    """Look up secrets by service name and identifier."""

    def lookup(self, service: str, identifier: str) -> str:
        """Return the secret stored for ``service``/``identifier``.

        Raises:
            SecretLookupError: If the entry is missing or the store is unavailable.
        """
        ...


class KeyringSecretStore:
    """Secret store backed by the platform keyring (Secret Service, Keychain, ...)."""

    def lookup(self, service: str, identifier: str) -> str:
        try:
            secret = keyring.get_password(service, identifier)
        except KeyringError as exc:
            raise SecretLookupError(f"keyring error: {exc}") from exc
        if secret is None:
            raise SecretLookupError(f"no keyring entry for service={service} user={identifier}")
        return secret


__all__ = ["KeyringSecretStore", "SecretStore"]
