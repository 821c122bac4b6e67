# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from inimerge.errors import SecretLookupError


@dataclass
class FakeSecretStore:
    """In-memory secret store keyed by ``(service, identifier)``."""

    secrets: dict[tuple[str, str], str] = field(default_factory=dict)

    def lookup(self, service: str, identifier: str) -> str:
        try:
            return self.secrets[(service, identifier)]
        except KeyError:
            raise SecretLookupError(f"no entry for {service}/{identifier}") from None


@pytest.fixture
def fake_store() -> FakeSecretStore:
    """Return a secret store holding a single ``irc``/``alice`` password."""
    return FakeSecretStore(secrets={("irc", "alice"): "hunter2"})
