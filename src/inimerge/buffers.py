# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Committed/pending output buffer shared by the merge and filter engines."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class LineBuffer:
    """Output lines plus a pending area for lines whose fate is undecided.

    A section header whose section may still turn out empty is *held*. Lines
    that follow it travel with it via :meth:`push_raw` until something forces
    a :meth:`flush` (the section gets content) or :meth:`discard_pending`
    (a new section starts and the held header is dropped).
    """

    committed: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    @property
    def has_pending(self) -> bool:
        return bool(self.pending)

    def hold(self, line: str) -> None:
        """Append ``line`` to the pending area."""

        self.pending.append(line)

    def push_raw(self, line: str) -> None:
        """Append ``line`` to whichever area is active (pending when non-empty)."""

        if self.pending:
            self.pending.append(line)
        else:
            self.committed.append(line)

    def flush(self) -> None:
        """Commit every pending line, in order."""

        self.committed.extend(self.pending)
        self.pending.clear()

    def commit(self, line: str) -> None:
        """Flush pending lines, then commit ``line`` after them."""

        self.flush()
        self.committed.append(line)

    def discard_pending(self) -> None:
        self.pending.clear()

    def lines(self) -> list[str]:
        """Return a copy of the committed output."""

        return list(self.committed)


__all__ = ["LineBuffer"]
