"""Snapshot model: observed values for one profile at one point in time."""

from __future__ import annotations

from typing import TypeAlias

from pydantic import Field

from wikisync.models._base import WikiSyncBaseModel


class Snapshot(WikiSyncBaseModel):
    """Observed values keyed by category and field id.

    A key's absence means the field was not in the manifest, never that it
    was unreadable (unreadable fields carry the ``-1`` sentinel).
    Equality is structural across all three categories.
    """

    varb: dict[int, int] = Field(default_factory=dict)
    varp: dict[int, int] = Field(default_factory=dict)
    level: dict[str, int] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.varb or self.varp or self.level)

    def field_count(self) -> int:
        return len(self.varb) + len(self.varp) + len(self.level)


Delta: TypeAlias = Snapshot
"""Left-only difference between two snapshots; same shape as :class:`Snapshot`."""
