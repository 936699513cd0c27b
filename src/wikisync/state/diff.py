"""Delta computation between two snapshots.

Deletions are not represented: the collector's model is append/overwrite
only, so keys present only in the old snapshot are dropped.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

from wikisync.models.snapshot import Delta, Snapshot

K = TypeVar("K")


def entries_only_on_left(new: Mapping[K, int], old: Mapping[K, int]) -> dict[K, int]:
    """Entries of *new* whose key is missing from *old* or maps to another value."""
    return {key: value for key, value in new.items() if key not in old or old[key] != value}


def diff(new: Snapshot, old: Snapshot) -> Delta:
    """Return what changed in *new* relative to *old*, per category."""
    return Delta(
        varb=entries_only_on_left(new.varb, old.varb),
        varp=entries_only_on_left(new.varp, old.varp),
        level=entries_only_on_left(new.level, old.level),
    )
