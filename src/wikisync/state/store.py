"""In-memory store of last-acknowledged snapshots.

This is the only component allowed to hold a profile's baseline. Entries
are replaced whole on commit and are never merged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict

from wikisync.models.profile import ProfileKey
from wikisync.models.snapshot import Snapshot


def _utcnow() -> datetime:
    return datetime.now(UTC)


class BaselineEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    snapshot: Snapshot
    manifest_fingerprint: str | None = None
    committed_at: datetime


class ProfileStateStore:
    """Keyed store of the last snapshot the collector acknowledged.

    A profile that was never committed reads as an empty snapshot, so every
    observed field shows up in its first delta.  Baselines live for the
    lifetime of the process.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._entries: dict[ProfileKey, BaselineEntry] = {}

    def get(self, key: ProfileKey, *, manifest_fingerprint: str | None = None) -> Snapshot:
        """Return a copy of the baseline for *key*.

        When *manifest_fingerprint* is given and differs from the one the
        baseline was committed under, the baseline is treated as absent so
        the next submission resends everything under the new manifest.
        """
        entry = self._entries.get(key)
        if entry is None:
            return Snapshot()
        if (
            manifest_fingerprint is not None
            and entry.manifest_fingerprint is not None
            and entry.manifest_fingerprint != manifest_fingerprint
        ):
            return Snapshot()
        return entry.snapshot.model_copy(deep=True)

    def commit(
        self,
        key: ProfileKey,
        snapshot: Snapshot,
        *,
        manifest_fingerprint: str | None = None,
    ) -> None:
        """Replace the baseline for *key* with *snapshot*."""
        # Build the entry first; the dict assignment is the only mutation.
        entry = BaselineEntry(
            snapshot=snapshot.model_copy(deep=True),
            manifest_fingerprint=manifest_fingerprint,
            committed_at=self._clock(),
        )
        self._entries[key] = entry

    def entry(self, key: ProfileKey) -> BaselineEntry | None:
        return self._entries.get(key)

    def profiles(self) -> Iterator[ProfileKey]:
        return iter(list(self._entries))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
