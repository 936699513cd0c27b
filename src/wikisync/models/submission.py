"""Submission request/response models."""

from __future__ import annotations

from typing import Any

from wikisync.models._base import WikiSyncBaseModel
from wikisync.models.profile import ProfileKey, ProfileType
from wikisync.models.snapshot import Delta


class Submission(WikiSyncBaseModel):
    """Body POSTed to the collector.

    Serialized as ``{"username", "profileType", "delta": {"varb", "varp", "level"}}``.
    """

    username: str
    profile_type: ProfileType
    delta: Delta

    @classmethod
    def for_profile(cls, key: ProfileKey, delta: Delta) -> Submission:
        return cls(username=key.username, profile_type=key.profile_type, delta=delta)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SubmissionResult(WikiSyncBaseModel):
    """Acknowledgement returned by :meth:`wikisync.submission.SubmissionClient.submit`."""

    status_code: int
    field_count: int
