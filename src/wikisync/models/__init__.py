"""Typed models for wikisync."""

from wikisync.models.manifest import Manifest
from wikisync.models.profile import ProfileKey, ProfileType
from wikisync.models.snapshot import Delta, Snapshot
from wikisync.models.submission import Submission, SubmissionResult

__all__ = [
    "Delta",
    "Manifest",
    "ProfileKey",
    "ProfileType",
    "Snapshot",
    "Submission",
    "SubmissionResult",
]
