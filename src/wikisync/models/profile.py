"""Profile identity models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import field_validator

from wikisync.models._base import WikiSyncBaseModel


class ProfileType(StrEnum):
    """Game world profile types; serialized by name."""

    STANDARD = "STANDARD"
    BETA = "BETA"
    QUEST_SPEEDRUNNING = "QUEST_SPEEDRUNNING"
    DEADMAN = "DEADMAN"
    PVP_ARENA = "PVP_ARENA"
    TRAILBLAZER_LEAGUE = "TRAILBLAZER_LEAGUE"
    DEADMAN_REBORN = "DEADMAN_REBORN"
    SHATTERED_RELICS_LEAGUE = "SHATTERED_RELICS_LEAGUE"


class ProfileKey(WikiSyncBaseModel):
    """Identity under which baselines are kept.

    Snapshots observed for different keys are never compared.
    """

    username: str
    profile_type: ProfileType

    @field_validator("username")
    @classmethod
    def _username_non_empty(cls, value: str) -> str:
        username = value.strip()
        if not username:
            raise ValueError("username must be non-empty")
        return username

    def __str__(self) -> str:
        return f"{self.username}/{self.profile_type.value}"
