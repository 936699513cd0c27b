"""Manifest model: the remote schema naming which fields to observe."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from pydantic import Field, field_validator

from wikisync._constants import SKILLS
from wikisync.models._base import WikiSyncBaseModel


def _unique_in_order(values: Any) -> Any:
    if isinstance(values, (list, tuple)):
        return tuple(dict.fromkeys(values))
    return values


class Manifest(WikiSyncBaseModel):
    """Observable-field identifiers partitioned by category.

    Parameters
    ----------
    varbits : tuple[int, ...]
        Varbit ids to read.
    varps : tuple[int, ...]
        Varp ids to read.
    levels : tuple[str, ...]
        Skill names to read.  The remote manifest usually omits this
        category; every skill is observed in that case.
    version : int or None
        Optional server-side manifest version.
    """

    varbits: tuple[int, ...] = ()
    varps: tuple[int, ...] = ()
    levels: tuple[str, ...] = Field(default=SKILLS)
    version: int | None = None

    @field_validator("varbits", "varps", mode="before")
    @classmethod
    def _dedupe_ids(cls, value: Any) -> Any:
        if value is None:
            return ()
        return _unique_in_order(value)

    @field_validator("levels", mode="before")
    @classmethod
    def _default_levels(cls, value: Any) -> Any:
        if value is None:
            return SKILLS
        return _unique_in_order(value)

    @property
    def fingerprint(self) -> str:
        """Stable identifier of this manifest's content.

        The server ``version`` when present, otherwise a SHA-256 over the
        sorted id lists.  Cached because the frozen model never changes.
        """
        try:
            return str(object.__getattribute__(self, "_fingerprint_cache"))
        except AttributeError:
            if self.version is not None:
                value = f"v{self.version}"
            else:
                canonical = json.dumps(
                    [sorted(self.varbits), sorted(self.varps), sorted(self.levels)],
                    separators=(",", ":"),
                )
                value = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
            object.__setattr__(self, "_fingerprint_cache", value)
            return value
