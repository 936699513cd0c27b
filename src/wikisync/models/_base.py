"""Base model for wikisync wire and state models.

Every model inherits from :class:`WikiSyncBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase wire keys map
  automatically to snake_case fields (``profileType`` -> ``profile_type``).
* ``frozen=True``: models are values; replacement, never mutation.
* ``extra="ignore"`` so the remote service can add fields without
  breaking older clients.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WikiSyncBaseModel(BaseModel):
    """Base for wikisync models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
