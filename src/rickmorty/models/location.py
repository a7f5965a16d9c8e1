from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from rickmorty.parser import link_ids


class Location(BaseModel):
    """Single entry from ``/location``."""

    model_config = ConfigDict(frozen=True)

    id: StrictInt
    name: str
    type: str
    dimension: str
    resident_ids: tuple[int, ...] = Field(alias="residents")
    url: str
    created: str

    @field_validator("resident_ids", mode="before")
    @classmethod
    def map_resident_links(cls, v: Any) -> Any:
        return link_ids(v)
