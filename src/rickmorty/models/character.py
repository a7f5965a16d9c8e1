from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

from rickmorty.parser import extract_id_from_url, link_ids


class CharacterStatus(StrEnum):
    ALIVE = "Alive"
    DEAD = "Dead"
    UNKNOWN = "unknown"

    @classmethod
    def from_api(cls, value: str) -> CharacterStatus:
        """Map an API status string; anything unrecognised is UNKNOWN."""
        return _STATUS_BY_NAME.get(value, cls.UNKNOWN)


class Gender(StrEnum):
    FEMALE = "Female"
    MALE = "Male"
    GENDERLESS = "Genderless"
    UNKNOWN = "unknown"

    @classmethod
    def from_api(cls, value: str) -> Gender:
        """Map an API gender string; anything unrecognised is UNKNOWN."""
        return _GENDER_BY_NAME.get(value, cls.UNKNOWN)


_STATUS_BY_NAME = {
    "Alive": CharacterStatus.ALIVE,
    "Dead": CharacterStatus.DEAD,
}

_GENDER_BY_NAME = {
    "Female": Gender.FEMALE,
    "Male": Gender.MALE,
    "Genderless": Gender.GENDERLESS,
}


class LocationReference(BaseModel):
    """Name and link of a character's origin or current location."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str = ""
    id: int = -1  # -1 when the url is empty or carries no numeric id

    @model_validator(mode="before")
    @classmethod
    def derive_id(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("url") is None:
            data["url"] = ""
        if isinstance(data["url"], str):
            data["id"] = extract_id_from_url(data["url"])
        return data


class Character(BaseModel):
    """Single entry from ``/character``. Characters order by name."""

    model_config = ConfigDict(frozen=True)

    id: StrictInt
    name: str
    status: CharacterStatus
    species: str
    type: str  # Sub-species or variant; usually empty
    gender: Gender
    origin: LocationReference
    location: LocationReference
    image_url: str = Field(alias="image")
    episode_ids: tuple[int, ...] = Field(alias="episode")
    url: str
    created: str

    @field_validator("status", mode="before")
    @classmethod
    def map_status(cls, v: Any) -> Any:
        return CharacterStatus.from_api(v) if isinstance(v, str) else v

    @field_validator("gender", mode="before")
    @classmethod
    def map_gender(cls, v: Any) -> Any:
        return Gender.from_api(v) if isinstance(v, str) else v

    @field_validator("episode_ids", mode="before")
    @classmethod
    def map_episode_links(cls, v: Any) -> Any:
        return link_ids(v)

    def __lt__(self, other: Character) -> bool:
        return self.name < other.name
