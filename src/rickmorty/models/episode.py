from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

from rickmorty.parser import link_ids, parse_episode_code

ItemT = TypeVar("ItemT", bound=BaseModel)


class Episode(BaseModel):
    """Single entry from ``/episode``.

    ``season`` and ``episode_number`` are derived from ``episode_code``
    (``S03E07`` → 3, 7) and are both 0 when the code does not parse.
    """

    model_config = ConfigDict(frozen=True)

    id: StrictInt
    name: str
    air_date: str
    episode_code: str = Field(alias="episode")
    character_ids: tuple[int, ...] = Field(alias="characters")
    url: str
    created: str
    season: int = 0
    episode_number: int = 0

    @model_validator(mode="before")
    @classmethod
    def derive_season(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        code = data.get("episode")
        if isinstance(code, str):
            data = dict(data)
            data["season"], data["episode_number"] = parse_episode_code(code)
        return data

    @field_validator("character_ids", mode="before")
    @classmethod
    def map_character_links(cls, v: Any) -> Any:
        return link_ids(v)


class PaginationInfo(BaseModel):
    """``info`` block of a collection response. Only used while paging."""

    count: StrictInt
    pages: StrictInt
    next: str | None = None
    prev: str | None = None


class Page(BaseModel, Generic[ItemT]):
    """One page of a collection endpoint."""

    info: PaginationInfo
    results: list[ItemT]
