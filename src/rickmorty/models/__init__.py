from __future__ import annotations

from rickmorty.models.character import (
    Character,
    CharacterStatus,
    Gender,
    LocationReference,
)
from rickmorty.models.episode import Episode, Page, PaginationInfo
from rickmorty.models.location import Location

__all__ = [
    # characters
    "Character",
    "CharacterStatus",
    "Gender",
    "LocationReference",
    # episodes
    "Episode",
    "PaginationInfo",
    "Page",
    # locations
    "Location",
]
