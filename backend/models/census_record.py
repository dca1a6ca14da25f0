"""Typed census records representing rows from the places and counties CSV files."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from utils.geoid import county_id, pad_state, place_id
from .enums import (
    COUNTY_SUMMARY_LEVEL,
    ESTIMATE_YEARS,
    PLACE_SUMMARY_LEVEL,
    STATE_COUNTY_SENTINEL,
)


def _field(row: Mapping[str, Optional[str]], name: str) -> str:
    value = row.get(name)
    return value.strip() if value else ""


def _estimates(row: Mapping[str, Optional[str]]) -> Dict[int, str]:
    return {year: _field(row, f"POPESTIMATE{year}") for year in ESTIMATE_YEARS}


@dataclass(frozen=True)
class CensusRecord(ABC):
    """Fields shared by both dataset variants."""
    state_name: str
    state_code: str
    name: str
    local_code: str
    summary_level: str
    estimates: Dict[int, str] = field(default_factory=dict, compare=False)

    @property
    def padded_state_code(self) -> str:
        return pad_state(self.state_code)

    @property
    def has_state(self) -> bool:
        """Whether the row names a state, so it contributes to the state catalog."""
        return bool(self.state_code and self.state_name)

    @property
    def is_complete(self) -> bool:
        """Whether every field the indexer needs is present."""
        return bool(self.state_code and self.name and self.local_code)

    @property
    def is_indexable(self) -> bool:
        """Whether the row belongs in the jurisdiction indices."""
        return self.is_complete

    @property
    @abstractmethod
    def geoid(self) -> str:
        """Canonical GEOID/FIPS code used as the lookup key."""
        pass

    def estimate(self, year: int) -> str:
        """Raw estimate text for a year ('' when the column is absent)."""
        return self.estimates.get(year, "")


@dataclass(frozen=True)
class PlaceRecord(CensusRecord):
    """A row of the sub-county (incorporated places) dataset."""

    @classmethod
    def from_row(cls, row: Mapping[str, Optional[str]]) -> "PlaceRecord":
        return cls(
            state_name=_field(row, "STNAME"),
            state_code=_field(row, "STATE"),
            name=_field(row, "NAME"),
            local_code=_field(row, "PLACE"),
            summary_level=_field(row, "SUMLEV"),
            estimates=_estimates(row),
        )

    @property
    def geoid(self) -> str:
        """7-digit place GEOID."""
        return place_id(self.state_code, self.local_code)

    @property
    def is_indexable(self) -> bool:
        # Other summary levels repeat the same place under county subdivisions
        return self.is_complete and self.summary_level == PLACE_SUMMARY_LEVEL


@dataclass(frozen=True)
class CountyRecord(CensusRecord):
    """A row of the county population estimates dataset."""

    @classmethod
    def from_row(cls, row: Mapping[str, Optional[str]]) -> "CountyRecord":
        return cls(
            state_name=_field(row, "STNAME"),
            state_code=_field(row, "STATE"),
            name=_field(row, "CTYNAME"),
            local_code=_field(row, "COUNTY"),
            summary_level=_field(row, "SUMLEV"),
            estimates=_estimates(row),
        )

    @property
    def geoid(self) -> str:
        """5-digit county FIPS code."""
        return county_id(self.state_code, self.local_code)

    @property
    def is_indexable(self) -> bool:
        return (
            self.is_complete
            and self.summary_level == COUNTY_SUMMARY_LEVEL
            and self.local_code != STATE_COUNTY_SENTINEL
        )
