"""Builds the state catalog and jurisdiction lookup indices from census rows."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
import logging

from models.census_record import CensusRecord, CountyRecord, PlaceRecord
from models.enums import JurisdictionType
from models.selection import StateEntry
from utils.formatting import collation_key

logger = logging.getLogger(__name__)

Row = Mapping[str, Optional[str]]


@dataclass(frozen=True)
class JurisdictionIndex:
    """
    Read-only indices for one loaded pair of datasets.

    A fresh instance is built per load and never mutated afterwards.
    """
    states: Tuple[StateEntry, ...] = ()
    places_by_state: Dict[str, List[PlaceRecord]] = field(default_factory=dict)
    counties_by_state: Dict[str, List[CountyRecord]] = field(default_factory=dict)
    place_lookup: Dict[str, PlaceRecord] = field(default_factory=dict)
    county_lookup: Dict[str, CountyRecord] = field(default_factory=dict)

    def records_for_state(
        self, state_code: str, jurisdiction_type: JurisdictionType
    ) -> Sequence[CensusRecord]:
        """Retained records of a type for a 2-digit state code, in source order."""
        if jurisdiction_type is JurisdictionType.PLACE:
            return self.places_by_state.get(state_code, [])
        return self.counties_by_state.get(state_code, [])

    def lookup(self, code: str, jurisdiction_type: JurisdictionType) -> Optional[CensusRecord]:
        if jurisdiction_type is JurisdictionType.PLACE:
            return self.place_lookup.get(code)
        return self.county_lookup.get(code)

    def state(self, state_code: str) -> Optional[StateEntry]:
        for entry in self.states:
            if entry.code == state_code:
                return entry
        return None

    def get_statistics(self) -> dict:
        return {
            'states': len(self.states),
            'places': len(self.place_lookup),
            'counties': len(self.county_lookup),
        }


class RecordIndexer:
    """
    Turns decoded rows into a JurisdictionIndex.

    Each dataset is filtered and indexed in a single pass independent of the
    other; only the state catalog combines both.
    """

    @staticmethod
    def index_records(
        records: Iterable[CensusRecord],
    ) -> Tuple[Dict[str, List[CensusRecord]], Dict[str, CensusRecord]]:
        """
        Bucket retained records by state and by canonical code.

        Args:
            records: Place or county records from one dataset

        Returns:
            Tuple of (state code -> records, GEOID -> record)
        """
        by_state: Dict[str, List[CensusRecord]] = {}
        lookup: Dict[str, CensusRecord] = {}

        for record in records:
            if not record.is_indexable:
                continue
            by_state.setdefault(record.padded_state_code, []).append(record)
            lookup[record.geoid] = record

        return by_state, lookup

    @staticmethod
    def build_state_catalog(*datasets: Iterable[CensusRecord]) -> Tuple[StateEntry, ...]:
        """
        Build the deduplicated state list from every row naming a state.

        A later row's state name replaces an earlier one for the same code.
        """
        names: Dict[str, str] = {}
        for records in datasets:
            for record in records:
                if record.has_state:
                    names[record.padded_state_code] = record.state_name

        entries = [StateEntry(name=name, code=code) for code, name in names.items()]
        return tuple(sorted(entries, key=lambda entry: collation_key(entry.name)))

    @classmethod
    def build(
        cls,
        place_rows: Iterable[Union[Row, PlaceRecord]],
        county_rows: Iterable[Union[Row, CountyRecord]],
    ) -> JurisdictionIndex:
        """
        Build every index from the two datasets.

        Args:
            place_rows: Decoded rows (or records) of the places file
            county_rows: Decoded rows (or records) of the counties file

        Returns:
            A complete JurisdictionIndex
        """
        places = [r if isinstance(r, PlaceRecord) else PlaceRecord.from_row(r) for r in place_rows]
        counties = [r if isinstance(r, CountyRecord) else CountyRecord.from_row(r) for r in county_rows]

        places_by_state, place_lookup = cls.index_records(places)
        logger.info(f"Indexed {len(place_lookup)} places from {len(places)} rows")

        counties_by_state, county_lookup = cls.index_records(counties)
        logger.info(f"Indexed {len(county_lookup)} counties from {len(counties)} rows")

        states = cls.build_state_catalog(places, counties)
        logger.info(f"State catalog has {len(states)} states")

        return JurisdictionIndex(
            states=states,
            places_by_state=places_by_state,
            counties_by_state=counties_by_state,
            place_lookup=place_lookup,
            county_lookup=county_lookup,
        )
