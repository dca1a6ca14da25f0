"""Jurisdiction option listing and metric resolution over a built index."""

from typing import List, Union
import logging

from models.census_record import CensusRecord
from models.enums import JurisdictionType, MetricKind
from models.errors import UnknownJurisdiction
from models.selection import JurisdictionOption
from record_indexer import JurisdictionIndex
from utils.formatting import collation_key, format_population, parse_estimate
from utils.geoid import pad_state

logger = logging.getLogger(__name__)


class JurisdictionQuery:
    """Read-only queries against one JurisdictionIndex."""

    def __init__(self, index: JurisdictionIndex):
        self.index = index

    def options_for(
        self,
        state_code: str,
        jurisdiction_type: Union[JurisdictionType, str],
    ) -> List[JurisdictionOption]:
        """
        List the jurisdictions of a type within a state.

        Args:
            state_code: State FIPS code (padded to 2 digits if shorter)
            jurisdiction_type: PLACE or COUNTY

        Returns:
            Options sorted by label; empty if the state has none
        """
        jurisdiction_type = JurisdictionType(jurisdiction_type)
        records = self.index.records_for_state(pad_state(state_code), jurisdiction_type)
        options = [JurisdictionOption(code=record.geoid, label=record.name) for record in records]
        # sorted() is stable, so equal labels keep source order
        return sorted(options, key=lambda option: collation_key(option.label))

    def record_for(
        self,
        code: str,
        jurisdiction_type: Union[JurisdictionType, str],
    ) -> CensusRecord:
        """Look up the record behind a code, failing if it is not indexed."""
        jurisdiction_type = JurisdictionType(jurisdiction_type)
        record = self.index.lookup(code, jurisdiction_type)
        if record is None:
            raise UnknownJurisdiction(code, jurisdiction_type)
        return record

    def resolve(
        self,
        code: str,
        jurisdiction_type: Union[JurisdictionType, str],
        metric: Union[MetricKind, str],
    ) -> str:
        """
        Resolve a metric for a jurisdiction as display text.

        Args:
            code: GEOID / FIPS code returned by options_for
            jurisdiction_type: PLACE or COUNTY
            metric: Which value to return

        Returns:
            The code itself for CODE, otherwise the estimate with thousands separators

        Raises:
            UnknownJurisdiction: If the code is not in the index for that type
        """
        record = self.record_for(code, jurisdiction_type)
        return self.metric_value(record, MetricKind(metric))

    @staticmethod
    def metric_value(record: CensusRecord, metric: MetricKind) -> str:
        if metric is MetricKind.CODE:
            return record.geoid
        return format_population(parse_estimate(record.estimate(metric.year)))
