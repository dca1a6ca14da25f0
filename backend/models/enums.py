"""Enums for jurisdiction types, metric kinds and session states."""

from enum import Enum
from typing import Optional

# Census summary-level codes used to filter the mixed-granularity datasets
PLACE_SUMMARY_LEVEL = "162"     # incorporated place
COUNTY_SUMMARY_LEVEL = "050"    # county or county-equivalent
STATE_COUNTY_SENTINEL = "000"   # COUNTY value of the statewide total row

CURRENT_ESTIMATE_YEAR = 2024
PRIOR_ESTIMATE_YEAR = 2023
ESTIMATE_YEARS = (CURRENT_ESTIMATE_YEAR, PRIOR_ESTIMATE_YEAR)


class JurisdictionType(Enum):
    """Kind of jurisdiction a caller can query."""
    PLACE = "place"
    COUNTY = "county"

    @property
    def label(self) -> str:
        return "City/Place" if self is JurisdictionType.PLACE else "County"


class MetricKind(Enum):
    """Value a selection asks for. Declared in report column order."""
    CODE = "code"
    POP_PRIOR = "pop2023"
    POP_CURRENT = "pop2024"

    @property
    def year(self) -> Optional[int]:
        """Estimate year backing this metric, or None for the identifier."""
        return _METRIC_YEARS[self]

    @property
    def label(self) -> str:
        return _METRIC_LABELS[self]

    @property
    def column(self) -> str:
        return _METRIC_COLUMNS[self]


_METRIC_YEARS = {
    MetricKind.CODE: None,
    MetricKind.POP_PRIOR: PRIOR_ESTIMATE_YEAR,
    MetricKind.POP_CURRENT: CURRENT_ESTIMATE_YEAR,
}

_METRIC_LABELS = {
    MetricKind.CODE: "GEOID / FIPS code",
    MetricKind.POP_PRIOR: f"Population estimate ({PRIOR_ESTIMATE_YEAR})",
    MetricKind.POP_CURRENT: f"Population estimate ({CURRENT_ESTIMATE_YEAR})",
}

_METRIC_COLUMNS = {
    MetricKind.CODE: "GEOID / FIPS",
    MetricKind.POP_PRIOR: f"Population ({PRIOR_ESTIMATE_YEAR})",
    MetricKind.POP_CURRENT: f"Population ({CURRENT_ESTIMATE_YEAR})",
}


class SessionStatus(Enum):
    """Lifecycle of a query session's indices."""
    IDLE = "idle"            # nothing loaded yet
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"        # last load raised DataLoadError
    CLOSED = "closed"        # owner went away, late results are discarded
