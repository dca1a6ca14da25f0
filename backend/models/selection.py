"""Selection and result row data models for the aggregated report."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .enums import JurisdictionType, MetricKind


@dataclass(frozen=True)
class StateEntry:
    """One state in the catalog."""
    name: str
    code: str


@dataclass(frozen=True)
class JurisdictionOption:
    """A jurisdiction a caller may pick for a state and type."""
    code: str
    label: str


@dataclass(frozen=True)
class Selection:
    """A single committed (jurisdiction, metric) choice."""
    identity: str
    state_name: str
    state_code: str
    jurisdiction_type: JurisdictionType
    jurisdiction_name: str
    jurisdiction_code: str
    metric: MetricKind
    metric_label: str
    value: str

    @property
    def group_key(self) -> Tuple[str, JurisdictionType, str]:
        """Rows of the report are keyed by state, type and jurisdiction code."""
        return (self.state_code, self.jurisdiction_type, self.jurisdiction_code)

    @property
    def display_name(self) -> str:
        """Human-readable name for logging."""
        return f"{self.jurisdiction_name}, {self.state_name} ({self.metric_label})"


@dataclass
class ResultRow:
    """One report row merging every selection made for a jurisdiction."""
    state_name: str
    jurisdiction_type: JurisdictionType
    jurisdiction_name: str
    jurisdiction_code: str
    values: Dict[MetricKind, str] = field(default_factory=dict)

    def value_for(self, metric: MetricKind) -> Optional[str]:
        return self.values.get(metric)
