"""Data models for the jurisdiction query engine."""

from .enums import JurisdictionType, MetricKind, SessionStatus
from .census_record import CensusRecord, PlaceRecord, CountyRecord
from .selection import StateEntry, JurisdictionOption, Selection, ResultRow
from .errors import CensusQueryError, DataLoadError, UnknownJurisdiction

__all__ = [
    'JurisdictionType',
    'MetricKind',
    'SessionStatus',
    'CensusRecord',
    'PlaceRecord',
    'CountyRecord',
    'StateEntry',
    'JurisdictionOption',
    'Selection',
    'ResultRow',
    'CensusQueryError',
    'DataLoadError',
    'UnknownJurisdiction',
]
