"""Exceptions raised by the jurisdiction query engine."""

from typing import Optional

from .enums import JurisdictionType


class CensusQueryError(Exception):
    """Base class for engine errors."""


class DataLoadError(CensusQueryError):
    """A dataset could not be fetched or decoded, so nothing was indexed."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class UnknownJurisdiction(CensusQueryError, LookupError):
    """A jurisdiction code is not in the index for its type."""

    def __init__(self, code: str, jurisdiction_type: JurisdictionType):
        super().__init__(f"No {jurisdiction_type.value} with code {code!r} in the index")
        self.code = code
        self.jurisdiction_type = jurisdiction_type
