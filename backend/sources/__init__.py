"""CSV sources for the places and counties datasets."""

from enum import Enum, auto
from typing import Sequence
from urllib.parse import urlparse

from .base_source import BaseCSVSource
from .file_source import FileCSVSource
from .http_source import HttpCSVSource

PLACE_COLUMNS = ['STNAME', 'STATE', 'NAME', 'PLACE', 'SUMLEV', 'POPESTIMATE2024']
COUNTY_COLUMNS = ['STNAME', 'STATE', 'CTYNAME', 'COUNTY', 'SUMLEV', 'POPESTIMATE2024']


class SourceKind(Enum):
    """Classification of dataset locations."""
    FILE = auto()
    HTTP = auto()


def classify_location(location: str) -> SourceKind:
    """Classify a dataset location by URL scheme."""
    scheme = urlparse(location).scheme.lower()
    if scheme in ('http', 'https'):
        return SourceKind.HTTP
    return SourceKind.FILE


def build_source(
    location: str,
    required_columns: Sequence[str] = (),
    encoding: str = "latin-1",
    timeout: float = 60.0,
) -> BaseCSVSource:
    """Get the appropriate source for a location."""
    if classify_location(location) is SourceKind.HTTP:
        return HttpCSVSource(location, required_columns=required_columns, encoding=encoding, timeout=timeout)
    return FileCSVSource(location, required_columns=required_columns, encoding=encoding)


__all__ = [
    'BaseCSVSource',
    'FileCSVSource',
    'HttpCSVSource',
    'SourceKind',
    'classify_location',
    'build_source',
    'PLACE_COLUMNS',
    'COUNTY_COLUMNS',
]
