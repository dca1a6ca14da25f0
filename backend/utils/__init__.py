"""Utility modules for the jurisdiction query engine."""

from .geoid import pad_state, place_id, county_id
from .formatting import parse_estimate, format_population, collation_key
from .config import Settings

__all__ = [
    'pad_state',
    'place_id',
    'county_id',
    'parse_estimate',
    'format_population',
    'collation_key',
    'Settings',
]
