"""Runtime settings loaded from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_PLACES_SOURCE = "data/sub-est2024.csv"
DEFAULT_COUNTIES_SOURCE = "data/co-est2024-alldata.csv"
DEFAULT_ENCODING = "latin-1"   # Census Bureau CSV releases are Latin-1
DEFAULT_TIMEOUT = 60.0
DEFAULT_LOG_LEVEL = "INFO"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Where the two datasets live and how to read them."""
    places_source: str = DEFAULT_PLACES_SOURCE
    counties_source: str = DEFAULT_COUNTIES_SOURCE
    encoding: str = DEFAULT_ENCODING
    fetch_timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(
        cls,
        places_source: Optional[str] = None,
        counties_source: Optional[str] = None,
        encoding: Optional[str] = None,
        fetch_timeout: Optional[float] = None,
        log_level: Optional[str] = None,
        dotenv: bool = True,
    ) -> "Settings":
        """
        Build settings from explicit values, then environment, then defaults.

        Args:
            places_source: Override for PLACES_CSV_SOURCE
            counties_source: Override for COUNTIES_CSV_SOURCE
            encoding: Override for CENSUS_CSV_ENCODING
            fetch_timeout: Override for FETCH_TIMEOUT_SECONDS
            log_level: Override for LOG_LEVEL
            dotenv: Whether to read a .env file first
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        return cls(
            places_source=places_source or os.getenv('PLACES_CSV_SOURCE', DEFAULT_PLACES_SOURCE),
            counties_source=counties_source or os.getenv('COUNTIES_CSV_SOURCE', DEFAULT_COUNTIES_SOURCE),
            encoding=encoding or os.getenv('CENSUS_CSV_ENCODING', DEFAULT_ENCODING),
            fetch_timeout=(
                fetch_timeout if fetch_timeout is not None
                else _env_float('FETCH_TIMEOUT_SECONDS', DEFAULT_TIMEOUT)
            ),
            log_level=(log_level or os.getenv('LOG_LEVEL', DEFAULT_LOG_LEVEL)).upper(),
        )
