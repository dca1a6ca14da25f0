"""Abstract base class for all census CSV sources."""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence
import csv
import io
import logging

from models.errors import DataLoadError

logger = logging.getLogger(__name__)


class BaseCSVSource(ABC):
    """Abstract base class for a dataset location that yields decoded CSV rows."""

    SOURCE_NAME: str = "base"

    def __init__(
        self,
        location: str,
        required_columns: Sequence[str] = (),
        encoding: str = "latin-1",
    ):
        """
        Initialize source.

        Args:
            location: File path or URL of the CSV file
            required_columns: Columns that must appear in the header
            encoding: Text encoding of the file
        """
        self.location = location
        self.required_columns = list(required_columns)
        self.encoding = encoding

    @abstractmethod
    async def fetch_rows(self) -> List[Dict[str, str]]:
        """
        Fetch and decode every row of the dataset.

        Returns:
            List of dict rows keyed by header name

        Raises:
            DataLoadError: If the data cannot be fetched or decoded
        """
        pass

    def decode(self, payload: bytes) -> str:
        try:
            return payload.decode(self.encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise DataLoadError(
                f"Could not decode {self.location} as {self.encoding}: {e}",
                source=self.location,
            ) from e

    def parse_text(self, text: str) -> List[Dict[str, str]]:
        """Parse CSV text, validating the header and skipping blank lines."""
        reader = csv.DictReader(io.StringIO(text.lstrip('\ufeff')))

        try:
            fieldnames = reader.fieldnames
        except csv.Error as e:
            raise DataLoadError(f"Malformed CSV header in {self.location}: {e}", source=self.location) from e

        if not fieldnames:
            raise DataLoadError(f"No CSV header found in {self.location}", source=self.location)

        missing = set(self.required_columns) - set(fieldnames)
        if missing:
            raise DataLoadError(
                f"CSV {self.location} missing required columns: {sorted(missing)}",
                source=self.location,
            )

        rows = []
        try:
            for row in reader:
                # Skip empty rows
                if not any(value and value.strip() for value in row.values() if isinstance(value, str)):
                    continue
                rows.append(row)
        except csv.Error as e:
            raise DataLoadError(
                f"Malformed CSV in {self.location} near line {reader.line_num}: {e}",
                source=self.location,
            ) from e

        logger.info(f"[{self.SOURCE_NAME}] Read {len(rows)} rows from {self.location}")
        return rows
