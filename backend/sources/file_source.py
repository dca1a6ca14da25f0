"""Source for CSV files on the local filesystem."""

import asyncio
from pathlib import Path
from typing import Dict, List

from .base_source import BaseCSVSource
from models.errors import DataLoadError


class FileCSVSource(BaseCSVSource):
    """Reads a local CSV file in a worker thread so loads can overlap."""

    SOURCE_NAME = "file"

    async def fetch_rows(self) -> List[Dict[str, str]]:
        payload = await asyncio.to_thread(self._read_bytes)
        return self.parse_text(self.decode(payload))

    def _read_bytes(self) -> bytes:
        path = Path(self.location)
        try:
            return path.read_bytes()
        except OSError as e:
            raise DataLoadError(f"CSV file not found or unreadable: {path}", source=self.location) from e
