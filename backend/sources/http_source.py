"""Source for CSV files served over HTTP(S)."""

import asyncio
import logging
from typing import Dict, List, Sequence

import aiohttp

from .base_source import BaseCSVSource
from models.errors import DataLoadError

logger = logging.getLogger(__name__)


class HttpCSVSource(BaseCSVSource):
    """Downloads a CSV file with aiohttp."""

    SOURCE_NAME = "http"

    def __init__(
        self,
        location: str,
        required_columns: Sequence[str] = (),
        encoding: str = "latin-1",
        timeout: float = 60.0,
    ):
        super().__init__(location, required_columns=required_columns, encoding=encoding)
        self.timeout = timeout

    async def fetch_rows(self) -> List[Dict[str, str]]:
        payload = await self._download()
        return self.parse_text(self.decode(payload))

    async def _download(self) -> bytes:
        """Download the raw file body."""
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    self.location, timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status != 200:
                        raise DataLoadError(
                            f"Failed to download {self.location}: HTTP {response.status}",
                            source=self.location,
                        )
                    content = await response.read()
                    logger.info(f"Downloaded {len(content)} bytes from {self.location}")
                    return content
        except asyncio.TimeoutError as e:
            # Includes aiohttp.ServerTimeoutError, which is also a ClientError
            raise DataLoadError(
                f"Timed out after {self.timeout}s downloading {self.location}",
                source=self.location,
            ) from e
        except aiohttp.ClientError as e:
            raise DataLoadError(f"Error downloading {self.location}: {e}", source=self.location) from e
