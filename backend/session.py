"""
Query session: owns the loaded indices and the user's selections.

Usage:
    session = QuerySession(Settings.from_env())
    await session.load()
    options = session.options_for("06", "place")
    session.add_selection("06", "place", options[0].code, "pop2024")
    print(session.report().render_text())
"""

import asyncio
from typing import Iterable, List, Mapping, Optional, Tuple, Union
import logging

from models.enums import JurisdictionType, MetricKind, SessionStatus
from models.errors import DataLoadError
from models.selection import JurisdictionOption, Selection, StateEntry
from query_facade import JurisdictionQuery
from record_indexer import JurisdictionIndex, RecordIndexer
from report import Report
from selection_store import SelectionStore
from sources import COUNTY_COLUMNS, PLACE_COLUMNS, BaseCSVSource, build_source
from utils.config import Settings
from utils.geoid import pad_state

logger = logging.getLogger(__name__)


class QuerySession:
    """
    Engine object for one caller.

    Features:
    - Concurrent load of both datasets, published all at once
    - Late results discarded once closed or superseded by a newer load
    - Load failures kept distinct from empty query results
    - Selection recording and report aggregation
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        places_source: Optional[BaseCSVSource] = None,
        counties_source: Optional[BaseCSVSource] = None,
    ):
        """
        Initialize session.

        Args:
            settings: Dataset locations and read options (env defaults if omitted)
            places_source: Explicit source for the places file
            counties_source: Explicit source for the counties file
        """
        self.settings = settings or Settings.from_env()
        self.places_source = places_source or build_source(
            self.settings.places_source,
            required_columns=PLACE_COLUMNS,
            encoding=self.settings.encoding,
            timeout=self.settings.fetch_timeout,
        )
        self.counties_source = counties_source or build_source(
            self.settings.counties_source,
            required_columns=COUNTY_COLUMNS,
            encoding=self.settings.encoding,
            timeout=self.settings.fetch_timeout,
        )

        self.selections = SelectionStore()

        self._query: Optional[JurisdictionQuery] = None
        self._status = SessionStatus.IDLE
        self._load_error: Optional[DataLoadError] = None
        self._generation = 0

    @classmethod
    def from_rows(
        cls,
        place_rows: Iterable[Mapping[str, Optional[str]]],
        county_rows: Iterable[Mapping[str, Optional[str]]],
        settings: Optional[Settings] = None,
    ) -> "QuerySession":
        """Build a ready session from rows that are already decoded."""
        session = cls(settings or Settings())
        session._publish(RecordIndexer.build(place_rows, county_rows))
        return session

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def load_error(self) -> Optional[DataLoadError]:
        return self._load_error

    @property
    def is_ready(self) -> bool:
        return self._status is SessionStatus.READY

    @property
    def index(self) -> JurisdictionIndex:
        return self._require_query().index

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """
        Fetch both datasets concurrently and replace the indices.

        Returns:
            True if new indices were published, False if the results arrived
            after close() or after a newer load() started and were discarded

        Raises:
            DataLoadError: If either dataset fails (for the current load only)
        """
        if self._status is SessionStatus.CLOSED:
            logger.warning("Ignoring load() on a closed session")
            return False

        self._generation += 1
        generation = self._generation
        self._status = SessionStatus.LOADING
        logger.info(
            f"Loading census data from {self.places_source.location} "
            f"and {self.counties_source.location}"
        )

        try:
            place_rows, county_rows = await self._fetch_both()
        except DataLoadError as e:
            if not self._is_current(generation):
                logger.debug(f"Discarding failure of superseded load {generation}: {e}")
                return False
            logger.error(f"Failed to load census data: {e}")
            self._query = None
            self._load_error = e
            self._status = SessionStatus.FAILED
            raise

        if not self._is_current(generation):
            logger.debug(f"Discarding results of superseded load {generation}")
            return False

        self._publish(RecordIndexer.build(place_rows, county_rows))
        return True

    async def _fetch_both(self) -> Tuple[List[dict], List[dict]]:
        """
        Run both fetches concurrently.

        As soon as one fails, the other is cancelled and awaited so no
        download outlives the load that started it.
        """
        tasks = [
            asyncio.ensure_future(self.places_source.fetch_rows()),
            asyncio.ensure_future(self.counties_source.fetch_rows()),
        ]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        for task in tasks:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()
        return tasks[0].result(), tasks[1].result()

    def close(self):
        """Mark the session as torn down; any outstanding load is discarded."""
        self._generation += 1
        self._status = SessionStatus.CLOSED
        logger.debug("Session closed")

    def _is_current(self, generation: int) -> bool:
        return self._status is not SessionStatus.CLOSED and generation == self._generation

    def _publish(self, index: JurisdictionIndex):
        self._query = JurisdictionQuery(index)
        self._load_error = None
        self._status = SessionStatus.READY
        stats = index.get_statistics()
        logger.info(
            f"Session ready: {stats['states']} states, "
            f"{stats['places']} places, {stats['counties']} counties"
        )

    def _require_query(self) -> JurisdictionQuery:
        if self._load_error is not None:
            raise self._load_error
        if self._query is None:
            raise DataLoadError("Census data has not been loaded")
        return self._query

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def states(self) -> Tuple[StateEntry, ...]:
        return self.index.states

    def find_state(self, state: str) -> Optional[StateEntry]:
        """Find a state by FIPS code or by name (case-insensitive)."""
        index = self.index
        if state.strip().isdigit():
            return index.state(pad_state(state.strip()))
        wanted = state.strip().casefold()
        for entry in index.states:
            if entry.name.casefold() == wanted:
                return entry
        return None

    def options_for(
        self, state_code: str, jurisdiction_type: Union[JurisdictionType, str]
    ) -> List[JurisdictionOption]:
        return self._require_query().options_for(state_code, jurisdiction_type)

    def resolve(
        self,
        code: str,
        jurisdiction_type: Union[JurisdictionType, str],
        metric: Union[MetricKind, str],
    ) -> str:
        return self._require_query().resolve(code, jurisdiction_type, metric)

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def add_selection(
        self,
        state_code: str,
        jurisdiction_type: Union[JurisdictionType, str],
        jurisdiction_code: str,
        metric: Union[MetricKind, str],
    ) -> Selection:
        """
        Resolve a metric and record it as a selection.

        The jurisdiction name and code are taken from the indexed record.

        Raises:
            ValueError: If the state is not in the catalog
            UnknownJurisdiction: If the code is not indexed for the type
        """
        query = self._require_query()
        state = query.index.state(pad_state(state_code))
        if state is None:
            raise ValueError(f"Unknown state code: {state_code!r}")

        jurisdiction_type = JurisdictionType(jurisdiction_type)
        metric = MetricKind(metric)
        record = query.record_for(jurisdiction_code, jurisdiction_type)

        return self.selections.record(
            state_name=state.name,
            state_code=state.code,
            jurisdiction_type=jurisdiction_type,
            jurisdiction_name=record.name,
            jurisdiction_code=record.geoid,
            metric=metric,
            metric_label=metric.label,
            value=query.metric_value(record, metric),
        )

    def remove_selection(self, identity: str):
        self.selections.remove(identity)

    def clear_selections(self):
        self.selections.clear()

    def report(self) -> Report:
        return self.selections.report()
