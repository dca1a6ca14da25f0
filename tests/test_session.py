"""
Tests for session.py - concurrent loading, cancellation, atomic index
replacement and selections end to end.
"""
import asyncio

import pytest

from models.enums import JurisdictionType, MetricKind, SessionStatus
from models.errors import DataLoadError, UnknownJurisdiction
from models.selection import JurisdictionOption
from report import NO_VALUE
from session import QuerySession
from sources import BaseCSVSource
from utils.config import Settings


class StubSource(BaseCSVSource):
    """Returns fixed rows, optionally waiting on a gate first."""

    SOURCE_NAME = "stub"

    def __init__(self, rows=None, error=None, gate=None, started=None):
        super().__init__("stub://data")
        self.rows = rows or []
        self.error = error
        self.gate = gate
        self.started = started

    async def fetch_rows(self):
        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.rows)


def make_session(places, counties):
    return QuerySession(Settings(), places_source=places, counties_source=counties)


class TestLoad:

    def test_load_publishes_indices(self, place_rows, county_rows):
        session = make_session(StubSource(place_rows), StubSource(county_rows))
        assert session.status is SessionStatus.IDLE

        assert asyncio.run(session.load()) is True
        assert session.status is SessionStatus.READY
        assert session.is_ready
        assert [s.code for s in session.states] == ["06", "32", "35"]

    def test_loads_run_concurrently(self, place_rows, county_rows):
        async def scenario():
            places_started = asyncio.Event()
            counties_started = asyncio.Event()
            # Each source only finishes once the other has started
            places = StubSource(place_rows, gate=counties_started, started=places_started)
            counties = StubSource(county_rows, gate=places_started, started=counties_started)
            session = make_session(places, counties)
            return await asyncio.wait_for(session.load(), timeout=5)

        assert asyncio.run(scenario()) is True

    def test_query_before_load_fails(self, place_rows, county_rows):
        session = make_session(StubSource(place_rows), StubSource(county_rows))
        with pytest.raises(DataLoadError, match="not been loaded"):
            session.options_for("06", "place")

    def test_failure_is_distinct_from_empty(self, place_rows):
        error = DataLoadError("boom", source="stub://counties")
        session = make_session(StubSource(place_rows), StubSource(error=error))

        with pytest.raises(DataLoadError):
            asyncio.run(session.load())

        assert session.status is SessionStatus.FAILED
        assert session.load_error is error
        with pytest.raises(DataLoadError, match="boom"):
            session.options_for("06", "place")

    def test_failure_cancels_other_fetch(self, county_rows):
        class SlowSource(StubSource):
            cancelled = False

            async def fetch_rows(self):
                try:
                    await asyncio.sleep(5)
                except asyncio.CancelledError:
                    self.cancelled = True
                    raise
                return list(self.rows)

        async def scenario():
            slow = SlowSource(county_rows)
            session = make_session(StubSource(error=DataLoadError("boom")), slow)
            with pytest.raises(DataLoadError, match="boom"):
                await asyncio.wait_for(session.load(), timeout=2)
            others = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
            return slow, others

        slow, others = asyncio.run(scenario())
        assert slow.cancelled
        assert others == []

    def test_empty_datasets_load_successfully(self):
        session = make_session(StubSource([]), StubSource([]))
        asyncio.run(session.load())
        assert session.states == ()
        assert session.options_for("06", "place") == []

    def test_failed_reload_publishes_nothing(self, place_rows, county_rows):
        places = StubSource(place_rows)
        counties = StubSource(county_rows)
        session = make_session(places, counties)
        asyncio.run(session.load())

        counties.error = DataLoadError("gone")
        with pytest.raises(DataLoadError):
            asyncio.run(session.load())
        with pytest.raises(DataLoadError, match="gone"):
            session.states

        counties.error = None
        assert asyncio.run(session.load()) is True
        assert session.load_error is None
        assert len(session.states) == 3

    def test_close_discards_late_results(self, place_rows, county_rows):
        async def scenario():
            gate = asyncio.Event()
            session = make_session(StubSource(place_rows, gate=gate), StubSource(county_rows))
            task = asyncio.ensure_future(session.load())
            await asyncio.sleep(0)
            session.close()
            gate.set()
            return session, await task

        session, published = asyncio.run(scenario())
        assert published is False
        assert session.status is SessionStatus.CLOSED
        with pytest.raises(DataLoadError):
            session.states

    def test_close_discards_late_failure(self, place_rows):
        async def scenario():
            gate = asyncio.Event()
            session = make_session(StubSource(place_rows), StubSource(error=DataLoadError("late"), gate=gate))
            task = asyncio.ensure_future(session.load())
            await asyncio.sleep(0)
            session.close()
            gate.set()
            return session, await task

        session, published = asyncio.run(scenario())
        assert published is False
        assert session.load_error is None

    def test_load_after_close_is_ignored(self, place_rows, county_rows):
        session = make_session(StubSource(place_rows), StubSource(county_rows))
        session.close()
        assert asyncio.run(session.load()) is False

    def test_reload_replaces_indices_atomically(self, place_rows, county_rows):
        async def scenario():
            places = StubSource(place_rows)
            counties = StubSource(county_rows)
            session = make_session(places, counties)
            await session.load()

            gate = asyncio.Event()
            places.rows = [{"SUMLEV": "162", "STATE": "06", "PLACE": "99999", "NAME": "Newtown",
                            "STNAME": "California", "POPESTIMATE2024": "7"}]
            places.gate = gate
            task = asyncio.ensure_future(session.load())
            await asyncio.sleep(0)

            # Old indices stay visible until the new set is complete
            during = [o.label for o in session.options_for("06", "place")]
            gate.set()
            await task
            after = [o.label for o in session.options_for("06", "place")]
            return during, after

        during, after = asyncio.run(scenario())
        assert during == ["Alameda city", "Alpine", "Anaheim city"]
        assert after == ["Newtown"]

    def test_superseded_load_is_discarded(self, place_rows, county_rows):
        async def scenario():
            slow_gate = asyncio.Event()
            session = make_session(StubSource(place_rows, gate=slow_gate), StubSource(county_rows))
            first = asyncio.ensure_future(session.load())
            await asyncio.sleep(0)

            # The newer load finishes while the first is still waiting
            session.places_source = StubSource([])
            second = await session.load()
            slow_gate.set()
            return session, await first, second

        session, first, second = asyncio.run(scenario())
        assert second is True
        assert first is False
        assert session.options_for("06", "place") == []


class TestQueriesAndSelections:

    @pytest.fixture
    def session(self, place_rows, county_rows):
        return QuerySession.from_rows(place_rows, county_rows)

    def test_from_rows_is_ready(self, session):
        assert session.status is SessionStatus.READY

    def test_alpine_scenario(self, session):
        assert session.options_for("06", "place")[1] == JurisdictionOption(code="0600002", label="Alpine")
        assert session.resolve("0600002", "place", "pop2024") == "5,000"

    def test_find_state(self, session):
        assert session.find_state("6").name == "California"
        assert session.find_state("new mexico").code == "35"
        assert session.find_state("Atlantis") is None

    def test_add_selection_uses_record_fields(self, session):
        selection = session.add_selection("6", "county", "06005", "code")
        assert selection.state_name == "California"
        assert selection.state_code == "06"
        assert selection.jurisdiction_type is JurisdictionType.COUNTY
        assert selection.jurisdiction_name == "Amador County"
        assert selection.jurisdiction_code == "06005"
        assert selection.value == "06005"
        assert selection.metric_label == "GEOID / FIPS code"

    def test_add_selection_unknown_code(self, session):
        with pytest.raises(UnknownJurisdiction):
            session.add_selection("06", "place", "0612345", "pop2024")
        assert len(session.selections) == 0

    def test_add_selection_unknown_state(self, session):
        with pytest.raises(ValueError):
            session.add_selection("99", "place", "0600002", "pop2024")

    def test_report_groups_and_marks_missing(self, session):
        session.add_selection("06", "place", "0600002", "code")
        session.add_selection("06", "place", "0600002", "pop2024")
        session.add_selection("35", "county", "35013", "pop2023")

        report = session.report()
        assert report.metrics == [MetricKind.CODE, MetricKind.POP_PRIOR, MetricKind.POP_CURRENT]
        assert report.as_table() == [
            ["California", "City/Place", "Alpine", "0600002", NO_VALUE, "5,000"],
            ["New Mexico", "County", "Doña Ana County", NO_VALUE, "225,210", NO_VALUE],
        ]

    def test_remove_and_clear(self, session):
        first = session.add_selection("06", "place", "0600002", "pop2024")
        session.add_selection("06", "place", "0600002", "pop2023")
        session.remove_selection(first.identity)
        assert session.report().metrics == [MetricKind.POP_PRIOR]

        session.clear_selections()
        assert not session.report()

    def test_selections_survive_reload(self, place_rows, county_rows):
        session = make_session(StubSource(place_rows), StubSource(county_rows))
        asyncio.run(session.load())
        session.add_selection("06", "place", "0600002", "pop2024")
        asyncio.run(session.load())
        assert len(session.selections) == 1
