"""In-memory store of selections and their aggregation into report rows."""

import uuid
from typing import Dict, List, Tuple, Union
import logging

from models.enums import JurisdictionType, MetricKind
from models.selection import ResultRow, Selection
from report import Report

logger = logging.getLogger(__name__)


class SelectionStore:
    """
    Ordered, session-scoped list of selections.

    Provides:
    - Append-only recording with unique identities
    - Removal by identity and clearing
    - Aggregation into one row per jurisdiction
    """

    def __init__(self):
        self._selections: List[Selection] = []

    def __len__(self) -> int:
        return len(self._selections)

    @property
    def selections(self) -> Tuple[Selection, ...]:
        """Selections in insertion order."""
        return tuple(self._selections)

    def record(
        self,
        state_name: str,
        state_code: str,
        jurisdiction_type: Union[JurisdictionType, str],
        jurisdiction_name: str,
        jurisdiction_code: str,
        metric: Union[MetricKind, str],
        metric_label: str,
        value: str,
    ) -> Selection:
        """Append a new selection. Duplicates are kept as separate entries."""
        selection = Selection(
            identity=uuid.uuid4().hex,
            state_name=state_name,
            state_code=state_code,
            jurisdiction_type=JurisdictionType(jurisdiction_type),
            jurisdiction_name=jurisdiction_name,
            jurisdiction_code=jurisdiction_code,
            metric=MetricKind(metric),
            metric_label=metric_label,
            value=value,
        )
        self._selections.append(selection)
        logger.debug(f"Recorded {selection.identity}: {selection.display_name} = {value}")
        return selection

    def remove(self, identity: str):
        """Remove the selection with this identity; no-op if absent."""
        before = len(self._selections)
        self._selections = [s for s in self._selections if s.identity != identity]
        if len(self._selections) == before:
            logger.debug(f"No selection with identity {identity} to remove")
        else:
            logger.debug(f"Removed selection {identity}")

    def clear(self):
        self._selections = []
        logger.debug("Cleared all selections")

    def aggregate(self) -> List[ResultRow]:
        """
        Group selections into one row per (state, type, jurisdiction code).

        Groups appear in the order they were first selected. A later selection
        of the same metric for the same jurisdiction overwrites the slot.
        """
        rows: Dict[Tuple[str, JurisdictionType, str], ResultRow] = {}

        for selection in self._selections:
            row = rows.get(selection.group_key)
            if row is None:
                row = ResultRow(
                    state_name=selection.state_name,
                    jurisdiction_type=selection.jurisdiction_type,
                    jurisdiction_name=selection.jurisdiction_name,
                    jurisdiction_code=selection.jurisdiction_code,
                )
                rows[selection.group_key] = row
            row.values[selection.metric] = selection.value

        return list(rows.values())

    def metric_columns(self) -> List[MetricKind]:
        """Metric kinds present in any selection, in column order."""
        present = {selection.metric for selection in self._selections}
        return [metric for metric in MetricKind if metric in present]

    def report(self) -> Report:
        return Report(rows=self.aggregate(), metrics=self.metric_columns())
