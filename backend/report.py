"""Tabular rendering and CSV export of aggregated result rows."""

import csv
from dataclasses import dataclass, field
from typing import List
import logging

from models.enums import MetricKind
from models.selection import ResultRow

logger = logging.getLogger(__name__)

NO_VALUE = "—"
EMPTY_MESSAGE = "No selections yet. Add a selection above to see results."
BASE_HEADERS = ["State", "Type", "Jurisdiction"]


@dataclass
class Report:
    """Result rows plus the metric columns shown for every row."""
    rows: List[ResultRow] = field(default_factory=list)
    metrics: List[MetricKind] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.rows)

    def headers(self) -> List[str]:
        return BASE_HEADERS + [metric.column for metric in self.metrics]

    def as_table(self) -> List[List[str]]:
        """Display text for every row, with NO_VALUE in empty metric slots."""
        table = []
        for row in self.rows:
            cells = [row.state_name, row.jurisdiction_type.label, row.jurisdiction_name]
            cells.extend(row.value_for(metric) or NO_VALUE for metric in self.metrics)
            table.append(cells)
        return table

    def render_text(self) -> str:
        """Render a plain-text table for terminal output."""
        if not self.rows:
            return EMPTY_MESSAGE

        headers = self.headers()
        table = self.as_table()
        widths = [
            max(len(cells[i]) for cells in [headers] + table)
            for i in range(len(headers))
        ]

        lines = [
            "  ".join(header.ljust(width) for header, width in zip(headers, widths)).rstrip(),
            "  ".join("-" * width for width in widths),
        ]
        for cells in table:
            lines.append("  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip())
        return "\n".join(lines)

    def export_csv(self, output_path: str):
        """Export the report to a CSV file."""
        if not self.rows:
            logger.warning("No results to export")
            return

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(self.headers())
            writer.writerows(self.as_table())

        logger.info(f"Exported {len(self.rows)} rows to {output_path}")
