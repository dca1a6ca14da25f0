"""
Command-line front end for querying census jurisdictions.

Usage:
    python query_tool.py --states
    python query_tool.py --options 06 place
    python query_tool.py --select 06 place 0600002 pop2024 --select 06 county 06003 code
    python query_tool.py --select California county 06003 pop2023 --export results.csv
    python query_tool.py --stats
"""

import asyncio
from typing import List, Optional, Sequence
import argparse
import logging
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from models.enums import JurisdictionType, MetricKind
from models.errors import DataLoadError, UnknownJurisdiction
from models.selection import StateEntry
from session import QuerySession
from utils.config import Settings

logger = logging.getLogger(__name__)


class QueryTool:
    """Runs CLI actions against a loaded QuerySession."""

    def __init__(self, session: QuerySession):
        self.session = session

    def resolve_state(self, state: str) -> StateEntry:
        entry = self.session.find_state(state)
        if entry is None:
            raise ValueError(f"Unknown state: {state!r}")
        return entry

    def print_states(self):
        print("\n" + "=" * 60)
        print("STATES")
        print("=" * 60)
        for entry in self.session.states:
            print(f"  {entry.code}  {entry.name}")

    def print_options(self, state: str, jurisdiction_type: str):
        entry = self.resolve_state(state)
        jurisdiction_type = JurisdictionType(jurisdiction_type)
        options = self.session.options_for(entry.code, jurisdiction_type)

        print("\n" + "=" * 60)
        print(f"{jurisdiction_type.label.upper()} OPTIONS: {entry.name}")
        print("=" * 60)
        if not options:
            print("  (none)")
        for option in options:
            print(f"  {option.code}  {option.label}")

    def run_selections(self, choices: Sequence[Sequence[str]], export: Optional[str] = None):
        """Record each (state, type, code, metric) choice in order and print the report."""
        for state, jurisdiction_type, code, metric in choices:
            entry = self.resolve_state(state)
            selection = self.session.add_selection(entry.code, jurisdiction_type, code, metric)
            logger.info(f"Added {selection.display_name}: {selection.value}")

        report = self.session.report()

        print("\n" + "=" * 60)
        print("RESULTS")
        print("=" * 60)
        print(report.render_text())

        if export:
            report.export_csv(export)
            print(f"\nResults exported to: {export}")

    def print_stats(self):
        stats = self.session.index.get_statistics()

        print("\n" + "=" * 60)
        print("DATASET STATISTICS")
        print("=" * 60)
        print(f"States:    {stats['states']}")
        print(f"Places:    {stats['places']}")
        print(f"Counties:  {stats['counties']}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Look up population estimates and GEOID/FIPS codes for U.S. places and counties',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Jurisdiction types: {', '.join(t.value for t in JurisdictionType)}
Metrics:            {', '.join(m.value for m in MetricKind)}

Examples:
  python query_tool.py --states
  python query_tool.py --options California place
  python query_tool.py --select 06 place 0600002 pop2024 --export results.csv
        """
    )

    parser.add_argument('--places', help='Places CSV path or URL (env PLACES_CSV_SOURCE)')
    parser.add_argument('--counties', help='Counties CSV path or URL (env COUNTIES_CSV_SOURCE)')
    parser.add_argument('--encoding', help='CSV text encoding (env CENSUS_CSV_ENCODING)')
    parser.add_argument('--timeout', type=float, help='Download timeout in seconds')
    parser.add_argument('--log-level', help='Logging level (env LOG_LEVEL)')

    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument('--states', action='store_true', help='List states')
    action.add_argument('--options', nargs=2, metavar=('STATE', 'TYPE'),
                        help='List jurisdictions of TYPE in STATE (code or name)')
    action.add_argument('--select', nargs=4, action='append',
                        metavar=('STATE', 'TYPE', 'CODE', 'METRIC'),
                        help='Add a selection (repeatable), then print the report')
    action.add_argument('--stats', action='store_true', help='Show dataset statistics')

    parser.add_argument('--export', help='Export the report to a CSV file (with --select)')
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    args = build_parser().parse_args(argv)

    settings = Settings.from_env(
        places_source=args.places,
        counties_source=args.counties,
        encoding=args.encoding,
        fetch_timeout=args.timeout,
        log_level=args.log_level,
    )

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    session = QuerySession(settings)
    try:
        await session.load()
    except DataLoadError as e:
        print(f"Error: Failed to load Census data files: {e}")
        return 1

    tool = QueryTool(session)
    try:
        if args.states:
            tool.print_states()
        elif args.options:
            tool.print_options(*args.options)
        elif args.select:
            tool.run_selections(args.select, export=args.export)
        elif args.stats:
            tool.print_stats()
    except (ValueError, UnknownJurisdiction) as e:
        print(f"Error: {e}")
        return 1
    finally:
        session.close()

    return 0


if __name__ == '__main__':
    sys.exit(asyncio.run(main()))
