"""
CLI entry point for running availability calculations on a scenario file.

Usage:
    python -m bookable.cli slots --scenario scenario.json --date 2026-03-02
    python -m bookable.cli slots --scenario scenario.json --date 2026-03-02 --duration 60
    python -m bookable.cli month --scenario scenario.json --year 2026 --month 3 --verbose

A scenario file holds ``owner_timezone``, ``visitor_timezone``,
``schedule`` (list of day rules, default weekdays 11:00-19:30),
``events`` and ``config``.
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from bookable.availability.calculate import AvailabilityCalculator
from bookable.logging_context import get_request_logger, request_scope

logger = get_request_logger(__name__)


class Scenario(BaseModel):
    """Inputs for one CLI run, as stored in a JSON file."""

    owner_timezone: str = "UTC"
    visitor_timezone: str = "UTC"
    schedule: Optional[list[dict[str, Any]]] = None
    events: list[dict[str, Any]] = Field(default_factory=list)
    config: dict[str, Any] = Field(default_factory=dict)


def load_scenario(path: Path) -> Scenario:
    return Scenario.model_validate_json(path.read_text(encoding="utf-8"))


def _add_now_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="Override current time (ISO 8601).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute bookable slots or a month overview from a scenario file."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    slots = sub.add_parser("slots", help="List bookable slot labels for one date.")
    slots.add_argument("--scenario", type=str, required=True, help="Path to scenario JSON.")
    slots.add_argument(
        "--date",
        type=date.fromisoformat,
        required=True,
        help="Visitor-local date (YYYY-MM-DD).",
    )
    slots.add_argument(
        "--duration",
        type=str,
        default=None,
        help="Meeting length, e.g. 30 or 45min.",
    )
    _add_now_argument(slots)

    month = sub.add_parser("month", help="Show per-date availability for a month.")
    month.add_argument("--scenario", type=str, required=True, help="Path to scenario JSON.")
    month.add_argument("--year", type=int, required=True)
    month.add_argument("--month", type=int, required=True)
    _add_now_argument(month)

    return parser


def _run(args: argparse.Namespace) -> Any:
    scenario_path = Path(args.scenario)
    if not scenario_path.exists():
        logger.error("Scenario file not found: %s", scenario_path)
        sys.exit(1)

    try:
        scenario = load_scenario(scenario_path)
        calculator = AvailabilityCalculator(scenario.schedule)
    except ValidationError as exc:
        logger.error("Invalid scenario %s: %s", scenario_path, exc)
        sys.exit(1)

    logger.debug("Running %s for %s", args.command, scenario_path)

    if args.command == "slots":
        return calculator.available_slots(
            args.date,
            args.duration,
            scenario.visitor_timezone,
            scenario.owner_timezone,
            scenario.events,
            scenario.config,
            now=args.now,
        )

    try:
        return calculator.month_overview(
            args.year,
            args.month,
            scenario.owner_timezone,
            scenario.visitor_timezone,
            scenario.events,
            scenario.config,
            now=args.now,
        )
    except ValueError as exc:
        logger.error("Invalid month %s-%s: %s", args.year, args.month, exc)
        sys.exit(1)


def main(argv: Optional[list[str]] = None) -> None:
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # one ID for the whole run, shared by the calculator calls it makes
    with request_scope():
        result = _run(args)

    sys.stdout.write(json.dumps(result, indent=2) + "\n")


if __name__ == "__main__":
    main()
