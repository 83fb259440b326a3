"""Command-line access to the inquiry audit trail.

Usage::

    appointments-audit --inquiry 3f2a... --format json
    appointments-audit --actor seller-1 --last 7d
    appointments-audit --property prop-9 --event-type action_refused
"""

from __future__ import annotations

import argparse
import json
from contextlib import closing
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from appointments.audit.models import EventType
from appointments.audit.store import init_audit_db, query_audit_trail

_DURATION_UNITS = {"h": "hours", "d": "days", "w": "weeks"}

# (header, width) per table column.
_TABLE_COLUMNS = (
    ("Timestamp", 20),
    ("Event", 20),
    ("Inquiry", 14),
    ("Actor", 14),
    ("Action", 16),
    ("Status", 32),
)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for audit trail queries."""
    parser = argparse.ArgumentParser(
        prog="appointments-audit",
        description="Query the appointment audit trail",
    )

    filters = parser.add_argument_group("filters")
    filters.add_argument("--inquiry", help="Inquiry id")
    filters.add_argument("--property", dest="property_id", help="Property id")
    filters.add_argument("--actor", help="Acting user id")
    filters.add_argument(
        "--event-type",
        choices=[e.value for e in EventType],
        help="Event type",
    )
    filters.add_argument("--from-date", help="Start date (YYYY-MM-DD)")
    filters.add_argument("--to-date", help="End date (YYYY-MM-DD)")
    filters.add_argument("--last", help='Only entries newer than e.g. "24h", "7d", "2w"')

    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        dest="output_format",
    )
    parser.add_argument("--limit", type=int, default=50)
    parser.add_argument("--db", default="data/audit.db", help="Audit database path")
    return parser


def parse_last_duration(last: str) -> str:
    """Turn a ``--last`` value into the timestamp it reaches back to.

    Raises:
        ValueError: If *last* is not a whole number followed by h, d or w.
    """
    amount, unit = last[:-1], last[-1:]
    if unit not in _DURATION_UNITS or not amount.isdigit():
        raise ValueError(
            f"Unrecognized duration format: {last!r}. Use e.g. 24h, 7d or 2w."
        )
    since = datetime.now(tz=UTC) - timedelta(**{_DURATION_UNITS[unit]: int(amount)})
    return since.strftime("%Y-%m-%dT%H:%M:%SZ")


def _status_change(row: dict[str, Any]) -> str:
    before, after = row.get("from_status"), row.get("to_status")
    if before:
        return f"{before} -> {after or '-'}"
    return after or ""


def _fit(value: Any, width: int) -> str:
    text = "" if value is None else str(value)
    if len(text) > width:
        text = text[: width - 3] + "..."
    return text.ljust(width)


def format_table(results: list[dict[str, Any]]) -> str:
    """Render audit rows as a fixed-width text table."""
    if not results:
        return "No results found."

    header = "  ".join(_fit(name, width) for name, width in _TABLE_COLUMNS)
    lines = [header, "-" * len(header)]
    for row in results:
        cells = (
            row.get("timestamp"),
            row.get("event_type"),
            row.get("inquiry_id"),
            row.get("actor_id"),
            row.get("action"),
            _status_change(row),
        )
        lines.append(
            "  ".join(_fit(cell, width) for cell, (_, width) in zip(cells, _TABLE_COLUMNS, strict=True))
        )
    return "\n".join(lines)


def format_json(results: list[dict[str, Any]]) -> str:
    return json.dumps(results, indent=2)


def main(argv: list[str] | None = None) -> None:
    """Entry point for ``appointments-audit``."""
    args = build_parser().parse_args(argv)

    from_date = parse_last_duration(args.last) if args.last else args.from_date

    db_path = Path(args.db)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with closing(init_audit_db(db_path)) as conn:
        results = query_audit_trail(
            conn,
            inquiry_id=args.inquiry,
            property_id=args.property_id,
            actor_id=args.actor,
            from_date=from_date,
            to_date=args.to_date,
            event_type=args.event_type,
            limit=args.limit,
        )

    render = format_json if args.output_format == "json" else format_table
    print(render(results))


if __name__ == "__main__":
    main()
