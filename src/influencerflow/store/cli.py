"""CLI query interface for the communication log.

Queries outreach, replies and contract rows with filters by campaign,
creator, direction, message type, date range and a shorthand ``--last``
duration. Output formats: table (default) or JSON.

Usage::

    python -m influencerflow.store.cli --campaign 6f1c... --last 7d
    python -m influencerflow.store.cli --direction inbound --format json
"""

from __future__ import annotations

import argparse
import json
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from influencerflow.domain.types import Direction, MessageType
from influencerflow.store.communications import CommunicationLogStore
from influencerflow.store.schema import close_db, init_db


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for communication log queries.

    Returns:
        A configured :class:`argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(description="Query the InfluencerFlow communication log")

    parser.add_argument("--campaign", type=str, help="Filter by campaign ID")
    parser.add_argument("--creator", type=str, help="Filter by creator user ID")
    parser.add_argument(
        "--direction",
        type=str,
        choices=[d.value for d in Direction],
        help="Filter by direction",
    )
    parser.add_argument(
        "--message-type",
        type=str,
        choices=[t.value for t in MessageType],
        help="Filter by message type",
    )
    parser.add_argument("--from-date", type=str, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--to-date", type=str, help="End date (YYYY-MM-DD)")
    parser.add_argument(
        "--last",
        type=str,
        help='Shorthand duration (e.g., "7d", "24h", "30d")',
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["table", "json"],
        default="table",
        dest="output_format",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Maximum results (default: 50)",
    )
    parser.add_argument(
        "--db",
        type=str,
        default="data/influencerflow.db",
        help="Path to the database (default: data/influencerflow.db)",
    )

    return parser


def parse_last_duration(last: str) -> str:
    """Convert a shorthand duration to an ISO 8601 date string.

    Supported formats:
        - ``Nd`` -- N days ago (e.g., ``7d``)
        - ``Nh`` -- N hours ago (e.g., ``24h``)

    Args:
        last: Duration string like ``"7d"`` or ``"24h"``.

    Returns:
        ISO 8601 date-time string for the computed past time.

    Raises:
        ValueError: If the format is not recognized.
    """
    if not last or len(last) < 2:
        msg = f"Unrecognized duration format: {last!r}"
        raise ValueError(msg)

    unit = last[-1]
    try:
        value = int(last[:-1])
    except ValueError:
        msg = f"Unrecognized duration format: {last!r}"
        raise ValueError(msg) from None

    now = datetime.now(tz=UTC)
    if unit == "d":
        result = now - timedelta(days=value)
    elif unit == "h":
        result = now - timedelta(hours=value)
    else:
        msg = f"Unrecognized duration format: {last!r}. Use 'd' for days or 'h' for hours."
        raise ValueError(msg)

    return result.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_table(results: list[dict[str, Any]]) -> str:
    """Format log rows as a fixed-width table.

    Columns: Created, Channel, Direction, Type, Campaign, Subject.

    Args:
        results: Row dicts from ``CommunicationLogStore.query``.

    Returns:
        Table text with a header row, or a placeholder when empty.
    """
    if not results:
        return "No results found."

    headers = ["Created", "Channel", "Direction", "Type", "Campaign", "Subject"]
    widths = [27, 8, 9, 16, 12, 40]

    def truncate(value: Any, width: int) -> str:
        s = str(value or "")
        if len(s) > width:
            return s[: width - 3] + "..."
        return s

    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths, strict=True))
    lines = [header_line, "-" * len(header_line)]

    for row in results:
        cells = [
            truncate(row.get("created_at"), widths[0]),
            truncate(row.get("channel"), widths[1]),
            truncate(row.get("direction"), widths[2]),
            truncate(row.get("message_type"), widths[3]),
            truncate(row.get("campaign_id"), widths[4]),
            truncate(row.get("subject"), widths[5]),
        ]
        lines.append("  ".join(c.ljust(w) for c, w in zip(cells, widths, strict=True)))

    return "\n".join(lines)


def format_json(results: list[dict[str, Any]]) -> str:
    """Format log rows as pretty-printed JSON."""
    return json.dumps(results, indent=2)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, query the log and print the results."""
    args = build_parser().parse_args(argv)

    from_date = args.from_date
    if args.last:
        from_date = parse_last_duration(args.last)

    db_path = Path(args.db)
    if not db_path.exists():
        db_path.parent.mkdir(parents=True, exist_ok=True)
    db = init_db(db_path)

    try:
        results = CommunicationLogStore(db).query(
            campaign_id=args.campaign,
            creator_id=args.creator,
            direction=args.direction,
            message_type=args.message_type,
            from_date=from_date,
            to_date=args.to_date,
            limit=args.limit,
        )
        output = format_json(results) if args.output_format == "json" else format_table(results)
        print(output)
    finally:
        close_db(db)


if __name__ == "__main__":
    main()
