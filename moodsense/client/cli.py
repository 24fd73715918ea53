"""
Mood Sense CLI
==============
Command-line front end for the journal.

    moodsense submit --scale 4 "feeling okay today"
    moodsense history --chart ~/mood.png
    moodsense ping

Notifications go to stderr as `Title: message`. Exit status is 0 when the
action succeeded and 1 otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from moodsense.client.api import InsightClient, InsightRequestError
from moodsense.client.chart import render_trend_chart
from moodsense.client.journal import MoodJournal
from moodsense.client.repository import StoredMoodHistoryRepository
from moodsense.client.storage import FileKeyValueStore
from moodsense.config import ClientSettings, get_client_settings
from moodsense.models.mood import MAX_SCALE, MIN_SCALE

logger = logging.getLogger(__name__)


def _print_notification(title: str, message: str) -> None:
    print(f"{title}: {message}", file=sys.stderr)


def _scale_arg(value: str) -> int:
    try:
        scale = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid scale: {value!r}") from exc
    if not MIN_SCALE <= scale <= MAX_SCALE:
        raise argparse.ArgumentTypeError(f"scale must be between {MIN_SCALE} and {MAX_SCALE}")
    return scale


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="moodsense", description="Mood Sense journal")
    parser.add_argument("--api-url", help="Relay base URL (default: MOODSENSE_API_BASE_URL)")
    parser.add_argument("--data-dir", type=Path, help="Where the history is stored")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    submit = sub.add_parser("submit", help="Record a mood and get an insight")
    submit.add_argument("--scale", type=_scale_arg, default=3, help="Mood 1-5 (default 3)")
    submit.add_argument("description", help="How are you feeling today?")

    history = sub.add_parser("history", help="Show past entries")
    history.add_argument("--chart", type=Path, help="Also render the trend chart to this PNG")

    sub.add_parser("ping", help="Check that the relay is running")
    return parser


def build_journal(settings: ClientSettings, api_url: Optional[str] = None, data_dir: Optional[Path] = None) -> MoodJournal:
    store = FileKeyValueStore(data_dir or settings.data_dir)
    client = InsightClient(api_url or settings.api_base_url, timeout=settings.request_timeout_seconds)
    return MoodJournal(
        StoredMoodHistoryRepository(store),
        client,
        notify=_print_notification,
    )


async def _submit(journal: MoodJournal, scale: int, description: str) -> int:
    await journal.load_history()
    journal.scale = scale
    journal.description = description
    entry = await journal.submit()
    if entry is None:
        return 1
    print(journal.current_insight)
    return 0


async def _history(journal: MoodJournal, chart: Optional[Path]) -> int:
    await journal.load_history()
    journal.toggle_history()
    view = journal.history_view()
    if not view.entries:
        print("No entries yet.")
    for text in view.entries:
        print(text)
        print()
    if chart is not None:
        written = render_trend_chart(view.trend, chart.expanduser())
        if written is None:
            print("Not enough entries for a trend chart.", file=sys.stderr)
        else:
            print(f"Trend chart written to {written}")
    return 0


async def _ping(client: InsightClient) -> int:
    try:
        message = await client.health()
    except InsightRequestError as exc:
        _print_notification("Error", str(exc))
        return 1
    print(message)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    settings = get_client_settings()
    logger.debug("Running %s against %s", args.command, args.api_url or settings.api_base_url)

    if args.command == "ping":
        client = InsightClient(args.api_url or settings.api_base_url, timeout=settings.request_timeout_seconds)
        return asyncio.run(_ping(client))

    journal = build_journal(settings, api_url=args.api_url, data_dir=args.data_dir)
    if args.command == "submit":
        return asyncio.run(_submit(journal, args.scale, args.description))
    return asyncio.run(_history(journal, args.chart))


if __name__ == "__main__":
    sys.exit(main())
