import requests
from datetime import date as Date
from typing import Any, Dict, List, Optional
import argparse
import calendar as cal
import os
import sys

from events_prompt import format_event_date

BASE_URL = os.environ.get("EVENTS_API_URL", "http://localhost:8000")
WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def render_month(year: int, month: int, selected: Optional[int] = None) -> str:
    """Text month grid, Sunday first, with the selected day in brackets."""
    first_weekday, days_in_month = cal.monthrange(year, month)
    cells = ["    "] * ((first_weekday + 1) % 7)
    for day in range(1, days_in_month + 1):
        cells.append(f"[{day:>2}]" if day == selected else f" {day:>2} ")

    lines = [f"{cal.month_name[month]} {year}".center(28), "".join(f"{d:^4}" for d in WEEKDAYS)]
    for i in range(0, len(cells), 7):
        lines.append("".join(cells[i:i + 7]).rstrip())
    return "\n".join(lines)


def fetch_events(day: Date, base_url: str = BASE_URL) -> List[Dict[str, Any]]:
    response = requests.get(f"{base_url}/api/events", params={"date": format_event_date(day)}, timeout=120)
    if not response.ok:
        raise RuntimeError(f"HTTP error! status: {response.status_code}")
    return response.json()


def render_events(day: Date, events: List[Dict[str, Any]]) -> str:
    lines = [f"Events on {day.strftime('%a %b %d %Y')}"]
    if not events:
        lines.append("No events for this date.")
    for event in events:
        lines.append(f"- {event.get('category', '')}: {event.get('event', '')}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    today = Date.today()
    parser = argparse.ArgumentParser(description="World events calendar")
    parser.add_argument("--year", type=int, default=today.year)
    parser.add_argument("--month", type=int, default=today.month, choices=range(1, 13))
    parser.add_argument("--day", type=int, help="Fetch world events for this day of the month")
    parser.add_argument("--base-url", default=BASE_URL)
    args = parser.parse_args(argv)

    print(render_month(args.year, args.month, args.day))
    if args.day is None:
        return 0

    try:
        selected = Date(args.year, args.month, args.day)
    except ValueError as e:
        print(f"\n[!] {e}", file=sys.stderr)
        return 2

    print()
    try:
        events = fetch_events(selected, args.base_url)
    except Exception as e:
        print(f"Failed to fetch events: {e}", file=sys.stderr)
        return 1

    print(render_events(selected, events))
    return 0


if __name__ == "__main__":
    sys.exit(main())
