"""
Post date inference.

The archives do not carry the original post date in a structured form, so
it is inferred from whatever evidence the capture contains. Two strategies
exist because the forum's markup changed over time:

- ABSOLUTE: a "Jul 13, 2023, 7:31:18 PM" timestamp inside a <span>, then
  a M/D/Y date in the title, then the capture date.
- RELATIVE: a "(5 hours ago)" / "(2 days ago)" phrase measured back from
  the capture time, then the capture date.

The two are never mixed; the builder picks one from its configuration.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Optional

from .config import DateStrategy

logger = logging.getLogger(__name__)

# The character between the seconds and AM/PM is usually U+202F
# (NARROW NO-BREAK SPACE), hence [^<]+ rather than a plain space.
ABSOLUTE_DATE_PATTERN = re.compile(
    r"<span[^>]*>\s*(?P<month>[A-Z][a-z]{2}) (?P<day>\d+), (?P<year>\d{4}), "
    r"\d{1,2}:\d\d:\d\d[^<]+(?:AM|PM)</span>"
)
TITLE_DATE_PATTERN = re.compile(r"(?P<month>\d+)/(?P<day>\d+)/(?P<year>\d+)")
RELATIVE_DATE_PATTERN = re.compile(r"\((?P<count>\d+) (?P<unit>hour|day)s? ago\)")

MONTHS = {
    name: number
    for number, name in enumerate(
        ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
         "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
        start=1,
    )
}


def _make_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None


def date_from_html(markup: str) -> Optional[date]:
    """Date portion of the first absolute timestamp in the markup.

    Example:
        date_from_html('<span class="zX2W9c">Jul 13, 2023, 7:31:18\u202fPM</span>')
        # Returns: date(2023, 7, 13)
    """
    match = ABSOLUTE_DATE_PATTERN.search(markup)
    if not match:
        return None
    month = MONTHS.get(match.group("month"))
    if month is None:
        logger.debug("Unknown month abbreviation %r", match.group("month"))
        return None
    return _make_date(int(match.group("year")), month, int(match.group("day")))


def date_from_title(title: str) -> Optional[date]:
    """First M/D/Y or M/D/YY date in a title; two-digit years are 20YY."""
    match = TITLE_DATE_PATTERN.search(title)
    if not match:
        return None
    year = int(match.group("year"))
    if year < 100:
        year += 2000
    return _make_date(year, int(match.group("month")), int(match.group("day")))


def date_from_relative_phrase(markup: str, capture_time: datetime) -> Optional[date]:
    """Date implied by the first "(N hours ago)" / "(N days ago)" phrase."""
    match = RELATIVE_DATE_PATTERN.search(markup)
    if not match:
        return None
    count = int(match.group("count"))
    try:
        if match.group("unit") == "hour":
            delta = timedelta(hours=count)
        else:
            delta = timedelta(days=count)
        return (capture_time - delta).date()
    except OverflowError:
        logger.debug("Relative date phrase %r out of range", match.group(0))
        return None


def capture_date(capture_time: datetime) -> date:
    """Calendar date of the capture in its own UTC offset."""
    return capture_time.date()


def resolve_post_date(
    strategy: DateStrategy,
    markup: str,
    title: str,
    capture_time: datetime,
    html_date: Optional[date] = None,
) -> date:
    """
    Best guess at when a post was originally made.

    Args:
        strategy: Which evidence chain to follow
        markup: Raw HTML of the post
        title: Archive subject
        capture_time: Archive capture timestamp with offset
        html_date: Absolute date already found by the extractor, if any;
            saves a second scan of the markup

    Returns:
        The first date the chosen chain can establish; the capture date
        when nothing else is found
    """
    if strategy == DateStrategy.RELATIVE:
        found = date_from_relative_phrase(markup, capture_time)
        if found is not None:
            return found
        logger.debug("No relative date phrase, using capture date")
        return capture_date(capture_time)

    found = html_date or date_from_html(markup)
    if found is not None:
        return found
    found = date_from_title(title)
    if found is not None:
        return found
    logger.debug("No date in markup or title %r, using capture date", title)
    return capture_date(capture_time)
