"""Date bucket headers for trip lists.

A header labeler turns a trip start time into a display bucket such as
"Today" or "Oct 05, 2026". assign_headers() folds the labels of an ordered
result into sequence numbers so a list view can group rows under sticky
headers.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from datetime import date, datetime

from activity_logger.constants import (
    HEADER_DATE_FORMAT,
    HEADER_TODAY,
    HEADER_WEEKDAY_WINDOW_DAYS,
    HEADER_YESTERDAY,
)
from activity_logger.store.models import UserActivity

HeaderLabeler = Callable[[int], str]


def trip_header_label(start_time: int, now: datetime | None = None) -> str:
    """Label the local calendar day a trip started on.

    Args:
        start_time: Trip start, seconds since epoch.
        now: Reference time (defaults to the current local time).

    Returns:
        "Today", "Yesterday", a weekday name for the rest of the past week,
        otherwise the full date. A start time outside the platform's date
        range is labeled with its raw value.
    """
    try:
        day = datetime.fromtimestamp(start_time).date()
    except (ValueError, OverflowError, OSError):
        # Not a plausible epoch-seconds value (e.g. milliseconds)
        return str(start_time)
    today: date = (now or datetime.now()).date()
    days_ago = (today - day).days

    if days_ago == 0:
        return HEADER_TODAY
    if days_ago == 1:
        return HEADER_YESTERDAY
    if 1 < days_ago < HEADER_WEEKDAY_WINDOW_DAYS:
        return day.strftime("%A")
    return day.strftime(HEADER_DATE_FORMAT)


def assign_headers(
    activities: Iterable[UserActivity], labeler: HeaderLabeler = trip_header_label
) -> list[UserActivity]:
    """Attach header_text and header_id to each activity.

    Header ids are handed out in first-seen order: the first new label gets
    0, the next new label 1, and a label seen again reuses its id. The input
    objects are not modified.

    Args:
        activities: Activities in display order.
        labeler: Maps a start time to a header label.

    Returns:
        New activities carrying their header fields.
    """
    header_ids: dict[str, int] = {}
    result: list[UserActivity] = []
    for activity in activities:
        text = labeler(activity.start_time)
        header_id = header_ids.setdefault(text, len(header_ids))
        result.append(dataclasses.replace(activity, header_text=text, header_id=header_id))
    return result
