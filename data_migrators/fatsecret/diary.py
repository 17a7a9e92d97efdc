# -*- coding: utf-8 -*-
"""FatSecret: walk a date range month summary by month summary, then day by day."""

from __future__ import annotations

import datetime
import logging
import time
from typing import Callable, List

from ..dates import date_to_days, days_to_date
from ..errors import DiaryProtocolError
from .client import FatSecretClient
from .models import DayAggregate, DiaryRange, DiaryResult, FoodEntry
from .normalize import parse_food_entries, parse_month_summary

logger = logging.getLogger(__name__)

COURTESY_DELAY = 1.0


def collect_days(
    client: FatSecretClient,
    diary_range: DiaryRange,
    *,
    warnings: List[str],
    sleep: Callable[[float], None] = time.sleep,
    courtesy_delay: float = COURTESY_DELAY,
) -> List[DayAggregate]:
    """Fetch month summaries until the API-chosen windows cover ``diary_range``.

    The cursor advances to the day after each returned window, so months are
    never assumed to follow calendar boundaries.
    """
    days: List[DayAggregate] = []
    cursor: datetime.date = diary_range.from_date
    while True:
        cursor_int = date_to_days(cursor)
        summary = parse_month_summary(client.get_month(cursor_int), warnings)
        if summary.from_date_int > summary.to_date_int:
            raise DiaryProtocolError(
                f"month window is inverted: from_date_int={summary.from_date_int}, "
                f"to_date_int={summary.to_date_int}"
            )
        if summary.to_date_int < cursor_int:
            raise DiaryProtocolError(
                f"month window does not advance: cursor={cursor_int}, to_date_int={summary.to_date_int}"
            )

        days.extend(summary.days)
        logger.info(
            "FatSecret month %s..%s: %d days",
            days_to_date(summary.from_date_int),
            days_to_date(summary.to_date_int),
            len(summary.days),
        )

        cursor = days_to_date(summary.to_date_int + 1)
        if cursor > diary_range.to_date:
            return days
        sleep(courtesy_delay)


def collect_entries(
    client: FatSecretClient,
    days: List[DayAggregate],
    *,
    warnings: List[str],
    sleep: Callable[[float], None] = time.sleep,
    courtesy_delay: float = COURTESY_DELAY,
) -> List[FoodEntry]:
    entries: List[FoodEntry] = []
    for idx, day in enumerate(days):
        if idx:
            sleep(courtesy_delay)
        day_entries = parse_food_entries(client.get_day_entries(day.date_int), warnings)
        logger.info("FatSecret day %s: %d entries", day.date, len(day_entries))
        entries.extend(day_entries)
    return entries


def fetch_diary(
    client: FatSecretClient,
    diary_range: DiaryRange,
    *,
    sleep: Callable[[float], None] = time.sleep,
    courtesy_delay: float = COURTESY_DELAY,
) -> DiaryResult:
    """Export every diary day and food entry the API reports for ``diary_range``.

    Any error aborts the export; a result is only returned once complete.
    """
    warnings: List[str] = []
    days = collect_days(client, diary_range, warnings=warnings, sleep=sleep, courtesy_delay=courtesy_delay)
    if days:
        sleep(courtesy_delay)
    entries = collect_entries(client, days, warnings=warnings, sleep=sleep, courtesy_delay=courtesy_delay)

    return DiaryResult(
        actual_from_date=days[0].date if days else None,
        actual_to_date=days[-1].date if days else None,
        day_aggregates=days,
        entries=entries,
        warnings=warnings,
    )
