# -*- coding: utf-8 -*-
"""Day index helpers: FatSecret addresses days as whole days since 1970-01-01."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

EPOCH = date(1970, 1, 1)


def date_to_days(value: date) -> int:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        value = value.date()
    return (value - EPOCH).days


def days_to_date(days: int) -> date:
    return EPOCH + timedelta(days=int(days))
