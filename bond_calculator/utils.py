from __future__ import annotations

from typing import List, Optional

import pandas as pd

from .config import MONEY_DECIMALS, RATE_DECIMALS


def schedule_start(start_date: Optional[pd.Timestamp] = None) -> pd.Timestamp:
    """Schedule anchor date; defaults to today (midnight)."""
    if start_date is None:
        return pd.Timestamp.today().normalize()
    return pd.Timestamp(start_date).normalize()


def payment_dates(start_date: pd.Timestamp, periods: int, months_per_period: int) -> List[pd.Timestamp]:
    """
    Coupon dates start + k * months_per_period months, k = 1..periods.

    Calendar-month arithmetic (pd.DateOffset): a day past the end of the target
    month rolls back to its last day, e.g. Aug-31 + 6M -> Feb-28/29.
    Each date is offset from the start, not from the previous date, so a
    month-end start does not drift.
    """
    if periods <= 0:
        raise ValueError("periods must be positive")
    if months_per_period <= 0:
        raise ValueError("months_per_period must be positive")

    start = pd.Timestamp(start_date)
    return [start + pd.DateOffset(months=k * months_per_period) for k in range(1, periods + 1)]


def round_money(x: float) -> float:
    return round(float(x), MONEY_DECIMALS)


def round_rate(x: float) -> float:
    return round(float(x), RATE_DECIMALS)
