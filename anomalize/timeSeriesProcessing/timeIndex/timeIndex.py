"""
Time index utilities for single time series tables.

Provides:
- TimeScale: inferred sampling granularity from the median gap between timestamps
- CalendarSpan: parsed calendar period such as "2 weeks" or "1 quarter"
- prep_tbl_time: locate and validate the time column of a table
- collapse_by: partition timestamps into calendar buckets
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import numpy as np
import pandas as pd

from anomalize.helpers.exceptions import InsufficientDataError, InvalidInputError
from anomalize.helpers.utils import ensure_single_frame

__version__ = "1.0.0"


SECONDS_PER_UNIT = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
}
MONTHS_PER_UNIT = {
    "month": 1,
    "quarter": 3,
    "year": 12,
}
# Weeks are anchored at the day of the first observation
FLOOR_FREQUENCY = {
    "second": "s",
    "minute": "min",
    "hour": "h",
    "day": "D",
    "week": "D",
}

UNIT_ALIASES = {
    "s": "second", "sec": "second", "secs": "second", "second": "second", "seconds": "second",
    "min": "minute", "mins": "minute", "minute": "minute", "minutes": "minute",
    "h": "hour", "hr": "hour", "hrs": "hour", "hour": "hour", "hours": "hour",
    "d": "day", "day": "day", "days": "day",
    "w": "week", "wk": "week", "week": "week", "weeks": "week",
    "mon": "month", "month": "month", "months": "month",
    "q": "quarter", "quarter": "quarter", "quarters": "quarter",
    "y": "year", "yr": "year", "year": "year", "years": "year",
}

CALENDAR_SPAN_PATTERN = re.compile(r"^\s*(\d+)?\s*([A-Za-z]+)\s*$")


class TimeScale(Enum):
    """Sampling granularity, ordered from the finest to the coarsest"""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @classmethod
    def from_median_gap(cls, seconds: float) -> "TimeScale":
        day = SECONDS_PER_UNIT["day"]
        if seconds < 60:
            return cls.SECOND
        if seconds < 3600:
            return cls.MINUTE
        if seconds < day:
            return cls.HOUR
        if seconds < 7 * day:
            return cls.DAY
        if seconds < 28 * day:
            return cls.WEEK
        if seconds < 90 * day:
            return cls.MONTH
        if seconds < 365 * day:
            return cls.QUARTER
        return cls.YEAR

    @classmethod
    def parse(cls, value: Union[str, "TimeScale"]) -> "TimeScale":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise InvalidInputError(
                f"Unknown time scale '{value}'. Expected one of {[s.value for s in cls]}"
            ) from e


@dataclass(frozen=True)
class CalendarSpan:
    """A calendar period: `count` repetitions of `unit`"""

    count: int
    unit: str

    def __str__(self) -> str:
        suffix = "" if self.count == 1 else "s"
        return f"{self.count} {self.unit}{suffix}"

    @property
    def is_month_based(self) -> bool:
        return self.unit in MONTHS_PER_UNIT


def parse_calendar_span(period: Union[str, CalendarSpan]) -> CalendarSpan:
    """
    Parse a calendar span such as "1 week", "3 months", "12 hours" or "2 q".

    Args:
        period: Span description

    Returns:
        CalendarSpan

    Raises:
        InvalidInputError: If the string cannot be parsed
    """
    if isinstance(period, CalendarSpan):
        return period

    match = CALENDAR_SPAN_PATTERN.match(str(period))
    if match is None:
        raise InvalidInputError(
            f"Cannot parse period '{period}'. Use a form like '1 week' or '3 months'."
        )

    count = int(match.group(1)) if match.group(1) else 1
    unit = UNIT_ALIASES.get(match.group(2).lower())
    if unit is None or count < 1:
        raise InvalidInputError(
            f"Cannot parse period '{period}'. Unknown unit '{match.group(2)}' or non-positive count."
        )

    return CalendarSpan(count=count, unit=unit)


def get_time_column(data: pd.DataFrame) -> Optional[str]:
    """Return the name of the first datetime column, or None."""
    for column in data.columns:
        if pd.api.types.is_datetime64_any_dtype(data[column]):
            return column
    return None


def prep_tbl_time(data: Any, message: bool = False) -> pd.DataFrame:
    """
    Prepare a single series table: find the time column and validate it.

    A DatetimeIndex without a datetime column is moved into a column.

    Args:
        data: pd.DataFrame or pd.Series
        message: Log the detected index column

    Returns:
        pd.DataFrame whose first datetime column is the time index

    Raises:
        InvalidInputError: If no time column exists or timestamps are not
            strictly increasing
    """
    frame = ensure_single_frame(data, "prep_tbl_time")

    time_column = get_time_column(frame)
    if time_column is None and isinstance(frame.index, pd.DatetimeIndex):
        frame = frame.reset_index()
        time_column = get_time_column(frame)

    if time_column is None:
        raise InvalidInputError(
            "Error prep_tbl_time(): No date or datetime column found. "
            "Object must contain a time index."
        )

    times = frame[time_column]
    if times.isnull().any():
        raise InvalidInputError(
            f"Error prep_tbl_time(): time column '{time_column}' has missing values"
        )
    if len(times) > 1 and not (times.diff().iloc[1:] > pd.Timedelta(0)).all():
        raise InvalidInputError(
            f"Error prep_tbl_time(): time column '{time_column}' must be strictly "
            f"increasing without duplicate timestamps"
        )

    if message:
        logging.info(f"prep_tbl_time - Auto-index message: index = {time_column}")

    return frame


def infer_time_scale(times: pd.Series) -> TimeScale:
    """
    Infer the time scale from the median gap between consecutive timestamps.

    Raises:
        InsufficientDataError: If fewer than two timestamps are given
    """
    times = pd.Series(times)
    if len(times) < 2:
        raise InsufficientDataError(
            "Cannot infer the time scale from fewer than two observations"
        )

    gaps = times.diff().iloc[1:].dt.total_seconds()
    return TimeScale.from_median_gap(float(np.median(gaps)))


def get_timeseries_summary(data: pd.DataFrame) -> Dict[str, Any]:
    """
    Summarise the time index of a prepared table.

    Returns:
        Dict with 'index', 'n_obs', 'scale', 'start', 'end'
    """
    time_column = get_time_column(data)
    times = data[time_column]
    return {
        "index": time_column,
        "n_obs": len(times),
        "scale": infer_time_scale(times),
        "start": times.iloc[0],
        "end": times.iloc[-1],
    }


def collapse_by(times: pd.Series, period: Union[str, CalendarSpan]) -> np.ndarray:
    """
    Assign every timestamp to a calendar bucket.

    Buckets start at the first timestamp floored to the span unit and repeat
    every span; month based units count calendar months.

    Args:
        times: Datetime values in increasing order
        period: Calendar span

    Returns:
        np.ndarray of integer bucket codes aligned with times
    """
    span = parse_calendar_span(period)
    times = pd.Series(pd.to_datetime(times)).reset_index(drop=True)

    if span.is_month_based:
        months_per_bucket = span.count * MONTHS_PER_UNIT[span.unit]
        month_index = times.dt.year.to_numpy() * 12 + times.dt.month.to_numpy() - 1
        first = month_index[0]
        # anchor quarters and years at the start of their calendar period
        anchor = first - first % MONTHS_PER_UNIT[span.unit]
        return (month_index - anchor) // months_per_bucket

    origin = times.iloc[0].floor(FLOOR_FREQUENCY[span.unit])
    elapsed = (times - origin).dt.total_seconds().to_numpy()
    return np.floor(elapsed / (span.count * SECONDS_PER_UNIT[span.unit])).astype(np.int64)


def median_bucket_size(times: pd.Series, period: Union[str, CalendarSpan]) -> Union[int, float]:
    """
    Median number of observations per calendar bucket.

    Returns:
        int when the median is integral, float otherwise
    """
    codes = collapse_by(times, period)
    _, counts = np.unique(codes, return_counts=True)
    median = float(np.median(counts))
    return int(median) if median.is_integer() else median
