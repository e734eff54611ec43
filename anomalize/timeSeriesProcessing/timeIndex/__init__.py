"""
Time index utilities: time scale inference, calendar spans and period apply.
"""

from anomalize.timeSeriesProcessing.timeIndex.timeApply import time_apply
from anomalize.timeSeriesProcessing.timeIndex.timeIndex import (
    CalendarSpan,
    TimeScale,
    collapse_by,
    get_time_column,
    get_timeseries_summary,
    infer_time_scale,
    median_bucket_size,
    parse_calendar_span,
    prep_tbl_time,
)

__all__ = [
    "CalendarSpan",
    "TimeScale",
    "collapse_by",
    "get_time_column",
    "get_timeseries_summary",
    "infer_time_scale",
    "median_bucket_size",
    "parse_calendar_span",
    "prep_tbl_time",
    "time_apply",
]
