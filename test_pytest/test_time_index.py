import numpy as np
import pandas as pd
import pytest

from anomalize import InsufficientDataError, InvalidInputError, TimeScale, prep_tbl_time, time_apply
from anomalize.timeSeriesProcessing.timeIndex.timeIndex import (
    CalendarSpan,
    collapse_by,
    get_timeseries_summary,
    infer_time_scale,
    median_bucket_size,
    parse_calendar_span,
)


def test_prep_tbl_time_finds_date_column(single_series):
    ret = prep_tbl_time(single_series)
    assert list(ret.columns) == ["package", "date", "count"]
    assert len(ret) == 425


def test_prep_tbl_time_series_with_datetime_index():
    index = pd.date_range("2020-01-01", periods=5, freq="D", name="date")
    ret = prep_tbl_time(pd.Series([1.0, 2.0, 3.0, 4.0, 5.0], index=index, name="value"))
    assert list(ret.columns) == ["date", "value"]


def test_prep_tbl_time_rejects_grouped(grouped_downloads):
    with pytest.raises(InvalidInputError, match="grouped"):
        prep_tbl_time(grouped_downloads)


def test_prep_tbl_time_requires_time_column():
    with pytest.raises(InvalidInputError, match="No date or datetime column"):
        prep_tbl_time(pd.DataFrame({"value": [1, 2, 3]}))


def test_prep_tbl_time_rejects_duplicate_timestamps():
    frame = pd.DataFrame(
        {"date": pd.to_datetime(["2020-01-01", "2020-01-01", "2020-01-02"]), "value": [1, 2, 3]}
    )
    with pytest.raises(InvalidInputError, match="strictly increasing"):
        prep_tbl_time(frame)


@pytest.mark.parametrize(
    "freq, expected",
    [
        ("s", TimeScale.SECOND),
        ("min", TimeScale.MINUTE),
        ("h", TimeScale.HOUR),
        ("D", TimeScale.DAY),
        ("W", TimeScale.WEEK),
        ("MS", TimeScale.MONTH),
        ("QS", TimeScale.QUARTER),
        ("YS", TimeScale.YEAR),
    ],
)
def test_infer_time_scale(freq, expected):
    assert infer_time_scale(pd.Series(pd.date_range("2015-01-01", periods=20, freq=freq))) == expected


def test_infer_time_scale_needs_two_observations():
    with pytest.raises(InsufficientDataError):
        infer_time_scale(pd.Series(pd.to_datetime(["2020-01-01"])))


def test_timeseries_summary(single_series):
    summary = get_timeseries_summary(single_series)
    assert summary["index"] == "date"
    assert summary["n_obs"] == 425
    assert summary["scale"] == TimeScale.DAY
    assert summary["start"] == pd.Timestamp("2017-01-01")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1 week", CalendarSpan(1, "week")),
        ("3 months", CalendarSpan(3, "month")),
        ("12 hours", CalendarSpan(12, "hour")),
        ("2 q", CalendarSpan(2, "quarter")),
        ("day", CalendarSpan(1, "day")),
    ],
)
def test_parse_calendar_span(text, expected):
    assert parse_calendar_span(text) == expected


@pytest.mark.parametrize("text", ["", "1 fortnight", "weekly please", "0 days"])
def test_parse_calendar_span_invalid(text):
    with pytest.raises(InvalidInputError):
        parse_calendar_span(text)


def test_calendar_span_str():
    assert str(CalendarSpan(1, "week")) == "1 week"
    assert str(CalendarSpan(3, "month")) == "3 months"


def test_collapse_by_weeks_starts_at_first_day():
    times = pd.Series(pd.date_range("2017-01-04", periods=14, freq="D"))
    assert collapse_by(times, "1 week").tolist() == [0] * 7 + [1] * 7


def test_collapse_by_quarter_is_calendar_aligned():
    times = pd.Series(pd.date_range("2017-02-01", "2017-07-31", freq="D"))
    codes = collapse_by(times, "1 quarter")
    # Feb-Mar in the first quarter, Apr-Jun in the second, Jul in the third
    assert np.unique(codes).tolist() == [0, 1, 2]
    assert (codes == 0).sum() == 28 + 31


def test_median_bucket_size_fractional():
    times = pd.Series(pd.date_range("2017-01-01", periods=10, freq="D"))
    # buckets of 4, 4 and 2 observations
    assert median_bucket_size(times, "4 days") == 4
    # buckets of 3, 3, 3 and 1 observations
    assert median_bucket_size(times, "3 days") == 3
    # buckets of 7 and 3 observations
    assert median_bucket_size(times, "1 week") == 5


def test_time_apply_calendar_period():
    frame = pd.DataFrame(
        {"date": pd.date_range("2017-01-01", periods=14, freq="D"), "value": np.arange(14.0)}
    )
    ret = time_apply(frame, "value", period="1 week", func=np.median)
    assert ret["time_apply"].tolist() == [3.0] * 7 + [10.0] * 7


def test_time_apply_count_period_with_kwargs():
    frame = pd.DataFrame(
        {"date": pd.date_range("2017-01-01", periods=6, freq="D"), "value": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]}
    )
    ret = time_apply(frame, "value", period=3, func=np.quantile, q=1.0)
    assert ret["time_apply"].tolist() == [3.0, 3.0, 3.0, 6.0, 6.0, 6.0]


def test_time_apply_grouped(grouped_downloads):
    ret = time_apply(grouped_downloads, "count", period="1 week", func=np.mean)
    assert len(ret) == 15 * 425
    assert list(ret.columns) == ["package", "date", "count", "time_apply"]


def test_time_apply_invalid_period(single_series):
    with pytest.raises(InvalidInputError):
        time_apply(single_series, "count", period=0, func=np.mean)


def test_time_apply_requires_callable(single_series):
    with pytest.raises(InvalidInputError, match="callable"):
        time_apply(single_series, "count", period="1 week", func=None)
