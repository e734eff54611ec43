import numpy as np
import pandas as pd
import pytest

from anomalize import (
    DecompositionKind,
    InvalidInputError,
    UnsupportedMethodError,
    time_decompose,
)
from anomalize.timeSeriesProcessing.decomposition.methods.baseDecomposerMethod import (
    BaseDecomposerMethod,
)
from anomalize.timeSeriesProcessing.decomposition.methods.stlDecomposerMethod import (
    StlDecomposerMethod,
)
from anomalize.timeSeriesProcessing.decomposition.methods.twitterDecomposerMethod import (
    TwitterDecomposerMethod,
)


def _assert_additive(decomposed, trend_column):
    observed = decomposed["observed"].to_numpy()
    rebuilt = (
        decomposed["season"].to_numpy()
        + decomposed[trend_column].to_numpy()
        + decomposed["remainder"].to_numpy()
    )
    scale = max(1.0, np.abs(observed).max())
    np.testing.assert_allclose(observed - rebuilt, 0, atol=1e-9 * scale)


def test_stl_decomposition(single_series):
    decomposed = time_decompose(single_series, "count", method="stl", message=False)

    assert list(decomposed.columns) == ["date", "observed", "season", "trend", "remainder"]
    assert len(decomposed) == 425
    assert decomposed["date"].equals(single_series["date"])
    np.testing.assert_array_equal(decomposed["observed"], single_series["count"])
    assert decomposed.attrs["decomposition"] is DecompositionKind.STL
    _assert_additive(decomposed, "trend")


def test_stl_season_is_weekly(single_series):
    decomposed = time_decompose(single_series, "count", method="stl", message=False)
    season = decomposed["season"].to_numpy()
    # the same value every 7 days
    np.testing.assert_allclose(season[:-7], season[7:])


def test_twitter_decomposition(single_series):
    decomposed = time_decompose(single_series, "count", method="twitter", message=False)

    assert list(decomposed.columns) == ["date", "observed", "season", "median_spans", "remainder"]
    assert decomposed.attrs["decomposition"] is DecompositionKind.TWITTER
    _assert_additive(decomposed, "median_spans")
    # round(425 / 91) = 5 spans
    assert decomposed["median_spans"].nunique() <= 5


def test_median_spans_blocks():
    method = TwitterDecomposerMethod()
    observed = np.array([1.0, 2.0, 3.0, 10.0, 20.0, 30.0, 100.0])
    # round(7 / 3) = 2 spans of 4 and 3 rows
    spans = method.compute_median_spans(observed, trend=3)
    np.testing.assert_array_equal(spans, [2.5, 2.5, 2.5, 2.5, 30.0, 30.0, 30.0])


def test_explicit_frequency_and_trend(single_series):
    decomposed = time_decompose(
        single_series, "count", frequency="1 week", trend=60, message=False
    )
    _assert_additive(decomposed, "trend")


def test_method_is_case_insensitive(single_series):
    decomposed = time_decompose(single_series, "count", method="STL", message=False)
    assert "trend" in decomposed.columns


def test_merge_appends_components(single_series):
    merged = time_decompose(single_series, "count", merge=True, message=False)

    assert list(merged.columns) == [
        "package", "date", "count", "observed", "season", "trend", "remainder"
    ]
    assert merged.attrs["decomposition"] is DecompositionKind.STL


def test_merge_deduplicates_column_names(single_series):
    frame = single_series.assign(season="winter")
    merged = time_decompose(frame, "count", merge=True, message=False)
    assert "season" in merged.columns
    assert "season..1" in merged.columns
    assert (merged["season"] == "winter").all()


def test_grouped_decomposition(grouped_downloads, tidyverse_cran_downloads):
    decomposed = time_decompose(grouped_downloads, "count")

    assert len(decomposed) == 15 * 425
    assert list(decomposed.columns) == [
        "package", "date", "observed", "season", "trend", "remainder"
    ]
    assert (decomposed.groupby("package").size() == 425).all()
    for package, group in decomposed.groupby("package"):
        original = tidyverse_cran_downloads[tidyverse_cran_downloads["package"] == package]
        np.testing.assert_array_equal(group["date"].to_numpy(), original["date"].to_numpy())
        np.testing.assert_array_equal(group["observed"].to_numpy(), original["count"].to_numpy())


def test_missing_target_raises(single_series):
    with pytest.raises(InvalidInputError, match="target"):
        time_decompose(single_series)
    with pytest.raises(InvalidInputError, match="not found"):
        time_decompose(single_series, "downloads", message=False)


def test_non_numeric_target_raises(single_series):
    with pytest.raises(InvalidInputError, match="numeric"):
        time_decompose(single_series, "package", message=False)


def test_missing_values_raise(single_series):
    frame = single_series.copy()
    frame.loc[10, "count"] = np.nan
    with pytest.raises(InvalidInputError, match="missing values"):
        time_decompose(frame, "count", message=False)


def test_unknown_method_raises(single_series):
    with pytest.raises(UnsupportedMethodError, match="multiplicative"):
        time_decompose(single_series, "count", method="multiplicative", message=False)


def test_frequency_below_two_raises(single_series):
    # 10 days resolve to frequency = 1
    with pytest.raises(InvalidInputError, match="frequency"):
        time_decompose(single_series.head(10), "count", message=False)


def test_series_shorter_than_two_periods_raises(single_series):
    with pytest.raises(InvalidInputError, match="at least 600"):
        time_decompose(single_series, "count", frequency=300, message=False)


def test_method_params_forwarded(single_series):
    robust = time_decompose(single_series, "count", message=False)
    plain = time_decompose(single_series, "count", robust=False, message=False)
    _assert_additive(plain, "trend")
    assert not np.allclose(robust["trend"], plain["trend"])


def test_robust_fit_keeps_spike_in_remainder(single_series):
    data = single_series.copy()
    data.loc[200, "count"] = data["count"].max() * 10

    robust = time_decompose(data, "count", message=False)
    plain = time_decompose(data, "count", robust=False, message=False)
    # robustness weights keep the spike in the remainder instead of the trend
    assert robust.loc[200, "remainder"] > plain.loc[200, "remainder"]


@pytest.mark.parametrize("frequency, expected", [(7, 7), (7.4, 7), (30.5, 31), (2.5, 3)])
def test_fractional_frequency_is_rounded(frequency, expected):
    assert StlDecomposerMethod().get_period(frequency, 100) == expected


def test_unknown_method_params_raise(single_series):
    with pytest.raises(InvalidInputError, match="Unknown parameters"):
        time_decompose(single_series, "count", seasonal_window=7, message=False)


@pytest.mark.parametrize(
    "trend, period, expected",
    [(91, 7, 91), (30, 7, 31), (4, 7, 9), (1, 2, 3), (90.5, 7, 91)],
)
def test_trend_window_is_odd_and_larger_than_period(trend, period, expected):
    assert BaseDecomposerMethod.get_trend_window(trend, period) == expected


def test_decomposition_kind_from_frame():
    stl = pd.DataFrame(columns=["observed", "season", "trend", "remainder"])
    twitter = pd.DataFrame(columns=["observed", "season", "median_spans", "remainder"])
    both = pd.DataFrame(columns=["observed", "season", "trend", "median_spans", "remainder"])

    assert DecompositionKind.from_frame(stl) is DecompositionKind.STL
    assert DecompositionKind.from_frame(twitter) is DecompositionKind.TWITTER
    assert DecompositionKind.from_frame(pd.DataFrame(columns=["observed"])) is None
    tagged = DecompositionKind.TWITTER.tag(both.copy())
    assert DecompositionKind.from_frame(tagged) is DecompositionKind.TWITTER
    with pytest.raises(InvalidInputError, match="Both"):
        DecompositionKind.from_frame(both)
