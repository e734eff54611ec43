import numpy as np
import pandas as pd
import pytest

from anomalize import (
    DecompositionKind,
    InvalidInputError,
    anomalize,
    clean_anomalies,
    time_decompose,
    time_recompose,
)
from anomalize.timeSeriesProcessing.recomposition.recomposer import get_component_columns


@pytest.fixture
def anomalized(single_series):
    decomposed = time_decompose(single_series, "count", method="stl", message=False)
    return anomalize(decomposed, "remainder", method="iqr")


def _band_frame(remainder, kind=None):
    n = len(remainder)
    frame = pd.DataFrame(
        {
            "date": pd.date_range("2020-01-01", periods=n, freq="D"),
            "observed": np.arange(n, dtype=float) + remainder,
            "season": np.zeros(n),
            "trend": np.arange(n, dtype=float),
            "remainder": remainder,
            "remainder_l1": -1.0,
            "remainder_l2": 1.0,
            "anomaly": np.where(np.abs(remainder) > 1, "Yes", "No"),
        }
    )
    return kind.tag(frame) if kind is not None else frame


def test_recompose_adds_bands(anomalized):
    ret = time_recompose(anomalized)

    assert list(ret.columns[-2:]) == ["recomposed_l1", "recomposed_l2"]
    expected = anomalized["season"] + anomalized["trend"]
    np.testing.assert_allclose(ret["recomposed_l1"], expected + anomalized["remainder_l1"])
    np.testing.assert_allclose(ret["recomposed_l2"], expected + anomalized["remainder_l2"])


def test_recompose_bands_bracket_the_expected_value():
    rng = np.random.default_rng(3)
    for remainder in [np.zeros(30), rng.uniform(-0.5, 0.5, 30)]:
        ret = time_recompose(_band_frame(remainder, DecompositionKind.STL))
        expected = ret["season"] + ret["trend"]
        assert (ret["recomposed_l1"] <= expected).all()
        assert (expected <= ret["recomposed_l2"]).all()
        assert (ret["recomposed_l1"] <= ret["observed"]).all()
        assert (ret["observed"] <= ret["recomposed_l2"]).all()


def test_recompose_includes_other_limit_columns():
    frame = _band_frame(np.zeros(10), DecompositionKind.STL)
    frame["count_l1"] = -5.0
    frame["count_l2"] = 5.0

    ret = time_recompose(frame)
    np.testing.assert_allclose(ret["recomposed_l1"], frame["trend"] - 6.0)
    np.testing.assert_allclose(ret["recomposed_l2"], frame["trend"] + 6.0)


def test_recompose_is_repeatable(anomalized):
    once = time_recompose(anomalized)
    twice = time_recompose(once)
    np.testing.assert_allclose(once["recomposed_l1"], twice["recomposed_l1"])
    np.testing.assert_allclose(once["recomposed_l2"], twice["recomposed_l2"])


def test_recompose_twitter(single_series):
    decomposed = time_decompose(single_series, "count", method="twitter", message=False)
    ret = time_recompose(anomalize(decomposed, "remainder"))
    np.testing.assert_allclose(
        ret["recomposed_l1"], ret["season"] + ret["median_spans"] + ret["remainder_l1"]
    )


@pytest.mark.parametrize("column", ["observed", "remainder", "remainder_l1", "remainder_l2"])
def test_recompose_missing_columns(anomalized, column):
    with pytest.raises(InvalidInputError, match=column):
        time_recompose(anomalized.drop(columns=[column]))


def test_component_columns_by_position():
    frame = _band_frame(np.zeros(5)).drop(columns=["season", "trend"])
    frame.insert(2, "level", 10.0)

    assert get_component_columns(frame, None) == ["level"]
    ret = time_recompose(frame)
    np.testing.assert_allclose(ret["recomposed_l1"], 9.0)
    np.testing.assert_allclose(ret["recomposed_l2"], 11.0)


def test_component_columns_out_of_order():
    frame = _band_frame(np.zeros(5)).drop(columns=["season", "trend"])
    frame = frame[["date", "remainder", "observed", "remainder_l1", "remainder_l2"]]
    with pytest.raises(InvalidInputError):
        time_recompose(frame)


def test_both_trend_columns_without_tag_are_ambiguous():
    frame = _band_frame(np.zeros(5))
    frame.insert(4, "median_spans", 0.0)
    with pytest.raises(InvalidInputError, match="Both"):
        time_recompose(frame)
    with pytest.raises(InvalidInputError, match="Both"):
        clean_anomalies(frame)


def test_tag_selects_trend_column():
    frame = _band_frame(np.zeros(5))
    frame.insert(4, "median_spans", 100.0)

    stl = time_recompose(DecompositionKind.STL.tag(frame.copy()))
    twitter = time_recompose(DecompositionKind.TWITTER.tag(frame.copy()))
    np.testing.assert_allclose(twitter["recomposed_l1"] - stl["recomposed_l1"], 100.0 - frame["trend"])


def test_recompose_grouped(grouped_downloads):
    decomposed = time_decompose(grouped_downloads, "count")
    anomalized = anomalize(decomposed.groupby("package"), "remainder")
    ret = time_recompose(anomalized.groupby("package"))

    assert len(ret) == 6375
    assert ret.columns[0] == "package"
    np.testing.assert_allclose(
        ret["recomposed_l2"], ret["season"] + ret["trend"] + ret["remainder_l2"]
    )


def test_clean_replaces_anomalies(anomalized):
    ret = clean_anomalies(anomalized)

    assert ret.columns[-1] == "observed_cleaned"
    anomalies = ret["anomaly"] == "Yes"
    np.testing.assert_allclose(
        ret.loc[anomalies, "observed_cleaned"],
        ret.loc[anomalies, "season"] + ret.loc[anomalies, "trend"],
    )
    np.testing.assert_array_equal(
        ret.loc[~anomalies, "observed_cleaned"], ret.loc[~anomalies, "observed"]
    )


def test_clean_without_anomalies_keeps_observed():
    frame = _band_frame(np.zeros(10), DecompositionKind.STL)
    ret = clean_anomalies(frame)
    np.testing.assert_array_equal(ret["observed_cleaned"], frame["observed"])


def test_clean_is_idempotent(anomalized):
    once = clean_anomalies(anomalized)
    twice = clean_anomalies(once)
    np.testing.assert_array_equal(once["observed_cleaned"], twice["observed_cleaned"])


def test_clean_twitter():
    remainder = np.array([0.0, 5.0, 0.0, -3.0, 0.0])
    frame = _band_frame(remainder).rename(columns={"trend": "median_spans"})
    ret = clean_anomalies(frame)
    np.testing.assert_allclose(ret["observed_cleaned"], [0.0, 1.0, 2.0, 3.0, 4.0])


@pytest.mark.parametrize("column", ["observed", "season", "anomaly"])
def test_clean_missing_columns(anomalized, column):
    with pytest.raises(InvalidInputError, match=column):
        clean_anomalies(anomalized.drop(columns=[column]))


def test_clean_requires_trend_column(anomalized):
    with pytest.raises(InvalidInputError, match="median_spans"):
        clean_anomalies(anomalized.drop(columns=["trend"]))


def test_clean_grouped(grouped_downloads):
    decomposed = time_decompose(grouped_downloads, "count", method="twitter")
    anomalized = anomalize(decomposed.groupby("package"), "remainder")
    ret = clean_anomalies(anomalized.groupby("package"))

    assert len(ret) == 6375
    assert ret.attrs["decomposition"] is DecompositionKind.TWITTER
    anomalies = ret["anomaly"] == "Yes"
    np.testing.assert_allclose(
        ret.loc[anomalies, "observed_cleaned"],
        ret.loc[anomalies, "season"] + ret.loc[anomalies, "median_spans"],
    )
