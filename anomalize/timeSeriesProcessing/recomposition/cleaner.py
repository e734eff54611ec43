"""
Replace anomalies with their seasonal + trend reconstruction.
"""

import logging
from typing import Any, Optional

import numpy as np
import pandas as pd

from anomalize.helpers.exceptions import InvalidInputError
from anomalize.helpers.utils import (
    apply_by_group,
    check_required_columns,
    ensure_single_frame,
    is_grouped,
)
from anomalize.timeSeriesProcessing.decomposition.decompositionKind import (
    DecompositionKind,
)
from anomalize.timeSeriesProcessing.outlierDetection.outlierResult import YES

__version__ = "1.0.0"

REQUIRED_COLUMNS = ["observed", "season", "anomaly"]


def _get_kind(data: pd.DataFrame) -> DecompositionKind:
    kind = DecompositionKind.from_frame(data, "clean_anomalies")
    if kind is None:
        raise InvalidInputError(
            "Error in clean_anomalies(): data must contain a 'trend' or 'median_spans' "
            "column. Use time_decompose() before anomalize()."
        )
    return kind


def _clean_single(data: pd.DataFrame, kind: Optional[DecompositionKind] = None) -> pd.DataFrame:
    data = ensure_single_frame(data, "clean_anomalies")
    check_required_columns(
        data,
        REQUIRED_COLUMNS,
        "clean_anomalies",
        hint="Use time_decompose() and anomalize() first.",
    )
    if kind is None:
        kind = _get_kind(data)

    is_anomaly = (data["anomaly"] == YES).to_numpy()
    reconstruction = data["season"] + data[kind.trend_column]

    ret = data.copy()
    ret["observed_cleaned"] = np.where(is_anomaly, reconstruction, data["observed"])

    logging.debug(
        f"clean_anomalies - Replaced {int(is_anomaly.sum())} anomalies with "
        f"season + {kind.trend_column}"
    )
    return ret


def clean_anomalies(data: Any) -> pd.DataFrame:
    """
    Add observed_cleaned: season + trend (or median_spans) where anomaly is "Yes",
    observed elsewhere.

    Args:
        data: Decomposed and anomalized table, or DataFrameGroupBy

    Returns:
        pd.DataFrame with observed_cleaned appended

    Raises:
        InvalidInputError: If observed, season, anomaly or the trend column is missing
    """
    if is_grouped(data):
        check_required_columns(data.obj, REQUIRED_COLUMNS, "clean_anomalies")
        kind = _get_kind(data.obj)
        return kind.tag(apply_by_group(data, _clean_single, "clean_anomalies", kind=kind))

    return _clean_single(data)
