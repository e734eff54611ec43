"""
anomalize: time series anomaly detection.

Workflow on a table with a datetime column and a numeric target:

    decomposed = time_decompose(df, "count", method="stl")
    anomalized = anomalize(decomposed, "remainder", method="iqr")
    recomposed = time_recompose(anomalized)
    cleaned = clean_anomalies(anomalized)

Every step also accepts a pandas DataFrameGroupBy and runs per group.
"""

from anomalize.helpers.exceptions import (
    AnomalizeError,
    InsufficientDataError,
    InvalidInputError,
    UnsupportedMethodError,
)
from anomalize.timeSeriesProcessing.decomposition import (
    DecompositionKind,
    time_decompose,
)
from anomalize.timeSeriesProcessing.outlierDetection import (
    OutlierResult,
    anomalize,
    gesd,
    iqr,
)
from anomalize.timeSeriesProcessing.periodicity import (
    PeriodSpec,
    ScaleTemplate,
    get_time_scale_template,
    set_time_scale_template,
    time_frequency,
    time_scale_template,
    time_trend,
)
from anomalize.timeSeriesProcessing.recomposition import clean_anomalies, time_recompose
from anomalize.timeSeriesProcessing.timeIndex import TimeScale, prep_tbl_time, time_apply

__version__ = "1.0.0"

__all__ = [
    "AnomalizeError",
    "DecompositionKind",
    "InsufficientDataError",
    "InvalidInputError",
    "OutlierResult",
    "PeriodSpec",
    "ScaleTemplate",
    "TimeScale",
    "UnsupportedMethodError",
    "anomalize",
    "clean_anomalies",
    "gesd",
    "get_time_scale_template",
    "iqr",
    "prep_tbl_time",
    "set_time_scale_template",
    "time_apply",
    "time_decompose",
    "time_frequency",
    "time_recompose",
    "time_scale_template",
    "time_trend",
]
