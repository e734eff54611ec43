"""
Median span decomposition: observed = season + median_spans + remainder.

The seasonal component comes from robust STL; its trend is replaced by a
step function holding the median observed value of each span.
"""

import logging

import numpy as np
import pandas as pd

from anomalize.helpers.utils import get_target_values
from anomalize.timeSeriesProcessing.decomposition.decompositionKind import (
    DecompositionKind,
)
from anomalize.timeSeriesProcessing.decomposition.methods.baseDecomposerMethod import (
    BaseDecomposerMethod,
)
from anomalize.timeSeriesProcessing.timeIndex.timeIndex import get_time_column

__version__ = "1.0.0"


class TwitterDecomposerMethod(BaseDecomposerMethod):
    """
    Seasonal component from STL, trend from medians over contiguous spans.

    Span medians ignore extreme points inside each span, which suits series
    where seasonality dominates long term drift.
    """

    KIND = DecompositionKind.TWITTER

    def process(
        self,
        data: pd.DataFrame,
        target: str,
        frequency: float,
        trend: float,
    ) -> pd.DataFrame:
        observed = get_target_values(data, target, "time_decompose")
        self.log_analysis_start(len(observed), frequency=frequency, trend=trend)

        period = self.get_period(frequency, len(observed))
        # only the seasonal component is kept
        season, _ = self.fit_stl(observed, period)

        median_spans = self.compute_median_spans(observed, trend)

        return self.prepare_decomposition_result(
            data,
            get_time_column(data),
            observed=observed,
            season=season,
            trend=median_spans,
        )

    def compute_median_spans(self, observed: np.ndarray, trend: float) -> np.ndarray:
        """
        Median of each of round(n / trend) contiguous spans, broadcast to its rows.

        Spans are nearly equal: the first n mod k spans hold one extra row.
        """
        n = len(observed)
        spans_needed = max(int(round(n / trend)), 1)

        groups = np.sort(np.resize(np.arange(spans_needed), n))
        median_spans = pd.Series(observed).groupby(groups).transform("median").to_numpy()

        logging.debug(f"{self} - median_spans: {spans_needed} spans over {n} observations")
        return median_spans
