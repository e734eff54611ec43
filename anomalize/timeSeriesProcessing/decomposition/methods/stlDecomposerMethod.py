"""
Loess based decomposition: observed = season + trend + remainder.
"""

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


class StlDecomposerMethod(BaseDecomposerMethod):
    """
    Robust STL with a periodic seasonal window and the resolved trend
    window. Robustness weights keep outliers out of season and trend so
    they end up in the remainder.
    """

    KIND = DecompositionKind.STL

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
        trend_window = self.get_trend_window(trend, period)

        season, loess_trend = self.fit_stl(observed, period, trend_window)

        return self.prepare_decomposition_result(
            data,
            get_time_column(data),
            observed=observed,
            season=season,
            trend=loess_trend,
        )
