"""
Interquartile range outlier detection.

Limits are q1 - factor * iqr and q3 + factor * iqr with factor = 0.15 / alpha
(factor 3 at alpha = 0.05). Values on or beyond a limit are candidates; only
the top max_anoms share of the ranking may be reported.
"""

import numpy as np
import pandas as pd

from anomalize.timeSeriesProcessing.outlierDetection.methods.baseOutlierDetectionMethod import (
    BaseOutlierDetectionMethod,
)
from anomalize.timeSeriesProcessing.outlierDetection.outlierResult import (
    NO,
    YES,
    OutlierResult,
)

__version__ = "1.0.0"

QUARTILES = (0.25, 0.75)
ALPHA_FACTOR_SCALE = 0.15

REPORT_COLUMNS = ["rank", "index", "value", "limit_lower", "limit_upper", "outlier", "direction"]


class IqrMethod(BaseOutlierDetectionMethod):
    """
    Quartile based detector: a single pass with fixed limits.
    """

    def detect(self, values) -> OutlierResult:
        x = self.validate_input(values, "iqr")
        n = len(x)
        self.log_analysis_start(n, alpha=self.alpha, max_anoms=self.max_anoms)

        q1, q3 = np.quantile(x, QUARTILES)
        iq_range = q3 - q1
        factor = ALPHA_FACTOR_SCALE / self.alpha
        limit_lower = q1 - factor * iq_range
        limit_upper = q3 + factor * iq_range

        abs_diff_lower = np.where(x <= limit_lower, np.abs(x - limit_lower), 0.0)
        abs_diff_upper = np.where(x >= limit_upper, np.abs(x - limit_upper), 0.0)
        max_abs_diff = np.where(abs_diff_lower > abs_diff_upper, abs_diff_lower, abs_diff_upper)

        # rank by distance from the centre of the limits
        centerline = (limit_upper + limit_lower) / 2
        rank_order = np.argsort(-np.abs(x - centerline), kind="stable")

        table = pd.DataFrame(
            {
                "rank": np.arange(1, n + 1),
                "index": rank_order,
                "value": x[rank_order],
                "limit_lower": limit_lower,
                "limit_upper": limit_upper,
                "max_abs_diff": max_abs_diff[rank_order],
            }
        )
        table = table.iloc[np.argsort(-table["max_abs_diff"].to_numpy(), kind="stable")]
        table = table.reset_index(drop=True)

        is_candidate = table["max_abs_diff"].to_numpy() > 0
        below_max_anoms = np.arange(1, n + 1) / n <= self.max_anoms
        is_reported = is_candidate & below_max_anoms

        table["candidate"] = np.where(is_candidate, YES, NO)
        table["outlier"] = np.where(is_reported, YES, NO)
        table["direction"] = self.label_directions(
            table["value"].to_numpy(), is_reported, limit_lower, limit_upper
        )

        critical_limits = self.select_critical_limits(table, "candidate")
        report = table.loc[below_max_anoms, REPORT_COLUMNS]

        result = self.build_result(
            n,
            reported=table.loc[is_reported],
            critical_limits=critical_limits,
            report=report,
            additional_metadata={
                "q1": float(q1),
                "q3": float(q3),
                "iqr": float(iq_range),
                "factor": factor,
                "n_candidates": int(is_candidate.sum()),
            },
        )
        self.log_analysis_complete(outliers=result.n_outliers, candidates=int(is_candidate.sum()))
        return result
