"""
Generalized Extreme Studentized Deviate (GESD) outlier detection.

Runs r = floor(n * max_anoms) iterations. Each iteration removes the value
furthest from the median of the remaining values, scaled by their MAD, and
compares that statistic with a Student's t based critical value. The number
of outliers is the largest iteration whose statistic exceeds its critical
value; every value removed up to that iteration is an outlier. The ranked
report labels each row by its own iteration's test, and the critical limits
are taken from that report.
"""

import logging

import numpy as np
import pandas as pd
from scipy import stats

from anomalize.helpers.exceptions import InsufficientDataError
from anomalize.timeSeriesProcessing.outlierDetection.methods.baseOutlierDetectionMethod import (
    BaseOutlierDetectionMethod,
)
from anomalize.timeSeriesProcessing.outlierDetection.outlierResult import (
    NO,
    YES,
    OutlierResult,
)

__version__ = "1.0.0"

# Consistency constant for the normal distribution
MAD_CONSTANT = 1.4826


class GesdMethod(BaseOutlierDetectionMethod):
    """
    Iterative detector: center and spread are re-estimated after every
    removal so large outliers cannot mask each other.
    """

    def critical_value(self, n: int, i: int) -> float:
        """lambda_i for iteration i (1-based) of a sample of n; NaN without degrees of freedom."""
        df = n - i - 1
        if df <= 0:
            return np.nan
        p = 1 - self.alpha / (2 * (n - i + 1))
        t = stats.t.ppf(p, df)
        return (n - i) * t / np.sqrt((n - i - 1 + t ** 2) * (n - i + 1))

    def detect(self, values) -> OutlierResult:
        x = self.validate_input(values, "gesd")
        n = len(x)
        r = int(np.trunc(n * self.max_anoms))
        if r == 0:
            raise InsufficientDataError(
                f"Error in gesd(): n * max_anoms = {n} * {self.max_anoms} < 1, "
                f"no value can be tested"
            )
        self.log_analysis_start(n, alpha=self.alpha, max_anoms=self.max_anoms, iterations=r)

        remaining = x.copy()
        positions = np.arange(n)

        removed_idx = np.empty(r, dtype=int)
        removed_val = np.empty(r)
        test_statistic = np.empty(r)
        critical_values = np.empty(r)
        medians = np.empty(r)
        mads = np.empty(r)
        n_outliers = 0

        for i in range(1, r + 1):
            median = np.median(remaining)
            mad = MAD_CONSTANT * stats.median_abs_deviation(remaining)
            z = np.abs(remaining - median) / (mad + self.NUMERICAL_EPSILON)

            # first position on ties
            k = int(np.argmax(z))

            removed_idx[i - 1] = positions[k]
            removed_val[i - 1] = remaining[k]
            test_statistic[i - 1] = z[k]
            medians[i - 1] = median
            mads[i - 1] = mad
            critical_values[i - 1] = self.critical_value(n, i)

            remaining = np.delete(remaining, k)
            positions = np.delete(positions, k)

            if not np.isnan(critical_values[i - 1]) and z[k] > critical_values[i - 1]:
                n_outliers = i

        logging.debug(f"{self} - {r} iterations, largest passing iteration = {n_outliers}")

        rank = np.arange(1, r + 1)
        # report rows are judged by their own iteration, the final flags by the cutoff
        passes_own_test = np.zeros(r, dtype=bool)
        valid = ~np.isnan(critical_values)
        passes_own_test[valid] = test_statistic[valid] > critical_values[valid]
        is_outlier = rank <= n_outliers
        limit_lower = medians - critical_values * mads
        limit_upper = critical_values * mads - medians

        report = pd.DataFrame(
            {
                "rank": rank,
                "index": removed_idx,
                "value": removed_val,
                "test_statistic": test_statistic,
                "critical_value": critical_values,
                "median": medians,
                "mad": mads,
                "limit_lower": limit_lower,
                "limit_upper": limit_upper,
                "outlier": np.where(passes_own_test, YES, NO),
                "direction": self.label_directions(
                    removed_val, passes_own_test, limit_lower, limit_upper
                ),
            }
        )

        reported = report.loc[is_outlier].copy()
        reported["direction"] = self.label_directions(
            removed_val[is_outlier], np.ones(n_outliers, dtype=bool),
            limit_lower[is_outlier], limit_upper[is_outlier],
        )

        result = self.build_result(
            n,
            reported=reported,
            critical_limits=self.select_critical_limits(report, "outlier"),
            report=report,
            additional_metadata={"iterations": r, "n_outliers": n_outliers},
        )
        self.log_analysis_complete(outliers=result.n_outliers, iterations=r)
        return result
