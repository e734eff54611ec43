"""
Base class for time series decomposition methods.

Inherits common functionality from BaseTimeSeriesMethod.
Defines the STL fit shared by both decomposition strategies and the
standard result table: time, observed, season, trend | median_spans, remainder.
"""

import logging
import math
from abc import abstractmethod
from typing import Any, ClassVar, Dict, Optional, Tuple

import numpy as np
import pandas as pd
from statsmodels.tsa.seasonal import STL

from anomalize.helpers.configs import AnomalizeConfig
from anomalize.helpers.exceptions import InvalidInputError
from anomalize.helpers.utils import validate_required_locals
from anomalize.timeSeriesProcessing.baseModule.baseMethod import BaseTimeSeriesMethod
from anomalize.timeSeriesProcessing.decomposition.decompositionKind import (
    DecompositionKind,
)

__version__ = "1.0.0"


MIN_FREQUENCY = 2  # STL needs at least two observations per cycle
MIN_PERIODS = 2  # STL needs at least two full cycles
MIN_WINDOW_SIZE = 3  # Smallest odd loess window
PERIODIC_SEASONAL_FACTOR = 10  # seasonal = 10 * n + 1 approximates a periodic window


class BaseDecomposerMethod(BaseTimeSeriesMethod):
    """
    Base class for time series decomposition methods.

    Subclasses set KIND and implement process().
    """

    KIND: ClassVar[DecompositionKind]

    DEFAULT_CONFIG = {
        **BaseTimeSeriesMethod.DEFAULT_CONFIG,
        **AnomalizeConfig.get_stl_config(),
        "trend_deg": 1,
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize decomposition method.

        Args:
            config: STL overrides (robust, seasonal_deg, trend_deg, inner_iter, outer_iter)

        Raises:
            InvalidInputError: If an unknown or invalid setting is passed
        """
        unknown = sorted(set(config or {}) - set(self.DEFAULT_CONFIG))
        if unknown:
            raise InvalidInputError(
                f"Unknown parameters for {self.__class__.__name__}: {unknown}. "
                f"Allowed: {sorted(self.DEFAULT_CONFIG)}"
            )

        super().__init__(config)

        validate_required_locals(
            ["robust", "seasonal_deg", "trend_deg", "inner_iter", "outer_iter"], self.config
        )
        self._validate_config()

    def __str__(self) -> str:
        return (
            f"{self.name}(robust={self.config['robust']}, "
            f"inner_iter={self.config['inner_iter']}, outer_iter={self.config['outer_iter']})"
        )

    def _validate_config(self) -> None:
        for param in ["seasonal_deg", "trend_deg"]:
            if self.config[param] not in (0, 1):
                raise InvalidInputError(
                    f"{self.name} {param} must be 0 or 1, got {self.config[param]}"
                )

        for param in ["inner_iter", "outer_iter"]:
            value = self.config[param]
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 0:
                raise InvalidInputError(
                    f"{self.name} {param} must be a non-negative integer, got {value}"
                )

    @abstractmethod
    def process(
        self,
        data: pd.DataFrame,
        target: str,
        frequency: float,
        trend: float,
    ) -> pd.DataFrame:
        """
        Decompose the target column of a prepared single series table.

        Args:
            data: Table returned by prep_tbl_time
            target: Numeric column to decompose
            frequency: Resolved observations per seasonal cycle
            trend: Resolved observations per trend window

        Returns:
            Decomposition table tagged with KIND
        """
        pass

    def get_period(self, frequency: float, data_length: int) -> int:
        """
        Convert a resolved frequency into an STL period.

        Fractional calendar medians are rounded half up (30.5 -> 31).

        Raises:
            InvalidInputError: If frequency < 2 or the series is shorter than two periods
        """
        period = int(math.floor(frequency + 0.5))
        if period < MIN_FREQUENCY:
            raise InvalidInputError(
                f"Error in time_decompose(): frequency must be at least {MIN_FREQUENCY} "
                f"observations per cycle, got {frequency}. The series is too short or "
                f"has no seasonality at this time scale; set frequency explicitly."
            )
        if data_length < MIN_PERIODS * period:
            raise InvalidInputError(
                f"Error in time_decompose(): series has {data_length} observations, "
                f"at least {MIN_PERIODS * period} needed for frequency = {period}"
            )
        return period

    @staticmethod
    def get_trend_window(trend: float, period: int) -> int:
        """Odd loess trend window of at least `trend` observations, larger than the period."""
        window = max(int(math.ceil(trend)), period + 1, MIN_WINDOW_SIZE)
        if window % 2 == 0:
            window += 1
        return window

    def fit_stl(
        self, values: np.ndarray, period: int, trend_window: Optional[int] = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Robust STL with a periodic seasonal component.

        inner_iter / outer_iter apply to the robust fit only; robust=False
        runs a single non-robust pass. The fitted seasonal values are averaged per position in the cycle so
        the season repeats exactly every `period` observations.

        Args:
            values: Observed values
            period: Seasonal period
            trend_window: Odd trend window, statsmodels default when None

        Returns:
            Tuple[season, trend]
        """
        seasonal_window = PERIODIC_SEASONAL_FACTOR * len(values) + 1

        logging.debug(
            f"{self} - STL: period={period}, seasonal={seasonal_window}, trend={trend_window}"
        )

        stl = STL(
            values,
            period=period,
            seasonal=seasonal_window,
            trend=trend_window,
            seasonal_deg=self.config["seasonal_deg"],
            trend_deg=self.config["trend_deg"],
            robust=self.config["robust"],
        )
        # without robust weights statsmodels picks its own loop counts (2 inner, 0 outer)
        if self.config["robust"]:
            fit = stl.fit(
                inner_iter=self.config["inner_iter"], outer_iter=self.config["outer_iter"]
            )
        else:
            fit = stl.fit()

        cycle_position = np.arange(len(values)) % period
        season = (
            pd.Series(np.asarray(fit.seasonal)).groupby(cycle_position).transform("mean").to_numpy()
        )
        return season, np.asarray(fit.trend)

    def prepare_decomposition_result(
        self,
        data: pd.DataFrame,
        time_column: str,
        observed: np.ndarray,
        season: np.ndarray,
        trend: np.ndarray,
    ) -> pd.DataFrame:
        """
        Build the standard decomposition table.

        remainder is computed as observed - season - trend so the additive
        identity holds exactly.
        """
        remainder = observed - season - trend

        result = pd.DataFrame(
            {
                time_column: data[time_column].to_numpy(),
                "observed": observed,
                "season": season,
                self.KIND.trend_column: trend,
                "remainder": remainder,
            },
            index=data.index,
        )

        self.log_analysis_complete(
            kind=self.KIND.value,
            remainder_sd=round(float(np.std(remainder)), 6),
        )
        return self.KIND.tag(result)
