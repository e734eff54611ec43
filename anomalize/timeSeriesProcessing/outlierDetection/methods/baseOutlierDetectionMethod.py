"""
Base class for outlier detection methods operating on a numeric vector.

Provides:
- alpha / max_anoms validation
- Direction labelling against lower / upper limits
- Critical limit selection from a ranked report
- OutlierResult assembly
"""

import logging
from abc import abstractmethod
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from anomalize.helpers.configs import AnomalizeConfig
from anomalize.helpers.exceptions import InvalidInputError
from anomalize.helpers.utils import validate_required_locals
from anomalize.timeSeriesProcessing.baseModule.baseMethod import BaseTimeSeriesMethod
from anomalize.timeSeriesProcessing.outlierDetection.outlierResult import (
    DOWN,
    NO,
    UP,
    YES,
    OutlierResult,
)

__version__ = "1.0.0"


class BaseOutlierDetectionMethod(BaseTimeSeriesMethod):
    """
    Base class for all outlier detection methods.

    Subclasses implement detect() and return an OutlierResult.
    """

    DEFAULT_CONFIG = {
        **BaseTimeSeriesMethod.DEFAULT_CONFIG,
        "alpha": AnomalizeConfig.get_alpha(),
        "max_anoms": AnomalizeConfig.get_max_anoms(),
    }
    NUMERICAL_EPSILON = np.finfo(float).eps

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize outlier detection method.

        Args:
            config: alpha in (0, 1) and max_anoms in (0, 1]

        Raises:
            InvalidInputError: If alpha or max_anoms are out of range
        """
        super().__init__(config)

        validate_required_locals(["alpha", "max_anoms"], self.config)
        self.alpha = self._check_fraction(self.config["alpha"], "alpha", include_upper=False)
        self.max_anoms = self._check_fraction(self.config["max_anoms"], "max_anoms", include_upper=True)

    def __str__(self) -> str:
        return f"{self.name}(alpha={self.alpha}, max_anoms={self.max_anoms})"

    @staticmethod
    def _check_fraction(value: Any, name: str, include_upper: bool) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
            raise InvalidInputError(f"{name} must be a number, got {value!r}")
        value = float(value)
        upper_ok = value <= 1 if include_upper else value < 1
        if not (value > 0 and upper_ok):
            interval = "(0, 1]" if include_upper else "(0, 1)"
            raise InvalidInputError(f"{name} must be in {interval}, got {value}")
        return value

    def process(self, values: Any) -> OutlierResult:
        return self.detect(values)

    @abstractmethod
    def detect(self, values: Any) -> OutlierResult:
        """
        Classify every value as outlier or not.

        Args:
            values: Numeric vector (usually a decomposition remainder)

        Returns:
            OutlierResult
        """
        pass

    @staticmethod
    def label_directions(
        values: np.ndarray,
        is_outlier: np.ndarray,
        limit_lower: np.ndarray,
        limit_upper: np.ndarray,
    ) -> np.ndarray:
        """
        Direction of each outlier: Up above limit_upper (checked first), Down
        below limit_lower, None for everything else.
        """
        up = is_outlier & (values > limit_upper)
        down = is_outlier & ~up & (values < limit_lower)

        directions = np.full(len(values), None, dtype=object)
        directions[up] = UP
        directions[down] = DOWN
        return directions

    @staticmethod
    def select_critical_limits(report: pd.DataFrame, candidate_column: str) -> Dict[str, float]:
        """
        Limits of the first ranked row that is not a candidate outlier,
        or of the last row when every row is a candidate.
        """
        non_outliers = report[report[candidate_column] == NO]
        row = non_outliers.iloc[0] if len(non_outliers) else report.iloc[-1]
        return {
            "limit_lower": float(row["limit_lower"]),
            "limit_upper": float(row["limit_upper"]),
        }

    def build_result(
        self,
        n: int,
        reported: pd.DataFrame,
        critical_limits: Dict[str, float],
        report: pd.DataFrame,
        additional_metadata: Optional[Dict[str, Any]] = None,
    ) -> OutlierResult:
        """
        Assemble an OutlierResult.

        Args:
            n: Number of input values
            reported: Report rows classified "Yes", in report order
            critical_limits: Selected lower / upper limits
            report: Full ranked report
            additional_metadata: Method specific details
        """
        flags = np.full(n, NO, dtype=object)
        flags[reported["index"].to_numpy(dtype=int)] = YES

        result = OutlierResult(
            outlier=flags.tolist(),
            outlier_idx=reported["index"].astype(int).tolist(),
            outlier_vals=reported["value"].astype(float).tolist(),
            outlier_direction=reported["direction"].tolist(),
            critical_limits=critical_limits,
            outlier_report=report.reset_index(drop=True),
            metadata=self.create_standard_metadata(n, additional_metadata),
        )

        logging.debug(
            f"{self} - {result.n_outliers} outliers in {n} values, limits={critical_limits}"
        )
        return result
