"""
Outlier detection entry points.

iqr() and gesd() work on plain numeric vectors; anomalize() runs one of them
on a table column (usually the decomposition remainder) and appends the
critical limits and the Yes/No classification.
"""

import logging
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

import pandas as pd

from anomalize.helpers.configs import AnomalizeConfig
from anomalize.helpers.exceptions import InvalidInputError, UnsupportedMethodError
from anomalize.helpers.utils import (
    apply_by_group,
    ensure_single_frame,
    get_target_values,
    is_grouped,
)
from anomalize.timeSeriesProcessing.outlierDetection.methods.baseOutlierDetectionMethod import (
    BaseOutlierDetectionMethod,
)
from anomalize.timeSeriesProcessing.outlierDetection.methods.gesdMethod import GesdMethod
from anomalize.timeSeriesProcessing.outlierDetection.methods.iqrMethod import IqrMethod
from anomalize.timeSeriesProcessing.outlierDetection.outlierResult import OutlierResult

__version__ = "1.0.0"


class OutlierDetectionAlgorithm:
    """
    Selects and runs an outlier detection method.

    Methods: iqr (single pass, quartile limits), gesd (iterative, t-test limits)
    """

    AVAILABLE_METHODS: ClassVar[Dict[str, type]] = {
        "iqr": IqrMethod,
        "gesd": GesdMethod,
    }

    def __init__(
        self,
        method: Optional[str] = None,
        alpha: Optional[float] = None,
        max_anoms: Optional[float] = None,
    ):
        """
        Raises:
            UnsupportedMethodError: If the method is unknown
            InvalidInputError: If alpha or max_anoms are out of range
        """
        method = AnomalizeConfig.get_outlier_method(method)
        self.method_name = str(method).strip().lower()
        if self.method_name not in self.AVAILABLE_METHODS:
            raise UnsupportedMethodError(method, list(self.AVAILABLE_METHODS))

        self.config = {
            "alpha": AnomalizeConfig.get_alpha(alpha),
            "max_anoms": AnomalizeConfig.get_max_anoms(max_anoms),
        }
        self._methods = {}
        self._class_name = self.__class__.__name__

        # fail fast on out of range parameters
        self.get_method()

    def __str__(self) -> str:
        return f"{self._class_name}(method={self.method_name}, config={self.config})"

    def _get_method_instance(self, method_name: str) -> BaseOutlierDetectionMethod:
        """Lazy-loading with caching."""
        if method_name not in self._methods:
            method_class = self.AVAILABLE_METHODS[method_name]
            self._methods[method_name] = method_class(self.config)
        return self._methods[method_name]

    def get_method(self) -> BaseOutlierDetectionMethod:
        return self._get_method_instance(self.method_name)

    def detect(self, values: Any) -> OutlierResult:
        return self.get_method().detect(values)

    def process(self, data: Any, target: str) -> Tuple[pd.DataFrame, OutlierResult]:
        """
        Anomalize a single table.

        Returns:
            (table with {target}_l1, {target}_l2, anomaly columns, OutlierResult)
        """
        frame = ensure_single_frame(data, "anomalize")
        values = get_target_values(frame, target, "anomalize")

        result = self.detect(values)

        ret = frame.copy()
        ret[f"{target}_l1"] = result.limit_lower
        ret[f"{target}_l2"] = result.limit_upper
        ret["anomaly"] = result.outlier

        logging.debug(f"{self} - {result.n_outliers} anomalies in {len(ret)} rows")
        return ret, result

    def process_table(self, data: Any, target: str) -> pd.DataFrame:
        return self.process(data, target)[0]


def _detect(
    x: Any, method: str, alpha: float, max_anoms: float, verbose: bool
) -> Union[List[str], OutlierResult]:
    result = OutlierDetectionAlgorithm(method, alpha, max_anoms).detect(x)
    return result if verbose else result.outlier


def iqr(
    x: Any, alpha: float = 0.05, max_anoms: float = 0.2, verbose: bool = False
) -> Union[List[str], OutlierResult]:
    """
    Interquartile range outlier detection on a numeric vector.

    Args:
        x: Numeric vector without missing values
        alpha: Controls the width of the limits; smaller is more conservative
        max_anoms: Maximum share of values that may be reported
        verbose: Return the full OutlierResult instead of the Yes/No list

    Returns:
        List of "Yes"/"No" in input order, or OutlierResult

    Raises:
        InvalidInputError: Empty or non-numeric x, alpha or max_anoms out of range
    """
    return _detect(x, "iqr", alpha, max_anoms, verbose)


def gesd(
    x: Any, alpha: float = 0.05, max_anoms: float = 0.2, verbose: bool = False
) -> Union[List[str], OutlierResult]:
    """
    Generalized Extreme Studentized Deviate test on a numeric vector.

    Same arguments as iqr().

    Raises:
        InvalidInputError: Empty or non-numeric x, alpha or max_anoms out of range
        InsufficientDataError: If floor(len(x) * max_anoms) is zero
    """
    return _detect(x, "gesd", alpha, max_anoms, verbose)


def anomalize(
    data: Any,
    target: Optional[str] = None,
    method: Optional[str] = None,
    alpha: Optional[float] = None,
    max_anoms: Optional[float] = None,
    verbose: bool = False,
) -> Union[pd.DataFrame, Tuple[pd.DataFrame, OutlierResult]]:
    """
    Detect anomalies in a table column.

    Adds {target}_l1 and {target}_l2 (critical limits) and anomaly ("Yes"/"No").

    Args:
        data: pd.DataFrame or DataFrameGroupBy
        target: Numeric column, usually "remainder"
        method: "iqr" or "gesd"
        alpha: Limit width parameter, default 0.05
        max_anoms: Maximum share of anomalies, default 0.2
        verbose: Also return the OutlierResult (ignored for grouped input)

    Returns:
        Table, or (table, OutlierResult) when verbose

    Raises:
        InvalidInputError: Missing target or invalid parameters
        UnsupportedMethodError: Unknown method
    """
    if target is None:
        raise InvalidInputError(
            'Error in anomalize(): argument "target" is missing, with no default'
        )

    algorithm = OutlierDetectionAlgorithm(method, alpha, max_anoms)

    if is_grouped(data):
        if verbose:
            logging.warning(f"{algorithm} - Cannot use 'verbose = True' with grouped data.")
        return apply_by_group(data, algorithm.process_table, "anomalize", target=target)

    ret, result = algorithm.process(data, target)
    if verbose:
        return ret, result
    return ret
