"""
Decomposition entry point.

Resolves frequency and trend windows for a single series, runs the selected
method ("stl" or "twitter") and optionally merges the components onto the
input table. Grouped input is decomposed group by group.
"""

import logging
from typing import Any, ClassVar, Dict, Optional

import pandas as pd

from anomalize.helpers.configs import AnomalizeConfig
from anomalize.helpers.exceptions import (
    AnomalizeError,
    InvalidInputError,
    UnsupportedMethodError,
)
from anomalize.helpers.utils import (
    apply_by_group,
    ensure_single_frame,
    get_target_values,
    is_grouped,
    merge_two_frames,
)
from anomalize.timeSeriesProcessing.decomposition.methods.baseDecomposerMethod import (
    BaseDecomposerMethod,
)
from anomalize.timeSeriesProcessing.decomposition.methods.stlDecomposerMethod import (
    StlDecomposerMethod,
)
from anomalize.timeSeriesProcessing.decomposition.methods.twitterDecomposerMethod import (
    TwitterDecomposerMethod,
)
from anomalize.timeSeriesProcessing.periodicity.configPeriodicity import ScaleTemplate
from anomalize.timeSeriesProcessing.periodicity.periodResolver import (
    time_frequency,
    time_trend,
)
from anomalize.timeSeriesProcessing.timeIndex.timeIndex import (
    get_time_column,
    prep_tbl_time,
)

__version__ = "1.0.0"


class DecompositionAlgorithm:
    """
    Orchestrates period resolution and the decomposition methods.

    Methods: stl (loess trend), twitter (median span trend)
    """

    AVAILABLE_METHODS: ClassVar[Dict[str, type]] = {
        "stl": StlDecomposerMethod,
        "twitter": TwitterDecomposerMethod,
    }

    def __init__(self, method: Optional[str] = None, method_params: Optional[Dict[str, Any]] = None):
        """
        Args:
            method: Method name, AnomalizeConfig default when None
            method_params: STL overrides passed to the method

        Raises:
            UnsupportedMethodError: If the method is unknown
        """
        method = AnomalizeConfig.get_decompose_method(method)
        self.method_name = str(method).strip().lower()
        if self.method_name not in self.AVAILABLE_METHODS:
            raise UnsupportedMethodError(method, list(self.AVAILABLE_METHODS))

        self.method_params = dict(method_params or {})
        self._methods = {}
        self._class_name = self.__class__.__name__

    def __str__(self) -> str:
        return f"{self._class_name}(method={self.method_name})"

    def _get_method_instance(self, method_name: str) -> BaseDecomposerMethod:
        """Lazy-loading with caching."""
        if method_name not in self._methods:
            method_class = self.AVAILABLE_METHODS[method_name]
            self._methods[method_name] = method_class(self.method_params)
        return self._methods[method_name]

    def get_method(self) -> BaseDecomposerMethod:
        return self._get_method_instance(self.method_name)

    @property
    def kind(self):
        return self.AVAILABLE_METHODS[self.method_name].KIND

    def process(
        self,
        data: Any,
        target: str,
        frequency: Any = "auto",
        trend: Any = "auto",
        merge: bool = False,
        message: bool = True,
        template: Optional[ScaleTemplate] = None,
    ) -> pd.DataFrame:
        """
        Decompose a single series.

        Returns:
            Decomposition table, or the input with the components appended
            when merge=True
        """
        frame = prep_tbl_time(ensure_single_frame(data, "time_decompose"), message=message)
        get_target_values(frame, target, "time_decompose")
        method = self.get_method()

        try:
            resolved_frequency = time_frequency(frame, period=frequency, template=template, message=message)
            resolved_trend = time_trend(frame, period=trend, template=template, message=message)

            decomposed = method.process(frame, target, resolved_frequency, resolved_trend)

        except AnomalizeError:
            raise
        except Exception as e:
            raise method.handle_error(e, "time_decompose") from e

        if merge:
            merged = merge_two_frames(frame, decomposed, get_time_column(frame), "time_decompose")
            return self.kind.tag(merged)

        return decomposed


def time_decompose(
    data: Any,
    target: Optional[str] = None,
    method: Optional[str] = None,
    frequency: Any = "auto",
    trend: Any = "auto",
    merge: bool = False,
    message: Optional[bool] = None,
    template: Optional[ScaleTemplate] = None,
    **method_params,
) -> pd.DataFrame:
    """
    Decompose a time series into season, trend and remainder.

    Args:
        data: pd.DataFrame with a datetime column, or a DataFrameGroupBy
        target: Numeric column to decompose
        method: "stl" (trend column) or "twitter" (median_spans column)
        frequency: "auto", calendar span or number of observations per cycle
        trend: "auto", calendar span or number of observations per trend window
        merge: Append the components to the input instead of returning them alone
        message: Log resolved frequency and trend; off by default for grouped input
        template: Time scale template for "auto" resolution
        **method_params: STL overrides (robust, seasonal_deg, trend_deg,
            inner_iter, outer_iter)

    Returns:
        pd.DataFrame with columns time, observed, season, trend | median_spans,
        remainder (plus the group columns first for grouped input)

    Raises:
        InvalidInputError: Missing target, too short series, bad parameters
        UnsupportedMethodError: Unknown method
    """
    if target is None:
        raise InvalidInputError(
            'Error in time_decompose(): argument "target" is missing, with no default'
        )

    algorithm = DecompositionAlgorithm(method, method_params)
    # validates method_params before any group is processed
    algorithm.get_method()

    if is_grouped(data):
        ret = apply_by_group(
            data,
            algorithm.process,
            "time_decompose",
            target=target,
            frequency=frequency,
            trend=trend,
            merge=merge,
            message=False if message is None else message,
            template=template,
        )
        logging.info(f"{algorithm} - Decomposed {data.ngroups} groups, {len(ret)} rows")
        return algorithm.kind.tag(ret)

    return algorithm.process(
        data,
        target,
        frequency=frequency,
        trend=trend,
        merge=merge,
        message=AnomalizeConfig.get_message(message),
        template=template,
    )
