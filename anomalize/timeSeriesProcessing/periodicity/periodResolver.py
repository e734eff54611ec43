"""
Period resolver: turn a frequency or trend request into a number of observations.

A request is "auto", a calendar span ("1 week", "3 months") or a raw count.
Auto requests are looked up in the time scale template for the series' scale
and checked for data sufficiency:

- frequency: at least 3 cycles, otherwise retry with the preceding template
  row, otherwise frequency = 1
- trend: at least 2 trend windows, otherwise retry with the preceding
  template row (rounded up), otherwise trend = number of observations
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Dict, Optional, Union

import pandas as pd

from anomalize.helpers.configs import AnomalizeConfig
from anomalize.helpers.exceptions import AnomalizeError, InvalidInputError
from anomalize.helpers.utils import ensure_single_frame
from anomalize.timeSeriesProcessing.baseModule.baseMethod import BaseTimeSeriesMethod
from anomalize.timeSeriesProcessing.periodicity.configPeriodicity import (
    ScaleTemplate,
    get_time_scale_template,
)
from anomalize.timeSeriesProcessing.timeIndex.timeIndex import (
    CalendarSpan,
    get_time_column,
    get_timeseries_summary,
    median_bucket_size,
    parse_calendar_span,
    prep_tbl_time,
)

__version__ = "1.0.0"


class PeriodTarget(Enum):
    FREQUENCY = "frequency"
    TREND = "trend"


@dataclass(frozen=True)
class PeriodSpec:
    """
    Normalised period request.

    kind is one of "auto", "calendar" (value is a CalendarSpan) or "count"
    (value is a positive number of observations).
    """

    kind: str
    value: Union[None, CalendarSpan, int, float] = None

    AUTO = "auto"
    CALENDAR = "calendar"
    COUNT = "count"

    @classmethod
    def parse(cls, period: Any) -> "PeriodSpec":
        """
        Normalise "auto", a calendar span string or a positive number.

        Raises:
            InvalidInputError: On non-positive counts or unparsable spans
        """
        if isinstance(period, PeriodSpec):
            return period

        if period is None:
            raise InvalidInputError('period must be "auto", a calendar span or a positive number')

        if isinstance(period, CalendarSpan):
            return cls(kind=cls.CALENDAR, value=period)

        if isinstance(period, str):
            if period.strip().lower() == cls.AUTO:
                return cls(kind=cls.AUTO)
            return cls(kind=cls.CALENDAR, value=parse_calendar_span(period))

        if isinstance(period, bool) or not isinstance(period, Real):
            raise InvalidInputError(
                f'period must be "auto", a calendar span or a positive number, got {period!r}'
            )

        if math.isnan(period) or period <= 0:
            raise InvalidInputError(f"period must be a positive number, got {period}")

        return cls(kind=cls.COUNT, value=period)


class PeriodResolver(BaseTimeSeriesMethod):
    """
    Resolve frequency and trend windows for a single time series.
    """

    DEFAULT_CONFIG = {
        **BaseTimeSeriesMethod.DEFAULT_CONFIG,
        "frequency_min_cycles": 3,  # n >= 3 * frequency
        "trend_min_cycles": 2,  # n / trend >= 2
    }

    def process(self, data: Any, period: Any = "auto", target: Any = PeriodTarget.FREQUENCY,
                template: Optional[ScaleTemplate] = None, message: bool = False) -> Union[int, float]:
        return self.resolve(data, period, target, template=template, message=message)

    def resolve(
        self,
        data: Any,
        period: Any = "auto",
        target: Any = PeriodTarget.FREQUENCY,
        template: Optional[ScaleTemplate] = None,
        message: bool = False,
    ) -> Union[int, float]:
        """
        Resolve a period request into a number of observations.

        Args:
            data: Single time series table
            period: "auto", calendar span or positive number
            target: PeriodTarget (or its string value)
            template: Time scale template; the process-wide default when None
            message: Log the resolved value at INFO

        Returns:
            Number of observations (int, or float for fractional medians)

        Raises:
            InvalidInputError: On grouped or non-tabular input, missing time
                column or invalid period
            InsufficientDataError: If the time scale cannot be inferred
        """
        try:
            target = PeriodTarget(target.value if isinstance(target, PeriodTarget) else target)
        except ValueError as e:
            raise InvalidInputError(
                f"Unknown period target '{target}'. Expected one of {[t.value for t in PeriodTarget]}"
            ) from e
        operation = f"time_{target.value}"

        try:
            frame = prep_tbl_time(ensure_single_frame(data, operation))
            spec = PeriodSpec.parse(period)
            template = self._get_template(template)

            summary = get_timeseries_summary(frame)
            times = frame[get_time_column(frame)]
            self.log_analysis_start(summary["n_obs"], scale=summary["scale"].value, spec=spec.kind)

            if spec.kind == PeriodSpec.COUNT:
                value = spec.value
            elif spec.kind == PeriodSpec.CALENDAR:
                value = median_bucket_size(times, spec.value)
            else:
                value = self._resolve_auto(times, summary, target, template)

        except AnomalizeError as e:
            raise self.handle_error(e, operation)
        except Exception as e:
            raise self.handle_error(e, operation) from e

        if message:
            logging.info(f"{target.value} = {value} {summary['scale'].value}s")

        self.log_analysis_complete(target=target.value, value=value)
        return value

    def _get_template(self, template: Any) -> ScaleTemplate:
        if template is None:
            return get_time_scale_template()
        if isinstance(template, pd.DataFrame):
            return ScaleTemplate.from_frame(template)
        if not isinstance(template, ScaleTemplate):
            raise InvalidInputError(
                f"template must be a ScaleTemplate or DataFrame, got {type(template).__name__}"
            )
        return template

    def _is_sufficient(self, n_obs: int, value: Union[int, float], target: PeriodTarget) -> bool:
        if target is PeriodTarget.FREQUENCY:
            return n_obs >= self.config["frequency_min_cycles"] * value
        return n_obs / value >= self.config["trend_min_cycles"]

    def _resolve_auto(
        self,
        times: pd.Series,
        summary: Dict[str, Any],
        target: PeriodTarget,
        template: ScaleTemplate,
    ) -> Union[int, float]:
        n_obs = summary["n_obs"]
        scale = summary["scale"]

        span = template.lookup(scale, target.value)
        value = median_bucket_size(times, span)
        logging.debug(f"{self} - {target.value}: template span {span} -> {value}")

        if not self._is_sufficient(n_obs, value, target):
            span = template.lookup(scale, target.value, index_shift=1)
            if span is not None:
                value = median_bucket_size(times, span)
                if target is PeriodTarget.TREND:
                    value = math.ceil(value)
                logging.debug(f"{self} - {target.value}: fallback span {span} -> {value}")

        if not self._is_sufficient(n_obs, value, target):
            value = 1 if target is PeriodTarget.FREQUENCY else n_obs
            logging.debug(f"{self} - {target.value}: insufficient data, using {value}")

        return value


def time_frequency(
    data: Any,
    period: Any = "auto",
    template: Optional[ScaleTemplate] = None,
    message: Optional[bool] = True,
) -> Union[int, float]:
    """
    Resolve the seasonal frequency of a single time series.

    Args:
        data: pd.DataFrame with a datetime column (or a Series with DatetimeIndex)
        period: "auto", calendar span such as "1 week", or a number of observations
        template: Time scale template; the process-wide default when None
        message: Log "frequency = N <scale>s" at INFO

    Returns:
        Number of observations per seasonal cycle
    """
    return PeriodResolver().resolve(
        data, period, PeriodTarget.FREQUENCY, template=template,
        message=AnomalizeConfig.get_message(message),
    )


def time_trend(
    data: Any,
    period: Any = "auto",
    template: Optional[ScaleTemplate] = None,
    message: Optional[bool] = True,
) -> Union[int, float]:
    """
    Resolve the trend window of a single time series.

    Same arguments as time_frequency(); logs "trend = N <scale>s".
    """
    return PeriodResolver().resolve(
        data, period, PeriodTarget.TREND, template=template,
        message=AnomalizeConfig.get_message(message),
    )
