"""
Frequency and trend window resolution from the time index.
"""

from anomalize.timeSeriesProcessing.periodicity.configPeriodicity import (
    ScaleTemplate,
    get_time_scale_template,
    set_time_scale_template,
    time_scale_template,
)
from anomalize.timeSeriesProcessing.periodicity.periodResolver import (
    PeriodResolver,
    PeriodSpec,
    PeriodTarget,
    time_frequency,
    time_trend,
)

__all__ = [
    "PeriodResolver",
    "PeriodSpec",
    "PeriodTarget",
    "ScaleTemplate",
    "get_time_scale_template",
    "set_time_scale_template",
    "time_frequency",
    "time_scale_template",
    "time_trend",
]
