"""
Apply a reducer over calendar spans or fixed-size blocks of observations.
"""

import logging
from functools import partial
from typing import Any, Callable, Union

import numpy as np
import pandas as pd

from anomalize.helpers.exceptions import InvalidInputError
from anomalize.helpers.utils import apply_by_group, get_target_values, is_grouped
from anomalize.timeSeriesProcessing.timeIndex.timeIndex import (
    collapse_by,
    get_time_column,
    prep_tbl_time,
)

__version__ = "1.0.0"


def _time_apply_single(
    data: pd.DataFrame,
    target: str,
    period: Union[str, int],
    func: Callable[..., Any],
    **func_kwargs,
) -> pd.DataFrame:
    frame = prep_tbl_time(data)
    get_target_values(frame, target, "time_apply")

    if isinstance(period, str):
        groups = collapse_by(frame[get_time_column(frame)], period)
    else:
        if isinstance(period, bool) or not isinstance(period, (int, np.integer)) or period < 1:
            raise InvalidInputError(
                f"Error in time_apply(): period must be a calendar span or a positive integer, got {period!r}"
            )
        # every `period` observations form one block
        groups = np.arange(len(frame)) // int(period)

    values = frame[target].reset_index(drop=True)
    applied = values.groupby(groups).transform(lambda block: func(block, **func_kwargs))

    ret = frame.copy()
    ret["time_apply"] = applied.to_numpy()

    logging.debug(
        f"time_apply - Applied {getattr(func, '__name__', func)} over "
        f"{len(np.unique(groups))} periods of {period}"
    )
    return ret


def time_apply(
    data: Any,
    target: str,
    period: Union[str, int],
    func: Callable[..., Any],
    **func_kwargs,
) -> pd.DataFrame:
    """
    Apply a function to a target column over time periods.

    Every row receives the value of `func` computed on its period, in a new
    `time_apply` column.

    Args:
        data: Single series table or DataFrameGroupBy
        target: Numeric column to summarise
        period: Calendar span (e.g. "1 week") or number of observations per block
        func: Reducer called on each period's values (e.g. np.median)
        **func_kwargs: Passed to func

    Returns:
        pd.DataFrame with the added `time_apply` column

    Raises:
        InvalidInputError: On missing target or invalid period
    """
    if func is None or not callable(func):
        raise InvalidInputError('Error in time_apply(): argument "func" must be callable')

    if is_grouped(data):
        apply_single = partial(
            _time_apply_single, target=target, period=period, func=func, **func_kwargs
        )
        return apply_by_group(data, apply_single, "time_apply")

    return _time_apply_single(data, target, period, func, **func_kwargs)
