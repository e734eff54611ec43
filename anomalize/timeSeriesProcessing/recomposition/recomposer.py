"""
Recompose remainder limits onto the observed scale.

recomposed_l1 = season + trend (or median_spans) + remainder_l1
recomposed_l2 = season + trend (or median_spans) + remainder_l2

Every other column whose name contains "_l1" / "_l2" is added as well.
"""

import logging
from typing import Any, List, Optional

import pandas as pd

from anomalize.helpers.exceptions import InvalidInputError
from anomalize.helpers.utils import (
    apply_by_group,
    check_required_columns,
    ensure_single_frame,
    is_grouped,
)
from anomalize.timeSeriesProcessing.decomposition.decompositionKind import (
    DecompositionKind,
)

__version__ = "1.0.0"

REQUIRED_COLUMNS = ["observed", "remainder", "remainder_l1", "remainder_l2"]
RECOMPOSED_COLUMNS = ["recomposed_l1", "recomposed_l2"]


def get_component_columns(data: pd.DataFrame, kind: Optional[DecompositionKind]) -> List[str]:
    """
    Columns holding the expected value of the series.

    Taken from the decomposition kind when known, otherwise every column
    between observed and remainder.
    """
    if kind is not None:
        return kind.component_columns

    columns = list(data.columns)
    start, end = columns.index("observed"), columns.index("remainder")
    if start >= end:
        raise InvalidInputError(
            "Error in time_recompose(): 'observed' must come before 'remainder' "
            "when the decomposition kind is unknown."
        )
    return columns[start + 1:end]


def _band_columns(data: pd.DataFrame, components: List[str], suffix: str) -> List[str]:
    limits = [
        column for column in data.columns
        if suffix in str(column) and column not in RECOMPOSED_COLUMNS
    ]
    return components + [column for column in limits if column not in components]


def _recompose_single(data: pd.DataFrame, kind: Optional[DecompositionKind] = None) -> pd.DataFrame:
    data = ensure_single_frame(data, "time_recompose")
    check_required_columns(
        data,
        REQUIRED_COLUMNS,
        "time_recompose",
        hint="Make sure observed:remainder, remainder_l1 and remainder_l2 are present.",
    )

    if kind is None:
        kind = DecompositionKind.from_frame(data, "time_recompose")
    components = get_component_columns(data, kind)
    check_required_columns(data, components, "time_recompose")

    l1_columns = _band_columns(data, components, "_l1")
    l2_columns = _band_columns(data, components, "_l2")

    ret = data.copy()
    ret["recomposed_l1"] = data[l1_columns].sum(axis=1, skipna=False)
    ret["recomposed_l2"] = data[l2_columns].sum(axis=1, skipna=False)

    logging.debug(f"time_recompose - l1 = {' + '.join(map(str, l1_columns))}")
    return ret


def time_recompose(data: Any) -> pd.DataFrame:
    """
    Add recomposed_l1 and recomposed_l2 bands to an anomalized decomposition.

    Args:
        data: Output of time_decompose() followed by anomalize(target="remainder"),
            single table or DataFrameGroupBy

    Returns:
        pd.DataFrame with recomposed_l1, recomposed_l2 appended

    Raises:
        InvalidInputError: If observed, remainder, remainder_l1 or remainder_l2 is missing
    """
    if is_grouped(data):
        check_required_columns(data.obj, REQUIRED_COLUMNS, "time_recompose")
        kind = DecompositionKind.from_frame(data.obj, "time_recompose")
        ret = apply_by_group(data, _recompose_single, "time_recompose", kind=kind)
        return kind.tag(ret) if kind is not None else ret

    return _recompose_single(data)
