import logging
from typing import Any, Callable, Iterable, List

import numpy as np
import pandas as pd
from pandas.core.groupby import DataFrameGroupBy

from anomalize.helpers.exceptions import InvalidInputError


def validate_required_locals(required_params: list, input_params: dict):
    """
    Validation through locals() - the most efficient way

    Usage:
        validate_required_locals(['data', 'target'], locals())
    """
    missing_params = [
        param
        for param in required_params
        if param not in input_params or input_params[param] is None
    ]
    if missing_params:
        raise InvalidInputError(f"Required parameters missing: {missing_params}")


def is_grouped(data: Any) -> bool:
    return isinstance(data, DataFrameGroupBy)


def ensure_single_frame(data: Any, operation: str) -> pd.DataFrame:
    """
    Check that data is a single, non-grouped table.

    A pd.Series is accepted and converted into a frame; a Series with a
    DatetimeIndex keeps its index as the time column.

    Args:
        data: Object passed by the caller
        operation: Name of the public operation, used in error messages

    Returns:
        pd.DataFrame

    Raises:
        InvalidInputError: If data is grouped or not tabular
    """
    if is_grouped(data):
        raise InvalidInputError(
            f"Error {operation}(): Cannot use on a grouped data frame. "
            f"Object must be a single, non-grouped series."
        )

    if isinstance(data, pd.Series):
        name = data.name if data.name is not None else "value"
        frame = data.to_frame(name=name)
        if isinstance(frame.index, pd.DatetimeIndex):
            frame = frame.reset_index()
        return frame

    if not isinstance(data, pd.DataFrame):
        raise InvalidInputError(
            f"Error {operation}(): Object must be a pandas DataFrame, got {type(data).__name__}."
        )

    return data


def check_required_columns(
    data: pd.DataFrame, required: Iterable[str], operation: str, hint: str = ""
) -> None:
    """Raise InvalidInputError naming the columns of `required` absent from data."""
    missing = [name for name in required if name not in data.columns]
    if missing:
        message = f"Error {operation}(): Output does not contain columns named {missing}."
        if hint:
            message = f"{message} {hint}"
        raise InvalidInputError(message)


def get_target_values(data: pd.DataFrame, target: str, operation: str) -> np.ndarray:
    """
    Pull a numeric target column as a float array.

    Raises:
        InvalidInputError: If the target is missing, not numeric or has missing values
    """
    if target is None:
        raise InvalidInputError(
            f'Error in {operation}(): argument "target" is missing, with no default'
        )
    if target not in data.columns:
        raise InvalidInputError(
            f"Error in {operation}(): target column '{target}' not found in data. "
            f"Available columns: {list(data.columns)}"
        )

    column = data[target]
    if not pd.api.types.is_numeric_dtype(column) or pd.api.types.is_bool_dtype(column):
        raise InvalidInputError(
            f"Error in {operation}(): target column '{target}' must be numeric, got {column.dtype}"
        )
    if column.isnull().any():
        raise InvalidInputError(
            f"Error in {operation}(): target column '{target}' has missing values"
        )

    return column.to_numpy(dtype=float)


def replace_duplicate_colnames(left: pd.DataFrame, right: pd.DataFrame) -> pd.DataFrame:
    """
    Rename columns of `right` that clash with `left`.

    Duplicates get "..1", "..2", ... appended until every name is unique.
    """
    name_list = list(left.columns) + list(right.columns)
    i = 1
    while len(set(name_list)) < len(name_list):
        seen = set()
        for position, name in enumerate(name_list):
            if name in seen:
                stripped = str(name).split("..")[0]
                name_list[position] = f"{stripped}..{i}"
            seen.add(name_list[position])
        i += 1

    renamed = right.copy()
    renamed.columns = name_list[len(left.columns):]
    return renamed


def merge_two_frames(
    left: pd.DataFrame, right: pd.DataFrame, time_column: str, operation: str
) -> pd.DataFrame:
    """
    Column-append `right` onto `left`.

    Both frames must describe the same rows in the same order. The time
    column of `right` is dropped, clashing names are de-duplicated.

    Raises:
        InvalidInputError: If the row counts differ
    """
    if len(left) != len(right):
        raise InvalidInputError(
            f"Error {operation}(): Could not join. Incompatible structures "
            f"({len(left)} rows vs {len(right)} rows)."
        )

    right = right.drop(columns=[time_column], errors="ignore")
    right = replace_duplicate_colnames(left, right)
    right.index = left.index

    return pd.concat([left, right], axis=1)


def _group_columns(grouped: DataFrameGroupBy, operation: str) -> List[str]:
    keys = grouped.keys
    keys = list(keys) if isinstance(keys, (list, tuple)) else [keys]
    unknown = [key for key in keys if not isinstance(key, str) or key not in grouped.obj.columns]
    if unknown:
        raise InvalidInputError(
            f"Error {operation}(): grouped data must be grouped by column names, got {unknown}"
        )
    return keys


def apply_by_group(
    grouped: DataFrameGroupBy, func: Callable[..., pd.DataFrame], operation: str, **kwargs
) -> pd.DataFrame:
    """
    Map a single-series function over every group of a collection.

    Group columns are removed before calling `func` and re-inserted, in
    front, on each result; results are concatenated in group order with
    every group's internal row order preserved.

    Args:
        grouped: pandas DataFrameGroupBy keyed by column names
        func: Single-series operation returning a DataFrame
        operation: Name of the public operation, used in messages
        **kwargs: Passed to func

    Returns:
        pd.DataFrame with the group columns first
    """
    group_columns = _group_columns(grouped, operation)

    results = []
    for key, group in grouped:
        if not isinstance(key, tuple):
            key = (key,)
        result = func(group.drop(columns=group_columns), **kwargs)
        result = result.reset_index(drop=True)
        for position, (column, value) in enumerate(zip(group_columns, key)):
            result.insert(position, column, value)
        results.append(result)

    if not results:
        raise InvalidInputError(f"Error {operation}(): grouped data has no groups")

    logging.debug(f"{operation} - Applied to {len(results)} groups")

    return pd.concat(results, ignore_index=True)
