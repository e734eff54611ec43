"""
Tag describing which trend representation a decomposition table carries.
"""

from enum import Enum
from typing import Optional

import pandas as pd

from anomalize.helpers.exceptions import InvalidInputError

__version__ = "1.0.0"

DECOMPOSITION_ATTR = "decomposition"


class DecompositionKind(Enum):
    """
    STL: smooth loess trend in the `trend` column.
    TWITTER: piecewise median trend in the `median_spans` column.
    """

    STL = "stl"
    TWITTER = "twitter"

    @property
    def trend_column(self) -> str:
        return "trend" if self is DecompositionKind.STL else "median_spans"

    @property
    def component_columns(self):
        """Columns that rebuild the expected value: observed = components + remainder"""
        return ["season", self.trend_column]

    def tag(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Attach this kind to frame.attrs and return the frame."""
        frame.attrs[DECOMPOSITION_ATTR] = self
        return frame

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, operation: str = "decomposition") -> Optional["DecompositionKind"]:
        """
        Read the kind of a decomposition table.

        The attrs tag wins when its trend column is present; otherwise the
        kind is taken from which of `trend` / `median_spans` exists.

        Returns:
            DecompositionKind, or None if neither trend column exists

        Raises:
            InvalidInputError: If both trend columns exist without a tag
        """
        tag = frame.attrs.get(DECOMPOSITION_ATTR)
        if tag is not None:
            try:
                kind = tag if isinstance(tag, cls) else cls(str(tag))
            except ValueError as e:
                raise InvalidInputError(
                    f"Error {operation}(): unknown decomposition tag {tag!r}"
                ) from e
            if kind.trend_column in frame.columns:
                return kind

        present = [kind for kind in cls if kind.trend_column in frame.columns]
        if len(present) > 1:
            raise InvalidInputError(
                f"Error {operation}(): Both 'trend' and 'median_spans' columns found. "
                f"Cannot tell which decomposition produced the table."
            )
        return present[0] if present else None
