"""
Time scale template for automatic frequency and trend selection.

The template maps each TimeScale to a default (frequency span, trend span)
pair. Rows are kept in template order: the insufficient data fallback of the
period resolver reads the row preceding the series' own scale.

A process-wide default is available through get_time_scale_template() /
set_time_scale_template(). Set it once before concurrent use; every resolver
call also accepts an explicit template.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

import pandas as pd

from anomalize.helpers.configs import TimeScaleTemplateConfig
from anomalize.helpers.exceptions import InvalidInputError
from anomalize.timeSeriesProcessing.timeIndex.timeIndex import (
    CalendarSpan,
    TimeScale,
    parse_calendar_span,
)

__version__ = "1.0.0"

TEMPLATE_COLUMNS = ["time_scale", "frequency", "trend"]
TEMPLATE_TARGETS = ("frequency", "trend")


@dataclass(frozen=True)
class ScaleTemplateRow:
    time_scale: TimeScale
    frequency: CalendarSpan
    trend: CalendarSpan


@dataclass(frozen=True)
class ScaleTemplate:
    """Immutable, ordered mapping TimeScale -> (frequency span, trend span)"""

    rows: Tuple[ScaleTemplateRow, ...]

    def __post_init__(self):
        scales = [row.time_scale for row in self.rows]
        if not scales:
            raise InvalidInputError("Time scale template must contain at least one row")
        if len(set(scales)) != len(scales):
            raise InvalidInputError(
                f"Time scale template has duplicate time scales: {[s.value for s in scales]}"
            )

    @classmethod
    def from_rows(cls, rows: Iterable[Tuple[Any, Any, Any]]) -> "ScaleTemplate":
        """Build a template from (time_scale, frequency, trend) triples."""
        return cls(
            rows=tuple(
                ScaleTemplateRow(
                    time_scale=TimeScale.parse(scale),
                    frequency=parse_calendar_span(frequency),
                    trend=parse_calendar_span(trend),
                )
                for scale, frequency, trend in rows
            )
        )

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "ScaleTemplate":
        """
        Build a template from a table with time_scale, frequency, trend columns.

        Raises:
            InvalidInputError: If a column is missing or a value cannot be parsed
        """
        if not isinstance(frame, pd.DataFrame):
            raise InvalidInputError(
                f"Time scale template must be a pandas DataFrame, got {type(frame).__name__}"
            )
        missing = [column for column in TEMPLATE_COLUMNS if column not in frame.columns]
        if missing:
            raise InvalidInputError(f"Time scale template is missing columns {missing}")

        return cls.from_rows(frame[TEMPLATE_COLUMNS].itertuples(index=False, name=None))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(row.time_scale.value, str(row.frequency), str(row.trend)) for row in self.rows],
            columns=TEMPLATE_COLUMNS,
        )

    def lookup(
        self, time_scale: TimeScale, target: str, index_shift: int = 0
    ) -> Optional[CalendarSpan]:
        """
        Get the span for a time scale.

        Args:
            time_scale: Scale of the series
            target: "frequency" or "trend"
            index_shift: Number of rows to step back from the scale's own row

        Returns:
            CalendarSpan, or None when the shifted row does not exist

        Raises:
            InvalidInputError: If the scale is not in the template or the
                target is unknown
        """
        if target not in TEMPLATE_TARGETS:
            raise InvalidInputError(
                f"Unknown template target '{target}'. Expected one of {list(TEMPLATE_TARGETS)}"
            )

        time_scale = TimeScale.parse(time_scale)
        positions = {row.time_scale: i for i, row in enumerate(self.rows)}
        if time_scale not in positions:
            raise InvalidInputError(
                f"Time scale '{time_scale.value}' is not in the time scale template"
            )

        position = positions[time_scale] - index_shift
        if position < 0 or position >= len(self.rows):
            return None

        return getattr(self.rows[position], target)


def time_scale_template() -> ScaleTemplate:
    """Return the built-in default template."""
    return ScaleTemplate.from_rows(TimeScaleTemplateConfig.get_template_rows())


_default_template = time_scale_template()


def get_time_scale_template() -> ScaleTemplate:
    """Return the process-wide default template."""
    return _default_template


def set_time_scale_template(template: Any) -> ScaleTemplate:
    """
    Replace the process-wide default template.

    Args:
        template: ScaleTemplate, or a DataFrame with time_scale, frequency,
            trend columns

    Returns:
        The template now in effect
    """
    global _default_template

    if isinstance(template, pd.DataFrame):
        template = ScaleTemplate.from_frame(template)
    if not isinstance(template, ScaleTemplate):
        raise InvalidInputError(
            f"set_time_scale_template(): expected ScaleTemplate or DataFrame, "
            f"got {type(template).__name__}"
        )

    _default_template = template
    logging.info(
        f"configPeriodicity - Time scale template updated: "
        f"{[row.time_scale.value for row in template.rows]}"
    )
    return _default_template
