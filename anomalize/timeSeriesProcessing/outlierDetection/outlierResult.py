"""
Result bundle of an outlier detection run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

__version__ = "1.0.0"

YES = "Yes"
NO = "No"
UP = "Up"
DOWN = "Down"


@dataclass
class OutlierResult:
    """
    Attributes:
        outlier: "Yes"/"No" per input value, in input order
        outlier_idx: 0-based positions of reported outliers, in report order
        outlier_vals: Values of reported outliers, in report order
        outlier_direction: "Up"/"Down" per reported outlier
        critical_limits: {"limit_lower": float, "limit_upper": float}
        outlier_report: Ranked diagnostic table
        metadata: Method name, data length and run details
    """

    outlier: List[str]
    outlier_idx: List[int]
    outlier_vals: List[float]
    outlier_direction: List[Optional[str]]
    critical_limits: Dict[str, float]
    outlier_report: pd.DataFrame
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def limit_lower(self) -> float:
        return self.critical_limits["limit_lower"]

    @property
    def limit_upper(self) -> float:
        return self.critical_limits["limit_upper"]

    @property
    def n_outliers(self) -> int:
        return len(self.outlier_idx)
