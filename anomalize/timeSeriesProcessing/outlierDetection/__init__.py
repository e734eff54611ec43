"""
Outlier detection on numeric vectors and table columns.
"""

from anomalize.timeSeriesProcessing.outlierDetection.algorithmOutlierDetection import (
    OutlierDetectionAlgorithm,
    anomalize,
    gesd,
    iqr,
)
from anomalize.timeSeriesProcessing.outlierDetection.outlierResult import OutlierResult

__all__ = ["OutlierDetectionAlgorithm", "OutlierResult", "anomalize", "gesd", "iqr"]
