"""
Band recomposition and anomaly cleaning.
"""

from anomalize.timeSeriesProcessing.recomposition.cleaner import clean_anomalies
from anomalize.timeSeriesProcessing.recomposition.recomposer import time_recompose

__all__ = ["clean_anomalies", "time_recompose"]
