"""
Seasonal decomposition of a single time series.
"""

from anomalize.timeSeriesProcessing.decomposition.algorithmDecomposition import (
    DecompositionAlgorithm,
    time_decompose,
)
from anomalize.timeSeriesProcessing.decomposition.decompositionKind import (
    DecompositionKind,
)

__all__ = ["DecompositionAlgorithm", "DecompositionKind", "time_decompose"]
