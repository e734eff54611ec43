"""
Outlier detection methods for numeric vectors.

Each method inherits from BaseOutlierDetectionMethod and returns an
OutlierResult.
"""

from .baseOutlierDetectionMethod import BaseOutlierDetectionMethod
from .gesdMethod import GesdMethod
from .iqrMethod import IqrMethod

__all__ = [
    "BaseOutlierDetectionMethod",
    "GesdMethod",
    "IqrMethod",
]

__version__ = "1.0.0"
