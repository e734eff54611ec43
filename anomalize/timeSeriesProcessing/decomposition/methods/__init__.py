"""
Decomposition methods.

Each method turns a single series into season, trend (or median spans)
and remainder components and inherits from BaseDecomposerMethod.
"""

from .baseDecomposerMethod import BaseDecomposerMethod
from .stlDecomposerMethod import StlDecomposerMethod
from .twitterDecomposerMethod import TwitterDecomposerMethod

__all__ = [
    "BaseDecomposerMethod",
    "StlDecomposerMethod",
    "TwitterDecomposerMethod",
]

__version__ = "1.0.0"
