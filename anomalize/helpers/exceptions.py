"""
Exception hierarchy for the anomalize pipeline.

AnomalizeError: base class for every error raised by the package.
InvalidInputError: wrong shape or type, missing columns, out-of-range parameters.
UnsupportedMethodError: unrecognised decomposition or outlier detection method.
InsufficientDataError: the series is too short to produce a usable window.
"""


class AnomalizeError(Exception):
    """Base class for all anomalize errors"""


class InvalidInputError(AnomalizeError, ValueError):
    """Input data or parameters violate a precondition"""


class UnsupportedMethodError(AnomalizeError, ValueError):
    """Requested method is not registered"""

    def __init__(self, method, available):
        self.method = method
        self.available = list(available)
        super().__init__(
            f"method = '{method}' is not a valid option. "
            f"Available methods: {self.available}"
        )


class InsufficientDataError(AnomalizeError, ValueError):
    """Not enough observations for the requested computation"""
