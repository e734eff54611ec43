import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from anomalize.helpers.exceptions import AnomalizeError, InvalidInputError

"""
Common base classes for time series processing modules.

Contains base class BaseTimeSeriesMethod, which eliminates code duplication
between the period resolver, decomposition methods and outlier detection methods.
"""


class BaseTimeSeriesMethod(ABC):
    """
    Common base class for all time series processing methods.

    Contains only common logic:
    - Configuration merge with class defaults
    - Input vector validation
    - Standard metadata creation
    - Error handling and logging

    Specific functionality remains in child classes.
    """

    # Default base configurations (can be overridden in child classes)
    DEFAULT_CONFIG = {
        "return_detailed_metadata": False,  # Common interface setting
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize base method.

        Args:
            config: Method configuration
        """
        # Merge configuration with defaults
        self.config = {**self.DEFAULT_CONFIG, **(config or {})}
        self.name = self.__class__.__name__

    def __str__(self) -> str:
        """Standard string representation for logging."""
        return f"{self.name}(config_keys={list(self.config.keys())})"

    @abstractmethod
    def process(self, *args, **kwargs) -> Any:
        """
        Execute time series processing.

        Raises:
            AnomalizeError: On any violated precondition
        """
        pass

    def validate_input(
        self, values: Any, operation: str, min_length: Optional[int] = None
    ) -> np.ndarray:
        """
        Common validation of a numeric vector.

        Args:
            values: Sequence of numbers (list, np.ndarray, pd.Series)
            operation: Operation name used in error messages
            min_length: Minimum data length

        Returns:
            1-D float array

        Raises:
            InvalidInputError: If values are empty, non-numeric or contain NaN
        """
        if isinstance(values, (pd.DataFrame, dict)) or isinstance(values, (str, bytes)):
            raise InvalidInputError(
                f"Error in {operation}(): expected a numeric vector, got {type(values).__name__}"
            )

        try:
            array = np.asarray(values, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(
                f"Error in {operation}(): expected a numeric vector: {e}"
            ) from e

        if array.ndim != 1:
            raise InvalidInputError(
                f"Error in {operation}(): expected a 1-D vector, got {array.ndim} dimensions"
            )

        if array.size == 0:
            raise InvalidInputError(f"Error in {operation}(): empty vector provided")

        if np.isnan(array).any():
            raise InvalidInputError(f"Error in {operation}(): vector has missing values")

        # Check minimum length (if specified)
        if min_length is not None and array.size < min_length:
            raise InvalidInputError(
                f"Error in {operation}(): series too short: {array.size} < {min_length}"
            )

        return array

    def create_standard_metadata(
        self,
        data_length: int,
        additional_metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Create standard metadata.

        Args:
            data_length: Number of observations processed
            additional_metadata: Additional metadata

        Returns:
            Dict with standard metadata
        """
        metadata = {
            "method": self.name,
            "data_length": data_length,
        }

        # Add detailed metadata if enabled
        if self.config.get("return_detailed_metadata", False):
            metadata["parameters_used"] = self.config.copy()

        if additional_metadata:
            metadata.update(additional_metadata)

        return metadata

    def handle_error(self, error: Exception, operation: str) -> AnomalizeError:
        """
        Standardized error handling.

        Logs the failure and converts foreign exceptions into InvalidInputError
        so that callers see a single error hierarchy.

        Args:
            error: Exception
            operation: Operation name where error occurred

        Returns:
            AnomalizeError to raise
        """
        error_msg = f"Error in {operation}: {str(error)}"
        logging.error(f"{self} - {error_msg}", exc_info=True)

        if isinstance(error, AnomalizeError):
            return error
        return InvalidInputError(error_msg)

    def log_analysis_start(self, data_length: int, **details) -> None:
        """Standard logging of analysis start."""
        extra = ", ".join(f"{key}={value}" for key, value in details.items())
        logging.debug(
            f"{self} - Starting analysis: length={data_length}"
            + (f", {extra}" if extra else "")
        )

    def log_analysis_complete(self, **details) -> None:
        """Standard logging of analysis completion."""
        extra = ", ".join(f"{key}={value}" for key, value in details.items())
        logging.debug(
            f"{self} - Analysis completed successfully" + (f": {extra}" if extra else "")
        )
