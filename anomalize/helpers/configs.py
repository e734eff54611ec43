"""
Configuration classes for the anomalize pipeline:

AnomalizeConfig: Defaults for decomposition and anomaly detection (alpha, max_anoms, methods,
    STL robustness iterations). Every default can be overridden through environment variables
    (or a .env file picked up by python-dotenv).
TimeScaleTemplateConfig: Default time scale template used when frequency or trend is "auto".


"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_float(name, default):
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _env_bool(name, default):
    value = os.getenv(name)
    if value in (None, ""):
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class AnomalizeConfig:
    """
    Centralized defaults for the decomposition and anomaly detection workflow
    """

    ALPHA = _env_float("ANOMALIZE_ALPHA", 0.05)
    MAX_ANOMS = _env_float("ANOMALIZE_MAX_ANOMS", 0.20)

    DECOMPOSE_METHOD = os.getenv("ANOMALIZE_DECOMPOSE_METHOD", "stl")
    OUTLIER_METHOD = os.getenv("ANOMALIZE_OUTLIER_METHOD", "iqr")

    # Emit the resolved frequency / trend as INFO log records
    MESSAGE = _env_bool("ANOMALIZE_MESSAGE", True)

    # Robust STL settings (periodic seasonal window, 1 inner / 15 outer loops when robust)
    STL_CONFIG = {
        "robust": True,
        "seasonal_deg": 0,
        "inner_iter": 1,
        "outer_iter": 15,
    }

    @classmethod
    def get_alpha(cls, alpha=None):
        """
        Get the alpha to use for outlier detection.

        Args:
            alpha (float): Explicit value, returned unchanged when given

        Returns:
            float: alpha
        """
        return cls.ALPHA if alpha is None else alpha

    @classmethod
    def get_max_anoms(cls, max_anoms=None):
        return cls.MAX_ANOMS if max_anoms is None else max_anoms

    @classmethod
    def get_decompose_method(cls, method=None):
        return cls.DECOMPOSE_METHOD if method is None else method

    @classmethod
    def get_outlier_method(cls, method=None):
        return cls.OUTLIER_METHOD if method is None else method

    @classmethod
    def get_message(cls, message=None):
        return cls.MESSAGE if message is None else bool(message)

    @classmethod
    def get_stl_config(cls):
        """
        Get a copy of the STL settings.

        Returns:
            dict: STL keyword settings
        """
        return dict(cls.STL_CONFIG)


class TimeScaleTemplateConfig:
    """
    Default mapping of time scale to (frequency span, trend span).

    Rows are ordered from the finest to the coarsest scale; the order matters
    because the insufficient data fallback steps one row up the table.
    """

    TEMPLATE = [
        # time_scale, frequency, trend
        ("second", "1 hour", "12 hours"),
        ("minute", "1 day", "14 days"),
        ("hour", "1 day", "1 month"),
        ("day", "1 week", "3 months"),
        ("week", "1 quarter", "1 year"),
        ("month", "1 year", "5 years"),
        ("quarter", "1 year", "10 years"),
        ("year", "5 years", "30 years"),
    ]

    @classmethod
    def get_template_rows(cls):
        return list(cls.TEMPLATE)
