import numpy as np
import pandas as pd
import pytest
from scipy import stats

from anomalize.timeSeriesProcessing.periodicity.configPeriodicity import (
    get_time_scale_template,
    set_time_scale_template,
)

PACKAGES = [
    "broom", "dplyr", "forcats", "ggplot2", "glue", "knitr", "lubridate", "purrr",
    "readr", "stringr", "tibble", "tidyquant", "tidyr", "tidytext", "tidyverse",
]
START, END = "2017-01-01", "2018-03-01"
N_DAYS = 425

def _package_downloads(rng: np.random.Generator, dates: pd.DatetimeIndex) -> np.ndarray:
    n = len(dates)
    level = rng.uniform(500, 20000)
    growth = np.linspace(0, rng.uniform(0.2, 1.5) * level, n)
    # fewer downloads on weekends
    weekly = np.where(dates.dayofweek >= 5, -0.35 * level, 0.1 * level)
    noise = rng.normal(0, 0.05 * level, n)

    counts = level + growth + weekly + noise
    spikes = rng.choice(n, size=4, replace=False)
    counts[spikes] += rng.uniform(3, 6) * level

    return np.round(np.clip(counts, 0, None))

@pytest.fixture(scope="session")
def tidyverse_cran_downloads() -> pd.DataFrame:
    """Synthetic daily downloads of 15 packages, 425 days each."""
    rng = np.random.default_rng(2017)
    dates = pd.date_range(START, END, freq="D")
    assert len(dates) == N_DAYS

    frames = [
        pd.DataFrame({"package": package, "date": dates, "count": _package_downloads(rng, dates)})
        for package in PACKAGES
    ]
    return pd.concat(frames, ignore_index=True)

@pytest.fixture
def single_series(tidyverse_cran_downloads) -> pd.DataFrame:
    ret = tidyverse_cran_downloads[tidyverse_cran_downloads["package"] == "tidyquant"]
    return ret.reset_index(drop=True)

@pytest.fixture
def grouped_downloads(tidyverse_cran_downloads):
    return tidyverse_cran_downloads.groupby("package")

@pytest.fixture
def shifted_normal_sample():
    """100 standard normal quantiles in random order, 5 of them shifted by +10."""
    rng = np.random.default_rng(100)
    x = rng.permutation(stats.norm.ppf(np.linspace(0.01, 0.99, 100)))
    shifted = np.sort(rng.choice(100, size=5, replace=False))
    x[shifted] += 10
    return x, shifted.tolist()

@pytest.fixture
def restore_time_scale_template():
    template = get_time_scale_template()
    yield
    set_time_scale_template(template)
