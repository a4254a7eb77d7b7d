"""
Z-Score Standardization

Classic and robust (median / MAD) z-scores over a buffer.

    z        = (x - mean) / std
    z_robust = (x - median) / (MAD * 1.4826)

1.4826 makes the MAD a consistent estimator of the standard deviation under a
normal distribution.
"""

import logging
from typing import Iterable, Optional

import numpy as np

from alphaquant.stats_kernel.errors import ZeroMADError, ZeroVarianceError
from alphaquant.stats_kernel.schemas import MeanStd
from alphaquant.stats_kernel.summary import median_of_sorted, mean_and_std
from alphaquant.stats_kernel.validation import as_buffer

LOG = logging.getLogger(__name__)

MAD_SCALE = 1.4826


def zscore(values: Iterable, stats: Optional[MeanStd] = None) -> np.ndarray:
    """
    Standardize to zero mean and unit (population) standard deviation.

    Args:
        values: Buffer or raw sequence (invalid entries are dropped)
        stats: Precomputed mean/std; computed from the data when None

    Returns:
        New standardized buffer

    Raises:
        EmptyInputError: If there are no values
        ZeroVarianceError: If std == 0 (single value or constant input)
    """
    buffer = as_buffer(values)
    if stats is None:
        stats = mean_and_std(buffer)

    if stats.std == 0:
        raise ZeroVarianceError(stats.mean)

    return (buffer - stats.mean) / stats.std


def robust_zscore(values: Iterable) -> np.ndarray:
    """
    Outlier-resistant z-score using median and MAD.

    Sorts private copies of the data and of the absolute deviations;
    O(n log n).

    Raises:
        EmptyInputError: If there are no values
        ZeroMADError: If the median absolute deviation is zero
    """
    buffer = as_buffer(values)

    median = median_of_sorted(np.sort(buffer))
    deviations = np.abs(buffer - median)
    deviations.sort()
    mad = median_of_sorted(deviations)

    if mad == 0:
        raise ZeroMADError(median)

    LOG.debug(f"Robust z-score: median={median:.6g}, MAD={mad:.6g}")

    return (buffer - median) / (mad * MAD_SCALE)
