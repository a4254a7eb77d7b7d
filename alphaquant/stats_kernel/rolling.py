"""
Rolling Window Transforms

Moving averages over a buffer. All outputs have the same length as the input
and use only values at positions <= t for the value at t.

    rolling_mean:        O(n) sliding sum, NaN until the first full window
    rolling_mean_robust: gap-tolerant, pandas rolling sum / count, O(n) memory
    ewma:                s_0 = x_0, s_t = alpha * x_t + (1 - alpha) * s_{t-1}

rolling_mean keeps the explicit add / subtract loop of the sliding sum; the
gap-tolerant mean and the EWMA run on pandas window kernels.
"""

import logging
from numbers import Real
from typing import Iterable

import numpy as np
import pandas as pd

from alphaquant.stats_kernel.errors import (
    InsufficientLengthError,
    InvalidAlphaError,
    InvalidMinObservationsError,
    InvalidSpanError,
    InvalidWindowSizeError,
)
from alphaquant.stats_kernel.schemas import WindowSpec, is_positive_int
from alphaquant.stats_kernel.validation import as_buffer, to_masked_array

LOG = logging.getLogger(__name__)


def _check_window_size(window_size) -> None:
    if not is_positive_int(window_size):
        raise InvalidWindowSizeError(window_size)


def rolling_mean(values: Iterable, window_size: int) -> np.ndarray:
    """
    Rolling mean ending at each position.

    The first window is summed once; after that each step adds the incoming
    value and subtracts the one leaving the window.

    Args:
        values: Buffer or raw sequence (invalid entries are dropped first)
        window_size: Positive integer window length

    Returns:
        New buffer of the same length; NaN for the first window_size - 1 values

    Raises:
        InvalidWindowSizeError: If window_size is not a positive integer
        InsufficientLengthError: If the buffer is shorter than the window
    """
    _check_window_size(window_size)

    buffer = as_buffer(values)
    n = buffer.size
    if n < window_size:
        raise InsufficientLengthError(n, window_size)

    items = buffer.tolist()
    window_sum = 0.0
    for x in items[:window_size]:
        window_sum += x

    means = [np.nan] * (window_size - 1)
    means.append(window_sum / window_size)

    for i in range(window_size, n):
        window_sum += items[i] - items[i - window_size]
        means.append(window_sum / window_size)

    return np.array(means, dtype=np.float64)


def rolling_mean_robust(
    values: Iterable,
    window_size: int,
    min_observations: int = 1
) -> np.ndarray:
    """
    Rolling mean over a raw sequence that may contain nulls / NaNs.

    Each full window averages its valid entries only. Sums and counts of
    valid entries come from a pandas rolling window, so no per-window copy
    of the data is made.

    Args:
        values: Raw, unfiltered sequence
        window_size: Positive integer window length
        min_observations: Valid entries a window needs to produce a value

    Returns:
        New buffer of the same length as values; NaN before the first full
        window and wherever fewer than min_observations values are valid

    Raises:
        InvalidWindowSizeError: If window_size is not a positive integer
        InvalidMinObservationsError: If min_observations is not in [1, window_size]
    """
    _check_window_size(window_size)
    if not is_positive_int(min_observations) or min_observations > window_size:
        raise InvalidMinObservationsError(min_observations, window_size)

    masked = to_masked_array(values)
    n = masked.size
    result = np.full(n, np.nan, dtype=np.float64)

    if n < window_size:
        return result

    means = pd.Series(masked).rolling(
        window=window_size,
        min_periods=min_observations
    ).mean().to_numpy()

    # NaN until the first full window
    result[window_size - 1:] = means[window_size - 1:]
    enough = np.isfinite(result)

    LOG.debug(f"Robust rolling mean: {int(enough.sum())}/{n} positions filled "
              f"(window={window_size}, min_obs={min_observations})")

    return result


def rolling_mean_window(values: Iterable, spec: WindowSpec) -> np.ndarray:
    """Gap-tolerant rolling mean driven by a WindowSpec"""
    return rolling_mean_robust(values, spec.window_size, spec.min_observations)


def ewma(values: Iterable, alpha: float) -> np.ndarray:
    """
    Exponential weighted moving average.

    Args:
        values: Buffer or raw sequence (invalid entries are dropped)
        alpha: Smoothing factor in (0, 1]; 1 reproduces the input

    Returns:
        New buffer of the same length as the filtered input

    Raises:
        InvalidAlphaError: If alpha is not a number in (0, 1]
        EmptyInputError: If there are no values
    """
    if isinstance(alpha, bool) or not isinstance(alpha, Real) or not (0 < alpha <= 1):
        raise InvalidAlphaError(alpha)

    buffer = as_buffer(values)
    smoothed = pd.Series(buffer).ewm(alpha=alpha, adjust=False).mean()
    return smoothed.to_numpy(dtype=np.float64)


def span_to_alpha(span: int) -> float:
    """
    Smoothing factor for a span, as in pandas: alpha = 2 / (span + 1).

    Raises:
        InvalidSpanError: If span is not a positive integer
    """
    if not is_positive_int(span):
        raise InvalidSpanError(span)
    return 2.0 / (span + 1)
