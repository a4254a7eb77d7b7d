"""
Summary Statistics

Single-pass descriptive statistics over NumericBuffers.

mean_and_std uses Welford's online algorithm:
    delta  = x - mean
    mean  += delta / (i + 1)
    M2    += delta * (x - mean)
    var    = M2 / n            (population variance)

This avoids the cancellation of sum(x^2)/n - mean^2 on large offsets. The
update is sequential and runs as a python loop; min / max / sum use numpy
reductions.
"""

import logging
import math
from numbers import Real
from typing import Iterable

import numpy as np

from alphaquant.stats_kernel.errors import EmptyInputError, InvalidQuantileError
from alphaquant.stats_kernel.schemas import MeanStd, MinMax
from alphaquant.stats_kernel.validation import as_buffer

LOG = logging.getLogger(__name__)


def _require_values(values: Iterable) -> np.ndarray:
    if values is None:
        raise EmptyInputError()
    buffer = as_buffer(values)
    if buffer.size == 0:
        raise EmptyInputError()
    return buffer


def mean_and_std(values: Iterable) -> MeanStd:
    """
    Mean and population standard deviation in one pass.

    Args:
        values: Buffer or raw sequence (invalid entries are dropped)

    Returns:
        MeanStd; std is exactly 0.0 for a single element

    Raises:
        EmptyInputError: If there are no values
    """
    buffer = _require_values(values)

    mean = 0.0
    m2 = 0.0
    count = 0
    for x in buffer.tolist():
        count += 1
        delta = x - mean
        mean += delta / count
        m2 += delta * (x - mean)

    variance = m2 / count if count > 1 else 0.0
    return MeanStd(mean=mean, std=math.sqrt(variance))


def min_max(values: Iterable) -> MinMax:
    """
    Minimum and maximum of a buffer (numpy reductions).

    Raises:
        EmptyInputError: If there are no values
    """
    buffer = _require_values(values)

    return MinMax(min=float(buffer.min()), max=float(buffer.max()))


def mean(values: Iterable) -> float:
    """Arithmetic mean (sum / n), for call sites that only need the mean"""
    buffer = _require_values(values)
    return float(np.sum(buffer)) / buffer.size


def median_of_sorted(sorted_values: np.ndarray) -> float:
    """Median of an already sorted buffer"""
    n = sorted_values.size
    mid = n // 2
    if n % 2 == 0:
        return float((sorted_values[mid - 1] + sorted_values[mid]) / 2)
    return float(sorted_values[mid])


def median(values: Iterable) -> float:
    """
    Median of a sorted copy; even length averages the two middle values.

    Raises:
        EmptyInputError: If there are no values
    """
    buffer = _require_values(values)
    return median_of_sorted(np.sort(buffer))


def quantile(values: Iterable, q: float) -> float:
    """
    Quantile by linear interpolation between closest ranks.

    pos = q * (n - 1); result = s[floor(pos)] + frac(pos) * (s[floor(pos)+1] - s[floor(pos)])

    Args:
        values: Buffer or raw sequence
        q: Level in [0, 1]

    Raises:
        InvalidQuantileError: If q is not a number in [0, 1]
        EmptyInputError: If there are no values
    """
    if isinstance(q, bool) or not isinstance(q, Real) or not (0.0 <= q <= 1.0):
        raise InvalidQuantileError(q)

    sorted_values = np.sort(_require_values(values))
    n = sorted_values.size
    if n == 1:
        return float(sorted_values[0])

    pos = q * (n - 1)
    base = int(math.floor(pos))
    rest = pos - base

    if base + 1 < n:
        return float(sorted_values[base] + rest * (sorted_values[base + 1] - sorted_values[base]))
    return float(sorted_values[base])
