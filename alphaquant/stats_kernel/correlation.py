"""
Correlation Engine

Pearson covariance / correlation between equal-length series and the k x k
correlation matrix of a set of series.

    cov(x, y)  = sum((x_i - mean_x) * (y_i - mean_y)) / n
    corr(x, y) = cov(x, y) / (std_x * std_y)

Series are converted strictly (no filtering): dropping an entry from one
series would misalign it with the others.
"""

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from alphaquant.stats_kernel.errors import (
    ConstantSeriesError,
    EmptyInputError,
    LengthMismatchError,
)
from alphaquant.stats_kernel.schemas import CorrelationMatrix
from alphaquant.stats_kernel.summary import mean_and_std
from alphaquant.stats_kernel.validation import to_float64_array

LOG = logging.getLogger(__name__)

LABEL_PREFIX = "Series_"


def _paired_buffers(x: Iterable, y: Iterable):
    bx = to_float64_array(x)
    by = to_float64_array(y)
    if bx.size != by.size:
        raise LengthMismatchError(by.size, bx.size, index=1)
    if bx.size == 0:
        raise EmptyInputError("Cannot compute covariance of empty series")
    return bx, by


def _covariance(x: np.ndarray, y: np.ndarray, mean_x: float, mean_y: float) -> float:
    return float(np.dot(x - mean_x, y - mean_y)) / x.size


def covariance(
    x: Iterable,
    y: Iterable,
    mean_x: Optional[float] = None,
    mean_y: Optional[float] = None
) -> float:
    """
    Population covariance of two equal-length series.

    Args:
        x: First series
        y: Second series
        mean_x: Precomputed mean of x (computed when None)
        mean_y: Precomputed mean of y (computed when None)

    Raises:
        NonNumericValueError: If an element is not a finite number
        LengthMismatchError: If the series differ in length
        EmptyInputError: If the series are empty
    """
    bx, by = _paired_buffers(x, y)
    if mean_x is None:
        mean_x = mean_and_std(bx).mean
    if mean_y is None:
        mean_y = mean_and_std(by).mean
    return _covariance(bx, by, mean_x, mean_y)


def correlation(x: Iterable, y: Iterable) -> float:
    """
    Pearson correlation coefficient in [-1, 1].

    Raises:
        ConstantSeriesError: If either series has zero variance
            (index 0 for x, 1 for y)
    """
    bx, by = _paired_buffers(x, y)
    stats_x = mean_and_std(bx)
    stats_y = mean_and_std(by)

    if stats_x.std == 0:
        raise ConstantSeriesError(0)
    if stats_y.std == 0:
        raise ConstantSeriesError(1)

    cov = _covariance(bx, by, stats_x.mean, stats_y.mean)
    return cov / (stats_x.std * stats_y.std)


def _resolve_labels(labels: Optional[Sequence[str]], k: int) -> List[str]:
    if labels is not None and len(labels) == k:
        return [str(label) for label in labels]
    if labels:
        LOG.warning(f"Got {len(labels)} labels for {k} series, using positional labels")
    return [f"{LABEL_PREFIX}{i}" for i in range(k)]


def correlation_matrix(
    series: Sequence[Iterable],
    labels: Optional[Sequence[str]] = None
) -> CorrelationMatrix:
    """
    Pearson correlation matrix of k equal-length series.

    Mean and std are computed once per series; only the upper triangle is
    computed and mirrored, the diagonal is set to exactly 1.0.

    Args:
        series: k sequences of equal length
        labels: One label per series; positional labels (Series_0, ...) are
            used when the count does not match

    Returns:
        CorrelationMatrix with a flat row-major k*k buffer

    Raises:
        EmptyInputError: If no series are given
        NonNumericValueError: If a series contains a non-finite element
        LengthMismatchError: If a series differs in length from the first
        ConstantSeriesError: If a series has zero variance
    """
    if series is None or len(series) == 0:
        raise EmptyInputError("Correlation matrix needs at least one series")

    k = len(series)
    buffers: List[np.ndarray] = []
    means = np.empty(k, dtype=np.float64)
    stds = np.empty(k, dtype=np.float64)

    expected = None
    for i, raw in enumerate(series):
        buffer = to_float64_array(raw)
        if expected is None:
            expected = buffer.size
        elif buffer.size != expected:
            raise LengthMismatchError(buffer.size, expected, index=i)

        stats = mean_and_std(buffer)
        if stats.std == 0:
            raise ConstantSeriesError(i)

        buffers.append(buffer)
        means[i] = stats.mean
        stds[i] = stats.std

    matrix = np.empty(k * k, dtype=np.float64)
    for i in range(k):
        matrix[i * k + i] = 1.0
        for j in range(i + 1, k):
            cov = _covariance(buffers[i], buffers[j], means[i], means[j])
            corr = cov / (stds[i] * stds[j])
            matrix[i * k + j] = corr
            matrix[j * k + i] = corr

    matrix.flags.writeable = False

    LOG.debug(f"Correlation matrix computed: k={k}, n={expected}")

    return CorrelationMatrix(values=matrix, labels=_resolve_labels(labels, k))


def to_row_major_2d(matrix: Iterable, size: int) -> List[List[float]]:
    """
    Reshape a flat row-major size*size buffer into size rows of size values.

    Raises:
        LengthMismatchError: If the buffer does not hold size*size values
    """
    flat = np.asarray(matrix, dtype=np.float64)
    if flat.size != size * size:
        raise LengthMismatchError(int(flat.size), size * size)
    return flat.reshape(size, size).tolist()
