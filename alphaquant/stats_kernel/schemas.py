"""
Value Types for the Statistics Kernel

Immutable results and parameter objects. Every instance is produced per call;
nothing here is shared or mutated after construction.
"""

from dataclasses import dataclass, field
from numbers import Integral
from typing import Dict, List

import numpy as np

from alphaquant.stats_kernel.errors import (
    InvalidMinObservationsError,
    InvalidWindowSizeError,
    LengthMismatchError,
)


def is_positive_int(value) -> bool:
    """True for integers > 0 (bool excluded)"""
    return isinstance(value, Integral) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class MeanStd:
    """
    Mean and population standard deviation (divisor n).

    Also used as the explicit precomputed-statistics argument of zscore().
    """

    mean: float
    std: float

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {'mean': float(self.mean), 'std': float(self.std)}


@dataclass(frozen=True)
class MinMax:
    """
    Minimum and maximum of a buffer.

    Also used as the explicit source-range argument of normalize().
    """

    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {'min': float(self.min), 'max': float(self.max)}


@dataclass(frozen=True)
class WindowSpec:
    """
    Rolling window parameters.

    window_size: positive integer
    min_observations: positive integer <= window_size
    """

    window_size: int
    min_observations: int = 1

    def __post_init__(self):
        if not is_positive_int(self.window_size):
            raise InvalidWindowSizeError(self.window_size)
        if not is_positive_int(self.min_observations) or self.min_observations > self.window_size:
            raise InvalidMinObservationsError(self.min_observations, self.window_size)

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'window_size': int(self.window_size),
            'min_observations': int(self.min_observations),
        }


@dataclass(frozen=True)
class CorrelationMatrix:
    """
    Square symmetric correlation matrix.

    values is a flat row-major buffer of length k*k; labels has one entry per
    series (positional, not necessarily unique). The diagonal is exactly 1.0
    and values[i*k + j] == values[j*k + i].
    """

    values: np.ndarray
    labels: List[str] = field(default_factory=list)

    def __post_init__(self):
        k = len(self.labels)
        if self.values.shape != (k * k,):
            raise LengthMismatchError(int(self.values.size), k * k)

    @property
    def size(self) -> int:
        return len(self.labels)

    def value(self, i: int, j: int) -> float:
        """Correlation between series i and series j"""
        return float(self.values[i * self.size + j])

    def to_2d(self) -> List[List[float]]:
        """Row-major nested lists (k rows of k values)"""
        k = self.size
        return self.values.reshape(k, k).tolist()

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        """
        Nested mapping label -> label -> correlation.

        Duplicate labels collapse; use to_2d() when labels are not unique.
        """
        rows = self.to_2d()
        return {
            row_label: dict(zip(self.labels, row))
            for row_label, row in zip(self.labels, rows)
        }
