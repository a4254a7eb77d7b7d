"""
Range Normalization

Min-max scaling of a buffer into [0, 1] or an arbitrary target range.

Formula:
    x_norm = (x - min) / (max - min)
    x_range = x_norm * (new_max - new_min) + new_min
"""

import logging
import math
from numbers import Real
from typing import Iterable, Optional

import numpy as np

from alphaquant.stats_kernel.errors import ConstantValueError, InvalidRangeError
from alphaquant.stats_kernel.schemas import MinMax
from alphaquant.stats_kernel.summary import min_max
from alphaquant.stats_kernel.validation import as_buffer

LOG = logging.getLogger(__name__)


def normalize(values: Iterable, bounds: Optional[MinMax] = None) -> np.ndarray:
    """
    Scale values into [0, 1].

    Args:
        values: Buffer or raw sequence (invalid entries are dropped)
        bounds: Source range; computed from the data when None

    Returns:
        New normalized buffer

    Raises:
        EmptyInputError: If there are no values
        ConstantValueError: If min == max (a single value included)
    """
    buffer = as_buffer(values)
    if bounds is None:
        bounds = min_max(buffer)

    if bounds.min == bounds.max:
        raise ConstantValueError(bounds.min)

    return (buffer - bounds.min) / (bounds.max - bounds.min)


def _is_finite_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def normalize_range(
    values: Iterable,
    new_min: float,
    new_max: float,
    bounds: Optional[MinMax] = None
) -> np.ndarray:
    """
    Scale values into [new_min, new_max].

    Args:
        values: Buffer or raw sequence
        new_min: Target minimum
        new_max: Target maximum (must exceed new_min)
        bounds: Source range; computed from the data when None

    Returns:
        New rescaled buffer

    Raises:
        InvalidRangeError: If the target range is non-numeric or not increasing
        ConstantValueError: If the source range is degenerate
    """
    if not (_is_finite_number(new_min) and _is_finite_number(new_max)) or new_min >= new_max:
        raise InvalidRangeError(new_min, new_max)

    normalized = normalize(values, bounds)
    normalized *= (new_max - new_min)
    normalized += new_min

    LOG.debug(f"Rescaled {normalized.size} values into [{new_min}, {new_max}]")

    return normalized
