"""
Validation Filter

Trust boundary of the kernel: raw sequences (lists, numpy arrays, pandas
columns) become NumericBuffers, i.e. 1-D float64 arrays whose elements are all
finite. Every check goes through is_valid_value(); there are no ad hoc type
tests elsewhere in the kernel.

Valid value:
    - a real number (python or numpy scalar)
    - not a bool, not a datetime64 / timedelta64
    - not NaN, not +/-inf
"""

import logging
import math
from numbers import Real
from typing import Any, Iterable

import numpy as np

from alphaquant.stats_kernel.errors import (
    EmptyInputError,
    NoValidValuesError,
    NonNumericValueError,
)

LOG = logging.getLogger(__name__)

# numpy dtype kinds that hold plain real numbers
_NUMERIC_KINDS = ('f', 'i', 'u')

# numpy dtype kinds for dates and durations (registered as Integral by numpy)
_TEMPORAL_KINDS = ('m', 'M')


def is_valid_value(value: Any) -> bool:
    """
    Single validation predicate for raw values.

    Args:
        value: Any raw element (None, pandas.NA, str, float, numpy scalar, ...)

    Returns:
        True if the value can enter a NumericBuffer
    """
    if value is None or isinstance(value, (bool, np.bool_, np.datetime64, np.timedelta64)):
        return False
    if not isinstance(value, Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a double
        return False


def validate_value(value: Any, index: int) -> float:
    """
    Validate one raw element and return it as a float.

    Raises:
        NonNumericValueError: If the element is not a finite number
    """
    if not is_valid_value(value):
        raise NonNumericValueError(index, value)
    return float(value)


def _unwrap(values: Iterable) -> Any:
    """Expose the underlying ndarray of pandas objects; materialize iterators"""
    if isinstance(values, np.ndarray):
        return values
    if hasattr(values, 'to_numpy'):
        return values.to_numpy()
    if not hasattr(values, '__len__'):
        return list(values)
    return values


def _is_numeric_array(values: Any) -> bool:
    return isinstance(values, np.ndarray) and values.dtype.kind in _NUMERIC_KINDS


def valid_mask(values: Iterable) -> np.ndarray:
    """
    Boolean mask marking the valid elements of a raw sequence.

    Float arrays are checked vectorized; everything else element by element.
    """
    values = _unwrap(values)
    if isinstance(values, np.ndarray) and values.dtype.kind in _TEMPORAL_KINDS:
        return np.zeros(values.shape, dtype=bool)
    if _is_numeric_array(values):
        if values.dtype.kind == 'f':
            return np.isfinite(values)
        return np.ones(values.shape, dtype=bool)
    return np.fromiter(
        (is_valid_value(v) for v in values),
        dtype=bool,
        count=len(values)
    )


def filter_valid(values: Iterable) -> np.ndarray:
    """
    Drop null / NaN / non-numeric elements, preserving order.

    Two passes: the validity mask is computed first, then exactly
    valid_count values are copied into a new buffer.

    Args:
        values: Raw sequence (n >= 1)

    Returns:
        New float64 buffer of the valid elements

    Raises:
        EmptyInputError: If the sequence is empty
        NoValidValuesError: If no element is valid
    """
    if values is None:
        raise EmptyInputError()
    values = _unwrap(values)
    if len(values) == 0:
        raise EmptyInputError()

    mask = valid_mask(values)
    valid_count = int(mask.sum())

    if valid_count == 0:
        raise NoValidValuesError()

    if _is_numeric_array(values):
        return values[mask].astype(np.float64, copy=False)

    return np.fromiter(
        (float(v) for v, ok in zip(values, mask) if ok),
        dtype=np.float64,
        count=valid_count
    )


def to_float64_array(values: Iterable) -> np.ndarray:
    """
    Strict conversion: validate every element and copy, no filtering.

    Args:
        values: Raw sequence

    Returns:
        New float64 buffer of the same length (empty input -> empty buffer)

    Raises:
        NonNumericValueError: At the first element that is not a finite number
    """
    if values is None:
        return np.empty(0, dtype=np.float64)
    values = _unwrap(values)
    n = len(values)
    if n == 0:
        return np.empty(0, dtype=np.float64)

    if _is_numeric_array(values):
        mask = valid_mask(values)
        if not mask.all():
            index = int(np.argmin(mask))
            raise NonNumericValueError(index, values[index])
        return values.astype(np.float64)

    return np.fromiter(
        (validate_value(v, i) for i, v in enumerate(values)),
        dtype=np.float64,
        count=n
    )


def to_masked_array(values: Iterable) -> np.ndarray:
    """
    Same-length float64 copy with NaN at every invalid position.

    Used where positions matter (gap-tolerant rolling windows, writing
    results back to table rows).
    """
    if values is None:
        return np.empty(0, dtype=np.float64)
    values = _unwrap(values)

    if _is_numeric_array(values):
        out = values.astype(np.float64)
        out[~np.isfinite(out)] = np.nan
        return out

    return np.fromiter(
        (float(v) if is_valid_value(v) else np.nan for v in values),
        dtype=np.float64,
        count=len(values)
    )


def as_buffer(values: Iterable) -> np.ndarray:
    """
    Entry helper for kernel functions.

    A clean 1-D float64 array is used as a borrowed view (never written);
    any other input is run through filter_valid().

    Raises:
        EmptyInputError: If the input is empty
        NoValidValuesError: If the input holds no valid values
    """
    if isinstance(values, np.ndarray) and values.dtype == np.float64 and values.ndim == 1:
        if values.size == 0:
            raise EmptyInputError()
        if np.isfinite(values).all():
            return values
    return filter_valid(values)
