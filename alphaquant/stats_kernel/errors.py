"""
Kernel Error Hierarchy

Every failure of the statistics kernel is a categorized exception carrying
structured fields (index, offending value, window size, ...). Callers assert
on type and fields, never on message text.

All errors derive from StatsKernelError and from the closest builtin
(ValueError / KeyError), so generic handlers keep working.
"""

from typing import Any, List, Optional


class StatsKernelError(Exception):
    """Base class for all kernel errors"""
    pass


# ============================================================================
# INPUT ERRORS
# ============================================================================

class EmptyInputError(StatsKernelError, ValueError):
    """Raised when an operation receives an empty sequence"""

    def __init__(self, message: str = "Input sequence is empty"):
        super().__init__(message)


class NoValidValuesError(StatsKernelError, ValueError):
    """Raised when every element of a sequence is null, NaN or non-numeric"""

    def __init__(self, message: str = "Sequence contains no valid numeric values"):
        super().__init__(message)


class NonNumericValueError(StatsKernelError, ValueError):
    """Raised by strict conversion when an element is not a finite number"""

    def __init__(self, index: int, value: Any):
        self.index = index
        self.value = value
        super().__init__(f"Non-numeric value at index {index}: {value!r}")


class LengthMismatchError(StatsKernelError, ValueError):
    """Raised when sequences that must align have different lengths"""

    def __init__(self, length: int, expected: int, index: Optional[int] = None):
        self.length = length
        self.expected = expected
        self.index = index
        if index is None:
            message = f"Length mismatch: got {length}, expected {expected}"
        else:
            message = f"Series {index} has length {length}, expected {expected}"
        super().__init__(message)


# ============================================================================
# DEGENERATE DISTRIBUTIONS
# ============================================================================

class DegenerateDistributionError(StatsKernelError, ValueError):
    """Raised when a distribution has no spread to scale by"""
    pass


class ConstantValueError(DegenerateDistributionError):
    """Raised when min == max during range normalization"""

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Cannot normalize constant values (min = max = {value})")


class ZeroVarianceError(DegenerateDistributionError):
    """Raised when standard deviation is zero during z-score standardization"""

    def __init__(self, mean: float):
        self.mean = mean
        super().__init__(f"Cannot standardize with zero standard deviation (mean = {mean})")


class ZeroMADError(DegenerateDistributionError):
    """Raised when the median absolute deviation is zero"""

    def __init__(self, median: float):
        self.median = median
        super().__init__(f"Cannot compute robust z-score with zero MAD (median = {median})")


class ConstantSeriesError(DegenerateDistributionError):
    """Raised when a series passed to a correlation has zero variance"""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Series {index} has constant values, correlation not possible")


# ============================================================================
# PARAMETER ERRORS
# ============================================================================

class InvalidWindowSizeError(StatsKernelError, ValueError):
    """Raised when a window size is not a positive integer"""

    def __init__(self, window_size: Any):
        self.window_size = window_size
        super().__init__(f"Window size must be a positive integer, got {window_size!r}")


class InsufficientLengthError(StatsKernelError, ValueError):
    """Raised when a buffer is shorter than the requested window"""

    def __init__(self, length: int, window_size: int):
        self.length = length
        self.window_size = window_size
        super().__init__(
            f"Input length ({length}) must be at least window size ({window_size})"
        )


class InvalidMinObservationsError(StatsKernelError, ValueError):
    """Raised when min_observations is not an integer in [1, window_size]"""

    def __init__(self, min_observations: Any, window_size: int):
        self.min_observations = min_observations
        self.window_size = window_size
        super().__init__(
            f"min_observations must be a positive integer not exceeding "
            f"window size ({window_size}), got {min_observations!r}"
        )


class InvalidAlphaError(StatsKernelError, ValueError):
    """Raised when an EWMA smoothing factor is outside (0, 1]"""

    def __init__(self, alpha: Any):
        self.alpha = alpha
        super().__init__(f"Alpha must be a number in (0, 1], got {alpha!r}")


class InvalidSpanError(StatsKernelError, ValueError):
    """Raised when an EWMA span is not a positive integer"""

    def __init__(self, span: Any):
        self.span = span
        super().__init__(f"Span must be a positive integer, got {span!r}")


class InvalidRangeError(StatsKernelError, ValueError):
    """Raised when a target range is non-numeric or not increasing"""

    def __init__(self, new_min: Any, new_max: Any):
        self.new_min = new_min
        self.new_max = new_max
        super().__init__(
            f"Target range must be finite numbers with new_min < new_max, "
            f"got ({new_min!r}, {new_max!r})"
        )


class InvalidQuantileError(StatsKernelError, ValueError):
    """Raised when a quantile level is outside [0, 1]"""

    def __init__(self, q: Any):
        self.q = q
        super().__init__(f"Quantile must be a number in [0, 1], got {q!r}")


# ============================================================================
# TABLE BOUNDARY
# ============================================================================

class ColumnNotFoundError(StatsKernelError, KeyError):
    """Raised when a table has no column with the requested name"""

    def __init__(self, column: str, available: List[str]):
        self.column = column
        self.available = list(available)
        super().__init__(f"Column '{column}' not found. Available: {self.available}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class ColumnComputationError(StatsKernelError):
    """Kernel failure re-raised with the name of the column being processed"""

    def __init__(self, column: str, cause: StatsKernelError):
        self.column = column
        self.cause = cause
        super().__init__(f"Column '{column}': {cause}")
