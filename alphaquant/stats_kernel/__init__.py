"""
Statistics Kernel

Pure numeric routines over NumericBuffers (1-D float64 numpy arrays).

Components (leaf-first):
    - Validation filter: raw sequence -> clean buffer
    - Summary statistics: Welford mean/std, min/max, mean, median, quantile
    - Normalizer: min-max scaling into [0, 1] or a target range
    - Standardizer: z-score and robust (median / MAD) z-score
    - Rolling window: rolling mean, gap-tolerant rolling mean, EWMA
    - Correlation engine: covariance, correlation, correlation matrix

Every function is synchronous and side-effect free: inputs are read only and
each call returns freshly allocated results.
"""

from alphaquant.stats_kernel.errors import (
    StatsKernelError,
    EmptyInputError,
    NoValidValuesError,
    NonNumericValueError,
    LengthMismatchError,
    DegenerateDistributionError,
    ConstantValueError,
    ZeroVarianceError,
    ZeroMADError,
    ConstantSeriesError,
    InvalidWindowSizeError,
    InsufficientLengthError,
    InvalidMinObservationsError,
    InvalidAlphaError,
    InvalidSpanError,
    InvalidRangeError,
    InvalidQuantileError,
    ColumnNotFoundError,
    ColumnComputationError,
)
from alphaquant.stats_kernel.schemas import MeanStd, MinMax, WindowSpec, CorrelationMatrix
from alphaquant.stats_kernel.validation import (
    is_valid_value,
    validate_value,
    valid_mask,
    filter_valid,
    to_float64_array,
    to_masked_array,
    as_buffer,
)
from alphaquant.stats_kernel.summary import mean_and_std, min_max, mean, median, quantile
from alphaquant.stats_kernel.normalization import normalize, normalize_range
from alphaquant.stats_kernel.standardization import MAD_SCALE, zscore, robust_zscore
from alphaquant.stats_kernel.rolling import (
    rolling_mean,
    rolling_mean_robust,
    rolling_mean_window,
    ewma,
    span_to_alpha,
)
from alphaquant.stats_kernel.correlation import (
    covariance,
    correlation,
    correlation_matrix,
    to_row_major_2d,
)

__all__ = [
    # Errors
    'StatsKernelError',
    'EmptyInputError',
    'NoValidValuesError',
    'NonNumericValueError',
    'LengthMismatchError',
    'DegenerateDistributionError',
    'ConstantValueError',
    'ZeroVarianceError',
    'ZeroMADError',
    'ConstantSeriesError',
    'InvalidWindowSizeError',
    'InsufficientLengthError',
    'InvalidMinObservationsError',
    'InvalidAlphaError',
    'InvalidSpanError',
    'InvalidRangeError',
    'InvalidQuantileError',
    'ColumnNotFoundError',
    'ColumnComputationError',
    # Value types
    'MeanStd',
    'MinMax',
    'WindowSpec',
    'CorrelationMatrix',
    # Validation
    'is_valid_value',
    'validate_value',
    'valid_mask',
    'filter_valid',
    'to_float64_array',
    'to_masked_array',
    'as_buffer',
    # Summary
    'mean_and_std',
    'min_max',
    'mean',
    'median',
    'quantile',
    # Transforms
    'normalize',
    'normalize_range',
    'MAD_SCALE',
    'zscore',
    'robust_zscore',
    'rolling_mean',
    'rolling_mean_robust',
    'rolling_mean_window',
    'ewma',
    'span_to_alpha',
    # Correlation
    'covariance',
    'correlation',
    'correlation_matrix',
    'to_row_major_2d',
]
