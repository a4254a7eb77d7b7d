"""
alphaquant

Column statistics kernel with a pandas boundary.

Flow:
    TableAdapter -> validation filter -> kernel transforms -> TableAdapter
"""

from alphaquant.stats_kernel import (
    CorrelationMatrix,
    MeanStd,
    MinMax,
    WindowSpec,
    StatsKernelError,
    correlation,
    correlation_matrix,
    covariance,
    ewma,
    filter_valid,
    mean,
    mean_and_std,
    min_max,
    normalize,
    normalize_range,
    robust_zscore,
    rolling_mean,
    rolling_mean_robust,
    to_float64_array,
    zscore,
)
from alphaquant.table_adapter import TableAdapter, TableAdapterConfig

__version__ = "1.0.0"

__all__ = [
    'CorrelationMatrix',
    'MeanStd',
    'MinMax',
    'WindowSpec',
    'StatsKernelError',
    'correlation',
    'correlation_matrix',
    'covariance',
    'ewma',
    'filter_valid',
    'mean',
    'mean_and_std',
    'min_max',
    'normalize',
    'normalize_range',
    'robust_zscore',
    'rolling_mean',
    'rolling_mean_robust',
    'to_float64_array',
    'zscore',
    'TableAdapter',
    'TableAdapterConfig',
]
