"""
Table Adapter

pandas boundary of the statistics kernel: extracts named columns as validated
buffers and re-attaches computed columns and correlation matrices.
"""

from alphaquant.table_adapter.config import (
    TableAdapterConfig,
    ColumnNamingConfig,
    RollingConfig,
    StandardizationConfig,
    CorrelationConfig,
    DEFAULT_CONFIG,
)
from alphaquant.table_adapter.adapter import TableAdapter, column_errors
from alphaquant.table_adapter.describe import STAT_NAMES, summarize

__all__ = [
    'TableAdapterConfig',
    'ColumnNamingConfig',
    'RollingConfig',
    'StandardizationConfig',
    'CorrelationConfig',
    'DEFAULT_CONFIG',
    'TableAdapter',
    'column_errors',
    'STAT_NAMES',
    'summarize',
]
