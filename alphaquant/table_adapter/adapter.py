"""
Table Adapter

Boundary between pandas DataFrames and the statistics kernel.

Flow:
    DataFrame column -> validation filter -> kernel buffer op -> new column / table

Rules:
    - Input tables are never mutated; every attach returns a new DataFrame
    - Element-wise results are written back to the rows they came from,
      invalid rows receive NaN
    - Kernel errors are re-raised as ColumnComputationError naming the column
"""

from contextlib import contextmanager
import logging
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from alphaquant.stats_kernel.correlation import correlation_matrix, to_row_major_2d
from alphaquant.stats_kernel.errors import (
    ColumnComputationError,
    ColumnNotFoundError,
    ConstantSeriesError,
    EmptyInputError,
    LengthMismatchError,
    NoValidValuesError,
    StatsKernelError,
)
from alphaquant.stats_kernel.normalization import normalize, normalize_range
from alphaquant.stats_kernel.rolling import ewma, rolling_mean_robust, span_to_alpha
from alphaquant.stats_kernel.schemas import CorrelationMatrix
from alphaquant.stats_kernel.standardization import robust_zscore, zscore
from alphaquant.stats_kernel.validation import filter_valid, to_float64_array, valid_mask
from alphaquant.table_adapter.config import TableAdapterConfig
from alphaquant.table_adapter.describe import STAT_NAMES, summarize

LOG = logging.getLogger(__name__)


@contextmanager
def column_errors(column: str):
    """Re-raise kernel errors with the column they occurred in"""
    try:
        yield
    except (ColumnNotFoundError, ColumnComputationError):
        raise
    except StatsKernelError as exc:
        raise ColumnComputationError(column, exc) from exc


class TableAdapter:
    """
    Extracts named columns as kernel buffers and re-attaches results.

    The container is a pandas DataFrame; the adapter only reads columns and
    builds new frames, it never filters, joins or re-indexes the input.
    """

    def __init__(self, config: Optional[TableAdapterConfig] = None):
        """
        Initialize adapter.

        Args:
            config: Adapter configuration (uses defaults if None)
        """
        self.config = config or TableAdapterConfig()
        self.config.validate()

        LOG.info(f"TableAdapter initialized with config hash: {self.config.get_config_hash()}")

    def _log_op(self, message: str) -> None:
        if self.config.verbose_logging:
            LOG.info(message)
        else:
            LOG.debug(message)

    # ========================================================================
    # BOUNDARY CONTRACT
    # ========================================================================

    def extract_column(self, table: pd.DataFrame, column_name: str) -> np.ndarray:
        """
        Raw values of a column.

        Raises:
            ColumnNotFoundError: If the column does not exist (lists available names)
        """
        if column_name not in table.columns:
            raise ColumnNotFoundError(column_name, [str(c) for c in table.columns])
        return table[column_name].to_numpy()

    def extract_buffer(
        self,
        table: pd.DataFrame,
        column_name: str,
        strict: bool = False
    ) -> np.ndarray:
        """
        Column as a validated kernel buffer.

        Args:
            table: Source table
            column_name: Column to extract
            strict: Fail on the first invalid value instead of dropping it

        Raises:
            ColumnNotFoundError: If the column does not exist
            ColumnComputationError: If validation fails
        """
        raw = self.extract_column(table, column_name)
        with column_errors(column_name):
            return to_float64_array(raw) if strict else filter_valid(raw)

    def attach_column(
        self,
        table: pd.DataFrame,
        new_name: str,
        sequence: Iterable
    ) -> pd.DataFrame:
        """
        New table with a column appended (or replaced).

        Raises:
            LengthMismatchError: If the sequence length differs from the row count
        """
        values = np.asarray(sequence)
        if values.shape != (len(table),):
            raise LengthMismatchError(int(values.size), len(table))
        return table.assign(**{new_name: values})

    def attach_matrix(
        self,
        table: pd.DataFrame,
        matrix: Union[CorrelationMatrix, np.ndarray],
        labels: Optional[Sequence[str]] = None
    ) -> pd.DataFrame:
        """
        Correlation matrix as a table whose index and columns are the labels.

        Args:
            table: Source table (its attrs metadata is carried over)
            matrix: CorrelationMatrix or flat row-major k*k buffer
            labels: k labels; defaults to the matrix's own labels

        Raises:
            LengthMismatchError: If the buffer does not hold len(labels)**2 values
        """
        if isinstance(matrix, CorrelationMatrix):
            values = matrix.values
            labels = list(matrix.labels) if labels is None else list(labels)
        else:
            values = matrix
            labels = list(labels or [])

        rows = to_row_major_2d(values, len(labels))
        result = pd.DataFrame(rows, index=labels, columns=labels)
        result.attrs.update(table.attrs)
        return result

    # ========================================================================
    # COLUMN OPERATIONS
    # ========================================================================

    @staticmethod
    def _scatter(table: pd.DataFrame, mask: np.ndarray, values: np.ndarray) -> np.ndarray:
        full = np.full(len(table), np.nan, dtype=np.float64)
        full[mask] = values
        return full

    @staticmethod
    def _column_list(columns) -> list:
        """One column name or a non-empty list of names, as a list"""
        if isinstance(columns, (list, tuple)):
            if not columns:
                raise EmptyInputError("Columns must be a non-empty name or list of names")
            return list(columns)
        return [columns]

    def numeric_columns(self, table: pd.DataFrame) -> List[str]:
        """
        Columns holding at least one valid numeric value.

        Raises:
            NoValidValuesError: If no column qualifies
        """
        columns = [
            col for col in table.columns
            if valid_mask(table[col].to_numpy()).any()
        ]
        if not columns:
            raise NoValidValuesError("Table has no numeric columns")
        return columns

    def normalize_column(
        self,
        table: pd.DataFrame,
        columns: Union[str, Sequence[str]],
        new_min: Optional[float] = None,
        new_max: Optional[float] = None
    ) -> pd.DataFrame:
        """
        Min-max scale one or more columns into [0, 1] (or [new_min, new_max]).

        Adds `<column><normalize_suffix>` per column, in the order given.

        Raises:
            EmptyInputError: If an empty list of columns is given
        """
        result = table
        for column in self._column_list(columns):
            result = self._normalize_one(result, column, new_min, new_max)
        return result

    def _normalize_one(
        self,
        table: pd.DataFrame,
        column: str,
        new_min: Optional[float],
        new_max: Optional[float]
    ) -> pd.DataFrame:
        raw = self.extract_column(table, column)
        with column_errors(column):
            mask = valid_mask(raw)
            buffer = filter_valid(raw)
            if new_min is None and new_max is None:
                result = normalize(buffer)
            else:
                result = normalize_range(buffer, new_min, new_max)

        self._log_op(f"Normalized {column}: {int(mask.sum())}/{len(table)} valid rows")

        new_name = f"{column}{self.config.naming.normalize_suffix}"
        return self.attach_column(table, new_name, self._scatter(table, mask, result))

    def zscore_column(
        self,
        table: pd.DataFrame,
        columns: Union[str, Sequence[str]],
        robust: Optional[bool] = None
    ) -> pd.DataFrame:
        """
        Standardize one or more columns (mean/std, or median/MAD when robust).

        Adds `<column><zscore_suffix>` per column, in the order given.

        Raises:
            EmptyInputError: If an empty list of columns is given
        """
        if robust is None:
            robust = self.config.standardization.use_robust

        result = table
        for column in self._column_list(columns):
            result = self._zscore_one(result, column, robust)
        return result

    def _zscore_one(self, table: pd.DataFrame, column: str, robust: bool) -> pd.DataFrame:
        raw = self.extract_column(table, column)
        with column_errors(column):
            mask = valid_mask(raw)
            buffer = filter_valid(raw)
            result = robust_zscore(buffer) if robust else zscore(buffer)

        self._log_op(f"Standardized {column} (robust={robust}): "
                     f"{int(mask.sum())}/{len(table)} valid rows")

        new_name = f"{column}{self.config.naming.zscore_suffix}"
        return self.attach_column(table, new_name, self._scatter(table, mask, result))

    def rolling_mean_column(
        self,
        table: pd.DataFrame,
        column: str,
        window_size: int,
        min_observations: Optional[int] = None
    ) -> pd.DataFrame:
        """
        Gap-tolerant rolling mean of a column, aligned to the table rows.

        Adds `<column><rolling_mean_suffix>`.
        """
        if min_observations is None:
            min_observations = self.config.rolling.min_observations

        raw = self.extract_column(table, column)
        with column_errors(column):
            result = rolling_mean_robust(raw, window_size, min_observations)

        self._log_op(f"Rolling mean {column}: window={window_size}, "
                     f"{int(np.isfinite(result).sum())}/{len(table)} values")

        new_name = f"{column}{self.config.naming.rolling_mean_suffix}"
        return self.attach_column(table, new_name, result)

    def ewm_column(self, table: pd.DataFrame, column: str, span: int) -> pd.DataFrame:
        """
        Exponentially weighted moving average with alpha = 2 / (span + 1).

        Smoothing runs over the valid values in row order; invalid rows get NaN.
        Adds `<column><ewm_suffix>`.
        """
        raw = self.extract_column(table, column)
        with column_errors(column):
            alpha = span_to_alpha(span)
            mask = valid_mask(raw)
            result = ewma(filter_valid(raw), alpha)

        self._log_op(f"EWM {column}: span={span}, alpha={alpha:.4f}")

        new_name = f"{column}{self.config.naming.ewm_suffix}"
        return self.attach_column(table, new_name, self._scatter(table, mask, result))

    def correlation_table(
        self,
        table: pd.DataFrame,
        columns: Optional[Sequence[str]] = None
    ) -> pd.DataFrame:
        """
        Pearson correlation matrix of columns, as a labelled table.

        Args:
            table: Source table
            columns: Columns to correlate (all numeric columns if None)

        Returns:
            k x k DataFrame indexed and labelled by column name

        Raises:
            ColumnNotFoundError: If a requested column does not exist
            ColumnComputationError: If a column is constant, or holds invalid
                values while drop_incomplete_rows is disabled
        """
        columns = list(columns) if columns is not None else self.numeric_columns(table)
        raws = [self.extract_column(table, col) for col in columns]

        if self.config.correlation.drop_incomplete_rows and raws:
            keep = np.ones(len(table), dtype=bool)
            for raw in raws:
                keep &= valid_mask(raw)
            raws = [raw[keep] for raw in raws]

        buffers = []
        for col, raw in zip(columns, raws):
            with column_errors(col):
                buffers.append(to_float64_array(raw))

        labels = [str(col) for col in columns]
        try:
            matrix = correlation_matrix(buffers, labels=labels)
        except ConstantSeriesError as exc:
            raise ColumnComputationError(labels[exc.index], exc) from exc
        except StatsKernelError as exc:
            raise ColumnComputationError(", ".join(labels), exc) from exc

        self._log_op(f"Correlation matrix over {len(labels)} columns, "
                     f"{buffers[0].size} rows")

        return self.attach_matrix(table, matrix)

    def describe(
        self,
        table: pd.DataFrame,
        columns: Optional[Sequence[str]] = None
    ) -> pd.DataFrame:
        """
        count / mean / std / min / quartiles / max per column.

        Args:
            table: Source table
            columns: Columns to describe (all numeric columns if None)

        Returns:
            DataFrame indexed by statistic name, one column per input column
        """
        columns = list(columns) if columns is not None else self.numeric_columns(table)

        summaries = {}
        for col in columns:
            raw = self.extract_column(table, col)
            with column_errors(col):
                summary = summarize(raw)
            summaries[col] = [summary[name] for name in STAT_NAMES]

        return pd.DataFrame(summaries, index=STAT_NAMES, columns=columns)
