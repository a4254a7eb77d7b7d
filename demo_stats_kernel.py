"""
Statistics Kernel Demo

Runs the column operations of the TableAdapter over a synthetic OHLCV table
with gaps, then shows how kernel errors surface with the column name.
"""

import sys
import logging
import numpy as np
import pandas as pd
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from alphaquant.stats_kernel import ColumnComputationError, mean_and_std, rolling_mean
from alphaquant.table_adapter import TableAdapter, TableAdapterConfig


def generate_test_data(n_bars: int = 200) -> pd.DataFrame:
    """Generate synthetic OHLCV data with a few missing closes."""
    np.random.seed(42)

    base_price = 100.0
    trend = np.linspace(0, 10, n_bars)
    noise = np.random.normal(0, 2, n_bars)
    close = base_price + trend + noise

    high = close + np.random.uniform(0.5, 2.0, n_bars)
    low = close - np.random.uniform(0.5, 2.0, n_bars)
    volume = np.random.uniform(1000, 10000, n_bars)

    df = pd.DataFrame({
        'high': high,
        'low': low,
        'close': close,
        'volume': volume
    })
    df.loc[df.index[::25], 'close'] = np.nan

    df.index = pd.date_range('2024-01-01', periods=n_bars, freq='1h')

    return df


def demo_kernel():
    """Kernel functions on plain sequences."""
    print("=" * 80)
    print("DEMO 1: Kernel on raw sequences")
    print("=" * 80)

    values = [1, None, 3, np.nan, 5, None, 7]
    stats = mean_and_std(values)
    print(f"\nInput:        {values}")
    print(f"Mean / std:   {stats.mean:.4f} / {stats.std:.4f}")
    print(f"Rolling mean: {rolling_mean([1, 2, 3, 4, 5], 3)}")


def demo_adapter():
    """Column operations through the TableAdapter."""
    print("\n" + "=" * 80)
    print("DEMO 2: TableAdapter column operations")
    print("=" * 80)

    df = generate_test_data()
    adapter = TableAdapter(TableAdapterConfig(verbose_logging=False))

    result = adapter.normalize_column(df, 'close')
    result = adapter.zscore_column(result, 'volume', robust=True)
    result = adapter.rolling_mean_column(result, 'close', 20)
    result = adapter.ewm_column(result, 'close', 10)

    print(f"\nColumns: {list(result.columns)}")
    print(result.tail(5).round(4).to_string())

    print("\nDescribe:")
    print(adapter.describe(df).round(4).to_string())

    print("\nCorrelation:")
    print(adapter.correlation_table(df).round(4).to_string())


def demo_errors():
    """Errors carry the column they occurred in."""
    print("\n" + "=" * 80)
    print("DEMO 3: Error reporting")
    print("=" * 80)

    df = pd.DataFrame({'flat': [1.0, 1.0, 1.0], 'x': [1.0, 2.0, 3.0]})
    adapter = TableAdapter()

    try:
        adapter.zscore_column(df, 'flat')
    except ColumnComputationError as e:
        print(f"\n{type(e.cause).__name__} in column '{e.column}': {e.cause}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    demo_kernel()
    demo_adapter()
    demo_errors()
