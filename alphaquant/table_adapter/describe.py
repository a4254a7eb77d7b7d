"""
Column Description

Per-column descriptive statistics in the layout of pandas' describe():
count, mean, std, min, 25%, 50%, 75%, max.

std is the population standard deviation (Welford), quantiles use linear
interpolation. A column without valid values reports count 0 and NaN
everywhere else.
"""

from typing import Dict, Iterable

import numpy as np

from alphaquant.stats_kernel.summary import mean_and_std, min_max, quantile
from alphaquant.stats_kernel.validation import filter_valid, valid_mask

STAT_NAMES = ['count', 'mean', 'std', 'min', '25%', '50%', '75%', 'max']


def summarize(values: Iterable) -> Dict[str, float]:
    """
    Descriptive statistics of the valid entries of a raw sequence.

    Args:
        values: Raw column values (nulls / NaNs / non-numeric are ignored)

    Returns:
        Dict keyed by STAT_NAMES
    """
    mask = valid_mask(values)
    if not mask.any():
        summary = {name: np.nan for name in STAT_NAMES}
        summary['count'] = 0
        return summary

    buffer = np.sort(filter_valid(values))
    stats = mean_and_std(buffer)
    bounds = min_max(buffer)

    return {
        'count': int(buffer.size),
        'mean': stats.mean,
        'std': stats.std,
        'min': bounds.min,
        '25%': quantile(buffer, 0.25),
        '50%': quantile(buffer, 0.5),
        '75%': quantile(buffer, 0.75),
        'max': bounds.max,
    }
