"""
Tests for rolling window transforms

Run: pytest tests/test_rolling.py -v
"""

import tracemalloc

import numpy as np
import pandas as pd
import pytest

from alphaquant.stats_kernel import (
    InsufficientLengthError,
    InvalidAlphaError,
    InvalidMinObservationsError,
    InvalidSpanError,
    InvalidWindowSizeError,
    WindowSpec,
    ewma,
    rolling_mean,
    rolling_mean_robust,
    rolling_mean_window,
    span_to_alpha,
)


@pytest.fixture
def prices():
    """Random walk price series"""
    np.random.seed(42)
    return 100 + np.cumsum(np.random.normal(0, 1, 300))


class TestRollingMean:
    """Test the sliding-sum rolling mean"""

    def test_known_values(self):
        """Window 3 over 1..5"""
        result = rolling_mean([1, 2, 3, 4, 5], 3)
        assert np.isnan(result[0])
        assert np.isnan(result[1])
        np.testing.assert_allclose(result[2:], [2.0, 3.0, 4.0])

    def test_same_length_nan_prefix(self, prices):
        """Output length equals input length, first w-1 entries are NaN"""
        result = rolling_mean(prices, 20)
        assert result.size == prices.size
        assert np.isnan(result[:19]).all()
        assert np.isfinite(result[19:]).all()

    def test_matches_pandas(self, prices):
        """Agrees with pandas rolling().mean()"""
        expected = pd.Series(prices).rolling(10).mean().to_numpy()
        np.testing.assert_allclose(rolling_mean(prices, 10), expected, rtol=1e-9, equal_nan=True)

    def test_window_one_is_identity(self):
        """Window 1 reproduces the input"""
        assert rolling_mean([4.0, 8.0, 15.0], 1).tolist() == [4.0, 8.0, 15.0]

    def test_window_equals_length(self):
        """A single full window at the last position"""
        result = rolling_mean([2, 4, 6], 3)
        assert np.isnan(result[:2]).all()
        assert result[2] == pytest.approx(4.0)

    def test_no_lookahead(self, prices):
        """Changing a future value does not change earlier outputs"""
        base = rolling_mean(prices, 5)
        shocked = prices.copy()
        shocked[150] += 1000.0
        result = rolling_mean(shocked, 5)
        np.testing.assert_array_equal(result[:150], base[:150])

    @pytest.mark.parametrize("window_size", [0, -1, 2.5, 3.0, True, "3", None])
    def test_invalid_window_size(self, window_size):
        """Window size must be a positive integer"""
        with pytest.raises(InvalidWindowSizeError) as exc_info:
            rolling_mean([1, 2, 3, 4, 5], window_size)
        assert exc_info.value.window_size is window_size

    def test_window_checked_before_input(self):
        """A bad window is reported even for empty input"""
        with pytest.raises(InvalidWindowSizeError):
            rolling_mean([], 0)

    def test_insufficient_length(self):
        """Fewer values than the window size"""
        with pytest.raises(InsufficientLengthError) as exc_info:
            rolling_mean([1, 2], 3)
        assert exc_info.value.length == 2
        assert exc_info.value.window_size == 3

    def test_numpy_integer_window(self):
        """numpy integers are accepted as window sizes"""
        result = rolling_mean([1, 2, 3], np.int64(2))
        np.testing.assert_allclose(result[1:], [1.5, 2.5])


class TestRollingMeanRobust:
    """Test the gap-tolerant rolling mean"""

    def test_skips_gaps(self):
        """Each window averages its valid entries"""
        result = rolling_mean_robust([1, None, 3, 4, np.nan, 6], 3)
        assert result.size == 6
        assert np.isnan(result[:2]).all()
        np.testing.assert_allclose(result[2:], [2.0, 3.5, 3.5, 5.0])

    def test_min_observations(self):
        """Windows with too few valid values give NaN"""
        result = rolling_mean_robust([1, None, 3, 4, 5], 3, min_observations=3)
        assert np.isnan(result[:4]).all()
        assert result[4] == pytest.approx(4.0)

    def test_all_invalid_window(self):
        """A window without valid values gives NaN"""
        result = rolling_mean_robust([None, None, 1.0, 2.0], 2)
        assert np.isnan(result[1])
        assert result[2] == 1.0
        assert result[3] == 1.5

    def test_shorter_than_window(self):
        """Short input gives all-NaN of the same length"""
        result = rolling_mean_robust([1.0, 2.0], 5)
        assert result.size == 2
        assert np.isnan(result).all()

    def test_empty_input(self):
        """Empty input gives an empty buffer"""
        assert rolling_mean_robust([], 3).size == 0

    def test_matches_plain_on_clean_data(self, prices):
        """Without gaps both rolling means agree"""
        np.testing.assert_allclose(
            rolling_mean_robust(prices, 7), rolling_mean(prices, 7), rtol=1e-9, equal_nan=True
        )

    def test_matches_pandas_min_periods(self, prices):
        """Agrees with pandas rolling(min_periods=...) on gapped data"""
        gapped = prices.copy()
        gapped[::7] = np.nan
        expected = pd.Series(gapped).rolling(5, min_periods=3).mean().to_numpy()
        expected[:4] = np.nan
        result = rolling_mean_robust(gapped, 5, min_observations=3)
        np.testing.assert_allclose(result, expected, rtol=1e-9, equal_nan=True)

    def test_memory_linear_in_length(self):
        """Peak allocation stays proportional to n, not n * window"""
        np.random.seed(42)
        values = np.random.normal(size=100_000)
        values[::50] = np.nan
        rolling_mean_robust(values[:2000], 1000)

        tracemalloc.start()
        try:
            rolling_mean_robust(values, 1000)
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        assert peak < 40 * values.nbytes

    @pytest.mark.parametrize("min_observations", [0, 4, 1.5, True])
    def test_invalid_min_observations(self, min_observations):
        """min_observations must be an integer in [1, window_size]"""
        with pytest.raises(InvalidMinObservationsError):
            rolling_mean_robust([1, 2, 3, 4], 3, min_observations=min_observations)

    def test_window_spec(self):
        """WindowSpec drives the robust rolling mean"""
        spec = WindowSpec(window_size=2, min_observations=2)
        result = rolling_mean_window([1, 3, None, 5, 7], spec)
        assert np.isnan(result[0])
        assert result[1] == pytest.approx(2.0)
        assert np.isnan(result[2:4]).all()
        assert result[4] == pytest.approx(6.0)


class TestWindowSpec:
    """Test WindowSpec validation"""

    def test_defaults(self):
        """min_observations defaults to 1"""
        spec = WindowSpec(window_size=10)
        assert spec.to_dict() == {'window_size': 10, 'min_observations': 1}

    def test_invalid_window(self):
        """Non-positive window rejected at construction"""
        with pytest.raises(InvalidWindowSizeError):
            WindowSpec(window_size=0)

    def test_min_observations_above_window(self):
        """min_observations may not exceed the window"""
        with pytest.raises(InvalidMinObservationsError):
            WindowSpec(window_size=3, min_observations=4)


class TestEWMA:
    """Test exponential weighted moving average"""

    def test_known_values(self):
        """alpha 0.5 halves the distance each step"""
        result = ewma([1, 2, 3], 0.5)
        np.testing.assert_allclose(result, [1.0, 1.5, 2.25])

    def test_seeded_with_first_value(self, prices):
        """s_0 = x_0"""
        assert ewma(prices, 0.1)[0] == prices[0]

    def test_alpha_one_is_identity(self, prices):
        """alpha 1 reproduces the input"""
        np.testing.assert_array_equal(ewma(prices, 1.0), prices)

    def test_matches_pandas(self, prices):
        """Agrees with pandas ewm(adjust=False)"""
        expected = pd.Series(prices).ewm(alpha=0.2, adjust=False).mean().to_numpy()
        np.testing.assert_allclose(ewma(prices, 0.2), expected, rtol=1e-12)

    def test_invalid_entries_dropped(self):
        """Nulls are removed before smoothing"""
        result = ewma([2.0, None, 4.0], 0.5)
        np.testing.assert_allclose(result, [2.0, 3.0])

    @pytest.mark.parametrize("alpha", [0, -0.1, 1.5, True, "0.5", None])
    def test_invalid_alpha(self, alpha):
        """alpha must be in (0, 1]"""
        with pytest.raises(InvalidAlphaError):
            ewma([1, 2, 3], alpha)

    def test_span_to_alpha(self):
        """alpha = 2 / (span + 1)"""
        assert span_to_alpha(3) == 0.5
        assert span_to_alpha(1) == 1.0

    @pytest.mark.parametrize("span", [0, -5, 2.0, False])
    def test_invalid_span(self, span):
        """span must be a positive integer"""
        with pytest.raises(InvalidSpanError):
            span_to_alpha(span)
