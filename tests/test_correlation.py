"""
Tests for the correlation engine

Run: pytest tests/test_correlation.py -v
"""

import logging

import numpy as np
import pytest

from alphaquant.stats_kernel import (
    ConstantSeriesError,
    CorrelationMatrix,
    EmptyInputError,
    LengthMismatchError,
    NonNumericValueError,
    correlation,
    correlation_matrix,
    covariance,
    to_row_major_2d,
)


@pytest.fixture
def linear_series():
    """Perfectly (anti-)correlated series"""
    x = [1.0, 2.0, 3.0, 4.0, 5.0]
    y = [10.0 * v for v in x]
    z = [60.0 - 10.0 * v for v in x]
    return x, y, z


@pytest.fixture
def asset_returns():
    """Three correlated return series"""
    np.random.seed(42)
    market = np.random.normal(0, 0.01, 500)
    a = market + np.random.normal(0, 0.005, 500)
    b = -0.5 * market + np.random.normal(0, 0.01, 500)
    c = np.random.normal(0, 0.02, 500)
    return [a, b, c]


class TestCovariance:
    """Test population covariance"""

    def test_self_covariance_is_variance(self):
        """cov(x, x) = population variance"""
        assert covariance([1, 2, 3], [1, 2, 3]) == pytest.approx(2.0 / 3.0)

    def test_matches_numpy(self, asset_returns):
        """Agrees with numpy cov (bias=True)"""
        a, b, _ = asset_returns
        expected = np.cov(a, b, bias=True)[0, 1]
        assert covariance(a, b) == pytest.approx(expected, rel=1e-10)

    def test_precomputed_means(self):
        """Explicit means are used as given"""
        assert covariance([1, 3], [2, 4], mean_x=0.0, mean_y=0.0) == pytest.approx(7.0)

    def test_length_mismatch(self):
        """Series must have equal length"""
        with pytest.raises(LengthMismatchError) as exc_info:
            covariance([1, 2, 3], [1, 2])
        assert exc_info.value.length == 2
        assert exc_info.value.expected == 3
        assert exc_info.value.index == 1

    def test_strict_conversion(self):
        """Invalid entries are not silently dropped"""
        with pytest.raises(NonNumericValueError) as exc_info:
            covariance([1, None, 3], [1, 2, 3])
        assert exc_info.value.index == 1

    def test_empty(self):
        """Empty series raise"""
        with pytest.raises(EmptyInputError):
            covariance([], [])


class TestCorrelation:
    """Test pairwise Pearson correlation"""

    def test_perfect_correlation(self, linear_series):
        """y = 10x gives +1, z = 60 - 10x gives -1"""
        x, y, z = linear_series
        assert correlation(x, y) == pytest.approx(1.0)
        assert correlation(x, z) == pytest.approx(-1.0)

    def test_matches_numpy(self, asset_returns):
        """Agrees with numpy corrcoef"""
        a, b, _ = asset_returns
        assert correlation(a, b) == pytest.approx(np.corrcoef(a, b)[0, 1], rel=1e-10)

    def test_symmetric(self, asset_returns):
        """corr(x, y) == corr(y, x)"""
        a, b, _ = asset_returns
        assert correlation(a, b) == pytest.approx(correlation(b, a), rel=1e-14)

    def test_constant_series(self):
        """Zero variance reports which series is constant"""
        with pytest.raises(ConstantSeriesError) as exc_info:
            correlation([1, 2, 3], [5, 5, 5])
        assert exc_info.value.index == 1

        with pytest.raises(ConstantSeriesError) as exc_info:
            correlation([4, 4, 4], [1, 2, 3])
        assert exc_info.value.index == 0


class TestCorrelationMatrix:
    """Test the k x k correlation matrix"""

    def test_known_values(self, linear_series):
        """Linear series give +/-1 everywhere"""
        matrix = correlation_matrix(linear_series, labels=['x', 'y', 'z'])
        assert matrix.size == 3
        assert matrix.labels == ['x', 'y', 'z']
        assert matrix.value(0, 1) == pytest.approx(1.0)
        assert matrix.value(0, 2) == pytest.approx(-1.0)
        assert matrix.value(1, 2) == pytest.approx(-1.0)

    def test_flat_row_major_layout(self, asset_returns):
        """values[i*k + j] holds corr(i, j)"""
        matrix = correlation_matrix(asset_returns)
        assert matrix.values.shape == (9,)
        expected = np.corrcoef(np.vstack(asset_returns))
        np.testing.assert_allclose(matrix.values.reshape(3, 3), expected, rtol=1e-10)

    def test_diagonal_and_symmetry(self, asset_returns):
        """Diagonal is exactly 1.0, off-diagonal entries mirror exactly"""
        matrix = correlation_matrix(asset_returns)
        k = matrix.size
        for i in range(k):
            assert matrix.value(i, i) == 1.0
            for j in range(k):
                assert matrix.value(i, j) == matrix.value(j, i)
                assert -1.0 - 1e-12 <= matrix.value(i, j) <= 1.0 + 1e-12

    def test_read_only(self, asset_returns):
        """The result buffer cannot be written"""
        matrix = correlation_matrix(asset_returns)
        with pytest.raises(ValueError):
            matrix.values[1] = 0.0

    def test_single_series(self):
        """k = 1 gives the 1 x 1 identity"""
        matrix = correlation_matrix([[1.0, 2.0, 4.0]])
        assert matrix.values.tolist() == [1.0]
        assert matrix.labels == ['Series_0']

    def test_default_labels(self, asset_returns):
        """Positional labels when none are given"""
        matrix = correlation_matrix(asset_returns)
        assert matrix.labels == ['Series_0', 'Series_1', 'Series_2']

    def test_label_count_mismatch(self, asset_returns, caplog):
        """Wrong number of labels falls back to positional labels with a warning"""
        with caplog.at_level(logging.WARNING):
            matrix = correlation_matrix(asset_returns, labels=['only_one'])
        assert matrix.labels == ['Series_0', 'Series_1', 'Series_2']
        assert any("positional labels" in r.getMessage() for r in caplog.records)

    def test_constant_series_index(self, linear_series):
        """The constant series is identified by position"""
        x, y, _ = linear_series
        with pytest.raises(ConstantSeriesError) as exc_info:
            correlation_matrix([x, y, [3.0] * 5])
        assert exc_info.value.index == 2

    def test_length_mismatch_index(self):
        """The first series of a different length is reported"""
        with pytest.raises(LengthMismatchError) as exc_info:
            correlation_matrix([[1, 2, 3], [3, 1, 2], [1, 2]])
        assert exc_info.value.index == 2
        assert exc_info.value.length == 2
        assert exc_info.value.expected == 3

    def test_non_numeric_entry(self):
        """Strict conversion applies to every series"""
        with pytest.raises(NonNumericValueError):
            correlation_matrix([[1, 2, 3], [1, np.nan, 3]])

    def test_no_series(self):
        """k = 0 is rejected"""
        with pytest.raises(EmptyInputError):
            correlation_matrix([])

    def test_to_dict(self, linear_series):
        """Nested label mapping"""
        x, y, _ = linear_series
        matrix = correlation_matrix([x, y], labels=['x', 'y'])
        result = matrix.to_dict()
        assert result['x']['x'] == 1.0
        assert result['x']['y'] == pytest.approx(1.0)


class TestRowMajorReshape:
    """Test to_row_major_2d / CorrelationMatrix shape checks"""

    def test_reshape(self):
        """Flat buffer becomes k rows of k values"""
        assert to_row_major_2d([1, 2, 3, 4], 2) == [[1.0, 2.0], [3.0, 4.0]]

    def test_wrong_size(self):
        """Buffer must hold size * size values"""
        with pytest.raises(LengthMismatchError):
            to_row_major_2d([1, 2, 3], 2)

    def test_matrix_shape_checked(self):
        """CorrelationMatrix rejects a buffer that does not match its labels"""
        with pytest.raises(LengthMismatchError):
            CorrelationMatrix(values=np.ones(3), labels=['a', 'b'])

    def test_to_2d(self):
        """CorrelationMatrix exposes the nested layout"""
        matrix = CorrelationMatrix(values=np.array([1.0, 0.5, 0.5, 1.0]), labels=['a', 'b'])
        assert matrix.to_2d() == [[1.0, 0.5], [0.5, 1.0]]
