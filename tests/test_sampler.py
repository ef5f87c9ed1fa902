"""Tests for the discrete CDF and inverse transform sampling."""

import numpy as np
import pytest

from central_limit import (
    DensityKind,
    DiscreteCDF,
    Distribution,
    InvalidDensity,
    RandomSource,
    SampleOutOfBracket,
    Sampler,
)


def linear_scan(cdf, u):
    """Reference bracket search: first k with y_k <= u <= y_(k+1)."""
    for k in range(len(cdf) - 1):
        if cdf.y[k] <= u <= cdf.y[k + 1]:
            return cdf.x[k]
    return None


@pytest.fixture
def small_cdf():
    return DiscreteCDF([0.0, 1.0, 2.0, 3.0], [0.1, 0.5, 0.9, 0.95])


class TestDiscreteCDF:
    """Test CDF construction by left Riemann sums."""

    def test_uniform_points(self):
        """Test grid and accumulated area for a uniform density."""
        cdf = DiscreteCDF.from_distribution(Distribution.uniform(0.0, 10.0), 1000)
        assert len(cdf) == 1000
        assert cdf.x[0] == 0.0
        assert cdf.x[-1] == pytest.approx(9.99)
        assert cdf.y[0] == pytest.approx(0.001)
        assert cdf.y[-1] == pytest.approx(1.0, abs=1e-9)

    def test_monotonic(self):
        """Test that y is non-negative and non-decreasing."""
        for dist in (Distribution.lopsided(), Distribution.bimodal(), Distribution.step()):
            cdf = DiscreteCDF.from_distribution(dist, 1000)
            assert cdf.y[0] >= 0
            assert np.all(np.diff(cdf.y) >= 0)
            assert np.all(np.diff(cdf.x) > 0)

    def test_endpoint_close_to_one(self):
        """Test that the last value is within O(1/N) of one."""
        numpoints = 1000
        cdf = DiscreteCDF.from_distribution(Distribution.parabolic(), numpoints)
        assert abs(cdf.y[-1] - 1.0) < 10.0 / numpoints
        assert cdf.y[-1] < 1.0

    def test_read_only(self):
        """Test that the CDF arrays cannot be modified."""
        cdf = DiscreteCDF.from_distribution(Distribution.uniform(), 100)
        with pytest.raises(ValueError):
            cdf.y[0] = 0.5

    def test_too_few_points(self):
        """Test that numpoints < 2 raises ValueError."""
        with pytest.raises(ValueError):
            DiscreteCDF.from_distribution(Distribution.uniform(), 1)

    def test_negative_value_between_validation_points(self):
        """Test that a negative value on the CDF grid raises InvalidDensity."""

        def pdf(x):
            return -1.0 if 0.0031 < x < 0.0049 else 1.0

        # Not validated here; the CDF grid at x = 0.004 reaches the negative region
        dist = Distribution(DensityKind.CUSTOM, {}, pdf, (0.0, 10.0), norm_const=0.1)
        with pytest.raises(InvalidDensity, match="negative"):
            DiscreteCDF.from_distribution(dist, 5000)

    def test_non_finite_value(self):
        """Test that a non-finite value on the CDF grid raises InvalidDensity."""
        dist = Distribution(
            DensityKind.CUSTOM, {}, lambda x: float("nan") if x > 5.0 else 1.0, (0.0, 10.0)
        )
        with pytest.raises(InvalidDensity, match="not finite"):
            DiscreteCDF.from_distribution(dist, 100)

    def test_rejects_decreasing_y(self):
        """Test that a decreasing y sequence is rejected."""
        with pytest.raises(ValueError):
            DiscreteCDF([0.0, 1.0, 2.0], [0.5, 0.4, 1.0])

    def test_rejects_unsorted_x(self):
        """Test that non-increasing x is rejected."""
        with pytest.raises(ValueError):
            DiscreteCDF([0.0, 0.0, 2.0], [0.1, 0.4, 1.0])

    def test_points(self, small_cdf):
        """Test the (x, y) pairs view."""
        assert small_cdf.points()[1] == (1.0, 0.5)
        assert len(small_cdf.points()) == 4


class TestSampler:
    """Test inverse transform sampling."""

    def test_matches_linear_scan(self):
        """Test that binary search gives the same bracket as a linear scan."""
        for dist in (Distribution.lopsided(), Distribution.step()):
            cdf = DiscreteCDF.from_distribution(dist, 500)
            sampler = Sampler(cdf)
            us = np.random.default_rng(0).uniform(cdf.y[0], cdf.y[-1], 2000)
            expected = np.array([linear_scan(cdf, u) for u in us])
            np.testing.assert_array_equal(sampler.invert_many(us), expected)
            assert sampler.n_clamped == 0

    def test_exact_cdf_values(self, small_cdf):
        """Test that u equal to a CDF value resolves to the first bracket."""
        sampler = Sampler(small_cdf)
        assert sampler.invert(0.1) == 0.0
        assert sampler.invert(0.5) == 0.0
        assert sampler.invert(0.9) == 1.0
        assert sampler.invert(0.95) == 2.0

    def test_deterministic(self, small_cdf):
        """Test that the same u always yields the same sample."""
        sampler = Sampler(small_cdf)
        assert sampler.invert(0.7) == sampler.invert(0.7) == 1.0

    def test_clamps_below(self, small_cdf):
        """Test that u < y_0 resolves to the first x value."""
        sampler = Sampler(small_cdf)
        assert sampler.invert(0.05) == 0.0
        assert sampler.n_clamped == 1

    def test_clamps_above(self, small_cdf):
        """Test that u > y_(N-1) resolves to the last bracket."""
        sampler = Sampler(small_cdf)
        assert sampler.invert(0.99) == 2.0
        assert sampler.n_clamped == 1

    def test_strict_raises(self, small_cdf):
        """Test that strict mode reports out-of-bracket draws."""
        sampler = Sampler(small_cdf, strict=True)
        with pytest.raises(SampleOutOfBracket):
            sampler.invert(0.99)
        with pytest.raises(SampleOutOfBracket):
            sampler.invert(0.01)

    def test_no_sample_dropped(self, small_cdf):
        """Test that every draw produces a sample."""
        sampler = Sampler(small_cdf)
        samples = sampler.sample(RandomSource(1234), 1000)
        assert samples.shape == (1000,)
        assert set(np.unique(samples)) <= {0.0, 1.0, 2.0}

    def test_samples_within_support(self):
        """Test that samples fall inside the support."""
        cdf = DiscreteCDF.from_distribution(Distribution.gaussian(), 1000)
        samples = Sampler(cdf).sample(RandomSource(42), 10000)
        assert samples.min() >= 0.0
        assert samples.max() < 10.0


class TestRandomSource:
    """Test the seeded random context."""

    def test_reproducible(self):
        """Test that equal seeds give equal streams."""
        a = RandomSource(1234).uniform(100)
        b = RandomSource(1234).uniform(100)
        np.testing.assert_array_equal(a, b)

    def test_different_seeds(self):
        """Test that different seeds give different streams."""
        assert not np.allclose(RandomSource(1).uniform(100), RandomSource(2).uniform(100))

    def test_range_and_count(self):
        """Test draws are in [0, 1) and counted."""
        source = RandomSource(7)
        values = source.uniform(500)
        single = source.uniform()
        assert isinstance(single, float)
        assert values.min() >= 0.0 and values.max() < 1.0
        assert source.draws == 501


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
