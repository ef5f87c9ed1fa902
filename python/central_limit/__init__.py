"""Central Limit - a numerical demonstration of the Central Limit Theorem.

A random variable is drawn from an arbitrary non-negative density on a closed
interval by discrete inverse transform sampling:

1. The density is normalized and a discrete approximation of its cumulative
   distribution function (CDF) is built with left Riemann sums.
2. A uniform draw on [0, 1) is matched to the CDF bracket containing it and
   the corresponding x value is the result of one experiment.

Experiments are averaged in trials, and the distribution of trial means is
compared with the mean and standard deviation predicted by the theorem.

Example:
    >>> from central_limit import Distribution, simulate
    >>>
    >>> result = simulate(Distribution.parabolic(0.0, 10.0), num_means=2000)
    >>> print(result.summary())

Example (custom density):
    >>> import math
    >>> def my_pdf(x):
    ...     return math.exp(-x) + 0.1
    ...
    >>> result = simulate(my_pdf, xmin=0.0, xmax=5.0, num_iterations=30)
    >>> result.prediction.mean, result.means.mean()
"""

import logging
import math
from enum import Enum, auto
from typing import Callable, List, NamedTuple, Optional, Tuple, Union

import numpy as np

from .config import XMAX, XMIN, ConfigurationError, SimulationConfig
from .quadrature import IntegrationFailure, evaluate, integrate

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

__all__ = [
    "Distribution",
    "DensityKind",
    "DiscreteCDF",
    "Sampler",
    "RandomSource",
    "MeanDistribution",
    "TrialAggregator",
    "MomentPredictor",
    "Prediction",
    "CentralLimitSimulator",
    "SimulationResult",
    "SimulationConfig",
    "simulate",
    "InvalidDensity",
    "IntegrationFailure",
    "SampleOutOfBracket",
    "ConfigurationError",
]

DEFAULT_VALIDATION_POINTS = 1000


class InvalidDensity(ValueError):
    """Raised when a candidate density is negative, non-finite or not integrable to a positive value."""

    pass


class SampleOutOfBracket(ValueError):
    """Raised in strict mode when a uniform draw falls outside the CDF range."""

    pass


# ============================================================================
# Probability Density
# ============================================================================


class DensityKind(Enum):
    """Built-in density shapes, plus user-supplied ones."""

    UNIFORM = auto()
    GAUSSIAN = auto()
    BIMODAL = auto()
    PARABOLIC = auto()
    STEP = auto()
    LOPSIDED = auto()
    TABLE = auto()
    CUSTOM = auto()


def _check_density_values(x_grid: np.ndarray, values: np.ndarray) -> None:
    """Raise InvalidDensity if any evaluated value is negative or not finite."""
    bad = ~np.isfinite(values)
    if np.any(bad):
        x_bad = x_grid[np.argmax(bad)]
        raise InvalidDensity(f"Density is not finite at x={x_bad:.6g}")

    negative = values < 0
    if np.any(negative):
        idx = int(np.argmax(negative))
        raise InvalidDensity(
            "Probability density function must never be negative: "
            f"pdf({x_grid[idx]:.6g}) = {values[idx]:.6g}"
        )


def _validate_density(
    pdf_func: Callable[[float], float], x_min: float, x_max: float, n_points: int
) -> None:
    """Evaluate a candidate density densely over its support.

    Raises:
        InvalidDensity: If any evaluated value is negative or not finite
    """
    x_grid = np.linspace(x_min, x_max, n_points + 1)
    _check_density_values(x_grid, evaluate(pdf_func, x_grid))


class Distribution:
    """A normalized probability density on a closed interval.

    The raw density is kept as supplied; ``pdf(x)`` applies the normalization
    constant so that the density integrates to one over ``support``.

    Examples:
        >>> # Uniform density on [0, 10]
        >>> dist = Distribution.uniform(0.0, 10.0)

        >>> # Gaussian bump with mean 5 and std 2, truncated to [0, 10]
        >>> dist = Distribution.gaussian(mean=5.0, std=2.0)

        >>> # Any non-negative callable
        >>> dist = Distribution.from_pdf(lambda x: x * x, support=(0.0, 10.0))
    """

    def __init__(
        self,
        kind: DensityKind,
        params: dict,
        pdf_func: Callable[[float], float],
        support: Tuple[float, float],
        norm_const: float = 1.0,
    ):
        self.kind = kind
        self.params = params
        self._pdf_func = pdf_func
        self.support = (float(support[0]), float(support[1]))
        self.norm_const = norm_const

    @property
    def xmin(self) -> float:
        return self.support[0]

    @property
    def xmax(self) -> float:
        return self.support[1]

    def pdf(self, x: float) -> float:
        """Evaluate the normalized PDF at point x."""
        return self.norm_const * float(self._pdf_func(x))

    __call__ = pdf

    def raw_pdf(self, x: float) -> float:
        """Evaluate the density as supplied, before normalization."""
        return float(self._pdf_func(x))

    def evaluate(self, n_points: int = 1000) -> Tuple[np.ndarray, np.ndarray]:
        """Return (x_grid, pdf_values) over the support, endpoints included."""
        x_grid = np.linspace(self.xmin, self.xmax, n_points)
        return x_grid, evaluate(self.pdf, x_grid)

    def __repr__(self):
        return (
            f"Distribution(kind={self.kind.name}, support={self.support}, "
            f"norm_const={self.norm_const:.6g})"
        )

    @staticmethod
    def from_pdf(
        pdf_func: Callable[[float], float],
        support: Tuple[float, float] = (XMIN, XMAX),
        validation_points: int = DEFAULT_VALIDATION_POINTS,
        rtol: float = 1e-5,
        max_refinements: int = 12,
        kind: DensityKind = DensityKind.CUSTOM,
        params: Optional[dict] = None,
    ) -> "Distribution":
        """Validate and normalize an arbitrary density.

        Args:
            pdf_func: Non-negative callable accepting and returning a float
            support: (x_min, x_max) closed interval of the density
            validation_points: Grid intervals used for the non-negativity check
            rtol: Relative tolerance of the normalization integral
            max_refinements: Grid doublings allowed for the integral
            kind: Shape tag stored on the distribution
            params: Shape parameters stored on the distribution

        Returns:
            Distribution whose ``pdf`` integrates to one over ``support``

        Raises:
            TypeError: If pdf_func is not callable
            ValueError: If the support is not a finite interval with x_min < x_max
            InvalidDensity: If the density is negative or not finite anywhere
                on the validation grid, or its integral is not positive
            IntegrationFailure: If the normalization integral does not converge
        """
        if not callable(pdf_func):
            raise TypeError("pdf_func must be callable")

        x_min, x_max = float(support[0]), float(support[1])
        if not (math.isfinite(x_min) and math.isfinite(x_max)) or x_min >= x_max:
            raise ValueError(f"Invalid support [{x_min}, {x_max}]")

        _validate_density(pdf_func, x_min, x_max, validation_points)

        total = integrate(
            pdf_func, x_min, x_max, rtol=rtol, max_refinements=max_refinements
        )
        if total <= 0:
            raise InvalidDensity(
                f"Density integrates to {total!r} over [{x_min}, {x_max}]; "
                "it must be positive somewhere on the support"
            )
        norm_const = 1.0 / total
        logger.info(
            "Normalized %s density on [%g, %g]: integral=%.6g, norm_const=%.6g",
            kind.name.lower(),
            x_min,
            x_max,
            total,
            norm_const,
        )

        params = dict(params or {})
        params["support"] = (x_min, x_max)
        return Distribution(
            kind=kind,
            params=params,
            pdf_func=pdf_func,
            support=(x_min, x_max),
            norm_const=norm_const,
        )

    @staticmethod
    def uniform(xmin: float = XMIN, xmax: float = XMAX) -> "Distribution":
        """Constant density on [xmin, xmax]."""

        def pdf(x: float) -> float:
            return 1.0

        return Distribution.from_pdf(pdf, (xmin, xmax), kind=DensityKind.UNIFORM)

    @staticmethod
    def gaussian(
        mean: float = 5.0, std: float = 2.0, xmin: float = XMIN, xmax: float = XMAX
    ) -> "Distribution":
        """Normal bump exp(-(x - mean)^2 / (2 std^2)), truncated to the support.

        Raises:
            ValueError: If std is not positive
        """
        if std <= 0:
            raise ValueError("std must be positive")
        two_var = 2.0 * std * std

        def pdf(x: float) -> float:
            return math.exp(-((x - mean) ** 2) / two_var)

        return Distribution.from_pdf(
            pdf,
            (xmin, xmax),
            kind=DensityKind.GAUSSIAN,
            params={"mean": mean, "std": std},
        )

    @staticmethod
    def bimodal(xmin: float = XMIN, xmax: float = XMAX) -> "Distribution":
        """sin(x) + 10: two humps on [0, 10]."""

        def pdf(x: float) -> float:
            return math.sin(x) + 10.0

        return Distribution.from_pdf(pdf, (xmin, xmax), kind=DensityKind.BIMODAL)

    @staticmethod
    def parabolic(xmin: float = XMIN, xmax: float = XMAX) -> "Distribution":
        """x^2 on the support."""

        def pdf(x: float) -> float:
            return x * x

        return Distribution.from_pdf(pdf, (xmin, xmax), kind=DensityKind.PARABOLIC)

    @staticmethod
    def step(
        low: float = 1.0, high: float = 5.0, xmin: float = XMIN, xmax: float = XMAX
    ) -> "Distribution":
        """1 on [low, high), 0 elsewhere."""

        def pdf(x: float) -> float:
            if x < low:
                return 0.0
            if x < high:
                return 1.0
            return 0.0

        return Distribution.from_pdf(
            pdf,
            (xmin, xmax),
            kind=DensityKind.STEP,
            params={"low": low, "high": high},
        )

    @staticmethod
    def lopsided(xmin: float = XMIN, xmax: float = XMAX) -> "Distribution":
        """exp(x) * exp(-(x - 3)^2 / 10).

        The most probable value is not the same as the expectation value once
        the density is truncated to [0, 10].
        """

        def pdf(x: float) -> float:
            return math.exp(x) * math.exp(-((x - 3.0) ** 2) / 10.0)

        return Distribution.from_pdf(pdf, (xmin, xmax), kind=DensityKind.LOPSIDED)

    @staticmethod
    def from_pdf_table(
        x_table: Union[np.ndarray, list],
        pdf_table: Union[np.ndarray, list],
    ) -> "Distribution":
        """Create a density from tabulated values, linearly interpolated.

        Useful when density values come from measurements rather than a
        formula. The support is [x_table[0], x_table[-1]] and the
        normalization integral is exact for the interpolant.

        Args:
            x_table: Grid points (strictly ascending)
            pdf_table: Density values at each grid point (non-negative)

        Returns:
            Distribution that interpolates the table

        Raises:
            ValueError: If arrays have invalid shapes or x_table is not sorted
            InvalidDensity: If pdf_table has negative or non-finite values, or
                sums to zero

        Example:
            >>> x = np.linspace(0, 10, 256)
            >>> dist = Distribution.from_pdf_table(x, np.exp(-x))
        """
        x_arr = np.asarray(x_table, dtype=np.float64)
        pdf_arr = np.asarray(pdf_table, dtype=np.float64)

        if x_arr.ndim != 1 or pdf_arr.ndim != 1:
            raise ValueError("x_table and pdf_table must be 1D arrays")

        if len(x_arr) != len(pdf_arr):
            raise ValueError("x_table and pdf_table must have the same length")

        if len(x_arr) < 2:
            raise ValueError("Tables must have at least 2 points")

        if not np.all(np.diff(x_arr) > 0):
            raise ValueError("x_table must be sorted in ascending order")

        if not np.all(np.isfinite(pdf_arr)):
            raise InvalidDensity("pdf_table must contain finite values")

        if np.any(pdf_arr < 0):
            raise InvalidDensity("pdf_table must contain non-negative values")

        total = float(np.sum(np.diff(x_arr) * (pdf_arr[:-1] + pdf_arr[1:]) / 2))
        if total <= 0:
            raise InvalidDensity("pdf_table integrates to zero")

        x_copy = x_arr.copy()
        pdf_copy = pdf_arr.copy()

        def pdf_func(x: float) -> float:
            return float(np.interp(x, x_copy, pdf_copy, left=0.0, right=0.0))

        return Distribution(
            kind=DensityKind.TABLE,
            params={"table_size": len(x_arr), "support": (x_arr[0], x_arr[-1])},
            pdf_func=pdf_func,
            support=(x_arr[0], x_arr[-1]),
            norm_const=1.0 / total,
        )


# ============================================================================
# Discrete CDF and Inverse Transform Sampling
# ============================================================================


class DiscreteCDF:
    """Discrete approximation of a cumulative distribution function.

    Holds ``N`` points ``(x_i, y_i)`` as two read-only arrays. ``x`` is
    strictly increasing and ``y`` is non-decreasing.
    """

    def __init__(self, x: np.ndarray, y: np.ndarray):
        x_arr = np.array(x, dtype=np.float64)
        y_arr = np.array(y, dtype=np.float64)

        if x_arr.ndim != 1 or x_arr.shape != y_arr.shape:
            raise ValueError("x and y must be 1D arrays of the same length")
        if len(x_arr) < 2:
            raise ValueError("A discrete CDF needs at least 2 points")
        if not np.all(np.diff(x_arr) > 0):
            raise ValueError("x must be strictly increasing")
        if y_arr[0] < 0 or not np.all(np.diff(y_arr) >= 0):
            raise ValueError("y must be non-negative and non-decreasing")

        x_arr.setflags(write=False)
        y_arr.setflags(write=False)
        self.x = x_arr
        self.y = y_arr

    @classmethod
    def from_distribution(cls, distribution: Distribution, numpoints: int) -> "DiscreteCDF":
        """Build the CDF by left Riemann summation.

        With ``step = (xmax - xmin) / numpoints``, point ``i`` is at
        ``xmin + i * step`` and holds the accumulated area of cells
        ``0..i``. The last value deviates from one by O(step).

        Raises:
            ValueError: If numpoints < 2
            InvalidDensity: If the density is negative or not finite at any
                grid point
        """
        if numpoints < 2:
            raise ValueError(f"numpoints must be >= 2, got {numpoints}")

        step = (distribution.xmax - distribution.xmin) / numpoints
        x_grid = distribution.xmin + np.arange(numpoints) * step
        densities = evaluate(distribution.pdf, x_grid)
        # The validation grid of the distribution need not contain these points
        _check_density_values(x_grid, densities)
        cdf_values = np.cumsum(densities * step)

        logger.debug(
            "Built CDF with %d points: y[0]=%.6g, y[-1]=%.6g",
            numpoints,
            cdf_values[0],
            cdf_values[-1],
        )
        if abs(cdf_values[-1] - 1.0) > 0.01:
            logger.warning(
                "CDF endpoint is %.4f; consider increasing numpoints (currently %d)",
                cdf_values[-1],
                numpoints,
            )
        return cls(x_grid, cdf_values)

    def __len__(self):
        return len(self.x)

    def points(self) -> List[Tuple[float, float]]:
        """Return the CDF as a list of (x, y) pairs."""
        return list(zip(self.x.tolist(), self.y.tolist()))

    def __repr__(self):
        return f"DiscreteCDF(n_points={len(self)}, y_range=({self.y[0]:.6g}, {self.y[-1]:.6g}))"


class RandomSource:
    """Seeded uniform random stream shared by every draw of a run.

    Wraps a Mersenne Twister generator. The stream only ever advances; a run
    is reproducible under the same seed as long as draws happen in the same
    order.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._generator = np.random.Generator(np.random.MT19937(seed))
        self.draws = 0

    def uniform(self, size: Optional[int] = None) -> Union[float, np.ndarray]:
        """Draw from U[0, 1): a float if size is None, else an array."""
        if size is None:
            self.draws += 1
            return float(self._generator.random())
        self.draws += size
        return self._generator.random(size)

    def __repr__(self):
        return f"RandomSource(seed={self.seed}, draws={self.draws})"


class Sampler:
    """Inverse transform sampler over a discrete CDF.

    A uniform value ``u`` maps to ``x_k`` for the first ``k`` with
    ``y_k <= u <= y_(k+1)``. The bracket is located by binary search over the
    monotonic ``y`` values, which gives the same ``k`` as a linear scan.

    Draws below ``y_0`` or above ``y_(N-1)`` have no bracket. By default they
    are clamped into ``[y_0, y_(N-1)]`` (resolving to the nearest boundary
    bracket) and counted in ``n_clamped``; with ``strict=True`` they raise
    ``SampleOutOfBracket``.
    """

    def __init__(self, cdf: DiscreteCDF, strict: bool = False):
        self.cdf = cdf
        self.strict = strict
        self.n_clamped = 0

    def invert(self, u: float) -> float:
        """Map one uniform value to a sample."""
        return float(self.invert_many(np.array([u], dtype=np.float64))[0])

    def invert_many(self, us: np.ndarray) -> np.ndarray:
        """Map an array of uniform values to samples."""
        us = np.asarray(us, dtype=np.float64)
        y = self.cdf.y

        outside = (us < y[0]) | (us > y[-1])
        n_outside = int(np.count_nonzero(outside))
        if n_outside:
            if self.strict:
                raise SampleOutOfBracket(
                    f"{n_outside} uniform draw(s) outside the CDF range "
                    f"[{y[0]:.6g}, {y[-1]:.6g}]"
                )
            self.n_clamped += n_outside
            us = np.clip(us, y[0], y[-1])

        # First index with y >= u; the bracket starts one before it.
        k = np.searchsorted(y, us, side="left") - 1
        return self.cdf.x[np.maximum(k, 0)]

    def sample(self, random_source: RandomSource, size: int) -> np.ndarray:
        """Draw ``size`` samples using the shared random source."""
        return self.invert_many(random_source.uniform(size))


# ============================================================================
# Trial Aggregation
# ============================================================================


class MeanDistribution:
    """Collection of trial means.

    Means are recorded while a run is in progress; after ``finalize()`` the
    collection is read-only.
    """

    def __init__(self, capacity: int):
        self._values = np.empty(capacity, dtype=np.float64)
        self._count = 0
        self.finalized = False

    def record(self, value: float) -> None:
        if self.finalized:
            raise RuntimeError("Cannot record into a finalized MeanDistribution")
        if self._count >= len(self._values):
            raise RuntimeError(f"MeanDistribution is full ({len(self._values)} values)")
        self._values[self._count] = value
        self._count += 1

    def finalize(self) -> "MeanDistribution":
        self._values = self._values[: self._count].copy()
        self._values.setflags(write=False)
        self.finalized = True
        return self

    @property
    def values(self) -> np.ndarray:
        view = self._values[: self._count]
        view.flags.writeable = False
        return view

    def __len__(self):
        return self._count

    def mean(self) -> float:
        if self._count == 0:
            raise ValueError("No trial means recorded")
        return float(np.mean(self.values))

    def std(self, ddof: int = 0) -> float:
        """Standard deviation of the trial means (population by default)."""
        if self._count <= ddof:
            raise ValueError(f"Need more than {ddof} trial means for ddof={ddof}")
        return float(np.std(self.values, ddof=ddof))

    def histogram(
        self, bins: int = 100, range: Optional[Tuple[float, float]] = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Return (counts, bin_edges) of the trial means."""
        return np.histogram(self.values, bins=bins, range=range)

    def __repr__(self):
        return f"MeanDistribution(n={self._count}, finalized={self.finalized})"


class TrialAggregator:
    """Runs trials of ``num_iterations`` samples and collects their means.

    Example:
        >>> cdf = DiscreteCDF.from_distribution(Distribution.uniform(), 1000)
        >>> aggregator = TrialAggregator(Sampler(cdf), RandomSource(1234), 100, 500)
        >>> means = aggregator.run()
    """

    def __init__(
        self,
        sampler: Sampler,
        random_source: RandomSource,
        num_iterations: int,
        num_means: int,
    ):
        if num_iterations < 1:
            raise ValueError("num_iterations must be >= 1")
        if num_means < 1:
            raise ValueError("num_means must be >= 1")
        self.sampler = sampler
        self.random_source = random_source
        self.num_iterations = num_iterations
        self.num_means = num_means

    def run(self) -> MeanDistribution:
        means = MeanDistribution(self.num_means)
        for _ in range(self.num_means):
            trial = self.sampler.sample(self.random_source, self.num_iterations)
            means.record(trial.mean())
        return means.finalize()


# ============================================================================
# Moment Prediction
# ============================================================================


class Prediction(NamedTuple):
    mean: float
    stdev_of_mean: float


class MomentPredictor:
    """Analytic moments of a density, by numerical integration.

    By the Central Limit Theorem, the mean of ``n`` independent samples has
    the density's mean and standard deviation ``sigma / sqrt(n)``.
    """

    def __init__(
        self, distribution: Distribution, rtol: float = 1e-5, max_refinements: int = 12
    ):
        self.distribution = distribution

        def first(x: float) -> float:
            return x * distribution.pdf(x)

        def second(x: float) -> float:
            return x * x * distribution.pdf(x)

        x_min, x_max = distribution.support
        self.mean = integrate(first, x_min, x_max, rtol=rtol, max_refinements=max_refinements)
        self.second_moment = integrate(
            second, x_min, x_max, rtol=rtol, max_refinements=max_refinements
        )

        variance = self.second_moment - self.mean * self.mean
        if variance < 0:
            # Cancellation can leave a tiny negative residue for narrow densities
            if variance < -rtol * self.second_moment:
                raise IntegrationFailure(
                    f"Computed variance is negative ({variance!r}); "
                    "the moment integrals are inconsistent"
                )
            variance = 0.0
        self.variance = variance
        self.stdev = math.sqrt(variance)

    def stdev_of_mean(self, num_iterations: int) -> float:
        if num_iterations < 1:
            raise ValueError("num_iterations must be >= 1")
        return math.sqrt(self.variance / num_iterations)

    def predict(self, num_iterations: int) -> Prediction:
        return Prediction(self.mean, self.stdev_of_mean(num_iterations))


# ============================================================================
# Simulation
# ============================================================================


class SimulationResult:
    """Everything a run produced, for reporting and plotting.

    Attributes:
        config: SimulationConfig of the run
        distribution: Normalized density
        cdf: DiscreteCDF used for sampling
        means: Finalized MeanDistribution
        prediction: Predicted (mean, stdev_of_mean)
        n_clamped: Uniform draws clamped into the CDF range
    """

    def __init__(
        self,
        config: SimulationConfig,
        distribution: Distribution,
        cdf: DiscreteCDF,
        means: MeanDistribution,
        prediction: Prediction,
        n_clamped: int = 0,
    ):
        self.config = config
        self.distribution = distribution
        self.cdf = cdf
        self.means = means
        self.prediction = prediction
        self.n_clamped = n_clamped

    @property
    def empirical_mean(self) -> float:
        return self.means.mean()

    @property
    def empirical_stdev(self) -> float:
        return self.means.std()

    def summary(self) -> str:
        """Predicted vs experimental statistics as a small text table."""
        lines = [
            "STATISTICS",
            f"{'':<8}{'Predicted':>14}{'Experimental':>16}",
            f"{'Mean:':<8}{self.prediction.mean:>14.6f}{self.empirical_mean:>16.6f}",
            f"{'Stdev:':<8}{self.prediction.stdev_of_mean:>14.6f}{self.empirical_stdev:>16.6f}",
        ]
        return "\n".join(lines)

    def __repr__(self):
        return (
            f"SimulationResult(predicted={tuple(self.prediction)}, "
            f"empirical=({self.empirical_mean:.6g}, {self.empirical_stdev:.6g}), "
            f"n_means={len(self.means)})"
        )


class CentralLimitSimulator:
    """Runs the full pipeline for one density.

    normalize -> discrete CDF -> trials of inverse transform samples ->
    compared against the predicted moments.

    Example:
        >>> sim = CentralLimitSimulator(SimulationConfig(num_means=1000))
        >>> result = sim.run(Distribution.lopsided())
        >>> print(result.summary())
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config if config is not None else SimulationConfig()

    def normalize(self, pdf: Union[Distribution, Callable[[float], float]]) -> Distribution:
        """Use a Distribution as is, or normalize a callable over the configured support."""
        if isinstance(pdf, Distribution):
            if pdf.support != (self.config.xmin, self.config.xmax):
                logger.warning(
                    "Using the distribution's own support %s instead of [%g, %g]",
                    pdf.support,
                    self.config.xmin,
                    self.config.xmax,
                )
            return pdf
        return Distribution.from_pdf(
            pdf,
            support=(self.config.xmin, self.config.xmax),
            validation_points=max(self.config.numpoints, DEFAULT_VALIDATION_POINTS),
            rtol=self.config.integration_rtol,
            max_refinements=self.config.integration_max_refinements,
        )

    def run(self, pdf: Union[Distribution, Callable[[float], float]]) -> SimulationResult:
        """Run one simulation.

        Raises:
            TypeError: If pdf is neither a Distribution nor callable
            InvalidDensity: If the density is invalid (before any CDF work)
            IntegrationFailure: If a normalization or moment integral fails
            SampleOutOfBracket: In strict mode, on a draw outside the CDF range
        """
        config = self.config
        logger.info(
            "Running simulation: numpoints=%d, num_iterations=%d, num_means=%d, seed=%d",
            config.numpoints,
            config.num_iterations,
            config.num_means,
            config.seed,
        )

        distribution = self.normalize(pdf)
        if distribution.support != (config.xmin, config.xmax):
            # Report the bounds the samples were actually drawn on
            config = config.replace(xmin=distribution.xmin, xmax=distribution.xmax)
        cdf = DiscreteCDF.from_distribution(distribution, config.numpoints)
        sampler = Sampler(cdf, strict=config.strict_bracket)
        random_source = RandomSource(config.seed)

        means = TrialAggregator(
            sampler, random_source, config.num_iterations, config.num_means
        ).run()
        if sampler.n_clamped:
            logger.warning(
                "%d of %d uniform draws fell outside the CDF range and were clamped",
                sampler.n_clamped,
                random_source.draws,
            )

        prediction = MomentPredictor(
            distribution,
            rtol=config.integration_rtol,
            max_refinements=config.integration_max_refinements,
        ).predict(config.num_iterations)

        result = SimulationResult(
            config=config,
            distribution=distribution,
            cdf=cdf,
            means=means,
            prediction=prediction,
            n_clamped=sampler.n_clamped,
        )
        logger.info(
            "Simulation finished: predicted mean=%.6g stdev=%.6g, "
            "experimental mean=%.6g stdev=%.6g",
            prediction.mean,
            prediction.stdev_of_mean,
            result.empirical_mean,
            result.empirical_stdev,
        )
        return result


def simulate(
    pdf: Union[Distribution, Callable[[float], float]],
    config: Optional[SimulationConfig] = None,
    **overrides,
) -> SimulationResult:
    """Convenience function for a single simulation run.

    This is a shorthand for creating a CentralLimitSimulator and calling run().

    Args:
        pdf: Distribution, or a non-negative callable normalized over
            [config.xmin, config.xmax]
        config: Base configuration (defaults if None)
        **overrides: Individual options replacing those of ``config``

    Returns:
        SimulationResult with the CDF, trial means and predictions

    Example:
        >>> from central_limit import simulate
        >>>
        >>> result = simulate(lambda x: 1.0, num_means=1000, seed=1)
        >>> print(f"mean = {result.empirical_mean:.3f}")  # ~5.0
    """
    config = config if config is not None else SimulationConfig()
    if overrides:
        config = config.replace(**overrides)
    return CentralLimitSimulator(config).run(pdf)
