"""Simulation configuration and defaults.

Defaults reproduce the classic demonstration: a density on [0, 10] discretized
into 1000 points, 100 samples averaged per trial, 10000 trials, seed 1234.
"""

import math
import numbers
from typing import Any, Dict, Mapping

# Domain
XMIN = 0.0
XMAX = 10.0

# Discretization and sampling
NUMPOINTS = 1000  # Points in the discrete CDF
NUM_ITERATIONS = 100  # Samples averaged per trial
NUM_MEANS = 10000  # Trial means collected
SEED = 1234

# Quadrature
INTEGRATION_RTOL = 1e-5
INTEGRATION_MAX_REFINEMENTS = 12

# Out-of-bracket uniform draws are clamped unless strict
STRICT_BRACKET = False


class ConfigurationError(ValueError):
    """Raised when simulation options are invalid."""

    pass


class SimulationConfig:
    """Validated options for one simulation run.

    All options are keyword-only and checked on construction, so an invalid
    configuration is reported before any computation begins.

    Example:
        >>> config = SimulationConfig(num_iterations=50, seed=7)
        >>> config.replace(num_means=500).num_means
        500
    """

    OPTIONS = (
        "xmin",
        "xmax",
        "numpoints",
        "num_iterations",
        "num_means",
        "seed",
        "integration_rtol",
        "integration_max_refinements",
        "strict_bracket",
    )

    def __init__(
        self,
        *,
        xmin: float = XMIN,
        xmax: float = XMAX,
        numpoints: int = NUMPOINTS,
        num_iterations: int = NUM_ITERATIONS,
        num_means: int = NUM_MEANS,
        seed: int = SEED,
        integration_rtol: float = INTEGRATION_RTOL,
        integration_max_refinements: int = INTEGRATION_MAX_REFINEMENTS,
        strict_bracket: bool = STRICT_BRACKET,
    ):
        self.xmin = _require_real("xmin", xmin)
        self.xmax = _require_real("xmax", xmax)
        self.numpoints = numpoints
        self.num_iterations = num_iterations
        self.num_means = num_means
        self.seed = seed
        self.integration_rtol = _require_real("integration_rtol", integration_rtol)
        self.integration_max_refinements = integration_max_refinements
        self.strict_bracket = bool(strict_bracket)
        self.validate()

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "SimulationConfig":
        """Build a config from a mapping, rejecting unrecognized option names."""
        unknown = sorted(set(options) - set(cls.OPTIONS))
        if unknown:
            raise ConfigurationError(
                f"Unrecognized option(s): {', '.join(unknown)}. "
                f"Recognized options: {', '.join(cls.OPTIONS)}"
            )
        return cls(**options)

    def validate(self) -> None:
        if not (math.isfinite(self.xmin) and math.isfinite(self.xmax)):
            raise ConfigurationError("xmin and xmax must be finite")
        if self.xmin >= self.xmax:
            raise ConfigurationError(
                f"xmin must be less than xmax, got [{self.xmin}, {self.xmax}]"
            )

        _require_int("numpoints", self.numpoints, minimum=2)
        _require_int("num_iterations", self.num_iterations, minimum=1)
        _require_int("num_means", self.num_means, minimum=1)
        _require_int("integration_max_refinements", self.integration_max_refinements, minimum=1)
        _require_int("seed", self.seed, minimum=0)

        if not (self.integration_rtol > 0 and math.isfinite(self.integration_rtol)):
            raise ConfigurationError("integration_rtol must be a positive number")

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.OPTIONS}

    def replace(self, **overrides) -> "SimulationConfig":
        """Return a copy with some options changed."""
        options = self.as_dict()
        options.update(overrides)
        return self.from_mapping(options)

    def __eq__(self, other):
        if not isinstance(other, SimulationConfig):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        options = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"SimulationConfig({options})"


def _require_int(name: str, value: Any, minimum: int) -> None:
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")


def _require_real(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"{name} must be a real number, got {value!r}")
    return float(value)
