#!/usr/bin/env python3
"""Built-in Densities Example

Run a smaller simulation for every built-in density and print predicted vs
experimental statistics side by side.
"""

from central_limit import Distribution, InvalidDensity, SimulationConfig, simulate

config = SimulationConfig(num_iterations=50, num_means=2000, seed=7)

densities = {
    "uniform": Distribution.uniform(),
    "gaussian": Distribution.gaussian(mean=5.0, std=2.0),
    "bimodal": Distribution.bimodal(),
    "parabolic": Distribution.parabolic(),
    "step": Distribution.step(low=1.0, high=5.0),
    "lopsided": Distribution.lopsided(),
}

print(f"{'density':<10} {'pred mean':>10} {'exp mean':>10} {'pred sd':>10} {'exp sd':>10}")
for name, dist in densities.items():
    result = simulate(dist, config)
    print(
        f"{name:<10} {result.prediction.mean:>10.4f} {result.empirical_mean:>10.4f} "
        f"{result.prediction.stdev_of_mean:>10.4f} {result.empirical_stdev:>10.4f}"
    )

# An improper density is rejected before any sampling
try:
    simulate(lambda x: x - 5.0, config)
except InvalidDensity as exc:
    print(f"\nRejected: {exc}")
