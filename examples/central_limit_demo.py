#!/usr/bin/env python3
"""Central Limit Theorem demonstration

Draw from a lopsided density by discrete inverse transform sampling, average
100 draws at a time, and compare the histogram of 10000 averages with the
predicted mean and standard deviation.
"""

import logging

import numpy as np
from matplotlib import pyplot as plt

from central_limit import Distribution, SimulationConfig, simulate

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

config = SimulationConfig(numpoints=1000, num_iterations=100, num_means=10000, seed=1234)
result = simulate(Distribution.lopsided(config.xmin, config.xmax), config)

print()
print(result.summary())
print()

fig, axes = plt.subplots(2, 2, figsize=(10, 8), layout="constrained")

x_grid, pdf_values = result.distribution.evaluate(n_points=500)
axes[0, 0].plot(x_grid, pdf_values)
axes[0, 0].set_title("Probability Density Function")

axes[0, 1].plot(result.cdf.x, result.cdf.y)
axes[0, 1].set_title("Cumulative Distribution Function")

counts, edges = result.means.histogram(bins=config.numpoints // 10)
axes[1, 0].stairs(counts, edges, fill=True)
axes[1, 0].set_title("Average Results")

mean, stdev = result.prediction
curve_x = np.linspace(edges[0], edges[-1], 400)
curve_y = (
    len(result.means)
    * (edges[1] - edges[0])
    * np.exp(-0.5 * ((curve_x - mean) / stdev) ** 2)
    / (stdev * np.sqrt(2 * np.pi))
)
axes[1, 1].stairs(counts, edges, alpha=0.5, fill=True, label="Experimental")
axes[1, 1].plot(curve_x, curve_y, "r-", label="Predicted normal")
axes[1, 1].set_title("Averages vs Prediction")
axes[1, 1].legend()

fig.savefig("plot.png")
plt.show()
