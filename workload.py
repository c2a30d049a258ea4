# workload.py

import numpy as np


def normal(rng, mean=10, sd=2, size=None):
    """
    Box-Muller normal sample(s) from two uniform draws, truncated toward zero.
    The first draw is redrawn while it is exactly 0 so log() stays finite.
    """
    n = 1 if size is None else size
    r1 = rng.random(n)
    zero = r1 == 0.0
    while zero.any():
        r1[zero] = rng.random(int(zero.sum()))
        zero = r1 == 0.0
    r2 = rng.random(n)

    z = np.sqrt(-2.0 * np.log(r1)) * np.cos(2.0 * np.pi * r2)
    # astype(int) truncates like a C cast: -1.7 -> -1, not -2
    samples = (z * sd + mean).astype(np.int64)
    return int(samples[0]) if size is None else samples


def generate_trace(rng, length=1000, region_size=100, region_stride=10,
                   mean=10, sd=2):
    """
    Generate a sequence of page references with locality by region.
    Position j lands in band region_stride * (j // region_size), offset by a
    truncated normal(mean, sd) sample.
    """
    if length < 0:
        raise ValueError(f"Trace length must be non-negative, got {length}")
    if region_size <= 0:
        raise ValueError(f"Region size must be positive, got {region_size}")

    base = region_stride * (np.arange(length) // region_size)
    return base + normal(rng, mean=mean, sd=sd, size=length)
