"""
Sampling module: seeded random stream and truncated normal draws.
"""

import numpy as np
from scipy import stats

from .errors import InvalidParameter


def make_rng(seed):
    """
    Create the single random stream used by a run.

    Args:
        seed: Integer seed

    Returns:
        numpy.random.Generator
    """
    return np.random.default_rng(seed)


def sample_truncated_normal(lower, upper, count, mean, stddev, rng):
    """
    Draw `count` values from a normal(mean, stddev) truncated to [lower, upper].

    Truncation is analytic (inverse CDF of the truncated distribution applied
    to uniform draws), so the bounds never pile up probability mass.

    Args:
        lower: Lower bound
        upper: Upper bound
        count: Number of values
        mean: Mean of the untruncated normal
        stddev: Standard deviation of the untruncated normal
        rng: Random stream; anything with a `random(size)` method returning
             uniforms in [0, 1)

    Returns:
        np.ndarray of floats, shape (count,)
    """
    if not np.isfinite(lower) or not np.isfinite(upper):
        raise InvalidParameter(f"Bounds must be finite (lower={lower}, upper={upper})")
    if lower >= upper:
        raise InvalidParameter(f"lower ({lower}) must be < upper ({upper})")
    if not stddev > 0:
        raise InvalidParameter(f"stddev must be > 0 (got {stddev})")
    if count < 0:
        raise InvalidParameter(f"count must be >= 0 (got {count})")

    a = (lower - mean) / stddev
    b = (upper - mean) / stddev
    u = np.asarray(rng.random(count), dtype=float)
    values = stats.truncnorm.ppf(u, a, b, loc=mean, scale=stddev)

    if np.isnan(values).any():
        raise InvalidParameter(
            f"Truncation interval [{lower}, {upper}] has no mass under "
            f"normal(mean={mean}, stddev={stddev})"
        )

    # loc + scale * b can round one ulp past the bound
    return np.clip(values, lower, upper)
