"""
Synthesis module: build the elevation/harvesting and bird density datasets.
"""

import numpy as np
import pandas as pd

from . import config
from .categories import Climate, TreeSpecies, categorical, labels as enum_labels
from .errors import DataShapeError
from .sampling import sample_truncated_normal

SPECIES_COLUMNS = {
    TreeSpecies.CEDAR: "cedar",
    TreeSpecies.FIR: "fir",
    TreeSpecies.HEMLOCK: "hemlock",
}


def cyclic_labels(n, labels):
    """Round-robin assignment: item i gets labels[i mod k]."""
    labels = list(labels)
    if not labels:
        raise ValueError("labels must not be empty")
    return [labels[i % len(labels)] for i in range(n)]


def linear_relationship(x, slope, intercept, noise=None):
    """
    Deterministic linear transform, optionally plus a per-row noise term.

    Args:
        x: Independent values
        slope: Slope
        intercept: Intercept
        noise: Optional per-row noise, same length as x

    Returns:
        np.ndarray
    """
    x = np.asarray(x, dtype=float)
    y = x * slope + intercept
    if noise is None:
        return y

    noise = np.asarray(noise, dtype=float)
    if noise.shape != x.shape:
        raise DataShapeError(f"noise has {len(noise)} rows, x has {len(x)}")
    return y + noise


def build_elevation_dataset(rng, n=config.N_ROWS):
    """
    Elevation vs. timber harvesting, with a climate label per row.

    Draw order on `rng`: elevation, then harvest noise.

    Returns:
        DataFrame with columns elevation, harvesting, harvesting_random, climate
    """
    elevation = sample_truncated_normal(count=n, rng=rng, **config.ELEVATION)
    noise = sample_truncated_normal(count=n, rng=rng, **config.HARVEST_NOISE)

    harvesting = linear_relationship(elevation, config.HARVEST_SLOPE, config.HARVEST_INTERCEPT)
    harvesting_random = linear_relationship(
        elevation, config.HARVEST_SLOPE, config.HARVEST_INTERCEPT, noise=noise
    )

    return pd.DataFrame({
        "elevation": elevation,
        "harvesting": harvesting,
        "harvesting_random": harvesting_random,
        "climate": categorical(cyclic_labels(n, enum_labels(Climate)), Climate),
    })


def build_bird_dataset(rng, n=config.N_ROWS):
    """
    Bird counts per plot under each tree species (wide form).

    Draw order on `rng`: cedar, fir noise, hemlock noise. Fir and hemlock
    derive from the unrounded cedar draw; every column is rounded only
    after its noise is added.

    Returns:
        DataFrame with integer columns cedar, fir, hemlock
    """
    cedar = sample_truncated_normal(count=n, rng=rng, **config.CEDAR)
    fir_noise = sample_truncated_normal(count=n, rng=rng, **config.FIR_NOISE)
    hemlock_noise = sample_truncated_normal(count=n, rng=rng, **config.HEMLOCK_NOISE)

    fir = linear_relationship(cedar, config.FIR_SLOPE, 0, noise=fir_noise)
    hemlock = linear_relationship(cedar, config.HEMLOCK_SLOPE, 0, noise=hemlock_noise)

    return pd.DataFrame({
        "cedar": np.round(cedar).astype("int64"),
        "fir": np.round(fir).astype("int64"),
        "hemlock": np.round(hemlock).astype("int64"),
    })


def bird_long_form(wide):
    """
    Reshape the wide bird table into (plot, tree, birds) rows.

    Rows are interleaved by plot, so row i carries species i mod 3.
    """
    columns = [SPECIES_COLUMNS[species] for species in TreeSpecies]
    missing = [c for c in columns if c not in wide.columns]
    if missing:
        raise DataShapeError(f"Bird table missing columns: {missing}")

    n = len(wide)
    species = enum_labels(TreeSpecies)
    return pd.DataFrame({
        "plot": np.repeat(np.arange(n), len(species)),
        "tree": categorical(cyclic_labels(n * len(species), species), TreeSpecies),
        "birds": wide[columns].to_numpy().ravel(),
    })
