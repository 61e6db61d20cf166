"""Global fixtures for ecostats tests."""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from ecostats.sampling import make_rng
from ecostats.synthesis import bird_long_form, build_bird_dataset, build_elevation_dataset


class FixedStream:
    """Stand-in random stream returning preset uniforms, one array per call."""

    def __init__(self, *values):
        self.values = list(values)
        self.sizes = []

    def random(self, size):
        self.sizes.append(size)
        value = self.values[(len(self.sizes) - 1) % len(self.values)]
        return np.full(size, value, dtype=float)


@pytest.fixture
def fixed_stream():
    return FixedStream


@pytest.fixture
def rng():
    return make_rng(10)


@pytest.fixture
def elevation_df():
    """Elevation dataset at the default seed (first draws on a fresh stream)."""
    return build_elevation_dataset(make_rng(10), n=20)


@pytest.fixture
def bird_tables():
    """Wide and long bird tables, drawn after the elevation dataset as in a full run."""
    stream = make_rng(10)
    build_elevation_dataset(stream, n=20)
    wide = build_bird_dataset(stream, n=20)
    return wide, bird_long_form(wide)
