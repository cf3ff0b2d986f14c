"""Pytest fixtures for chargefit tests."""

import numpy as np
import pytest

from chargefit.core.domain.config import ChargeFitConfig, set_config
from chargefit.core.lineshapes import power_lorentzian


def make_cluster(
    center_x: float = 0.0,
    center_y: float = 0.0,
    *,
    half_size: int = 4,
    amplitude: float = 100.0,
    gamma: float = 1.5,
    beta: float = 1.0,
    baseline: float = 2.0,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Rotationally symmetric cluster sampled on the integer pixel grid."""
    grid = np.arange(-half_size, half_size + 1, dtype=float)
    gx, gy = np.meshgrid(grid, grid, indexing="xy")
    x, y = gx.ravel(), gy.ravel()
    r_squared = (x - center_x) ** 2 + (y - center_y) ** 2
    charge = amplitude / np.power(1.0 + r_squared / gamma**2, beta) + baseline
    return x, y, charge


@pytest.fixture(autouse=True)
def reset_config():
    """Restore the default process-wide configuration after each test."""
    previous = set_config(ChargeFitConfig())
    yield
    set_config(previous)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def wide_profile():
    """Noiseless 15-point profile that the MAD filter leaves untouched."""
    positions = np.arange(-7.0, 8.0)
    params = (100.0, 0.3, 3.0, 1.0, 5.0)
    return positions, power_lorentzian(positions, *params), params


@pytest.fixture
def sharp_profile():
    """Noiseless 21-point profile with a non-Lorentzian exponent."""
    params = (100.0, 2.0, 0.6, 1.2, 5.0)
    positions = np.linspace(2.0 - 1.8, 2.0 + 1.8, 21)
    return positions, power_lorentzian(positions, *params), params


@pytest.fixture
def cluster():
    """Symmetric 9x9 cluster centered off-grid at (0.3, -0.2)."""
    return make_cluster(0.3, -0.2)


@pytest.fixture
def centered_cluster():
    """Symmetric 9x9 cluster centered on the origin pixel."""
    return make_cluster(0.0, 0.0)


@pytest.fixture
def samples_csv(tmp_path, cluster):
    """CSV file holding the off-grid cluster."""
    from chargefit.io.samples import write_samples

    path = tmp_path / "hits.csv"
    write_samples(path, *cluster)
    return path


@pytest.fixture
def cluster_factory():
    return make_cluster
