"""
Pytest configuration and fixtures for roadspline tests.

This module provides shared fixtures for testing:
- Configuration fixtures
- Control point fixtures
- Spline fixtures
- Random generator fixtures
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Tuple

import numpy as np
import pytest


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def default_config() -> Dict[str, Any]:
    """Create default configuration dictionary."""
    from roadspline import create_default_config

    return create_default_config()


@pytest.fixture
def settings():
    """Create typed configuration."""
    from roadspline.config import SplineSettings

    return SplineSettings()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep ROADSPLINE_* settings from the outer environment out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("ROADSPLINE_") and not key.startswith("ROADSPLINE_LOG_"):
            monkeypatch.delenv(key)


# =============================================================================
# Control Point Fixtures
# =============================================================================


@pytest.fixture
def demo_points() -> List[Tuple[float, float]]:
    """Winding road sketched on an 800x800 canvas."""
    return [
        (10.0, 10.0),
        (400.0, 50.0),
        (600.0, 150.0),
        (550.0, 300.0),
        (300.0, 450.0),
        (150.0, 350.0),
        (200.0, 270.0),
        (520.0, 400.0),
        (580.0, 600.0),
        (350.0, 750.0),
        (120.0, 580.0),
        (50.0, 650.0),
        (150.0, 700.0),
        (500.0, 500.0),
        (700.0, 400.0),
    ]


@pytest.fixture
def collinear_points() -> List[Tuple[float, float]]:
    """Points on the line y = 1.5 x - 0.5."""
    return [(1.0, 1.0), (3.0, 4.0), (5.0, 7.0)]


# =============================================================================
# Spline Fixtures
# =============================================================================


@pytest.fixture
def empty_spline():
    from roadspline import CubicSpline

    return CubicSpline()


@pytest.fixture
def two_point_spline():
    """Fitted spline through (0, 0) and (10, 0)."""
    from roadspline import CubicSpline

    spline = CubicSpline()
    spline.add_point(0.0, 0.0)
    spline.add_point(10.0, 0.0)
    assert spline.fit()
    return spline


@pytest.fixture
def demo_spline(demo_points):
    """Fitted spline through the demo road."""
    from roadspline import CubicSpline

    spline = CubicSpline()
    for x, y in demo_points:
        spline.add_point(x, y)
    assert spline.fit()
    return spline


# =============================================================================
# Random Fixtures
# =============================================================================


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator for reproducible systems."""
    return np.random.default_rng(20181230)


# =============================================================================
# Temporary Files Fixtures
# =============================================================================


@pytest.fixture
def temp_config_file(tmp_path) -> Path:
    """Create a temporary configuration file."""
    import yaml

    config = {
        "sampling": {"density": 8},
        "solver": {"guard": True, "tolerance": 1e-9},
    }

    config_path = tmp_path / "test_config.yml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)

    return config_path


# =============================================================================
# Marker Registrations
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "requires_scipy: marks tests that compare against SciPy"
    )
