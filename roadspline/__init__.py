"""
roadspline - Cubic spline road paths through sketched points.

This package fits a natural cubic spline through ordered 2D control points
and samples it for drawing. It is built on:
- Vector: fixed-size vector with permissive index access
- BandMatrix: tridiagonal matrix storing only its three diagonals
- solve: tridiagonal elimination without pivoting

Basic Usage:
    from roadspline import CubicSpline

    spline = CubicSpline()
    spline.add_point(10.0, 10.0)
    spline.add_point(400.0, 50.0)
    spline.add_point(600.0, 150.0)
    spline.fit()
    polyline = spline.sample()

For more control:
    from roadspline.config import SplineSettings, ConfigManager
    from roadspline.logging import LOG_INFO, LOG_DEBUG, TimeTracker
    from roadspline.exceptions import NotFittedError
"""

from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Core API
# =============================================================================

from roadspline.vector import (
    DEFAULT_EPSILON,
    EqualityResult,
    Vector,
)

from roadspline.band_matrix import BandMatrix

from roadspline.solver import solve

from roadspline.spline import (
    CubicSpline,
    Point2D,
    SplineCoefficients,
)

from roadspline.generators import (
    RoundTripReport,
    random_band_matrix,
    random_vector,
    round_trip_check,
)

from roadspline.config import (
    ConfigManager,
    SplineSettings,
    create_default_config,
    get_config,
    init_config,
    load_config,
)

# =============================================================================
# Logging
# =============================================================================

from roadspline.logging import (
    LOG_DEBUG,
    LOG_INFO,
    LOG_WARN,
    LOG_ERROR,
    TimeTracker,
    profile_scope,
    get_logger,
    setup_logging,
    timed,
)

# =============================================================================
# Exceptions
# =============================================================================

from roadspline.exceptions import (
    RoadSplineError,
    ConfigurationError,
    ConfigNotFoundError,
    ConfigValidationError,
    LinearAlgebraError,
    DimensionMismatchError,
    InvalidDimensionError,
    SingularMatrixError,
    SplineError,
    InsufficientPointsError,
    NotFittedError,
    SegmentIndexError,
    DegenerateFitError,
)

__all__ = [
    "__version__",
    # Core
    "DEFAULT_EPSILON",
    "EqualityResult",
    "Vector",
    "BandMatrix",
    "solve",
    "CubicSpline",
    "Point2D",
    "SplineCoefficients",
    # Generators
    "RoundTripReport",
    "random_band_matrix",
    "random_vector",
    "round_trip_check",
    # Config
    "ConfigManager",
    "SplineSettings",
    "create_default_config",
    "get_config",
    "init_config",
    "load_config",
    # Logging
    "LOG_DEBUG",
    "LOG_INFO",
    "LOG_WARN",
    "LOG_ERROR",
    "TimeTracker",
    "profile_scope",
    "get_logger",
    "setup_logging",
    "timed",
    # Exceptions
    "RoadSplineError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "LinearAlgebraError",
    "DimensionMismatchError",
    "InvalidDimensionError",
    "SingularMatrixError",
    "SplineError",
    "InsufficientPointsError",
    "NotFittedError",
    "SegmentIndexError",
    "DegenerateFitError",
]
