"""
roadspline Exception Hierarchy.

This module defines all custom exceptions used in the roadspline package.
Out-of-range container access is not an error (it reads 0 and ignores
writes); everything here signals misuse or a failed numeric step:
- Configuration loading and validation
- Linear algebra (dimensions, singular pivots)
- Spline state (evaluation before a fit)
"""

from typing import Any, Optional


class RoadSplineError(Exception):
    """Base exception for all roadspline errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(RoadSplineError):
    """Error in configuration loading or validation."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Configuration file not found."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file not found: {config_path}",
            details={"path": config_path},
        )


class ConfigValidationError(ConfigurationError):
    """Configuration validation failed."""

    def __init__(self, key: str, reason: str, value: Any = None):
        details = {"key": key, "reason": reason}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            f"Invalid configuration for '{key}': {reason}",
            details=details,
        )


# =============================================================================
# Linear Algebra Errors
# =============================================================================


class LinearAlgebraError(RoadSplineError):
    """Base class for vector, matrix and solver errors."""

    pass


class DimensionMismatchError(LinearAlgebraError):
    """Operands of an operation have different dimensions."""

    def __init__(self, operation: str, expected: int, actual: int):
        super().__init__(
            f"Dimension mismatch in {operation}: expected {expected}, got {actual}",
            details={"operation": operation, "expected": expected, "actual": actual},
        )


class InvalidDimensionError(LinearAlgebraError):
    """A container was created with an invalid dimension."""

    def __init__(self, dimension: Any):
        super().__init__(
            f"Invalid dimension: {dimension}",
            details={"dimension": dimension},
        )


class SingularMatrixError(LinearAlgebraError):
    """Elimination hit a pivot below the configured tolerance."""

    def __init__(self, row: int, pivot: float, tolerance: float):
        super().__init__(
            f"Pivot at row {row} is numerically zero",
            details={"row": row, "pivot": pivot, "tolerance": tolerance},
        )


# =============================================================================
# Spline Errors
# =============================================================================


class SplineError(RoadSplineError):
    """Base class for spline-related errors."""

    pass


class InsufficientPointsError(SplineError):
    """Too few control points for the requested operation."""

    def __init__(self, required: int, actual: int):
        super().__init__(
            f"At least {required} control points required, got {actual}",
            details={"required": required, "actual": actual},
        )


class NotFittedError(SplineError):
    """The curve has no valid fit for its current control points."""

    def __init__(self, point_count: int):
        super().__init__(
            "Spline has not been fitted. Call fit() first.",
            details={"points": point_count},
        )


class SegmentIndexError(SplineError):
    """A parameter mapped outside the fitted segments."""

    def __init__(self, index: int, point_count: int):
        super().__init__(
            f"Segment index out of range: {index}",
            details={"index": index, "points": point_count},
        )


class DegenerateFitError(SplineError):
    """The spline system produced non-finite coefficients."""

    def __init__(self, point_count: int):
        super().__init__(
            f"Spline system for {point_count} control points has no finite solution",
            details={"points": point_count},
        )
