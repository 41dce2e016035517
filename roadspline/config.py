"""
Configuration management for roadspline.

This module provides:
- SplineSettings: Typed configuration dataclass
- ConfigManager: Central configuration management with environment support
- create_default_config: Factory function for the default configuration
- load_config: Load configuration from YAML files
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from roadspline.exceptions import ConfigNotFoundError, ConfigValidationError


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class VectorConfig:
    """Vector comparison settings."""

    epsilon: float = 1e-10

    def validate(self) -> None:
        if self.epsilon <= 0:
            raise ConfigValidationError("vector.epsilon", "must be > 0", self.epsilon)


@dataclass
class SolverConfig:
    """Solver settings.

    ``guard`` enables the zero-pivot check; ``tolerance`` is the pivot
    magnitude, relative to its row, at or below which the solve is rejected.
    """

    guard: bool = False
    tolerance: float = 1e-12

    def validate(self) -> None:
        if self.tolerance < 0:
            raise ConfigValidationError("solver.tolerance", "must be >= 0", self.tolerance)


@dataclass
class SamplingConfig:
    """Curve sampling settings."""

    density: int = 30

    def validate(self) -> None:
        if self.density < 1:
            raise ConfigValidationError("sampling.density", "must be >= 1", self.density)


@dataclass
class CheckConfig:
    """Solver round-trip check settings."""

    trials: int = 1000
    dimension: int = 10
    seed: Optional[int] = None

    def validate(self) -> None:
        if self.trials < 1:
            raise ConfigValidationError("check.trials", "must be >= 1", self.trials)
        if self.dimension < 2:
            raise ConfigValidationError("check.dimension", "must be >= 2", self.dimension)


@dataclass
class SplineSettings:
    """Complete roadspline configuration."""

    vector: VectorConfig = field(default_factory=VectorConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    check: CheckConfig = field(default_factory=CheckConfig)

    def validate(self) -> None:
        """Validate all configuration settings."""
        self.vector.validate()
        self.solver.validate()
        self.sampling.validate()
        self.check.validate()

    @property
    def solver_pivot_tolerance(self) -> Optional[float]:
        """Tolerance to pass to ``solve``, or None when the guard is off."""
        return self.solver.tolerance if self.solver.guard else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vector": {"epsilon": self.vector.epsilon},
            "solver": {
                "guard": self.solver.guard,
                "tolerance": self.solver.tolerance,
            },
            "sampling": {"density": self.sampling.density},
            "check": {
                "trials": self.check.trials,
                "dimension": self.check.dimension,
                "seed": self.check.seed,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SplineSettings":
        vector_data = data.get("vector", {})
        solver_data = data.get("solver", {})
        sampling_data = data.get("sampling", {})
        check_data = data.get("check", {})

        return cls(
            vector=VectorConfig(epsilon=float(vector_data.get("epsilon", 1e-10))),
            solver=SolverConfig(
                guard=bool(solver_data.get("guard", False)),
                tolerance=float(solver_data.get("tolerance", 1e-12)),
            ),
            sampling=SamplingConfig(density=int(sampling_data.get("density", 30))),
            check=CheckConfig(
                trials=int(check_data.get("trials", 1000)),
                dimension=int(check_data.get("dimension", 10)),
                seed=check_data.get("seed"),
            ),
        )


# =============================================================================
# Configuration Manager
# =============================================================================


class ConfigManager:
    """Central configuration management with environment variable support.

    Environment variables take precedence over config files.
    Config files take precedence over defaults.

    Environment variable format: ROADSPLINE_<SECTION>_<KEY>
    Example: ROADSPLINE_SAMPLING_DENSITY=60
    """

    ENV_PREFIX = "ROADSPLINE"
    # Logging is configured separately, see roadspline.logging
    ENV_EXCLUDE = ("LOG",)

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to YAML configuration file.
        """
        self._config: Optional[SplineSettings] = None
        self._config_path = Path(config_path) if config_path else None
        self._raw_config: Dict[str, Any] = {}

    def load(self, validate: bool = True) -> SplineSettings:
        """Load and return configuration.

        Args:
            validate: Whether to validate configuration after loading.

        Returns:
            Loaded SplineSettings instance.
        """
        self._raw_config = create_default_config()

        if self._config_path:
            self._load_from_file(self._config_path)

        self._load_from_env()

        self._config = SplineSettings.from_dict(self._raw_config)

        if validate:
            self._config.validate()

        return self._config

    def _load_from_file(self, path: Path) -> None:
        """Load configuration from YAML file."""
        if not path.exists():
            raise ConfigNotFoundError(str(path))

        with open(path, "r") as f:
            file_config = yaml.safe_load(f)

        if file_config:
            self._deep_update(self._raw_config, file_config)

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        for key, value in os.environ.items():
            if not key.startswith(f"{self.ENV_PREFIX}_"):
                continue
            config_key = key[len(self.ENV_PREFIX) + 1 :]
            if config_key.split("_", 1)[0] in self.ENV_EXCLUDE:
                continue
            self._set_nested_value(config_key.lower(), value)

    def _set_nested_value(self, key: str, value: str) -> None:
        """Set a nested configuration value from environment variable."""
        parts = key.split("_")
        target = self._raw_config

        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]

        target[parts[-1]] = self._parse_value(value)

    @staticmethod
    def _parse_value(value: str) -> Any:
        """Parse string value to appropriate Python type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False
        if value.lower() in ("none", "null"):
            return None

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _deep_update(base: dict, update: dict) -> dict:
        """Deep merge update into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                ConfigManager._deep_update(base[key], value)
            else:
                base[key] = value
        return base

    @property
    def config(self) -> SplineSettings:
        """Get current configuration (loads if not already loaded)."""
        if self._config is None:
            self.load()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dotted key path.

        Args:
            key: Dotted key path (e.g., "sampling.density").
            default: Default value if key not found.
        """
        value = self._raw_config

        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value


# =============================================================================
# Factory Functions
# =============================================================================


def create_default_config() -> Dict[str, Any]:
    """Create the default configuration dictionary."""
    return SplineSettings().to_dict()


def load_config(path: Union[str, Path], validate: bool = True) -> SplineSettings:
    """Load configuration from a YAML file (merged with defaults and env)."""
    manager = ConfigManager(path)
    return manager.load(validate=validate)


_global_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get global configuration manager instance."""
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager()
    return _global_config


def init_config(path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize global configuration from file.

    Args:
        path: Optional path to configuration file.

    Returns:
        Initialized ConfigManager instance.
    """
    global _global_config
    _global_config = ConfigManager(path)
    _global_config.load()
    return _global_config
