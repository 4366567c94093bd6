"""
Configuration for the genetic algorithm.

Maps operator names to closed enumerations and validates the numeric
parameters once, at construction time.
"""

from dataclasses import dataclass, fields
from enum import Enum
from numbers import Integral, Real
from pathlib import Path
from typing import Any, Dict, Union

import yaml


class ConfigurationError(ValueError):
    """Raised when a genetic algorithm parameter is invalid."""
    pass


class Selection(Enum):
    TOURNAMENT = "tournament"
    TRUNCATED = "truncated"


class Crossover(Enum):
    EXPONENTIAL = "exponential"
    BINOMIAL = "binomial"
    SINGLE = "single"
    SBX = "sbx"


class Mutation(Enum):
    GAUSSIAN = "gaussian"
    UNIFORM = "uniform"
    POLYNOMIAL = "polynomial"


def _parse_operator(enum_cls, value, kind: str):
    """Convert an operator name (or enum member) to the enum member."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = " or ".join(f'"{member.value}"' for member in enum_cls)
        raise ConfigurationError(
            f"The {kind} type must be one of {choices}: unknown type requested: {value}"
        )


@dataclass
class SGAConfig:
    """
    Operator configuration of the simple genetic algorithm.

    Attributes:
        gen: Number of generations
        cr: Crossover probability (inactive for "single" crossover)
        eta_c: Distribution index for "sbx" crossover
        m: Mutation probability, per gene
        param_m: Distribution index for "polynomial" mutation, otherwise the
            mutation width relative to the box bounds
        elitism: Number of best parents carried over to the next generation
        param_s: Tournament size for "tournament" selection, number of best
            individuals recycled for "truncated" selection
        mutation: Mutation strategy
        selection: Selection strategy
        crossover: Crossover strategy
        int_dim: Number of trailing genes treated as integers
    """
    gen: int = 1
    cr: float = 0.95
    eta_c: float = 10.0
    m: float = 0.02
    param_m: float = 0.5
    elitism: int = 5
    param_s: int = 5
    mutation: Union[str, Mutation] = Mutation.GAUSSIAN
    selection: Union[str, Selection] = Selection.TOURNAMENT
    crossover: Union[str, Crossover] = Crossover.EXPONENTIAL
    int_dim: int = 0

    def __post_init__(self):
        """Validate parameters and convert operator names to enums."""
        self.mutation = _parse_operator(Mutation, self.mutation, "mutation")
        self.selection = _parse_operator(Selection, self.selection, "selection")
        self.crossover = _parse_operator(Crossover, self.crossover, "crossover")

        for name in ("gen", "elitism", "param_s", "int_dim"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral) or value < 0:
                raise ConfigurationError(
                    f"The parameter '{name}' must be a non-negative integer, "
                    f"while a value of {value!r} was detected"
                )
            setattr(self, name, int(value))

        for name in ("cr", "eta_c", "m", "param_m"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ConfigurationError(
                    f"The parameter '{name}' must be a number, "
                    f"while a value of {value!r} was detected"
                )
            setattr(self, name, float(value))

        if not 0.0 <= self.cr <= 1.0:
            raise ConfigurationError(
                f"The crossover probability must be in the [0,1] range, "
                f"while a value of {self.cr} was detected"
            )
        if not 1.0 <= self.eta_c < 100.0:
            raise ConfigurationError(
                f"The distribution index for SBX crossover must be in [1, 100[, "
                f"while a value of {self.eta_c} was detected"
            )
        if not 0.0 <= self.m <= 1.0:
            raise ConfigurationError(
                f"The mutation probability must be in the [0,1] range, "
                f"while a value of {self.m} was detected"
            )
        if self.param_s < 1:
            raise ConfigurationError(
                f"The selection parameter must be at least 1, "
                f"while a value of {self.param_s} was detected"
            )

        if self.mutation == Mutation.POLYNOMIAL:
            if not 1.0 <= self.param_m <= 100.0:
                raise ConfigurationError(
                    f"Polynomial mutation was selected, the mutation parameter must be in [1, 100], "
                    f"while a value of {self.param_m} was detected"
                )
        elif not 0.0 <= self.param_m <= 1.0:
            raise ConfigurationError(
                f"The mutation parameter must be in [0,1], "
                f"while a value of {self.param_m} was detected"
            )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to a plain dictionary.

        Returns:
            Dictionary with operator names as strings
        """
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SGAConfig":
        """
        Create configuration from a dictionary (e.g., parsed YAML).

        Raises:
            ConfigurationError: If the dictionary has unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown parameters: {sorted(unknown)}")
        return cls(**data)


def load_config(config_path: Union[str, Path]) -> SGAConfig:
    """
    Load an algorithm configuration from a YAML file.

    Args:
        config_path: Path to config YAML file

    Returns:
        Validated SGAConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If the YAML is invalid or describes an invalid configuration
    """
    return SGAConfig.from_dict(load_yaml_mapping(config_path))


def load_yaml_mapping(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a YAML file that must contain a mapping.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the YAML is invalid, empty or not a mapping
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if data is None:
        raise ConfigurationError("Configuration file is empty")
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must contain a mapping")

    return data
