"""
Simple Genetic Algorithm

This package provides a generational genetic algorithm for single-objective,
unconstrained, box-bounded optimization problems, with pluggable selection,
crossover and mutation operators and simple elitism.

Key Features:
- Tournament and truncated selection
- Exponential, binomial, single-point and simulated binary (SBX) crossover
- Gaussian, uniform and polynomial mutation
- Mixed integer support (trailing integer genes)
- Reproducible runs driven by a single seeded random number generator

Modules:
- data_models: Problem interface, Population container, log lines
- problems: Benchmark problems (sphere, rastrigin, rosenbrock, noisy sphere)
- config: Operator enumerations and parameter validation
- selection: Selection operators
- crossover: Crossover operators
- mutation: Mutation operators
- reinsertion: Simple elitism
- algorithm: The SGA evolve loop
- io_utils: Algorithm persistence, population and log CSV export
- visualization_utils: Convergence plots
- cli: Command-line interface driven by YAML run configurations
"""

__version__ = "0.1.0"
__author__ = "Optimization Team"

from .algorithm import SGA
from .config import SGAConfig, ConfigurationError, Selection, Crossover, Mutation
from .data_models import Problem, Population, LogLine

__all__ = [
    "SGA",
    "SGAConfig",
    "ConfigurationError",
    "Selection",
    "Crossover",
    "Mutation",
    "Problem",
    "Population",
    "LogLine",
]
