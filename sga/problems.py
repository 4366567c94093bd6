"""
Benchmark problems.

Box-bounded single-objective test functions used by the CLI and the tests.
"""

from typing import Tuple

import numpy as np

from .data_models import Problem


class Sphere(Problem):
    """Sum of squares, minimum 0 at the origin."""

    def __init__(self, dim: int = 2, int_dim: int = 0, lb: float = -5.12, ub: float = 5.12):
        super().__init__(int_dim=int_dim)
        if dim < 1:
            raise ValueError(f"Problem dimension must be at least 1, got: {dim}")
        self.dim = dim
        self.lb = lb
        self.ub = ub

    def get_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        return np.full(self.dim, float(self.lb)), np.full(self.dim, float(self.ub))

    def _evaluate(self, x):
        return [float(np.sum(x * x))]


class Rastrigin(Problem):
    """Highly multimodal function, minimum 0 at the origin."""

    def __init__(self, dim: int = 2, int_dim: int = 0):
        super().__init__(int_dim=int_dim)
        if dim < 1:
            raise ValueError(f"Problem dimension must be at least 1, got: {dim}")
        self.dim = dim

    def get_bounds(self):
        return np.full(self.dim, -5.12), np.full(self.dim, 5.12)

    def _evaluate(self, x):
        return [float(10.0 * x.size + np.sum(x * x - 10.0 * np.cos(2.0 * np.pi * x)))]


class Rosenbrock(Problem):
    """Banana-shaped valley, minimum 0 at (1, ..., 1)."""

    def __init__(self, dim: int = 2):
        super().__init__()
        if dim < 2:
            raise ValueError(f"Rosenbrock needs at least 2 dimensions, got: {dim}")
        self.dim = dim

    def get_bounds(self):
        return np.full(self.dim, -5.0), np.full(self.dim, 10.0)

    def _evaluate(self, x):
        return [float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))]


class NoisySphere(Sphere):
    """
    Sphere with additive Gaussian noise.

    The noise realization depends on the seed: every set_seed() restarts
    the noise stream, so a seed always reproduces the same noise sequence.
    """

    def __init__(self, dim: int = 2, noise: float = 0.1, seed: int = 0):
        super().__init__(dim=dim)
        if noise < 0:
            raise ValueError(f"Noise level must be non-negative, got: {noise}")
        self.noise = noise
        self.set_seed(seed)

    def set_seed(self, seed: int) -> None:
        super().set_seed(seed)
        self._noise_rng = np.random.default_rng(self._seed)

    def is_stochastic(self) -> bool:
        return True

    def _evaluate(self, x):
        return [float(np.sum(x * x) + self._noise_rng.normal(0.0, self.noise))]


PROBLEMS = {
    "sphere": Sphere,
    "rastrigin": Rastrigin,
    "rosenbrock": Rosenbrock,
    "noisy_sphere": NoisySphere,
}


def make_problem(name: str, **kwargs) -> Problem:
    """
    Build a benchmark problem by name.

    Args:
        name: One of the keys of PROBLEMS
        **kwargs: Forwarded to the problem constructor

    Raises:
        ValueError: If the name is unknown
    """
    if name not in PROBLEMS:
        raise ValueError(f"Unknown problem: '{name}'. Must be one of {sorted(PROBLEMS)}")
    return PROBLEMS[name](**kwargs)
