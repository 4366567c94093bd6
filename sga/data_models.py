"""
Data models for the genetic algorithm.

Core data structures the evolve loop depends on: the optimization problem
interface, the population container and the log line recorded while evolving.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np


class Problem(ABC):
    """
    Single-objective, box-bounded optimization problem.

    Subclasses provide the box bounds and the objective function. The base
    class takes care of dimension checks and of counting fitness evaluations.

    Attributes:
        int_dim: Number of trailing decision variables that are integers
    """

    def __init__(self, int_dim: int = 0):
        if int_dim < 0:
            raise ValueError(f"Integer dimension must be non-negative, got: {int_dim}")
        self.int_dim = int_dim
        self._fevals = 0
        self._seed = 0

    @abstractmethod
    def get_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return the (lower, upper) box bounds."""

    @abstractmethod
    def _evaluate(self, x: np.ndarray) -> Sequence[float]:
        """Compute the fitness vector of decision vector x."""

    def fitness(self, x: Sequence[float]) -> np.ndarray:
        """
        Evaluate a decision vector and increment the evaluation counter.

        Args:
            x: Decision vector of length get_nx()

        Returns:
            Fitness vector of length get_nf()

        Raises:
            ValueError: If x or the computed fitness has the wrong length
        """
        x = np.asarray(x, dtype=float)
        if x.shape != (self.get_nx(),):
            raise ValueError(
                f"Decision vector of length {x.size} passed to {self.get_name()}, "
                f"expected length {self.get_nx()}"
            )
        f = np.atleast_1d(np.asarray(self._evaluate(x), dtype=float))
        if f.shape != (self.get_nf(),):
            raise ValueError(
                f"{self.get_name()} returned a fitness of length {f.size}, "
                f"expected length {self.get_nf()}"
            )
        self._fevals += 1
        return f

    def get_nx(self) -> int:
        return len(self.get_bounds()[0])

    def get_nix(self) -> int:
        return self.int_dim

    def get_nc(self) -> int:
        return 0

    def get_nf(self) -> int:
        return 1

    def get_fevals(self) -> int:
        return self._fevals

    def is_stochastic(self) -> bool:
        return False

    def set_seed(self, seed: int) -> None:
        self._seed = int(seed)

    def get_seed(self) -> int:
        return self._seed

    def get_name(self) -> str:
        return type(self).__name__


def validate_bounds(lb: Sequence[float], ub: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Check a pair of box bounds and return them as float arrays.

    Raises:
        ValueError: If the bounds differ in length, are not finite or lb > ub
    """
    lb = np.asarray(lb, dtype=float)
    ub = np.asarray(ub, dtype=float)

    if lb.ndim != 1 or lb.shape != ub.shape:
        raise ValueError(f"Bounds must be 1-D and of equal length, got {lb.shape} and {ub.shape}")
    if lb.size == 0:
        raise ValueError("Bounds must not be empty")
    if not (np.all(np.isfinite(lb)) and np.all(np.isfinite(ub))):
        raise ValueError("Bounds must be finite")
    if np.any(lb > ub):
        bad = int(np.argmax(lb > ub))
        raise ValueError(f"Lower bound {lb[bad]} exceeds upper bound {ub[bad]} at index {bad}")

    return lb, ub


class Population:
    """
    Decision and fitness vectors of a set of individuals bound to one problem.

    The population keeps track of its champion: the best individual ever
    inserted, which survives even when it is later overwritten.
    """

    def __init__(self, problem: Problem, size: int = 0, seed: Optional[int] = None):
        """
        Create a population of random individuals.

        Args:
            problem: Problem the individuals belong to
            size: Number of random individuals to create
            seed: Seed for the generator drawing the initial decision vectors
        """
        self._problem = problem
        self._lb, self._ub = validate_bounds(*problem.get_bounds())

        nix = problem.get_nix()
        if nix > self._lb.size:
            raise ValueError(
                f"Integer dimension {nix} exceeds the problem dimension {self._lb.size}"
            )

        self._x = np.empty((0, self._lb.size))
        self._f = np.empty((0, problem.get_nf()))
        self.champion_x: Optional[np.ndarray] = None
        self.champion_f: Optional[np.ndarray] = None
        self.seed = seed

        rng = np.random.default_rng(seed)
        for _ in range(size):
            self.push_back(self.random_decision_vector(rng))

    def random_decision_vector(self, rng: np.random.Generator) -> np.ndarray:
        """Draw a decision vector uniformly inside the problem bounds."""
        nx = self._lb.size
        dimc = nx - self._problem.get_nix()

        x = np.empty(nx)
        x[:dimc] = rng.uniform(self._lb[:dimc], self._ub[:dimc])
        for j in range(dimc, nx):
            x[j] = rng.integers(int(np.ceil(self._lb[j])), int(np.floor(self._ub[j])), endpoint=True)
        return x

    def push_back(self, x: Sequence[float], f: Optional[Sequence[float]] = None) -> None:
        """Append an individual, evaluating it when no fitness is given."""
        x = self._check_x(x)
        f = self._problem.fitness(x) if f is None else self._check_f(f)

        self._x = np.vstack([self._x, x])
        self._f = np.vstack([self._f, f])
        self._update_champion(x, f)

    def set_xf(self, i: int, x: Sequence[float], f: Sequence[float]) -> None:
        """Overwrite the decision and fitness vectors of individual i."""
        self._check_index(i)
        x = self._check_x(x)
        f = self._check_f(f)

        self._x[i] = x
        self._f[i] = f
        self._update_champion(x, f)

    def set_x(self, i: int, x: Sequence[float]) -> None:
        """Overwrite the decision vector of individual i and re-evaluate it."""
        self._check_index(i)
        x = self._check_x(x)
        self.set_xf(i, x, self._problem.fitness(x))

    def get_x(self) -> np.ndarray:
        return self._x.copy()

    def get_f(self) -> np.ndarray:
        return self._f.copy()

    def get_problem(self) -> Problem:
        return self._problem

    def size(self) -> int:
        return self._x.shape[0]

    def __len__(self) -> int:
        return self.size()

    def best_idx(self) -> int:
        """Index of the individual with the lowest fitness (NaN ranks last)."""
        if self.size() == 0:
            raise ValueError("Cannot pick the best individual of an empty population")
        return int(np.argsort(self._f[:, 0], kind="stable")[0])

    def worst_idx(self) -> int:
        """Index of the individual with the highest fitness (NaN ranks last)."""
        if self.size() == 0:
            raise ValueError("Cannot pick the worst individual of an empty population")
        return int(np.argsort(self._f[:, 0], kind="stable")[-1])

    def _check_index(self, i: int) -> None:
        if not 0 <= i < self.size():
            raise IndexError(f"Individual index {i} out of range for population of size {self.size()}")

    def _check_x(self, x: Sequence[float]) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        if x.shape != self._lb.shape:
            raise ValueError(f"Decision vector of length {x.size}, expected {self._lb.size}")
        return x.copy()

    def _check_f(self, f: Sequence[float]) -> np.ndarray:
        f = np.atleast_1d(np.asarray(f, dtype=float))
        if f.shape != (self._problem.get_nf(),):
            raise ValueError(f"Fitness vector of length {f.size}, expected {self._problem.get_nf()}")
        return f.copy()

    def _update_champion(self, x: np.ndarray, f: np.ndarray) -> None:
        # NaN compares false, so it never becomes champion
        if self.champion_f is None and not np.isnan(f[0]):
            self.champion_x, self.champion_f = x.copy(), f.copy()
        elif self.champion_f is not None and f[0] < self.champion_f[0]:
            self.champion_x, self.champion_f = x.copy(), f.copy()

    def __repr__(self) -> str:
        champion = "none" if self.champion_f is None else f"{self.champion_f[0]:g}"
        return (f"Population(problem={self._problem.get_name()}, size={self.size()}, "
                f"champion_f={champion})")


@dataclass
class LogLine:
    """
    One entry of the evolve log.

    Attributes:
        gen: Generation number (1-based)
        fevals: Fitness evaluations since the start of the evolve call
        best: Best fitness ever seen in the population (champion)
        cur_best: Best fitness in the current population
    """
    gen: int
    fevals: int
    best: float
    cur_best: float

    def to_dict(self) -> dict:
        return {
            "gen": self.gen,
            "fevals": self.fevals,
            "best": self.best,
            "cur_best": self.cur_best,
        }
