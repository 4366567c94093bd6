"""
Simple Genetic Algorithm.

A classical generational genetic algorithm for single-objective,
unconstrained, box-bounded problems. Each generation runs selection,
crossover, mutation, evaluation of the offspring and reinsertion with
simple elitism. The trailing int_dim genes are treated as integers by every
operator.

All randomness flows through one numpy Generator owned by the algorithm,
so a run is reproducible given the seed, the configuration and the problem.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from .config import Crossover, Mutation, Selection, SGAConfig
from .crossover import perform_crossover
from .data_models import LogLine, Population, validate_bounds
from .mutation import perform_mutation
from .reinsertion import reinsert
from .selection import perform_selection

# Lines printed between two repetitions of the column header
HEADER_EVERY = 50


def _random_seed() -> int:
    return int(np.random.default_rng().integers(0, 2**32))


class SGA:
    """
    Simple genetic algorithm.

    Example:
        >>> algo = SGA(gen=100, crossover="sbx", mutation="polynomial", param_m=20, seed=42)
        >>> pop = algo.evolve(Population(Sphere(dim=10), size=20, seed=1))
    """

    def __init__(
        self,
        gen: int = 1,
        cr: float = 0.95,
        eta_c: float = 10.0,
        m: float = 0.02,
        param_m: float = 0.5,
        elitism: int = 5,
        param_s: int = 5,
        mutation: str = "gaussian",
        selection: str = "tournament",
        crossover: str = "exponential",
        int_dim: int = 0,
        seed: Optional[int] = None
    ):
        """
        Construct the algorithm.

        Args:
            gen: Number of generations
            cr: Crossover probability, inactive for "single" crossover
            eta_c: Distribution index for "sbx" crossover
            m: Mutation probability
            param_m: Distribution index for "polynomial" mutation, otherwise
                the width of the mutation relative to the box bounds
            elitism: Number of parents carried over to the next generation
            param_s: Tournament size ("tournament") or number of best
                individuals recycled ("truncated")
            mutation: One of "gaussian", "uniform", "polynomial"
            selection: One of "tournament", "truncated"
            crossover: One of "exponential", "binomial", "single", "sbx"
            int_dim: Number of trailing genes treated as integers
            seed: Seed of the random number generator (random if None)

        Raises:
            ConfigurationError: If any parameter is invalid
        """
        self.config = SGAConfig(
            gen=gen, cr=cr, eta_c=eta_c, m=m, param_m=param_m, elitism=elitism,
            param_s=param_s, mutation=mutation, selection=selection,
            crossover=crossover, int_dim=int_dim
        )
        self._verbosity = 0
        self._log: List[LogLine] = []
        self.set_seed(_random_seed() if seed is None else seed)

    @classmethod
    def from_config(cls, config: SGAConfig, seed: Optional[int] = None) -> "SGA":
        """Construct the algorithm from a validated configuration."""
        return cls(seed=seed, **config.to_dict())

    def evolve(self, pop: Population) -> Population:
        """
        Evolve the population for config.gen generations.

        Args:
            pop: Population to evolve; modified in place

        Returns:
            The evolved population

        Raises:
            ValueError: If the problem is multi-objective or constrained, the
                population has fewer than 2 individuals, elitism or param_s
                exceed the population size, int_dim exceeds the problem
                dimension or differs from its integer dimension, or the
                population size is odd with sbx crossover
        """
        prob = pop.get_problem()
        bounds = validate_bounds(*prob.get_bounds())
        n = pop.size()
        fevals0 = prob.get_fevals()
        cfg = self.config

        # Preamble: nothing is modified unless all checks pass
        if prob.get_nc() != 0:
            raise ValueError(
                f"Constraints detected in {prob.get_name()} instance. "
                f"{self.get_name()} cannot deal with them"
            )
        if prob.get_nf() != 1:
            raise ValueError(
                f"Multiple objectives detected in {prob.get_name()} instance. "
                f"{self.get_name()} cannot deal with them"
            )
        if n < 2:
            raise ValueError(
                f"{self.get_name()} needs at least 2 individuals in the population, {n} detected"
            )
        if cfg.elitism > n:
            raise ValueError(
                f"The elitism must be smaller than the population size, while a value of: "
                f"{cfg.elitism} was detected in a population of size: {n}"
            )
        if cfg.param_s > n:
            raise ValueError(
                f"The parameter for selection must be smaller than the population size, "
                f"while a value of: {cfg.param_s} was detected in a population of size: {n}"
            )
        if cfg.int_dim > prob.get_nx():
            raise ValueError(
                f"The integer dimension {cfg.int_dim} exceeds the dimension "
                f"{prob.get_nx()} of {prob.get_name()}"
            )
        if cfg.int_dim != prob.get_nix():
            raise ValueError(
                f"The integer dimension {cfg.int_dim} does not match the integer dimension "
                f"{prob.get_nix()} of {prob.get_name()}"
            )
        if cfg.crossover == Crossover.SBX and n % 2 != 0:
            raise ValueError(
                f"Population size must be even if sbx crossover is selected. Detected pop size is: {n}"
            )

        if cfg.gen == 0:
            return pop

        self._log = []
        count = 1

        for gen in range(1, cfg.gen + 1):
            # A stochastic problem gets a new seed, and the population is re-evaluated under it
            if prob.is_stochastic():
                prob.set_seed(int(self._rng.integers(0, 2**32)))
                X = pop.get_x()
                for j in range(n):
                    pop.set_xf(j, X[j], prob.fitness(X[j]))

            X_old = pop.get_x()
            F_old = pop.get_f()

            selected = perform_selection(F_old, cfg.selection, cfg.param_s, self._rng)
            X_new = X_old[selected]
            perform_crossover(X_new, bounds, cfg, self._rng)
            perform_mutation(X_new, bounds, cfg, self._rng)
            F_new = np.array([prob.fitness(x) for x in X_new])

            reinsert(pop, X_old, F_old, X_new, F_new, cfg.elitism)

            if self._verbosity > 0 and (gen % self._verbosity == 1 or self._verbosity == 1):
                if count % HEADER_EVERY == 1:
                    print(f"{'Gen:':>7}{'Fevals:':>15}{'Best:':>15}{'Current Best:':>15}")
                line = LogLine(
                    gen=gen,
                    fevals=prob.get_fevals() - fevals0,
                    best=float(pop.champion_f[0]) if pop.champion_f is not None else float("nan"),
                    cur_best=float(pop.get_f()[pop.best_idx(), 0]),
                )
                print(f"{line.gen:>7}{line.fevals:>15}{line.best:>15.6g}{line.cur_best:>15.6g}")
                self._log.append(line)
                count += 1

        return pop

    def set_seed(self, seed: int) -> None:
        """Reset the random number generator with a new seed."""
        seed = int(seed)
        if seed < 0:
            raise ValueError(f"Seed must be non-negative, got: {seed}")
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    def get_seed(self) -> int:
        return self._seed

    def set_verbosity(self, level: int) -> None:
        """
        Set the verbosity of the screen output and of the log.

        Args:
            level: 0 for no output, otherwise one line every level generations
        """
        level = int(level)
        if level < 0:
            raise ValueError(f"Verbosity must be non-negative, got: {level}")
        self._verbosity = level

    def get_verbosity(self) -> int:
        return self._verbosity

    def get_log(self) -> List[LogLine]:
        """Lines logged during the last call to evolve (see set_verbosity)."""
        return list(self._log)

    def get_name(self) -> str:
        return "Genetic Algorithm"

    def get_extra_info(self) -> str:
        """Human-readable dump of the configuration."""
        cfg = self.config
        lines = [
            f"\tNumber of generations: {cfg.gen}",
            f"\tElitism: {cfg.elitism}",
            "\tCrossover:",
            f"\t\tType: {cfg.crossover.value}",
            f"\t\tProbability: {cfg.cr}",
        ]
        if cfg.crossover == Crossover.SBX:
            lines.append(f"\t\tDistribution index: {cfg.eta_c}")
        lines += [
            "\tMutation:",
            f"\t\tType: {cfg.mutation.value}",
            f"\t\tProbability: {cfg.m}",
        ]
        if cfg.mutation == Mutation.POLYNOMIAL:
            lines.append(f"\t\tDistribution index: {cfg.param_m}")
        else:
            lines.append(f"\t\tWidth: {cfg.param_m}")
        lines += [
            "\tSelection:",
            f"\t\tType: {cfg.selection.value}",
        ]
        if cfg.selection == Selection.TRUNCATED:
            lines.append(f"\t\tTruncation size: {cfg.param_s}")
        else:
            lines.append(f"\t\tTournament size: {cfg.param_s}")
        lines += [
            f"\tSize of the integer part: {cfg.int_dim}",
            f"\tSeed: {self._seed}",
            f"\tVerbosity: {self._verbosity}",
        ]
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """
        Capture configuration, seed, verbosity and generator state.

        A restored instance continues the same random stream.
        """
        return {
            "name": self.get_name(),
            "config": self.config.to_dict(),
            "seed": self._seed,
            "verbosity": self._verbosity,
            "rng_state": self._rng.bit_generator.state,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SGA":
        """Restore an instance captured with to_dict()."""
        algo = cls(seed=data["seed"], **data["config"])
        algo.set_verbosity(data.get("verbosity", 0))
        if "rng_state" in data:
            algo._rng.bit_generator.state = data["rng_state"]
        return algo

    def __repr__(self) -> str:
        return f"Algorithm name: {self.get_name()}\n{self.get_extra_info()}"
