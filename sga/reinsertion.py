"""
Reinsertion for the genetic algorithm.

Simple elitism: the best parents survive unchanged, the rest of the next
generation is taken from the ranked offspring.
"""

import numpy as np

from .data_models import Population
from .selection import rank_by_fitness


def reinsert(
    pop: Population,
    X_old: np.ndarray,
    F_old: np.ndarray,
    X_new: np.ndarray,
    F_new: np.ndarray,
    elitism: int
) -> None:
    """
    Write the next generation into the population.

    Slot i < elitism receives the i-th best parent, verbatim with its
    fitness. Slot i >= elitism receives the offspring ranked i-th, so the
    offspring ranked 0..elitism-1 do not survive.

    Args:
        pop: Population to overwrite
        X_old: Parent decision vectors, shape (N, D)
        F_old: Parent fitness vectors, shape (N, 1)
        X_new: Offspring decision vectors, shape (N, D)
        F_new: Offspring fitness vectors, shape (N, 1)
        elitism: Number of parents carried over

    Raises:
        ValueError: If the sizes disagree or elitism exceeds the population size
    """
    n = pop.size()
    if not (len(X_old) == len(F_old) == len(X_new) == len(F_new) == n):
        raise ValueError("Parents, offspring and population must have the same size")
    if elitism > n:
        raise ValueError(
            f"The elitism must be smaller than the population size, while a value of: "
            f"{elitism} was detected in a population of size: {n}"
        )

    best_parents = rank_by_fitness(F_old)
    best_offspring = rank_by_fitness(F_new)

    for i in range(elitism):
        pop.set_xf(i, X_old[best_parents[i]], F_old[best_parents[i]])
    for i in range(elitism, n):
        pop.set_xf(i, X_new[best_offspring[i]], F_new[best_offspring[i]])
