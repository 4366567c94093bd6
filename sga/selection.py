"""
Selection operators for the genetic algorithm.

Builds the mating pool: for every offspring slot, the index of the parent
it is copied from. Fitness is minimized; NaN fitness ranks last.
"""

import numpy as np

from .config import Selection


def less_than_f(a: float, b: float) -> bool:
    """Strict fitness comparison where NaN is worse than any number."""
    if np.isnan(a):
        return False
    if np.isnan(b):
        return True
    return a < b


def rank_by_fitness(F: np.ndarray) -> np.ndarray:
    """
    Sort individual indices from best to worst fitness.

    The sort is stable, so equal fitness keeps encounter order.

    Args:
        F: Fitness vectors, shape (N, 1)

    Returns:
        Array of N indices, best first
    """
    F = np.asarray(F, dtype=float)
    # numpy sorts NaN to the end
    return np.argsort(F[:, 0], kind="stable")


def truncated_selection(F: np.ndarray, param_s: int) -> np.ndarray:
    """
    Cycle through the param_s best individuals to fill the mating pool.

    Args:
        F: Fitness vectors, shape (N, 1)
        param_s: Number of best individuals to recycle

    Returns:
        Array of N parent indices
    """
    ranked = rank_by_fitness(F)
    return ranked[np.arange(len(ranked)) % param_s]


def tournament_selection(F: np.ndarray, param_s: int, rng: np.random.Generator) -> np.ndarray:
    """
    Fill each mating slot with the winner of a random tournament.

    Each tournament draws param_s distinct individuals with a partial
    Fisher-Yates shuffle of the index pool and keeps the one with the
    lowest fitness; on ties the first one drawn wins.

    Args:
        F: Fitness vectors, shape (N, 1)
        param_s: Tournament size
        rng: Random number generator

    Returns:
        Array of N parent indices
    """
    F = np.asarray(F, dtype=float)
    n = F.shape[0]
    pool = np.arange(n)
    selected = np.empty(n, dtype=int)

    for j in range(n):
        for i in range(param_s):
            index = rng.integers(i, n)
            pool[i], pool[index] = pool[index], pool[i]

        winner = pool[0]
        for i in range(1, param_s):
            if less_than_f(F[pool[i], 0], F[winner, 0]):
                winner = pool[i]
        selected[j] = winner

    return selected


def perform_selection(
    F: np.ndarray,
    selection: Selection,
    param_s: int,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Apply the configured selection strategy.

    Args:
        F: Fitness vectors of the current population, shape (N, 1)
        selection: Selection strategy
        param_s: Tournament size or truncation size
        rng: Random number generator

    Returns:
        Array of N parent indices (repeats allowed)

    Raises:
        ValueError: If param_s exceeds the population size
        RuntimeError: If the strategy has no implementation
    """
    n = len(F)
    if param_s > n:
        raise ValueError(
            f"The parameter for selection must be smaller than the population size, "
            f"while a value of: {param_s} was detected in a population of size: {n}"
        )

    if selection == Selection.TRUNCATED:
        return truncated_selection(F, param_s)
    elif selection == Selection.TOURNAMENT:
        return tournament_selection(F, param_s, rng)
    else:
        raise RuntimeError(f"The code should never reach here: unknown selection {selection!r}")
