"""
Crossover operators for the genetic algorithm.

Implements exponential, binomial and single-point crossover, which copy
genes from a random mating partner, and simulated binary crossover (SBX),
which breeds two children per couple of parents.

All operators work in place on the mating pool. Except for SBX's
continuous part, children only ever receive genes of valid parents, so
bounds and the integer part are preserved by construction.
"""

from typing import Tuple

import numpy as np

from .config import Crossover, SGAConfig


def exponential_crossover(
    child: np.ndarray,
    partner: np.ndarray,
    cr: float,
    rng: np.random.Generator
) -> None:
    """
    Copy a run of consecutive partner genes into child.

    Starting at a random gene, partner genes are copied (wrapping around)
    while successive Bernoulli(cr) draws succeed, at most len(child) genes.
    At least one gene is always copied.
    """
    dim = child.size
    n = rng.integers(0, dim)
    length = 0
    while True:
        child[n] = partner[n]
        n = (n + 1) % dim
        length += 1
        if not (rng.random() < cr and length < dim):
            break


def binomial_crossover(
    child: np.ndarray,
    partner: np.ndarray,
    cr: float,
    rng: np.random.Generator
) -> None:
    """
    Copy each partner gene into child with probability cr.

    Genes are visited from a random start (wrapping around); the last one
    visited is always copied so that at least one gene changes.
    """
    dim = child.size
    n = rng.integers(0, dim)
    for length in range(dim):
        if rng.random() < cr or length + 1 == dim:
            child[n] = partner[n]
        n = (n + 1) % dim


def single_point_crossover(
    child: np.ndarray,
    partner: np.ndarray,
    rng: np.random.Generator
) -> None:
    """Replace the child's genes from a random cut point on with the partner's."""
    dim = child.size
    n = rng.integers(0, dim, endpoint=True)
    child[n:] = partner[n:]


def sbx_crossover(
    parent1: np.ndarray,
    parent2: np.ndarray,
    bounds: Tuple[np.ndarray, np.ndarray],
    cr: float,
    eta_c: float,
    int_dim: int,
    rng: np.random.Generator
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Breed two children with simulated binary crossover.

    The continuous part of the chromosome undergoes SBX (Deb & Agrawal,
    1995) with probability cr, each gene with probability 0.5. The integer
    part undergoes two-point crossover with probability cr.

    Args:
        parent1: First parent
        parent2: Second parent
        bounds: (lower, upper) box bounds
        cr: Crossover probability
        eta_c: Distribution index
        int_dim: Number of trailing integer genes
        rng: Random number generator

    Returns:
        Tuple of (child1, child2)
    """
    lb, ub = bounds
    dim = parent1.size
    dimc = dim - int_dim

    child1 = np.array(parent1, dtype=float)
    child2 = np.array(parent2, dtype=float)

    if rng.random() <= cr:
        for i in range(dimc):
            if rng.random() <= 0.5 and abs(parent1[i] - parent2[i]) > 1e-14 and lb[i] != ub[i]:
                y1, y2 = min(parent1[i], parent2[i]), max(parent1[i], parent2[i])
                yl, yu = lb[i], ub[i]
                rand01 = rng.random()

                beta = 1.0 + 2.0 * (y1 - yl) / (y2 - y1)
                betaq = _spread_factor(beta, rand01, eta_c)
                c1 = 0.5 * ((y1 + y2) - betaq * (y2 - y1))

                beta = 1.0 + 2.0 * (yu - y2) / (y2 - y1)
                betaq = _spread_factor(beta, rand01, eta_c)
                c2 = 0.5 * ((y1 + y2) + betaq * (y2 - y1))

                c1 = min(max(c1, yl), yu)
                c2 = min(max(c2, yl), yu)

                if rng.random() <= 0.5:
                    child1[i], child2[i] = c1, c2
                else:
                    child1[i], child2[i] = c2, c1

    # Two-point crossover on the integer part; sites are relative to its start
    if int_dim > 0 and rng.random() <= cr:
        site1 = rng.integers(0, int_dim)
        site2 = rng.integers(0, int_dim)
        if site1 > site2:
            site1, site2 = site2, site1
        middle = slice(dimc + site1, dimc + site2)
        child1[middle] = parent2[middle]
        child2[middle] = parent1[middle]

    return child1, child2


def _spread_factor(beta: float, rand01: float, eta_c: float) -> float:
    """Spread factor betaq of SBX for the given bound-distance ratio beta."""
    alpha = 2.0 - beta ** -(eta_c + 1.0)
    if rand01 <= 1.0 / alpha:
        return (rand01 * alpha) ** (1.0 / (eta_c + 1.0))
    return (1.0 / (2.0 - rand01 * alpha)) ** (1.0 / (eta_c + 1.0))


def perform_crossover(
    X: np.ndarray,
    bounds: Tuple[np.ndarray, np.ndarray],
    config: SGAConfig,
    rng: np.random.Generator
) -> None:
    """
    Turn the mating pool into offspring, in place.

    For SBX the pool is shuffled and bred two by two. For the other
    strategies every individual mates with a partner drawn uniformly among
    the other members of the (pre-crossover) pool.

    Args:
        X: Mating pool, shape (N, D); modified in place
        bounds: (lower, upper) box bounds
        config: Algorithm configuration
        rng: Random number generator

    Raises:
        ValueError: If the pool has fewer than 2 individuals, or an odd size under SBX
        RuntimeError: If the strategy has no implementation
    """
    n = X.shape[0]
    if n < 2:
        raise ValueError(f"Crossover needs at least 2 individuals, {n} detected")

    if config.crossover == Crossover.SBX:
        if n % 2 != 0:
            raise ValueError(f"Population size must be even if sbx crossover is selected. Detected pop size is: {n}")
        rng.shuffle(X)
        for i in range(0, n, 2):
            X[i], X[i + 1] = sbx_crossover(
                X[i], X[i + 1], bounds, config.cr, config.eta_c, config.int_dim, rng
            )
        return

    pool = X.copy()
    all_idx = list(range(n))

    for i in range(n):
        # Swapping i to the front leaves the others in positions 1..n-1
        all_idx[0], all_idx[i] = all_idx[i], all_idx[0]
        partner = pool[all_idx[rng.integers(1, n)]]
        child = X[i]

        if config.crossover == Crossover.EXPONENTIAL:
            exponential_crossover(child, partner, config.cr, rng)
        elif config.crossover == Crossover.BINOMIAL:
            binomial_crossover(child, partner, config.cr, rng)
        elif config.crossover == Crossover.SINGLE:
            single_point_crossover(child, partner, rng)
        else:
            raise RuntimeError(f"The code should never reach here: unknown crossover {config.crossover!r}")
