"""
Mutation operators for the genetic algorithm.

Implements gaussian, uniform and polynomial mutation. Each gene of each
offspring mutates independently with probability m. Mutated genes always
stay within the box bounds, and the trailing integer genes are rounded
back to integers.
"""

import math
from typing import Tuple

import numpy as np

from .config import Mutation, SGAConfig


def uniform_mutation(lb: float, ub: float, rng: np.random.Generator) -> float:
    """Draw a new gene value uniformly in [lb, ub)."""
    return lb + rng.random() * (ub - lb)


def gaussian_mutation(
    x: float,
    lb: float,
    ub: float,
    width: float,
    rng: np.random.Generator
) -> float:
    """
    Add zero-mean gaussian noise to a gene and clip it to the bounds.

    Args:
        x: Current gene value
        lb: Lower bound
        ub: Upper bound
        width: Standard deviation relative to the bounds width (ub - lb)
        rng: Random number generator
    """
    value = x + rng.normal(0.0, width * (ub - lb))
    return min(max(value, lb), ub)


def polynomial_mutation(
    x: float,
    lb: float,
    ub: float,
    eta_m: float,
    rng: np.random.Generator
) -> float:
    """
    Perturb a gene with polynomial mutation (Deb & Goyal, 1996).

    Args:
        x: Current gene value
        lb: Lower bound
        ub: Upper bound
        eta_m: Distribution index; larger values keep the gene closer to x
        rng: Random number generator

    Returns:
        Mutated value, clipped to [lb, ub]
    """
    rand01 = rng.random()
    if ub == lb:
        return lb

    delta1 = (x - lb) / (ub - lb)
    delta2 = (ub - x) / (ub - lb)
    mut_pow = 1.0 / (eta_m + 1.0)

    if rand01 < 0.5:
        xy = 1.0 - delta1
        val = 2.0 * rand01 + (1.0 - 2.0 * rand01) * xy ** (eta_m + 1.0)
        deltaq = val ** mut_pow - 1.0
    else:
        xy = 1.0 - delta2
        val = 2.0 * (1.0 - rand01) + 2.0 * (rand01 - 0.5) * xy ** (eta_m + 1.0)
        deltaq = 1.0 - val ** mut_pow

    value = x + deltaq * (ub - lb)
    return min(max(value, lb), ub)


def integer_bounds(lb: float, ub: float) -> Tuple[int, int]:
    """Smallest and largest integers inside [lb, ub]."""
    return math.ceil(lb), math.floor(ub)


def round_to_integer(value: float, lb: float, ub: float) -> float:
    """Round a gene to the nearest integer inside [lb, ub]."""
    low, high = integer_bounds(lb, ub)
    return float(min(max(round(value), low), high))


def mutate_gene(
    x: float,
    lb: float,
    ub: float,
    is_integer: bool,
    config: SGAConfig,
    rng: np.random.Generator
) -> float:
    """
    Mutate one gene with the configured strategy.

    Raises:
        RuntimeError: If the strategy has no implementation
    """
    if config.mutation == Mutation.UNIFORM:
        if is_integer:
            low, high = integer_bounds(lb, ub)
            return float(rng.integers(low, high, endpoint=True))
        return uniform_mutation(lb, ub, rng)
    elif config.mutation == Mutation.GAUSSIAN:
        value = gaussian_mutation(x, lb, ub, config.param_m, rng)
    elif config.mutation == Mutation.POLYNOMIAL:
        value = polynomial_mutation(x, lb, ub, config.param_m, rng)
    else:
        raise RuntimeError(f"The code should never reach here: unknown mutation {config.mutation!r}")

    if is_integer:
        return round_to_integer(value, lb, ub)
    return value


def perform_mutation(
    X: np.ndarray,
    bounds: Tuple[np.ndarray, np.ndarray],
    config: SGAConfig,
    rng: np.random.Generator
) -> None:
    """
    Mutate the offspring in place.

    Every gene of every individual consumes one Bernoulli(m) draw deciding
    whether it mutates. The last config.int_dim genes are integers.

    Args:
        X: Offspring decision vectors, shape (N, D); modified in place
        bounds: (lower, upper) box bounds
        config: Algorithm configuration
        rng: Random number generator
    """
    lb, ub = bounds
    dim = X.shape[1]
    dimc = dim - config.int_dim

    for i in range(X.shape[0]):
        for j in range(dim):
            if rng.random() < config.m:
                X[i, j] = mutate_gene(X[i, j], lb[j], ub[j], j >= dimc, config, rng)
