"""
Visualization utilities for the genetic algorithm.

Plots the convergence recorded in the evolve log.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

import matplotlib.pyplot as plt

from .data_models import LogLine


def plot_convergence(
    log: List[LogLine],
    output_path: Optional[Union[str, Path]] = None,
    figsize: Tuple[int, int] = (8, 5),
    log_scale: bool = False
):
    """
    Plot best and current-best fitness against the generation number.

    Args:
        log: Log lines from SGA.get_log()
        output_path: If given, save the figure there and close it
        figsize: Figure size (width, height)
        log_scale: Use a logarithmic fitness axis

    Returns:
        The matplotlib Figure

    Raises:
        ValueError: If the log is empty
    """
    if not log:
        raise ValueError("Cannot plot an empty log; set a verbosity > 0 before evolving")

    gens = [line.gen for line in log]

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(gens, [line.best for line in log], label="Best", color="tab:blue", linewidth=2)
    ax.plot(gens, [line.cur_best for line in log], label="Current best",
            color="tab:orange", linestyle="--")

    ax.set_xlabel("Generation")
    ax.set_ylabel("Fitness")
    ax.set_title("Genetic Algorithm convergence")
    if log_scale:
        ax.set_yscale("log")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()

    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150)
        plt.close(fig)

    return fig
