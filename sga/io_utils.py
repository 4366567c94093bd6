"""
I/O utilities for the genetic algorithm.

Handles algorithm persistence (YAML), and CSV export of populations and
evolve logs.
"""

import csv
from datetime import datetime
from pathlib import Path
from typing import List, Union

import yaml

from .algorithm import SGA
from .data_models import LogLine, Population


def save_algorithm(
    algo: SGA,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save an algorithm, including its generator state, to a YAML file.

    Args:
        algo: Algorithm to save
        output_path: Path for output YAML
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = algo.to_dict()
    data["saved_at"] = datetime.now().isoformat()

    with open(output_path, 'w') as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    return output_path


def load_algorithm(input_path: Union[str, Path]) -> SGA:
    """
    Load an algorithm saved with save_algorithm().

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file does not describe a saved algorithm
    """
    input_path = Path(input_path)

    if not input_path.exists():
        raise FileNotFoundError(f"Algorithm file not found: {input_path}")

    with open(input_path, 'r') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or "config" not in data or "seed" not in data:
        raise ValueError(f"Invalid algorithm file: {input_path}")

    data.pop("saved_at", None)
    return SGA.from_dict(data)


def save_population_to_csv(
    pop: Population,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save a population to CSV file.

    CSV format:
        x0,x1,...,f0
        0.12,-1.5,...,2.26

    Args:
        pop: Population to save
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    X = pop.get_x()
    F = pop.get_f()

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow([f"x{j}" for j in range(X.shape[1])] + [f"f{j}" for j in range(F.shape[1])])
        for x, fit in zip(X, F):
            writer.writerow([repr(float(v)) for v in x] + [repr(float(v)) for v in fit])

    return output_path


def save_log_to_csv(
    log: List[LogLine],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save an evolve log to CSV file.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Log file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=['gen', 'fevals', 'best', 'cur_best'])
        writer.writeheader()
        for line in log:
            writer.writerow(line.to_dict())

    return output_path
