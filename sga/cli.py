"""
CLI module for the genetic algorithm.

Handles run configuration loading, validation, and execution.
"""

from typing import Dict, Any
from pathlib import Path

from .config import ConfigurationError, SGAConfig, load_yaml_mapping


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    try:
        return load_yaml_mapping(config_path)
    except ConfigurationError as e:
        raise ConfigValidationError(str(e))


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ConfigValidationError("Run configuration must be a dictionary")

    for field in ['problem', 'population', 'algorithm']:
        if field not in config:
            raise ConfigValidationError(f"Missing required field: '{field}'")
        if not isinstance(config[field], dict):
            raise ConfigValidationError(f"'{field}' must be a dictionary")

    # Problem section
    if 'name' not in config['problem']:
        raise ConfigValidationError("Missing required field: 'problem.name'")

    # Population section
    if 'size' not in config['population']:
        raise ConfigValidationError("Missing required field: 'population.size'")

    size = config['population']['size']
    if not isinstance(size, int) or size < 2:
        raise ConfigValidationError(
            f"'population.size' must be an integer of at least 2, got: {size}"
        )

    # Algorithm section is validated by SGAConfig itself
    try:
        SGAConfig.from_dict(config['algorithm'])
    except ConfigurationError as e:
        raise ConfigValidationError(f"Invalid 'algorithm' section: {e}")

    for field in ['seed', 'verbosity']:
        if field in config:
            value = config[field]
            if not isinstance(value, int) or value < 0:
                raise ConfigValidationError(
                    f"'{field}' must be a non-negative integer, got: {value}"
                )

    # Output section (optional)
    if 'output' in config:
        if not isinstance(config['output'], dict):
            raise ConfigValidationError("'output' must be a dictionary")
        if 'root' not in config['output']:
            raise ConfigValidationError("Missing required field: 'output.root'")


def run_from_config(config_path: str):
    """
    Load run configuration, evolve a population, and report the result.

    This is the main entry point called by sga_cli.py.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Tuple of (algorithm, evolved population)

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
        FileExistsError: If the output directory exists and overwrite is off
    """
    from .algorithm import SGA
    from .data_models import Population
    from .problems import make_problem

    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print("Validating configuration...")
    validate_run_config(config)

    problem_config = dict(config['problem'])
    problem_name = problem_config.pop('name')
    try:
        problem = make_problem(problem_name, **problem_config)
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(f"Invalid 'problem' section: {e}")

    pop_config = config['population']
    pop = Population(problem, size=pop_config['size'], seed=pop_config.get('seed'))

    algo = SGA.from_config(SGAConfig.from_dict(config['algorithm']), seed=config.get('seed'))
    algo.set_verbosity(config.get('verbosity', 0))

    # Check the output location before spending time evolving
    output_root = None
    overwrite = False
    if 'output' in config:
        output_root = Path(config['output']['root'])
        overwrite = config['output'].get('overwrite', False)
        if output_root.exists() and not overwrite:
            raise FileExistsError(
                f"Output directory already exists: {output_root}\n"
                f"Set 'output.overwrite: true' in config to overwrite"
            )

    print("=" * 70)
    print(f"{algo.get_name().upper()} on {problem.get_name()} (dimension {problem.get_nx()})")
    print("=" * 70)
    print(algo.get_extra_info())
    print()

    initial_best = float(pop.champion_f[0])
    pop = algo.evolve(pop)

    print()
    print("=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Population size: {pop.size()}")
    print(f"Fitness evaluations: {problem.get_fevals()}")
    print(f"Initial best fitness: {initial_best:.6g}")
    print(f"Champion fitness: {pop.champion_f[0]:.6g}")
    print(f"Champion: {pop.champion_x.tolist()}")

    if output_root is not None:
        _write_outputs(algo, pop, output_root, overwrite, config['output'].get('plot', False))

    return algo, pop


def _write_outputs(algo, pop, output_root: Path, overwrite: bool, plot: bool) -> None:
    """Write population, log, algorithm state and optional plot under output_root."""
    from .io_utils import save_algorithm, save_log_to_csv, save_population_to_csv

    output_root.mkdir(parents=True, exist_ok=overwrite)

    save_population_to_csv(pop, output_root / 'population.csv', overwrite=overwrite)
    save_algorithm(algo, output_root / 'algorithm.yaml', overwrite=overwrite)
    log = algo.get_log()
    if log:
        save_log_to_csv(log, output_root / 'log.csv', overwrite=overwrite)
        if plot:
            from .visualization_utils import plot_convergence
            plot_convergence(log, output_root / 'convergence.png')

    print(f"Output directory: {output_root}")
    print(f"Files created: {len(list(output_root.iterdir()))}")
