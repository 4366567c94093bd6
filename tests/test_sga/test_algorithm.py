"""
Tests for the SGA evolve loop and algorithm interface.
"""

import io
import pickle
import unittest
from contextlib import redirect_stdout

import numpy as np

from sga import SGA, SGAConfig, ConfigurationError, Population
from sga.problems import Sphere, NoisySphere


class TwoObjectives(Sphere):
    """Sphere with a second objective."""

    def get_nf(self):
        return 2

    def _evaluate(self, x):
        return [float(np.sum(x * x)), float(np.sum(x))]


class ConstrainedSphere(Sphere):
    """Sphere declaring one constraint."""

    def get_nc(self):
        return 1


class TestConstruction(unittest.TestCase):
    """Test construction and the algorithm interface."""

    def test_invalid_parameters(self):
        """Test invalid parameters fail at construction."""
        with self.assertRaises(ConfigurationError):
            SGA(cr=1.5)
        with self.assertRaises(ConfigurationError):
            SGA(eta_c=0.5)
        with self.assertRaises(ConfigurationError):
            SGA(selection="roulette")
        with self.assertRaises(ConfigurationError):
            SGA(mutation="polynomial", param_m=0.5)

    def test_from_config(self):
        """Test construction from a configuration object."""
        config = SGAConfig(gen=3, crossover="sbx", selection="truncated", param_s=2)
        algo = SGA.from_config(config, seed=4)

        self.assertEqual(algo.config, config)
        self.assertEqual(algo.get_seed(), 4)

    def test_name(self):
        self.assertEqual(SGA().get_name(), "Genetic Algorithm")

    def test_seed(self):
        """Test seed accessors."""
        algo = SGA(seed=32)
        self.assertEqual(algo.get_seed(), 32)
        algo.set_seed(7)
        self.assertEqual(algo.get_seed(), 7)
        self.assertIsInstance(SGA().get_seed(), int)

    def test_verbosity(self):
        """Test verbosity accessors."""
        algo = SGA()
        self.assertEqual(algo.get_verbosity(), 0)
        algo.set_verbosity(10)
        self.assertEqual(algo.get_verbosity(), 10)
        with self.assertRaises(ValueError):
            algo.set_verbosity(-1)

    def test_extra_info(self):
        """Test the configuration dump mentions the active parameters."""
        info = SGA(gen=10, elitism=2, param_s=3, seed=5).get_extra_info()
        self.assertIn("Number of generations: 10", info)
        self.assertIn("Elitism: 2", info)
        self.assertIn("Type: exponential", info)
        self.assertIn("Width: 0.5", info)
        self.assertIn("Tournament size: 3", info)
        self.assertIn("Seed: 5", info)
        self.assertNotIn("Distribution index", info)

        info = SGA(crossover="sbx", mutation="polynomial", param_m=20.0,
                   selection="truncated", int_dim=2).get_extra_info()
        self.assertEqual(info.count("Distribution index"), 2)
        self.assertIn("Truncation size: 5", info)
        self.assertIn("Size of the integer part: 2", info)

        self.assertIn("Genetic Algorithm", repr(SGA()))


class TestEvolvePreamble(unittest.TestCase):
    """Test evolve rejects incompatible problems and populations without touching them."""

    def assertRejected(self, algo, pop):
        X, F = pop.get_x(), pop.get_f()
        fevals = pop.get_problem().get_fevals()
        with self.assertRaises(ValueError):
            algo.evolve(pop)
        np.testing.assert_array_equal(pop.get_x(), X)
        np.testing.assert_array_equal(pop.get_f(), F)
        self.assertEqual(pop.get_problem().get_fevals(), fevals)

    def test_multi_objective(self):
        self.assertRejected(SGA(elitism=1, param_s=1), Population(TwoObjectives(dim=2), size=4, seed=0))

    def test_constrained(self):
        self.assertRejected(SGA(elitism=1, param_s=1), Population(ConstrainedSphere(dim=2), size=4, seed=0))

    def test_population_too_small(self):
        self.assertRejected(SGA(elitism=1, param_s=1), Population(Sphere(dim=2), size=1, seed=0))

    def test_elitism_too_large(self):
        self.assertRejected(SGA(elitism=5, param_s=1), Population(Sphere(dim=2), size=4, seed=0))

    def test_selection_size_too_large(self):
        self.assertRejected(SGA(elitism=1, param_s=5), Population(Sphere(dim=2), size=4, seed=0))

    def test_integer_dimension_too_large(self):
        self.assertRejected(SGA(elitism=1, param_s=1, int_dim=3), Population(Sphere(dim=2), size=4, seed=0))

    def test_integer_dimension_mismatch(self):
        """Test int_dim must agree with the problem's integer dimension."""
        self.assertRejected(
            SGA(gen=3, m=0.0, elitism=1, param_s=2, int_dim=2, seed=1),
            Population(Sphere(dim=4), size=6, seed=0)
        )
        self.assertRejected(
            SGA(gen=3, elitism=1, param_s=2, int_dim=1, seed=1),
            Population(Sphere(dim=4, int_dim=2), size=6, seed=0)
        )

    def test_sbx_odd_population(self):
        """Test SBX with an odd population fails before any generation runs."""
        self.assertRejected(
            SGA(gen=5, crossover="sbx", elitism=1, param_s=2),
            Population(Sphere(dim=2), size=5, seed=0)
        )

    def test_preamble_checked_with_zero_generations(self):
        """Test gen = 0 still validates the problem."""
        self.assertRejected(SGA(gen=0, elitism=1, param_s=1), Population(TwoObjectives(dim=2), size=4, seed=0))


class TestEvolve(unittest.TestCase):
    """Test properties of evolved populations."""

    OPERATORS = [
        (crossover, mutation, param_m)
        for crossover in ["exponential", "binomial", "single", "sbx"]
        for mutation, param_m in [("gaussian", 0.3), ("uniform", 0.3), ("polynomial", 20.0)]
    ]

    def test_zero_generations_is_identity(self):
        """Test gen = 0 returns the population unchanged."""
        pop = Population(Sphere(dim=3), size=6, seed=0)
        X, F = pop.get_x(), pop.get_f()
        fevals = pop.get_problem().get_fevals()

        result = SGA(gen=0, elitism=1, param_s=2, seed=1).evolve(pop)

        self.assertIs(result, pop)
        np.testing.assert_array_equal(result.get_x(), X)
        np.testing.assert_array_equal(result.get_f(), F)
        self.assertEqual(pop.get_problem().get_fevals(), fevals)

    def test_bounds_integers_and_size(self):
        """Test every operator combination keeps bounds, integer genes and size."""
        for selection in ["tournament", "truncated"]:
            for crossover, mutation, param_m in self.OPERATORS:
                with self.subTest(selection=selection, crossover=crossover, mutation=mutation):
                    problem = Sphere(dim=5, int_dim=2, lb=-3.0, ub=3.0)
                    pop = Population(problem, size=10, seed=1)
                    algo = SGA(gen=15, cr=0.9, m=0.3, param_m=param_m, elitism=2, param_s=3,
                               mutation=mutation, selection=selection, crossover=crossover,
                               int_dim=2, seed=11)

                    pop = algo.evolve(pop)
                    X = pop.get_x()

                    self.assertEqual(pop.size(), 10)
                    self.assertTrue(np.all(X >= -3.0) and np.all(X <= 3.0))
                    np.testing.assert_array_equal(X[:, 3:], np.round(X[:, 3:]))
                    # Recorded fitness matches the decision vectors
                    for x, f in zip(X, pop.get_f()):
                        self.assertAlmostEqual(f[0], float(np.sum(x * x)))

    def test_determinism(self):
        """Test equal seeds and inputs give bit-identical outputs."""
        for crossover, mutation, param_m in self.OPERATORS:
            with self.subTest(crossover=crossover, mutation=mutation):
                results = []
                for _ in range(2):
                    pop = Population(Sphere(dim=4, int_dim=1), size=8, seed=3)
                    algo = SGA(gen=10, m=0.2, param_m=param_m, elitism=1, param_s=2,
                               mutation=mutation, crossover=crossover, int_dim=1, seed=99)
                    results.append(algo.evolve(pop))

                np.testing.assert_array_equal(results[0].get_x(), results[1].get_x())
                np.testing.assert_array_equal(results[0].get_f(), results[1].get_f())

    def test_different_seeds_differ(self):
        """Test the seed drives the run."""
        pops = []
        for seed in (1, 2):
            pop = Population(Sphere(dim=4), size=8, seed=3)
            pops.append(SGA(gen=5, m=0.2, elitism=1, param_s=2, seed=seed).evolve(pop))

        self.assertFalse(np.array_equal(pops[0].get_x(), pops[1].get_x()))

    def test_elitism_keeps_best_parents(self):
        """Test the best parents survive unchanged in the first slots."""
        pop = Population(Sphere(dim=3), size=10, seed=5)
        X_old, F_old = pop.get_x(), pop.get_f()
        order = np.argsort(F_old[:, 0], kind="stable")

        pop = SGA(gen=1, m=0.5, elitism=3, param_s=2, seed=8).evolve(pop)

        np.testing.assert_array_equal(pop.get_f()[:3, 0], F_old[order[:3], 0])
        np.testing.assert_array_equal(pop.get_x()[:3], X_old[order[:3]])

    def test_incumbent_never_worsens(self):
        """Test truncated/single/uniform with m = 0 never loses the best individual."""
        pop = Population(Sphere(dim=2, lb=0.0, ub=1.0), size=4, seed=2)
        best_before = pop.get_f()[:, 0].min()

        pop = SGA(gen=1, elitism=1, param_s=2, selection="truncated", crossover="single",
                  mutation="uniform", m=0.0, seed=3).evolve(pop)

        self.assertEqual(pop.size(), 4)
        self.assertLessEqual(pop.get_f()[:, 0].min(), best_before)

    def test_best_monotone_over_generations(self):
        """Test with elitism the best fitness in the population never worsens."""
        pop = Population(Sphere(dim=4), size=12, seed=0)
        algo = SGA(gen=1, elitism=1, param_s=3, crossover="sbx", mutation="polynomial",
                   param_m=20.0, m=0.25, seed=6)
        best = pop.get_f()[:, 0].min()
        for _ in range(20):
            pop = algo.evolve(pop)
            current = pop.get_f()[:, 0].min()
            self.assertLessEqual(current, best)
            best = current

    def test_optimizes(self):
        """Test a longer run improves considerably on the sphere."""
        pop = Population(Sphere(dim=5), size=20, seed=1)
        initial = pop.champion_f[0]

        pop = SGA(gen=150, elitism=2, param_s=3, crossover="sbx", mutation="polynomial",
                  param_m=20.0, m=0.2, seed=42).evolve(pop)

        self.assertLess(pop.champion_f[0], initial / 10.0)

    def test_fitness_evaluations(self):
        """Test one evaluation per offspring per generation."""
        problem = Sphere(dim=3)
        pop = Population(problem, size=6, seed=0)
        SGA(gen=4, elitism=1, param_s=2, seed=1).evolve(pop)

        self.assertEqual(problem.get_fevals(), 6 + 4 * 6)

    def test_stochastic_problem_reseeded(self):
        """Test stochastic problems are reseeded and re-evaluated every generation."""
        problem = NoisySphere(dim=3, noise=0.01, seed=0)
        pop = Population(problem, size=6, seed=0)

        SGA(gen=3, elitism=1, param_s=2, seed=1).evolve(pop)

        self.assertEqual(problem.get_fevals(), 6 + 3 * (6 + 6))
        self.assertNotEqual(problem.get_seed(), 0)

    def test_stochastic_determinism(self):
        """Test runs on stochastic problems are reproducible."""
        results = []
        for _ in range(2):
            pop = Population(NoisySphere(dim=3, noise=0.1, seed=0), size=6, seed=0)
            results.append(SGA(gen=5, elitism=1, param_s=2, seed=1).evolve(pop).get_f())

        np.testing.assert_array_equal(results[0], results[1])


class TestVerbosityAndLog(unittest.TestCase):
    """Test screen output and the evolve log."""

    def evolve_quietly(self, algo, pop):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            algo.evolve(pop)
        return buffer.getvalue()

    def test_silent_by_default(self):
        """Test verbosity 0 prints nothing and logs nothing."""
        algo = SGA(gen=5, elitism=1, param_s=2, seed=1)
        output = self.evolve_quietly(algo, Population(Sphere(dim=2), size=4, seed=0))

        self.assertEqual(output, "")
        self.assertEqual(algo.get_log(), [])

    def test_log_every_n_generations(self):
        """Test one line every verbosity generations."""
        algo = SGA(gen=7, elitism=1, param_s=2, seed=1)
        algo.set_verbosity(3)
        output = self.evolve_quietly(algo, Population(Sphere(dim=2), size=4, seed=0))

        log = algo.get_log()
        self.assertEqual([line.gen for line in log], [1, 4, 7])
        self.assertEqual([line.fevals for line in log], [4, 16, 28])
        self.assertIn("Gen:", output)
        self.assertIn("Current Best:", output)
        self.assertEqual(len(output.strip().splitlines()), 4)

    def test_log_values(self):
        """Test best is the champion and never above the current best."""
        algo = SGA(gen=10, elitism=1, param_s=2, seed=1)
        algo.set_verbosity(1)
        pop = Population(Sphere(dim=2), size=4, seed=0)
        self.evolve_quietly(algo, pop)

        log = algo.get_log()
        self.assertEqual(len(log), 10)
        for line in log:
            self.assertLessEqual(line.best, line.cur_best)
        self.assertEqual(log[-1].best, pop.champion_f[0])

    def test_header_repeats(self):
        """Test the header is printed again every 50 lines."""
        algo = SGA(gen=51, elitism=1, param_s=2, seed=1)
        algo.set_verbosity(1)
        output = self.evolve_quietly(algo, Population(Sphere(dim=2), size=4, seed=0))

        self.assertEqual(output.count("Gen:"), 2)

    def test_log_cleared_between_calls(self):
        """Test each evolve call starts a new log."""
        algo = SGA(gen=2, elitism=1, param_s=2, seed=1)
        algo.set_verbosity(1)
        pop = Population(Sphere(dim=2), size=4, seed=0)
        self.evolve_quietly(algo, pop)
        self.evolve_quietly(algo, pop)

        self.assertEqual([line.gen for line in algo.get_log()], [1, 2])


class TestPersistence(unittest.TestCase):
    """Test capturing and restoring the algorithm state."""

    def test_dict_roundtrip_continues_stream(self):
        """Test a restored algorithm continues the same random stream."""
        algo = SGA(gen=3, m=0.2, elitism=1, param_s=2, crossover="binomial", seed=21)
        algo.set_verbosity(2)
        algo.evolve(Population(Sphere(dim=3), size=6, seed=0))

        restored = SGA.from_dict(algo.to_dict())

        self.assertEqual(restored.config, algo.config)
        self.assertEqual(restored.get_seed(), 21)
        self.assertEqual(restored.get_verbosity(), 2)

        pop1 = Population(Sphere(dim=3), size=6, seed=4)
        pop2 = Population(Sphere(dim=3), size=6, seed=4)
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            algo.evolve(pop1)
            restored.evolve(pop2)

        np.testing.assert_array_equal(pop1.get_x(), pop2.get_x())

    def test_set_seed_restarts_stream(self):
        """Test resetting the seed reproduces a run."""
        algo = SGA(gen=3, elitism=1, param_s=2, seed=21)
        first = algo.evolve(Population(Sphere(dim=3), size=6, seed=0)).get_x()
        algo.set_seed(21)
        second = algo.evolve(Population(Sphere(dim=3), size=6, seed=0)).get_x()

        np.testing.assert_array_equal(first, second)

    def test_pickle(self):
        """Test pickling preserves configuration and generator state."""
        algo = SGA(gen=2, elitism=1, param_s=2, crossover="sbx", seed=5)
        restored = pickle.loads(pickle.dumps(algo))

        pop1 = Population(Sphere(dim=2), size=4, seed=0)
        pop2 = Population(Sphere(dim=2), size=4, seed=0)
        np.testing.assert_array_equal(algo.evolve(pop1).get_x(), restored.evolve(pop2).get_x())


if __name__ == '__main__':
    unittest.main()
