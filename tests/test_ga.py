import random
import unittest

from horarios.config import GAConfig
from horarios.data_loader import SchoolCatalog, default_catalog
from horarios.ga import GeneticSolver
from horarios.model import Subject, Teacher
from horarios.report import ProgressReporter
from horarios.selection import best_of


class RecordingReporter(ProgressReporter):
    def __init__(self):
        self.generations = []
        self.finished_runs = 0

    def generation(self, number, best_fitness):
        self.generations.append(number)

    def finished(self, best, generations, converged):
        self.finished_runs += 1


def one_slot_catalog(math_quota):
    full = default_catalog(GAConfig())
    return SchoolCatalog(full.teachers, full.classrooms[:1], full.groups[:1], {Subject.MATH: math_quota})


def one_slot_config(**overrides):
    data = {"working_days": 1, "max_periods_per_day": 1, "population_size": 6, "seed": 3}
    data.update(overrides)
    return GAConfig.from_dict(data).validate()


class GenerationTests(unittest.TestCase):
    def setUp(self):
        self.cfg = GAConfig.from_dict({"population_size": 12, "max_generations": 8, "seed": 11})
        self.catalog = default_catalog(self.cfg)

    def test_elitism(self):
        solver = GeneticSolver(self.catalog, self.cfg, reporter=RecordingReporter())
        population = solver.initialize()
        best = best_of(population)
        new_pop = solver.create_new_generation(population)
        self.assertEqual(len(new_pop), len(population))
        self.assertIs(new_pop[0], best)

    def test_best_fitness_never_decreases(self):
        result = GeneticSolver(self.catalog, self.cfg, reporter=RecordingReporter()).evolve()
        best = [h["best_fitness"] for h in result.history]
        self.assertEqual(len(best), result.generations + 1)
        self.assertEqual(best, sorted(best))
        self.assertLessEqual(result.best.fitness, self.cfg.base_fitness)
        self.assertEqual([h["gen"] for h in result.history], list(range(result.generations + 1)))

    def test_same_seed_same_run(self):
        a = GeneticSolver(self.catalog, self.cfg, rng=random.Random(5), reporter=RecordingReporter()).evolve()
        b = GeneticSolver(self.catalog, self.cfg, rng=random.Random(5), reporter=RecordingReporter()).evolve()
        self.assertEqual(a.history, b.history)
        self.assertEqual(a.best.lessons, b.best.lessons)


class TerminationTests(unittest.TestCase):
    def test_trivial_catalog_converges_immediately(self):
        cfg = one_slot_config(max_generations=50)
        reporter = RecordingReporter()
        result = GeneticSolver(one_slot_catalog(1), cfg, reporter=reporter).solve()
        self.assertTrue(result.converged)
        self.assertEqual(result.generations, 0)
        self.assertEqual(result.best.fitness, cfg.base_fitness)
        self.assertEqual(len(result.history), 1)
        self.assertEqual(reporter.finished_runs, 1)

    def test_unsolvable_catalog_uses_all_attempts(self):
        # dos lecciones de matemáticas en un único periodo siempre chocan
        cfg = one_slot_config(max_generations=3, max_attempts=3)
        reporter = RecordingReporter()
        result = GeneticSolver(one_slot_catalog(2), cfg, reporter=reporter).solve()
        self.assertFalse(result.converged)
        self.assertEqual(reporter.finished_runs, 3)
        self.assertEqual(result.generations, 3)
        self.assertIn(result.attempt, (1, 2, 3))
        self.assertLess(result.best.fitness, cfg.base_fitness)

    def test_snapshots_and_progress_cadence(self):
        cfg = one_slot_config(max_generations=10, snapshot_every=5, progress_every=5)
        reporter = RecordingReporter()
        result = GeneticSolver(one_slot_catalog(2), cfg, reporter=reporter).evolve()
        self.assertEqual([s["generation"] for s in result.snapshots], [5, 10])
        self.assertEqual(reporter.generations, [0, 5, 10])
        kinds = {c["conflictType"] for c in result.snapshots[0]["conflicts"]}
        self.assertIn("GROUP_COLLISIONS", kinds)


class EndToEndTests(unittest.TestCase):
    def test_five_teacher_catalog(self):
        cfg = GAConfig.from_dict({"population_size": 50, "max_generations": 40, "seed": 21})
        base = default_catalog(cfg)
        catalog = SchoolCatalog(
            base.teachers + (Teacher(5, "Ms. Lee", Subject.MATH),),
            base.classrooms, base.groups, base.weekly_lessons,
        ).validate()
        result = GeneticSolver(catalog, cfg, reporter=RecordingReporter()).solve()
        best = [h["best_fitness"] for h in result.history]
        self.assertEqual(best, sorted(best))
        self.assertEqual(result.best.fitness, best[-1])
        self.assertTrue(0 <= result.best.generation <= result.generations)

    def test_default_catalog_improves(self):
        cfg = GAConfig.from_dict({
            "population_size": 30,
            "max_generations": 25,
            "seed": 7,
            "repair_max_teacher_lessons_per_day": 4,
        })
        result = GeneticSolver(default_catalog(cfg), cfg, reporter=RecordingReporter()).solve()
        first, last = result.history[0]["best_fitness"], result.history[-1]["best_fitness"]
        self.assertGreaterEqual(last, first)
        self.assertEqual(result.best.fitness, last)
        self.assertLessEqual(result.best.generation, result.generations)


if __name__ == "__main__":
    unittest.main()
