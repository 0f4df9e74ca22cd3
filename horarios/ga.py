# horarios/ga.py
from dataclasses import dataclass, field
import logging
import random
from typing import Dict, List, Optional

from .config import GAConfig
from .data_loader import SchoolCatalog
from .evaluation import FitnessEvaluator
from .initial_population import build_initial_population
from .model import Timetable
from .operators import group_crossover, mutate, repair_teacher_overload
from .report import LoggingReporter, ProgressReporter
from .selection import TournamentSelection, best_of

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    best: Timetable
    generations: int
    converged: bool
    history: List[Dict] = field(default_factory=list)
    snapshots: List[Dict] = field(default_factory=list)
    attempt: int = 1


class GeneticSolver:
    def __init__(
        self,
        catalog: SchoolCatalog,
        cfg: GAConfig,
        rng: Optional[random.Random] = None,
        evaluator: Optional[FitnessEvaluator] = None,
        selector: Optional[TournamentSelection] = None,
        reporter: Optional[ProgressReporter] = None,
    ):
        self.catalog = catalog
        self.cfg = cfg
        self.rng = rng or random.Random(cfg.seed)
        self.evaluator = evaluator or FitnessEvaluator.from_config(catalog, cfg)
        self.selector = selector or TournamentSelection(cfg.tournament_size, self.rng)
        self.reporter = reporter or LoggingReporter()

    def initialize(self) -> List[Timetable]:
        population = build_initial_population(
            self.catalog, self.cfg, self.cfg.population_size, self.rng
        )
        self.evaluator.evaluate_population(population)
        return population

    def breed(self, p1: Timetable, p2: Timetable) -> Timetable:
        child = group_crossover(p1, p2, self.catalog, self.rng)
        child = mutate(child, self.cfg.mutation_rate, self.catalog, self.cfg, self.rng)
        if self.cfg.repair_enabled:
            child = repair_teacher_overload(child, self.cfg.repair_max_teacher_lessons_per_day)
        return child

    def create_new_generation(self, population: List[Timetable]) -> List[Timetable]:
        # Elitismo: el mejor pasa intacto
        new_pop: List[Timetable] = [best_of(population)]
        while len(new_pop) < len(population):
            p1, p2 = self.selector.select_parents(population)
            new_pop.append(self.breed(p1, p2))
        return new_pop

    def _snapshot(self, best: Timetable, gen: int) -> Dict:
        result = self.evaluator.evaluate(best)
        return {
            "generation": gen,
            "fitness": best.fitness,
            "conflicts": [
                {"conflictType": ct.name, "number": n} for ct, n in result.conflicts.items()
            ],
        }

    def evolve(self, attempt: int = 1) -> RunResult:
        population = self.initialize()
        best = best_of(population)
        history: List[Dict] = [self._history_entry(0, population, best)]
        snapshots: List[Dict] = []
        self.reporter.generation(0, best.fitness)

        gen = 0
        converged = self.evaluator.is_solution(best)
        while not converged and gen < self.cfg.max_generations:
            gen += 1
            population = self.create_new_generation(population)
            self.evaluator.evaluate_population(population)
            previous = best
            best = best_of(population)
            if best is not previous:
                best.generation = gen

            history.append(self._history_entry(gen, population, best))
            if gen % self.cfg.snapshot_every == 0:
                snapshots.append(self._snapshot(best, gen))
            converged = self.evaluator.is_solution(best)
            if gen % self.cfg.progress_every == 0:
                self.reporter.generation(gen, best.fitness)

        if converged:
            logger.info("Intento %d: solución encontrada en la generación %d", attempt, gen)
        else:
            logger.info(
                "Intento %d: sin solución tras %d generaciones (mejor fitness %.1f)",
                attempt, gen, best.fitness,
            )
        self.reporter.finished(best, gen, converged)
        return RunResult(best, gen, converged, history, snapshots, attempt)

    def solve(self) -> RunResult:
        """Repite corridas independientes hasta converger o agotar `max_attempts`."""
        best_run: Optional[RunResult] = None
        for attempt in range(1, self.cfg.max_attempts + 1):
            logger.info("Intento #%d", attempt)
            run = self.evolve(attempt)
            if best_run is None or run.best.fitness > best_run.best.fitness:
                best_run = run
            if run.converged:
                break
        return best_run

    @staticmethod
    def _history_entry(gen: int, population: List[Timetable], best: Timetable) -> Dict:
        avg = sum(t.fitness for t in population) / len(population)
        return {"gen": gen, "best_fitness": best.fitness, "avg_fitness": avg}
