# horarios/evaluation.py
from dataclasses import dataclass, field
import logging
from typing import Dict, List, Sequence, Set, Tuple

from .config import GAConfig
from .data_loader import SchoolCatalog
from .model import Timetable
from .rules import ConflictRule, ConflictType, default_rules

logger = logging.getLogger(__name__)

WeightedRule = Tuple[ConflictRule, float]


@dataclass
class EvaluationResult:
    fitness: float
    conflicts: Dict[ConflictType, int]
    penalties: Dict[ConflictType, float]
    # Índices de lecciones que violan alguna regla (solo diagnóstico)
    conflicted: Set[int] = field(default_factory=set)

    @property
    def total_conflicts(self) -> int:
        return sum(self.conflicts.values())

    @property
    def penalty(self) -> float:
        return sum(self.penalties.values())

    def as_records(self) -> List[Dict[str, object]]:
        return [
            {"conflictType": ct.name, "number": n, "penalty": self.penalties[ct]}
            for ct, n in self.conflicts.items()
        ]


def build_weighted_rules(catalog: SchoolCatalog, cfg: GAConfig) -> List[WeightedRule]:
    """Empareja cada regla con su peso; las reglas sin peso no se registran."""
    weighted: List[WeightedRule] = []
    for rule in default_rules(catalog, cfg):
        weight = cfg.rule_weights.get(rule.conflict_type.key)
        if weight is None:
            logger.debug("Regla %s deshabilitada", rule.conflict_type.key)
            continue
        weighted.append((rule, float(weight)))
    return weighted


class FitnessEvaluator:
    """
    fitness = base - sum(conflictos(regla) * peso(regla)).

    Un horario con fitness >= base no tiene ninguna violación medida.
    """

    def __init__(self, rules: Sequence[WeightedRule], base_fitness: float = 2000.0):
        self.rules = list(rules)
        self.base_fitness = base_fitness

    @classmethod
    def from_config(cls, catalog: SchoolCatalog, cfg: GAConfig) -> "FitnessEvaluator":
        return cls(build_weighted_rules(catalog, cfg), cfg.base_fitness)

    def calculate_fitness(self, timetable: Timetable) -> float:
        fitness = self.base_fitness
        for rule, weight in self.rules:
            fitness -= rule.calculate_conflicts(timetable) * weight
        return fitness

    def evaluate(self, timetable: Timetable) -> EvaluationResult:
        """Como calculate_fitness, pero con el desglose por regla."""
        conflicts: Dict[ConflictType, int] = {}
        penalties: Dict[ConflictType, float] = {}
        conflicted: Set[int] = set()
        for rule, weight in self.rules:
            n = rule.calculate_conflicts(timetable, conflicted)
            ct = rule.conflict_type
            conflicts[ct] = conflicts.get(ct, 0) + n
            penalties[ct] = penalties.get(ct, 0.0) + n * weight
        fitness = self.base_fitness - sum(penalties.values())
        return EvaluationResult(fitness, conflicts, penalties, conflicted)

    def evaluate_population(self, population: List[Timetable]) -> None:
        for timetable in population:
            timetable.fitness = self.calculate_fitness(timetable)

    def is_solution(self, timetable: Timetable) -> bool:
        return timetable.fitness >= self.base_fitness
