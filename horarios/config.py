"""
Configuración del algoritmo genético.

Incluye un cargador desde YAML para dejar los parámetros reproducibles y
configurables: tamaño de población, generaciones, tasa de mutación, pesos
de cada regla de conflicto y cuotas semanales por materia.
"""
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Optional, Any

import yaml


DEFAULT_DAY_NAMES: List[str] = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

# Clave de regla -> peso por conflicto
DEFAULT_RULE_WEIGHTS: Dict[str, int] = {
    "room_conflicts": 30,
    "room_accommodate": 50,
    "group_gaps": 50,
    "teacher_gaps": 50,
    "max_lessons_per_day": 40,
    "invalid_assignments": 100,
    "group_collisions": 50,
    "teacher_collisions": 50,
    "last_lesson": 30,
    "adjustment": 100,
}

# Lecciones por semana de cada materia (por grupo)
DEFAULT_WEEKLY_LESSONS: Dict[str, int] = {
    "MATH": 5,
    "PHYSICS": 4,
    "INFORMATICS": 3,
    "PHYSICAL_CULTURE": 2,
}

_NESTED_MAPPINGS = ("rule_weights", "weekly_lessons")


@dataclass
class GAConfig:
    # Tiempo
    working_days: int = 5
    max_periods_per_day: int = 6
    day_names: List[str] = field(default_factory=lambda: list(DEFAULT_DAY_NAMES))

    # Algoritmo genético
    population_size: int = 100
    max_generations: int = 700
    mutation_rate: float = 0.05
    tournament_size: int = 5
    max_attempts: int = 1
    seed: Optional[int] = 42

    # Reparación
    repair_enabled: bool = True
    repair_max_teacher_lessons_per_day: int = 3

    # Pesos y fitness
    base_fitness: float = 2000.0
    rule_weights: Dict[str, Optional[int]] = field(
        default_factory=lambda: dict(DEFAULT_RULE_WEIGHTS)
    )

    # Dominio
    weekly_lessons: Dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_WEEKLY_LESSONS)
    )

    # Reportes
    progress_every: int = 100
    snapshot_every: int = 20
    output_dir: str = "outputs"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GAConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k not in merged:
                continue
            if k in _NESTED_MAPPINGS:
                if not isinstance(v, dict):
                    raise ValueError(f"{k} debe ser un mapeo, no {type(v).__name__}")
                merged[k].update(v)
            else:
                merged[k] = v
        return cls(**merged)

    def validate(self) -> "GAConfig":
        if self.working_days <= 0 or self.max_periods_per_day <= 0:
            raise ValueError("working_days y max_periods_per_day deben ser positivos")
        if len(self.day_names) < self.working_days:
            raise ValueError(
                f"day_names tiene {len(self.day_names)} nombres para {self.working_days} días"
            )
        if self.population_size <= 0:
            raise ValueError("population_size debe ser positivo")
        if self.max_generations < 0:
            raise ValueError("max_generations no puede ser negativo")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate fuera de [0, 1]: {self.mutation_rate}")
        if self.tournament_size < 1:
            raise ValueError("tournament_size debe ser al menos 1")
        if self.max_attempts < 1:
            raise ValueError("max_attempts debe ser al menos 1")
        if self.repair_max_teacher_lessons_per_day < 1:
            raise ValueError("repair_max_teacher_lessons_per_day debe ser al menos 1")
        if self.progress_every < 1 or self.snapshot_every < 1:
            raise ValueError("progress_every y snapshot_every deben ser al menos 1")
        for code, quota in self.weekly_lessons.items():
            if int(quota) < 0:
                raise ValueError(f"Cuota semanal negativa para {code}")
        return self


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def load_config(path: str = "config.yaml") -> GAConfig:
    cfg_path = Path(path)
    data = _load_yaml(cfg_path)
    if not isinstance(data, dict):
        raise ValueError("config.yaml debe contener un objeto mapeo")
    return GAConfig.from_dict(data).validate()
