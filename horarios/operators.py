# horarios/operators.py
from collections import defaultdict
import logging
import random
from typing import Dict, List, Tuple

from .config import GAConfig
from .data_loader import SchoolCatalog
from .initial_population import random_classroom_for, random_time_slot
from .model import Lesson, Timetable

logger = logging.getLogger(__name__)

MUTATE_SLOT, MUTATE_ROOM, MUTATE_BOTH = range(3)


def group_crossover(
    p1: Timetable,
    p2: Timetable,
    catalog: SchoolCatalog,
    rng: random.Random,
) -> Timetable:
    """Cruce por bloques: cada grupo hereda todas sus lecciones de un solo padre."""
    child_lessons: List[Lesson] = []
    for group in catalog.groups:
        donor = p1 if rng.random() < 0.5 else p2
        child_lessons.extend(donor.lessons_for_group(group))
    return Timetable(lessons=child_lessons)


def mutate_lesson(
    lesson: Lesson,
    catalog: SchoolCatalog,
    cfg: GAConfig,
    rng: random.Random,
) -> Lesson:
    kind = rng.randrange(3)
    time_slot = lesson.time_slot
    classroom = lesson.classroom
    if kind in (MUTATE_SLOT, MUTATE_BOTH):
        time_slot = random_time_slot(cfg, rng)
    if kind in (MUTATE_ROOM, MUTATE_BOTH):
        classroom = random_classroom_for(lesson.subject, catalog, rng)
    return Lesson(lesson.subject, lesson.teacher, classroom, time_slot, lesson.group)


def mutate(
    timetable: Timetable,
    mutation_rate: float,
    catalog: SchoolCatalog,
    cfg: GAConfig,
    rng: random.Random,
) -> Timetable:
    """Perturba cada lección con probabilidad `mutation_rate`.

    Si ninguna lección cambió se devuelve el mismo objeto recibido.
    """
    lessons = list(timetable.lessons)
    mutated = False
    for i, lesson in enumerate(lessons):
        if rng.random() < mutation_rate:
            lessons[i] = mutate_lesson(lesson, catalog, cfg, rng)
            mutated = True
    if not mutated:
        return timetable
    return Timetable(lessons=lessons)


def repair_teacher_overload(timetable: Timetable, max_per_day: int = 3) -> Timetable:
    """Descarta las lecciones de un docente que exceden `max_per_day` en un mismo día.

    Se conservan las primeras en el orden original. No resuelve otros
    conflictos; si no hay nada que recortar devuelve el mismo objeto.
    """
    seen: Dict[Tuple[int, int], int] = defaultdict(int)
    kept: List[Lesson] = []
    for lesson in timetable.lessons:
        key = (lesson.teacher.id, lesson.time_slot.day)
        seen[key] += 1
        if seen[key] <= max_per_day:
            kept.append(lesson)
    dropped = len(timetable.lessons) - len(kept)
    if dropped == 0:
        return timetable
    logger.debug("Reparación: %d lecciones descartadas por exceso diario de docente", dropped)
    return Timetable(lessons=kept)
