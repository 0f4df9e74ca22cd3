# horarios/initial_population.py
import random
from typing import List

from .config import GAConfig
from .data_loader import SchoolCatalog
from .model import Classroom, Group, Lesson, Subject, TimeSlot, Timetable


def random_time_slot(cfg: GAConfig, rng: random.Random) -> TimeSlot:
    return TimeSlot(
        day=rng.randrange(cfg.working_days),
        period=rng.randrange(cfg.max_periods_per_day),
    )


def random_classroom_for(subject: Subject, catalog: SchoolCatalog, rng: random.Random) -> Classroom:
    # classrooms_for falla si ninguna aula admite la materia
    return rng.choice(catalog.classrooms_for(subject))


def random_lesson(
    subject: Subject,
    group: Group,
    catalog: SchoolCatalog,
    cfg: GAConfig,
    rng: random.Random,
) -> Lesson:
    return Lesson(
        subject=subject,
        teacher=catalog.teacher_for(subject),
        classroom=random_classroom_for(subject, catalog, rng),
        time_slot=random_time_slot(cfg, rng),
        group=group,
    )


def build_random_timetable(catalog: SchoolCatalog, cfg: GAConfig, rng: random.Random) -> Timetable:
    # Sin evitar choques: la población inicial es "sucia" a propósito
    lessons: List[Lesson] = []
    for group in catalog.groups:
        for subject in Subject:
            for _ in range(catalog.weekly_quota(subject)):
                lessons.append(random_lesson(subject, group, catalog, cfg, rng))
    return Timetable(lessons=lessons)


def build_initial_population(
    catalog: SchoolCatalog,
    cfg: GAConfig,
    pop_size: int,
    rng: random.Random,
) -> List[Timetable]:
    return [build_random_timetable(catalog, cfg, rng) for _ in range(pop_size)]
