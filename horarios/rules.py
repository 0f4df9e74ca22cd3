# horarios/rules.py
"""
Reglas de conflicto intercambiables.

Cada regla cuenta las violaciones de una sola restricción sobre un horario
(`calculate_conflicts`) y, si se le pasa un conjunto, agrega los índices de
las lecciones culpables. Ese conjunto es solo diagnóstico: nunca cambia el
número devuelto.
"""
from collections import Counter, defaultdict
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from .config import GAConfig
from .data_loader import SchoolCatalog
from .model import Lesson, Subject, Timetable

IndexedLesson = Tuple[int, Lesson]
DayBuckets = Dict[Tuple[int, int], List[IndexedLesson]]


class ConflictType(Enum):
    ROOM_CONFLICTS = "Room Conflicts"
    ROOM_ACCOMMODATE = "Room Accommodate"
    GROUP_GAPS = "Group Gaps"
    TEACHER_GAPS = "Teacher Gaps"
    MAX_LESSONS_PER_DAY = "Max Lessons Per Day"
    INVALID_ASSIGNMENTS = "Invalid Assignments"
    GROUP_COLLISIONS = "Group Collisions"
    TEACHER_COLLISIONS = "Teacher Collisions"
    LAST_LESSON = "Last Lesson"
    ADJUSTMENT = "Adjustment"

    @property
    def key(self) -> str:
        """Clave usada en `rule_weights` de la configuración."""
        return self.name.lower()

    @property
    def display_name(self) -> str:
        return self.value


def _mark(conflicted: Optional[Set[int]], indices: Iterable[int]) -> None:
    if conflicted is not None:
        conflicted.update(indices)


def day_buckets(
    timetable: Timetable,
    owner: Callable[[Lesson], object],
    n_days: int,
) -> DayBuckets:
    """Agrupa (índice, lección) por (id de entidad, día), ordenado por periodo."""
    buckets: DayBuckets = defaultdict(list)
    for idx, lesson in enumerate(timetable.lessons):
        day = lesson.time_slot.day
        if 0 <= day < n_days:
            buckets[(owner(lesson).id, day)].append((idx, lesson))
    for day_lessons in buckets.values():
        day_lessons.sort(key=lambda p: p[1].time_slot.period)
    return buckets


def _periods(day_lessons: List[IndexedLesson]) -> np.ndarray:
    return np.array([l.time_slot.period for _, l in day_lessons], dtype=int)


def count_gaps(day_lessons: List[IndexedLesson], conflicted: Optional[Set[int]] = None) -> int:
    """Periodos vacíos entre la primera y la última lección del día."""
    if len(day_lessons) <= 1:
        return 0
    steps = np.diff(_periods(day_lessons)) - 1
    holes = np.flatnonzero(steps > 0)
    _mark(conflicted, (day_lessons[i + 1][0] for i in holes))
    return int(steps[holes].sum())


def count_collisions(
    day_lessons: List[IndexedLesson],
    n_periods: int,
    conflicted: Optional[Set[int]] = None,
) -> int:
    """Lecciones que comparten periodo, sin contar la primera de cada periodo."""
    if len(day_lessons) <= 1:
        return 0
    periods = _periods(day_lessons)
    counts = np.bincount(periods, minlength=n_periods)
    _mark(conflicted, (idx for (idx, _), p in zip(day_lessons, periods) if counts[p] > 1))
    return int(np.maximum(counts - 1, 0).sum())


class ConflictRule:
    conflict_type: ConflictType

    def calculate_conflicts(self, timetable: Timetable, conflicted: Optional[Set[int]] = None) -> int:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RoomConflicts(ConflictRule):
    conflict_type = ConflictType.ROOM_CONFLICTS

    def calculate_conflicts(self, timetable, conflicted=None):
        conflicts = 0
        rooms_by_slot: Dict[object, Set[int]] = defaultdict(set)
        for idx, lesson in enumerate(timetable.lessons):
            used = rooms_by_slot[lesson.time_slot]
            if lesson.classroom.id in used:
                _mark(conflicted, (idx,))
                conflicts += 1
            else:
                used.add(lesson.classroom.id)
        return conflicts


class RoomAccommodate(ConflictRule):
    conflict_type = ConflictType.ROOM_ACCOMMODATE

    def calculate_conflicts(self, timetable, conflicted=None):
        bad = [
            idx for idx, l in enumerate(timetable.lessons)
            if not l.classroom.can_accommodate(l.subject)
        ]
        _mark(conflicted, bad)
        return len(bad)


class InvalidAssignments(ConflictRule):
    """Docente que no dicta la materia y aula que no la admite cuentan por separado."""
    conflict_type = ConflictType.INVALID_ASSIGNMENTS

    def calculate_conflicts(self, timetable, conflicted=None):
        invalid = 0
        for idx, lesson in enumerate(timetable.lessons):
            if lesson.teacher.subject != lesson.subject:
                _mark(conflicted, (idx,))
                invalid += 1
            if not lesson.classroom.can_accommodate(lesson.subject):
                _mark(conflicted, (idx,))
                invalid += 1
        return invalid


class _DailyRule(ConflictRule):
    """Regla evaluada por entidad del catálogo y por día laborable."""

    def __init__(self, catalog: SchoolCatalog, cfg: GAConfig):
        self.catalog = catalog
        self.n_days = cfg.working_days
        self.n_periods = cfg.max_periods_per_day

    def entities(self):
        return self.catalog.groups

    @staticmethod
    def owner(lesson: Lesson):
        return lesson.group

    def count_day(self, day_lessons: List[IndexedLesson], conflicted: Optional[Set[int]]) -> int:
        raise NotImplementedError

    def calculate_conflicts(self, timetable, conflicted=None):
        buckets = day_buckets(timetable, self.owner, self.n_days)
        total = 0
        for entity in self.entities():
            for day in range(self.n_days):
                day_lessons = buckets.get((entity.id, day))
                if day_lessons:
                    total += self.count_day(day_lessons, conflicted)
        return total


class _TeacherDailyRule(_DailyRule):
    def entities(self):
        return self.catalog.teachers

    @staticmethod
    def owner(lesson: Lesson):
        return lesson.teacher


class GroupGaps(_DailyRule):
    conflict_type = ConflictType.GROUP_GAPS

    def count_day(self, day_lessons, conflicted):
        return count_gaps(day_lessons, conflicted)


class TeacherGaps(_TeacherDailyRule):
    conflict_type = ConflictType.TEACHER_GAPS

    def count_day(self, day_lessons, conflicted):
        return count_gaps(day_lessons, conflicted)


class GroupCollisions(_DailyRule):
    conflict_type = ConflictType.GROUP_COLLISIONS

    def count_day(self, day_lessons, conflicted):
        return count_collisions(day_lessons, self.n_periods, conflicted)


class TeacherCollisions(_TeacherDailyRule):
    conflict_type = ConflictType.TEACHER_COLLISIONS

    def count_day(self, day_lessons, conflicted):
        return count_collisions(day_lessons, self.n_periods, conflicted)


class MaxLessonsPerDay(_DailyRule):
    conflict_type = ConflictType.MAX_LESSONS_PER_DAY

    def count_day(self, day_lessons, conflicted):
        excess = len(day_lessons) - self.n_periods
        if excess <= 0:
            return 0
        _mark(conflicted, (idx for idx, _ in day_lessons[self.n_periods:]))
        return excess


class LastLesson(_DailyRule):
    """
    Educación Física debe ir agrupada al final del día.

    Por cada grupo/día con al menos una clase de `subject` se penalizan los
    periodos vacíos entre sus ocurrencias y la distancia entre la última
    ocurrencia y la última lección del día.
    """
    conflict_type = ConflictType.LAST_LESSON

    def __init__(self, catalog: SchoolCatalog, cfg: GAConfig, subject: Subject = Subject.PHYSICAL_CULTURE):
        super().__init__(catalog, cfg)
        self.subject = subject

    def count_day(self, day_lessons, conflicted):
        target = [(idx, l) for idx, l in day_lessons if l.subject == self.subject]
        if not target:
            return 0
        periods = _periods(target)
        steps = np.maximum(np.diff(periods) - 1, 0)
        violations = int(steps.sum())
        if violations > 0:
            _mark(conflicted, (idx for idx, _ in target))
        last_idx, last = day_lessons[-1]
        trailing = last.time_slot.period - int(periods[-1])
        if trailing > 0:
            _mark(conflicted, (last_idx,))
            violations += trailing
        return violations


class Adjustment(ConflictRule):
    """|cuota semanal - lecciones reales| por grupo y materia."""
    conflict_type = ConflictType.ADJUSTMENT

    def __init__(self, catalog: SchoolCatalog):
        self.catalog = catalog

    def group_adjustment(self, lessons: Iterable[Lesson]) -> int:
        counts = Counter(l.subject for l in lessons)
        return sum(abs(self.catalog.weekly_quota(s) - counts[s]) for s in Subject)

    def calculate_conflicts(self, timetable, conflicted=None):
        by_group: Dict[int, List[Lesson]] = defaultdict(list)
        for lesson in timetable.lessons:
            by_group[lesson.group.id].append(lesson)
        return sum(self.group_adjustment(by_group.get(g.id, [])) for g in self.catalog.groups)


def default_rules(catalog: SchoolCatalog, cfg: GAConfig) -> List[ConflictRule]:
    """Las diez reglas estándar, en el orden en que se reportan."""
    return [
        RoomConflicts(),
        RoomAccommodate(),
        GroupGaps(catalog, cfg),
        TeacherGaps(catalog, cfg),
        MaxLessonsPerDay(catalog, cfg),
        InvalidAssignments(),
        GroupCollisions(catalog, cfg),
        TeacherCollisions(catalog, cfg),
        LastLesson(catalog, cfg),
        Adjustment(catalog),
    ]
