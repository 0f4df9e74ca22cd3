# horarios/model.py
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Sequence, Tuple, Union

DayIdx = int
PeriodIdx = int


class Subject(Enum):
    MATH = "Mathematics"
    PHYSICS = "Physics"
    INFORMATICS = "Informatics"
    PHYSICAL_CULTURE = "Physical Culture"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def parse(cls, code: str) -> "Subject":
        key = str(code).strip().upper().replace(" ", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Materia desconocida: {code!r}") from None


@dataclass(frozen=True)
class TimeSlot:
    day: DayIdx         # 0..working_days-1
    period: PeriodIdx   # 0..max_periods_per_day-1

    def day_name(self, day_names: Sequence[str]) -> str:
        if 0 <= self.day < len(day_names):
            return day_names[self.day]
        return "Unknown"

    def __str__(self) -> str:
        return f"Day {self.day} - Period {self.period + 1}"


# Las entidades de referencia se identifican solo por id
@dataclass(frozen=True)
class Teacher:
    id: int
    name: str = field(compare=False)
    subject: Subject = field(compare=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Classroom:
    id: int
    name: str = field(compare=False)
    allowed_subjects: FrozenSet[Subject] = field(compare=False, default=frozenset())

    def can_accommodate(self, subject: Subject) -> bool:
        return subject in self.allowed_subjects

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Group:
    id: int
    name: str = field(compare=False)
    student_count: int = field(compare=False, default=30)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Lesson:
    # Un “gen” = una ocurrencia de clase en la semana
    subject: Subject
    teacher: Teacher
    classroom: Classroom
    time_slot: TimeSlot
    group: Group

    def __str__(self) -> str:
        return f"{self.subject.display_name} - {self.teacher.name} - {self.classroom.name}"


Entity = Union[Group, Teacher, Classroom]


def _owner(lesson: Lesson, entity: Entity):
    if isinstance(entity, Group):
        return lesson.group
    if isinstance(entity, Teacher):
        return lesson.teacher
    if isinstance(entity, Classroom):
        return lesson.classroom
    raise TypeError(f"No se puede filtrar por {type(entity).__name__}")


@dataclass(eq=False)
class Timetable:
    """Cromosoma: horario semanal completo de todos los grupos."""
    lessons: List[Lesson] = field(default_factory=list)
    fitness: float = 0.0
    generation: int = 0

    def lessons_for(self, entity: Entity) -> List[Lesson]:
        return [l for l in self.lessons if _owner(l, entity) == entity]

    def lessons_for_group(self, group: Group) -> List[Lesson]:
        return [l for l in self.lessons if l.group == group]

    def lessons_for_teacher(self, teacher: Teacher) -> List[Lesson]:
        return [l for l in self.lessons if l.teacher == teacher]

    def lessons_for_classroom(self, classroom: Classroom) -> List[Lesson]:
        return [l for l in self.lessons if l.classroom == classroom]

    def lessons_on_day_for(self, entity: Entity, day: DayIdx) -> List[Lesson]:
        """Lecciones de la entidad en un día, ordenadas por periodo."""
        day_lessons = [l for l in self.lessons_for(entity) if l.time_slot.day == day]
        return sorted(day_lessons, key=lambda l: l.time_slot.period)

    def indexed_lessons_for(self, entity: Entity) -> List[Tuple[int, Lesson]]:
        """Pares (índice en `lessons`, lección) de la entidad."""
        return [(i, l) for i, l in enumerate(self.lessons) if _owner(l, entity) == entity]

    def __len__(self) -> int:
        return len(self.lessons)
