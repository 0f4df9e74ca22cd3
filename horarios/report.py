# horarios/report.py
"""
Presentación: progreso del AG y resúmenes del horario.

Todo lo de este módulo es observacional, nada vuelve al núcleo del AG.
"""
import logging
from typing import AbstractSet, List, Sequence, Tuple

import pandas as pd

from .config import GAConfig
from .data_loader import SchoolCatalog
from .evaluation import EvaluationResult
from .model import Group, Lesson, Teacher, Timetable

logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS = ["Grupo", "Dia", "Periodo", "Materia", "Docente", "Aula"]


class ProgressReporter:
    """Recibe (generación, mejor fitness) a la cadencia que elija el llamador."""

    def generation(self, number: int, best_fitness: float) -> None:
        pass

    def finished(self, best: Timetable, generations: int, converged: bool) -> None:
        pass


class LoggingReporter(ProgressReporter):
    def generation(self, number, best_fitness):
        logger.info("Gen %d: Mejor Fitness=%.2f", number, best_fitness)

    def finished(self, best, generations, converged):
        logger.info(
            "Fin: fitness=%.2f generaciones=%d solución=%s", best.fitness, generations, converged
        )


class ConsoleReporter(ProgressReporter):
    def generation(self, number, best_fitness):
        print(f"Gen {number}: Mejor Fitness={best_fitness:.2f}")

    def finished(self, best, generations, converged):
        estado = "SOLUCIÓN" if converged else "MEJOR ESFUERZO"
        print(f"[{estado}] Fitness={best.fitness:.2f} tras {generations} generaciones")


def abbreviate(name: str) -> str:
    """'Mathematics' -> 'Math', 'Physical Culture' -> 'PCul'."""
    parts = name.split(" ")
    if len(parts) == 1:
        return name[:4]
    return parts[0][:1] + parts[1][:3]


def _day_label(day: int, cfg: GAConfig) -> str:
    name = cfg.day_names[day] if day < len(cfg.day_names) else f"Day {day}"
    return f"{name}:".ljust(12)


def _format_days(
    timetable: Timetable,
    entity,
    cfg: GAConfig,
    cell,
    width: int,
) -> List[str]:
    per_day = [timetable.lessons_on_day_for(entity, d) for d in range(cfg.working_days)]
    longest = max((len(d) for d in per_day), default=0)
    lines = []
    for day, lessons in enumerate(per_day):
        if not lessons:
            continue
        cells = " ".join(f"{l.time_slot.period}.{cell(l)}" for l in lessons)
        padding = " " * ((longest - len(lessons)) * width)
        lines.append(f"{_day_label(day, cfg)}{cells} {padding}({len(lessons)} lessons)")
    return lines


def format_group_schedule(timetable: Timetable, group: Group, cfg: GAConfig) -> str:
    lines = [f"Group: {group.name}"]
    lines += _format_days(timetable, group, cfg, lambda l: abbreviate(l.subject.display_name), 7)
    return "\n".join(lines)


def format_teacher_schedule(timetable: Timetable, teacher: Teacher, cfg: GAConfig) -> str:
    subject = teacher.subject.display_name
    lines = [f"{teacher.name} ({subject} - {abbreviate(subject)}):"]
    lines += _format_days(timetable, teacher, cfg, lambda l: f"Gr{l.group.id}", 6)
    return "\n".join(lines)


def print_timetable_summary(timetable: Timetable, catalog: SchoolCatalog, cfg: GAConfig) -> None:
    print("\n=== TIMETABLE SUMMARY ===")
    for group in catalog.groups:
        print("\n" + format_group_schedule(timetable, group, cfg))
    print("\n=== TEACHER SCHEDULES ===")
    for teacher in catalog.teachers:
        print("\n" + format_teacher_schedule(timetable, teacher, cfg))


def print_final_results(timetable: Timetable, result: EvaluationResult) -> None:
    print("\n=== FINAL RESULTS ===")
    print(f"Best Fitness: {timetable.fitness}")
    print(f"Total Lessons: {len(timetable.lessons)}")
    for ct, n in result.conflicts.items():
        if n:
            print(f"  {ct.display_name:<22} {n:>4}  (-{result.penalties[ct]:.0f})")


def _lesson_row(lesson: Lesson, cfg: GAConfig) -> dict:
    return {
        "Grupo": lesson.group.name,
        "Dia": lesson.time_slot.day_name(cfg.day_names),
        "Periodo": lesson.time_slot.period + 1,
        "Materia": lesson.subject.display_name,
        "Docente": lesson.teacher.name,
        "Aula": lesson.classroom.name,
        "_group_id": lesson.group.id,
        "_day": lesson.time_slot.day,
    }


def timetable_to_dataframe(timetable: Timetable, cfg: GAConfig) -> pd.DataFrame:
    if not timetable.lessons:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)
    df = pd.DataFrame([_lesson_row(l, cfg) for l in timetable.lessons])
    df = df.sort_values(["_group_id", "_day", "Periodo"], kind="stable")
    return df[SCHEDULE_COLUMNS].reset_index(drop=True)


def schedule_grid(
    entries: Sequence[Tuple[int, Lesson]],
    cfg: GAConfig,
    cell,
    conflicted: AbstractSet[int] = frozenset(),
) -> pd.DataFrame:
    """Matriz periodos x días a partir de pares (índice, lección).

    Las celdas con varias lecciones se separan con ' / ' y las lecciones cuyo
    índice está en `conflicted` se marcan con '⚠'.
    """
    days = [cfg.day_names[d] for d in range(cfg.working_days)]
    grid = pd.DataFrame(
        "",
        index=[f"P{p + 1}" for p in range(cfg.max_periods_per_day)],
        columns=days,
    )
    for idx, lesson in entries:
        d, p = lesson.time_slot.day, lesson.time_slot.period
        if not (0 <= d < cfg.working_days and 0 <= p < cfg.max_periods_per_day):
            continue
        text = cell(lesson)
        if idx in conflicted:
            text = f"⚠ {text}"
        current = grid.iat[p, d]
        grid.iat[p, d] = f"{current} / {text}" if current else text
    return grid
