# horarios/data_loader.py
"""
Catálogo de referencia: docentes, aulas, grupos y cuotas semanales.

Se construye una sola vez al inicio y es de solo lectura durante toda la
ejecución del AG. Puede venir del catálogo por defecto o de CSVs en un
directorio de datos (teachers.csv, classrooms.csv, groups.csv).
"""
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Tuple

import pandas as pd

from .config import GAConfig
from .model import Classroom, Group, Subject, Teacher

logger = logging.getLogger(__name__)

TEACHERS_CSV = "teachers.csv"
CLASSROOMS_CSV = "classrooms.csv"
GROUPS_CSV = "groups.csv"
SUBJECT_SEPARATOR = ";"


class CatalogError(ValueError):
    """El catálogo de referencia no permite construir un horario."""


@dataclass(frozen=True)
class SchoolCatalog:
    teachers: Tuple[Teacher, ...]
    classrooms: Tuple[Classroom, ...]
    groups: Tuple[Group, ...]
    weekly_lessons: Mapping[Subject, int]

    def weekly_quota(self, subject: Subject) -> int:
        return self.weekly_lessons.get(subject, 0)

    def total_weekly_lessons(self) -> int:
        return sum(self.weekly_quota(s) for s in Subject)

    def teacher_for(self, subject: Subject) -> Teacher:
        for t in self.teachers:
            if t.subject == subject:
                return t
        raise CatalogError(f"No hay docente para la materia: {subject.name}")

    def classrooms_for(self, subject: Subject) -> List[Classroom]:
        rooms = [c for c in self.classrooms if c.can_accommodate(subject)]
        if not rooms:
            raise CatalogError(f"No hay aula disponible para la materia: {subject.name}")
        return rooms

    def validate(self) -> "SchoolCatalog":
        if not self.groups:
            raise CatalogError("El catálogo no tiene grupos")
        for subject in Subject:
            if self.weekly_quota(subject) > 0:
                self.teacher_for(subject)
                self.classrooms_for(subject)
        return self


def _quotas_from_config(cfg: GAConfig) -> Dict[Subject, int]:
    return {Subject.parse(code): int(n) for code, n in cfg.weekly_lessons.items()}


def default_catalog(cfg: GAConfig) -> SchoolCatalog:
    teachers = (
        Teacher(1, "Mr. Smith", Subject.MATH),
        Teacher(2, "Ms. Johnson", Subject.PHYSICS),
        Teacher(3, "Dr. Brown", Subject.INFORMATICS),
        Teacher(4, "Mrs. Davis", Subject.PHYSICAL_CULTURE),
    )
    usual = frozenset(s for s in Subject if s != Subject.INFORMATICS)
    classrooms = (
        Classroom(1, "Room 101", usual),
        Classroom(2, "Room 102", usual),
        Classroom(3, "Room 103", usual),
        # Aulas especializadas
        Classroom(4, "Physics Lab", frozenset({Subject.PHYSICS})),
        Classroom(5, "Computer Lab", frozenset({Subject.INFORMATICS})),
    )
    groups = tuple(Group(i, f"Group {i}", 30) for i in range(1, 5))
    return SchoolCatalog(teachers, classrooms, groups, _quotas_from_config(cfg)).validate()


def _parse_subjects(raw) -> frozenset:
    if pd.isna(raw) or not str(raw).strip():
        return frozenset()
    try:
        return frozenset(
            Subject.parse(code) for code in str(raw).split(SUBJECT_SEPARATOR) if code.strip()
        )
    except ValueError as e:
        raise CatalogError(str(e)) from e


def _require_columns(df: pd.DataFrame, name: str, columns: List[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise CatalogError(f"{name}: faltan columnas {missing}")


def load_catalog(data_dir: str, cfg: GAConfig) -> SchoolCatalog:
    base = Path(data_dir)
    teachers_df = pd.read_csv(base / TEACHERS_CSV)
    classrooms_df = pd.read_csv(base / CLASSROOMS_CSV)
    groups_df = pd.read_csv(base / GROUPS_CSV)

    _require_columns(teachers_df, TEACHERS_CSV, ["teacher_id", "name", "subject"])
    _require_columns(classrooms_df, CLASSROOMS_CSV, ["classroom_id", "name", "allowed_subjects"])
    _require_columns(groups_df, GROUPS_CSV, ["group_id", "name"])

    try:
        teachers = tuple(
            Teacher(int(r.teacher_id), str(r.name), Subject.parse(r.subject))
            for r in teachers_df.itertuples(index=False)
        )
    except ValueError as e:
        raise CatalogError(f"{TEACHERS_CSV}: {e}") from e

    classrooms = tuple(
        Classroom(int(r.classroom_id), str(r.name), _parse_subjects(r.allowed_subjects))
        for r in classrooms_df.itertuples(index=False)
    )

    if "student_count" not in groups_df.columns:
        groups_df["student_count"] = 30
    groups = tuple(
        Group(int(r.group_id), str(r.name), int(r.student_count))
        for r in groups_df.itertuples(index=False)
    )

    logger.info(
        "Catálogo cargado de %s: %d docentes, %d aulas, %d grupos",
        base, len(teachers), len(classrooms), len(groups),
    )
    return SchoolCatalog(teachers, classrooms, groups, _quotas_from_config(cfg)).validate()


def write_catalog(catalog: SchoolCatalog, data_dir: str, overwrite: bool = False) -> List[Path]:
    """Siembra el directorio de datos con el catálogo. Devuelve los archivos escritos."""
    base = Path(data_dir)
    base.mkdir(parents=True, exist_ok=True)
    frames = {
        TEACHERS_CSV: pd.DataFrame(
            [{"teacher_id": t.id, "name": t.name, "subject": t.subject.name} for t in catalog.teachers]
        ),
        CLASSROOMS_CSV: pd.DataFrame(
            [
                {
                    "classroom_id": c.id,
                    "name": c.name,
                    "allowed_subjects": SUBJECT_SEPARATOR.join(
                        s.name for s in Subject if s in c.allowed_subjects
                    ),
                }
                for c in catalog.classrooms
            ]
        ),
        GROUPS_CSV: pd.DataFrame(
            [{"group_id": g.id, "name": g.name, "student_count": g.student_count} for g in catalog.groups]
        ),
    }
    written: List[Path] = []
    for name, df in frames.items():
        path = base / name
        if path.exists() and not overwrite:
            logger.info("%s ya existe, se omite", path)
            continue
        df.to_csv(path, index=False)
        written.append(path)
    return written
