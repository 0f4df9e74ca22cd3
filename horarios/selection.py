# horarios/selection.py
import random
from typing import List, Optional, Sequence, Tuple

from .model import Timetable


def best_of(population: Sequence[Timetable]) -> Timetable:
    """El más apto de la población (el primero en caso de empate)."""
    if not population:
        raise ValueError("La población está vacía")
    return max(population, key=lambda t: t.fitness)


class TournamentSelection:
    """Torneo: se sortean `tournament_size` individuos (con reemplazo) y gana el más apto."""

    def __init__(self, tournament_size: int, rng: Optional[random.Random] = None):
        if tournament_size < 1:
            raise ValueError("tournament_size debe ser al menos 1")
        self.tournament_size = tournament_size
        self.rng = rng or random.Random()

    def select_parent(self, population: Sequence[Timetable]) -> Timetable:
        if not population:
            raise ValueError("No se puede seleccionar de una población vacía")
        tournament = [self.rng.choice(population) for _ in range(self.tournament_size)]
        return best_of(tournament)

    def select_parents(self, population: Sequence[Timetable]) -> Tuple[Timetable, Timetable]:
        p1 = self.select_parent(population)
        p2 = self.select_parent(population)
        # Padres distintos (por referencia) si es posible
        while p2 is p1 and len(population) > 1:
            p2 = self.select_parent(population)
        return p1, p2

    def select_many(self, population: Sequence[Timetable], n: int) -> List[Timetable]:
        return [self.select_parent(population) for _ in range(n)]
