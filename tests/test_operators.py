import random
import unittest
from collections import Counter

from horarios.config import GAConfig
from horarios.data_loader import CatalogError, SchoolCatalog, default_catalog
from horarios.initial_population import build_initial_population, build_random_timetable
from horarios.model import Classroom, Lesson, Subject, Teacher, TimeSlot, Timetable
from horarios.operators import group_crossover, mutate, repair_teacher_overload


class InitialPopulationTests(unittest.TestCase):
    def setUp(self):
        self.cfg = GAConfig()
        self.catalog = default_catalog(self.cfg)

    def test_every_group_gets_its_quota(self):
        tt = build_random_timetable(self.catalog, self.cfg, random.Random(1))
        self.assertEqual(len(tt), 4 * 14)
        for group in self.catalog.groups:
            counts = Counter(l.subject for l in tt.lessons_for_group(group))
            self.assertEqual(counts[Subject.MATH], 5)
            self.assertEqual(counts[Subject.PHYSICAL_CULTURE], 2)

    def test_lessons_are_structurally_valid(self):
        for tt in build_initial_population(self.catalog, self.cfg, 5, random.Random(2)):
            for l in tt.lessons:
                self.assertEqual(l.teacher.subject, l.subject)
                self.assertTrue(l.classroom.can_accommodate(l.subject))
                self.assertTrue(0 <= l.time_slot.day < self.cfg.working_days)
                self.assertTrue(0 <= l.time_slot.period < self.cfg.max_periods_per_day)

    def test_population_members_are_independent(self):
        pop = build_initial_population(self.catalog, self.cfg, 3, random.Random(2))
        self.assertEqual(len(pop), 3)
        self.assertIsNot(pop[0].lessons, pop[1].lessons)

    def test_same_seed_same_population(self):
        a = build_random_timetable(self.catalog, self.cfg, random.Random(9))
        b = build_random_timetable(self.catalog, self.cfg, random.Random(9))
        self.assertEqual(a.lessons, b.lessons)

    def test_subject_without_room(self):
        catalog = SchoolCatalog(
            teachers=(Teacher(3, "Dr. Brown", Subject.INFORMATICS),),
            classrooms=(Classroom(1, "Room 101", frozenset({Subject.MATH})),),
            groups=self.catalog.groups,
            weekly_lessons={Subject.INFORMATICS: 1},
        )
        with self.assertRaises(CatalogError):
            build_random_timetable(catalog, self.cfg, random.Random(0))


class CrossoverTests(unittest.TestCase):
    def test_child_takes_whole_group_blocks(self):
        cfg = GAConfig()
        catalog = default_catalog(cfg)
        rng = random.Random(4)
        p1 = build_random_timetable(catalog, cfg, rng)
        p2 = build_random_timetable(catalog, cfg, rng)
        child = group_crossover(p1, p2, catalog, rng)

        self.assertEqual(len(child), len(p1))
        self.assertIsNot(child, p1)
        for group in catalog.groups:
            block = child.lessons_for_group(group)
            from_p1 = all(a is b for a, b in zip(block, p1.lessons_for_group(group)))
            from_p2 = all(a is b for a, b in zip(block, p2.lessons_for_group(group)))
            self.assertTrue(from_p1 or from_p2)


class MutationTests(unittest.TestCase):
    def setUp(self):
        self.cfg = GAConfig()
        self.catalog = default_catalog(self.cfg)
        self.tt = build_random_timetable(self.catalog, self.cfg, random.Random(6))

    def test_zero_rate_returns_same_object(self):
        self.assertIs(mutate(self.tt, 0.0, self.catalog, self.cfg, random.Random(1)), self.tt)

    def test_full_rate_keeps_lessons_valid(self):
        mutated = mutate(self.tt, 1.0, self.catalog, self.cfg, random.Random(1))
        self.assertIsNot(mutated, self.tt)
        self.assertEqual(len(mutated), len(self.tt))
        for before, after in zip(self.tt.lessons, mutated.lessons):
            self.assertIs(after.subject, before.subject)
            self.assertEqual(after.teacher, before.teacher)
            self.assertEqual(after.group, before.group)
            self.assertTrue(after.classroom.can_accommodate(after.subject))
            self.assertTrue(0 <= after.time_slot.day < self.cfg.working_days)
            self.assertTrue(0 <= after.time_slot.period < self.cfg.max_periods_per_day)

    def test_parent_is_not_modified(self):
        snapshot = list(self.tt.lessons)
        mutate(self.tt, 1.0, self.catalog, self.cfg, random.Random(1))
        self.assertEqual(self.tt.lessons, snapshot)


class RepairTests(unittest.TestCase):
    def setUp(self):
        self.catalog = default_catalog(GAConfig())

    def lessons(self, day, periods):
        teacher = self.catalog.teacher_for(Subject.MATH)
        return [
            Lesson(Subject.MATH, teacher, self.catalog.classrooms[0], TimeSlot(day, p), self.catalog.groups[0])
            for p in periods
        ]

    def test_drops_excess_keeping_first(self):
        day0 = self.lessons(0, [4, 0, 2, 1, 3])
        day1 = self.lessons(1, [0])
        tt = Timetable(lessons=day0 + day1)
        repaired = repair_teacher_overload(tt, max_per_day=3)
        self.assertEqual(repaired.lessons, day0[:3] + day1)
        self.assertEqual(len(tt), 6)

    def test_nothing_to_drop_returns_same_object(self):
        tt = Timetable(lessons=self.lessons(0, [0, 1]) + self.lessons(1, [0, 1, 2]))
        self.assertIs(repair_teacher_overload(tt, max_per_day=3), tt)


if __name__ == "__main__":
    unittest.main()
