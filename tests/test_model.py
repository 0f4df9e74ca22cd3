import unittest

from horarios.config import GAConfig
from horarios.data_loader import default_catalog
from horarios.model import Classroom, Group, Lesson, Subject, Teacher, TimeSlot, Timetable


class SubjectTests(unittest.TestCase):
    def test_display_names(self):
        self.assertEqual(Subject.MATH.display_name, "Mathematics")
        self.assertEqual(Subject.PHYSICAL_CULTURE.display_name, "Physical Culture")

    def test_parse_accepts_codes_case_insensitive(self):
        self.assertIs(Subject.parse("physics"), Subject.PHYSICS)
        self.assertIs(Subject.parse("Physical Culture"), Subject.PHYSICAL_CULTURE)
        with self.assertRaises(ValueError):
            Subject.parse("CHEMISTRY")


class EntityTests(unittest.TestCase):
    def test_time_slot_value_semantics(self):
        self.assertEqual(TimeSlot(1, 2), TimeSlot(1, 2))
        self.assertNotEqual(TimeSlot(1, 2), TimeSlot(2, 1))
        self.assertEqual(len({TimeSlot(0, 0), TimeSlot(0, 0), TimeSlot(0, 1)}), 2)
        self.assertEqual(TimeSlot(2, 0).day_name(["Mon", "Tue", "Wed"]), "Wed")
        self.assertEqual(TimeSlot(7, 0).day_name(["Mon"]), "Unknown")

    def test_identity_is_id(self):
        self.assertEqual(Teacher(1, "A", Subject.MATH), Teacher(1, "B", Subject.PHYSICS))
        self.assertNotEqual(Group(1, "Group 1"), Group(2, "Group 1"))
        self.assertEqual(hash(Classroom(3, "X")), hash(Classroom(3, "Y")))

    def test_classroom_can_accommodate(self):
        lab = Classroom(4, "Physics Lab", frozenset({Subject.PHYSICS}))
        self.assertTrue(lab.can_accommodate(Subject.PHYSICS))
        self.assertFalse(lab.can_accommodate(Subject.MATH))

    def test_group_default_students(self):
        self.assertEqual(Group(1, "Group 1").student_count, 30)


class TimetableTests(unittest.TestCase):
    def setUp(self):
        self.math = Teacher(1, "Mr. Smith", Subject.MATH)
        self.pe = Teacher(4, "Mrs. Davis", Subject.PHYSICAL_CULTURE)
        self.room = Classroom(1, "Room 101", frozenset(Subject))
        self.g1 = Group(1, "Group 1")
        self.g2 = Group(2, "Group 2")
        self.tt = Timetable([
            Lesson(Subject.MATH, self.math, self.room, TimeSlot(0, 3), self.g1),
            Lesson(Subject.PHYSICAL_CULTURE, self.pe, self.room, TimeSlot(0, 1), self.g1),
            Lesson(Subject.MATH, self.math, self.room, TimeSlot(1, 0), self.g1),
            Lesson(Subject.MATH, self.math, self.room, TimeSlot(0, 0), self.g2),
        ])

    def test_filters(self):
        self.assertEqual(len(self.tt.lessons_for_group(self.g1)), 3)
        self.assertEqual(len(self.tt.lessons_for_teacher(self.math)), 3)
        self.assertEqual(len(self.tt.lessons_for_classroom(self.room)), 4)

    def test_lessons_on_day_sorted_by_period(self):
        day = self.tt.lessons_on_day_for(self.g1, 0)
        self.assertEqual([l.time_slot.period for l in day], [1, 3])

    def test_indexed_lessons_keep_positions(self):
        pairs = self.tt.indexed_lessons_for(self.g1)
        self.assertEqual(len(pairs), 3)
        for i, lesson in pairs:
            self.assertIs(self.tt.lessons[i], lesson)
            self.assertEqual(lesson.group, self.g1)

    def test_identity_equality(self):
        other = Timetable(lessons=list(self.tt.lessons))
        self.assertNotEqual(other, self.tt)


class DefaultCatalogTests(unittest.TestCase):
    def test_default_catalog_contents(self):
        catalog = default_catalog(GAConfig())
        self.assertEqual(len(catalog.teachers), 4)
        self.assertEqual(len(catalog.classrooms), 5)
        self.assertEqual(len(catalog.groups), 4)
        self.assertEqual(catalog.weekly_quota(Subject.MATH), 5)
        self.assertEqual(catalog.total_weekly_lessons(), 14)
        self.assertEqual([c.name for c in catalog.classrooms_for(Subject.INFORMATICS)], ["Computer Lab"])


if __name__ == "__main__":
    unittest.main()
