import unittest

from gpacalc.core.export import EMPTY_EXPORT_MESSAGE, export_csv
from gpacalc.core.models import CourseEntry, ErrorKind, GradeType


class ExportTests(unittest.TestCase):
    def test_csv_document(self):
        exported = export_csv(
            [
                CourseEntry(name="Calculus", grade_type=GradeType.LETTER, raw_grade="b+", raw_credits="3"),
                CourseEntry(grade_type=GradeType.PERCENT, raw_grade=" 91 ", raw_credits="2.5"),
            ]
        )
        self.assertTrue(exported.ok)
        self.assertEqual(
            exported.csv,
            "Course,Grade Type,Grade,Credits,GPA Points\r\n"
            '"Calculus","Letter","b+","3","3.30"\r\n'
            '"Course 2","Percent","91","2.5","3.70"',
        )

    def test_quotes_are_doubled(self):
        exported = export_csv(
            [CourseEntry(name='Intro "Phys 101"', raw_grade="A", raw_credits="4")]
        )
        self.assertIn('"Intro ""Phys 101""","Letter","A","4","4.00"', exported.csv)

    def test_invalid_rows_are_dropped(self):
        exported = export_csv(
            [
                CourseEntry(raw_grade="A", raw_credits="3"),
                CourseEntry(raw_grade="Z", raw_credits="3"),
                CourseEntry(),
                CourseEntry(raw_grade="C", raw_credits="1"),
            ]
        )
        self.assertTrue(exported.ok)
        self.assertEqual([row.index for row in exported.rows], [0, 3])
        self.assertEqual([e.row_index for e in exported.errors], [1])
        self.assertEqual(len(exported.csv.split("\r\n")), 3)
        self.assertIn('"Course 4"', exported.csv)

    def test_small_credits_written_as_plain_decimals(self):
        exported = export_csv([CourseEntry(raw_grade="A", raw_credits="0.00001")])
        self.assertIn('"Course 1","Letter","A","0.00001","4.00"', exported.csv)

    def test_empty_export(self):
        exported = export_csv([CourseEntry(), CourseEntry(raw_grade="A", raw_credits="0")])
        self.assertFalse(exported.ok)
        self.assertIsNone(exported.csv)
        self.assertEqual(exported.error.kind, ErrorKind.EMPTY_EXPORT_SET)
        self.assertEqual(exported.error.message, EMPTY_EXPORT_MESSAGE)
        self.assertEqual(len(exported.errors), 1)


if __name__ == "__main__":
    unittest.main()
