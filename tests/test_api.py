import unittest

from fastapi.testclient import TestClient

from gpacalc.app import app


class APITests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        r = self.client.get("/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"status": "ok"})

    def test_evaluate(self):
        payload = {
            "courses": [
                {"name": "Algebra", "grade_type": "letter", "grade": "A", "credits": "3"},
                {"grade_type": "letter", "grade": "B", "credits": 3},
                {"grade": "", "credits": ""},
            ]
        }
        r = self.client.post("/gpa/evaluate", json=payload)
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertAlmostEqual(data["gpa"], 3.5)
        self.assertEqual(data["gpa_display"], "3.50")
        self.assertEqual(data["total_credits"], 6)
        self.assertEqual(data["credits_display"], "6.0")
        self.assertEqual(data["note"], "Based on 6.0 total credit hours using a 4.0 scale.")
        self.assertEqual([c["name"] for c in data["courses"]], ["Algebra", "Course 2"])

    def test_evaluate_errors(self):
        payload = {
            "courses": [
                {"grade": "Z", "credits": "3"},
                {"grade": "", "credits": "3"},
            ]
        }
        r = self.client.post("/gpa/evaluate", json=payload)
        self.assertEqual(r.status_code, 422)
        errors = r.json()["detail"]["errors"]
        self.assertEqual([e["kind"] for e in errors], ["invalid_letter_grade", "missing_grade"])
        self.assertEqual(errors[0]["fields"], ["grade", "grade_type"])
        self.assertEqual(errors[1]["row_index"], 1)

    def test_evaluate_no_courses(self):
        r = self.client.post("/gpa/evaluate", json={"courses": []})
        self.assertEqual(r.status_code, 422)
        self.assertEqual(r.json()["detail"]["errors"][0]["kind"], "no_valid_courses")

    def test_evaluate_overflowing_credits(self):
        payload = {"courses": [{"grade": "A", "credits": "1e308"}, {"grade": "A", "credits": "1e308"}]}
        r = self.client.post("/gpa/evaluate", json=payload)
        self.assertEqual(r.status_code, 422)
        self.assertEqual(r.json()["detail"]["errors"][0]["kind"], "invalid_credits")

    def test_unknown_grade_type(self):
        r = self.client.post("/gpa/evaluate", json={"courses": [{"grade_type": "gpa", "grade": "A", "credits": "3"}]})
        self.assertEqual(r.status_code, 422)

    def test_export(self):
        payload = {"courses": [{"name": 'Lab "B"', "grade_type": "percent", "grade": "88", "credits": "4"}]}
        r = self.client.post("/gpa/export", json=payload)
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.headers["content-type"].startswith("text/csv"))
        self.assertIn('filename="gpa-courses.csv"', r.headers["content-disposition"])
        self.assertEqual(
            r.text,
            'Course,Grade Type,Grade,Credits,GPA Points\r\n"Lab ""B""","Percent","88","4","3.30"',
        )

    def test_export_nothing(self):
        r = self.client.post("/gpa/export", json={"courses": [{"grade": "A", "credits": "-1"}]})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"]["errors"][0]["kind"], "empty_export_set")


if __name__ == "__main__":
    unittest.main()
