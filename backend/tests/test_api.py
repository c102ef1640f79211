import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient

from main import app
from registry import CALCULATORS

NORMAL_EXAM = {
    "visual_acuity": {"left": 1.0, "right": 1.0},
    "iop": {"left": 15, "right": 15},
    "retinal_thickness": {"central": 250, "average": 280},
    "visual_field": {"md": 0, "psd": 0},
    "age": 30,
}


class ApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_health(self):
        res = self.client.get("/health")
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertTrue(body["ok"])
        self.assertIn("score_engine_version", body)

    def test_calculators_listing(self):
        res = self.client.get("/calculators")
        self.assertEqual(res.status_code, 200)
        ids = [c["id"] for c in res.json()]
        self.assertEqual(len(ids), 12)
        self.assertEqual(set(ids), set(CALCULATORS))

    def test_calculate_visual_acuity(self):
        res = self.client.post("/calculate/visual_acuity", json={"denominator": 40})
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["snellen"], "20/40")
        self.assertEqual(body["category"], "mild_impairment")

    def test_undefined_measurement_is_422(self):
        res = self.client.post("/calculate/visual_acuity", json={"denominator": 0})
        self.assertEqual(res.status_code, 422)
        self.assertIn("message", res.json()["detail"])

    def test_zero_test_distance_is_422(self):
        res = self.client.post("/calculate/visual_acuity", json={"denominator": 20, "test_distance": 0})
        self.assertEqual(res.status_code, 422)
        self.assertIn("message", res.json()["detail"])

    def test_non_finite_denominator_is_422(self):
        res = self.client.post(
            "/calculate/visual_acuity",
            content=b'{"denominator": NaN}',
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(res.status_code, 422)
        self.assertIn("message", res.json()["detail"])

    def test_atrophy_survives_clamping(self):
        res = self.client.post(
            "/calculate/retinal_thickness",
            json={
                "central_thickness": 200,
                "average_thickness": 280,
                "volume_data": [150, 300, 200, 250],
                "age": 40,
                "gender": "male",
            },
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["status"], "atrophy")

    def test_missing_field_is_422(self):
        res = self.client.post("/calculate/iop", json={"age": 40})
        self.assertEqual(res.status_code, 422)
        self.assertEqual(res.json()["detail"][0]["loc"], ["pressure"])

    def test_unknown_calculator_is_404(self):
        res = self.client.post("/calculate/keratoconus", json={})
        self.assertEqual(res.status_code, 404)
        self.assertEqual(len(res.json()["detail"]["available"]), 12)

    def test_out_of_range_input_is_clamped(self):
        res = self.client.post("/calculate/iop", json={"pressure": 120, "age": 40})
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["corrected_pressure"], 80.0)
        self.assertEqual(body["risk"], "very_high")

    def test_nested_calculator_payload(self):
        res = self.client.post(
            "/calculate/pediatric",
            json={"age_months": 3, "reflexes": {"pupillary": True, "blink": True}},
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["development_status"], "normal")

    def test_eye_health_score(self):
        res = self.client.post("/eye-health-score", json=NORMAL_EXAM)
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["assessment"]["overall_score"], 100.0)
        self.assertEqual(body["assessment"]["category"], "excellent")
        self.assertIn("disclaimer", body)

    def test_report_pdf(self):
        res = self.client.post("/report", json={"patient_name": "Jane Doe", "assessment": NORMAL_EXAM})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.headers["content-type"], "application/pdf")
        self.assertIn("jane-doe-eye-health-report.pdf", res.headers["content-disposition"])
        self.assertTrue(res.content.startswith(b"%PDF"))

    def test_report_rejects_long_name(self):
        res = self.client.post("/report", json={"patient_name": "x" * 61, "assessment": NORMAL_EXAM})
        self.assertEqual(res.status_code, 422)


if __name__ == "__main__":
    unittest.main()
