import json
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from eye_health_score import calculate_eye_health_score
from models import EyeHealthInput
from pdf_report import render_report_bytes

FIXTURE_PATH = Path(__file__).parent / "fixtures" / "eye_health_scenarios.json"


class PdfReportTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.scenarios = json.loads(FIXTURE_PATH.read_text(encoding="utf-8"))

    def test_every_scenario_renders(self):
        for s in self.scenarios:
            with self.subTest(scenario=s["id"]):
                result = calculate_eye_health_score(EyeHealthInput.model_validate(s["input"]))
                pdf = render_report_bytes(result, patient_name="Test Patient")
                self.assertTrue(pdf.startswith(b"%PDF"))
                self.assertGreater(len(pdf), 1000)

    def test_renders_without_patient_name(self):
        result = calculate_eye_health_score(EyeHealthInput.model_validate(self.scenarios[0]["input"]))
        self.assertTrue(render_report_bytes(result).startswith(b"%PDF"))


if __name__ == "__main__":
    unittest.main()
